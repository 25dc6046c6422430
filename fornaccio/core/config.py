from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Required Fields ---
    PROJECT_NAME: str = "Il Fornaccio"
    DATABASE_URL: str

    # --- Optional / Default Fields ---
    REDIS_URL: str | None = None
    LOG_LEVEL: str = "INFO"

    # Payments (Mollie)
    MOLLIE_API_KEY: str | None = None
    CURRENCY: str = "EUR"
    # Used for redirect/webhook URLs. Falls back to the request Host header.
    PUBLIC_BASE_URL: str | None = None

    # Locale
    PHONE_REGION: str = "BE"
    TIMEZONE: str = "Europe/Brussels"

    # Admin session
    ADMIN_PASSWORD_HASH: str | None = None
    SESSION_SECRET: str | None = None
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7

    # Notifications (Twilio SMS)
    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_FROM_NUMBER: str | None = None
    ADMIN_PHONE_NUMBER: str | None = None

    # Carts & background jobs
    CART_TTL_SECONDS: int = 60 * 60 * 24
    PAYMENT_SYNC_INTERVAL_SECONDS: int = 60
    PAYMENT_SYNC_WINDOW_MINUTES: int = 120

    # Media & maps
    UPLOAD_DIR: str | None = None  # defaults to fornaccio/static/uploads
    GOOGLE_MAPS_API_KEY: str | None = None
    RESTAURANT_ADDRESS: str = "Grand-Place, 1000 Bruxelles"

    # --- Configuration ---
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"  # unknown variables in .env are ignored instead of crashing
    )

settings = Settings()
