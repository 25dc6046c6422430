import os
import tempfile

from passlib.hash import pbkdf2_sha256

# Settings are read at import time, so the environment is prepared before
# any fornaccio module gets imported by the test modules.
_TMP_DIR = tempfile.mkdtemp(prefix="fornaccio-tests-")

ADMIN_PASSWORD = "forno-a-legna"

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'fornaccio.db')}"
os.environ["REDIS_URL"] = ""
os.environ["PUBLIC_BASE_URL"] = ""
os.environ["PAYMENT_SYNC_INTERVAL_SECONDS"] = "0"
os.environ["ADMIN_PASSWORD_HASH"] = pbkdf2_sha256.hash(ADMIN_PASSWORD)
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""
os.environ["TWILIO_FROM_NUMBER"] = ""
os.environ["TIMEZONE"] = "Europe/Brussels"
os.environ["PHONE_REGION"] = "BE"
