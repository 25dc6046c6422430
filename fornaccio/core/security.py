import logging

from fastapi import Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from fornaccio.core.config import settings
from fornaccio.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "admin_session"
SESSION_SALT = "fornaccio-admin"

# bcrypt for hashes generated by ops tooling; pbkdf2 as a pure-python alternative.
pwd_context = CryptContext(schemes=["bcrypt", "pbkdf2_sha256"], deprecated="auto")


def _serializer() -> URLSafeTimedSerializer:
    secret = settings.SESSION_SECRET or settings.ADMIN_PASSWORD_HASH
    if not secret:
        raise AuthenticationError("Erreur configuration serveur")
    return URLSafeTimedSerializer(secret, salt=SESSION_SALT)


def verify_admin_password(password: str) -> bool:
    stored_hash = settings.ADMIN_PASSWORD_HASH
    if not stored_hash:
        logger.error("ADMIN_PASSWORD_HASH is not defined in environment variables.")
        raise AuthenticationError("Erreur configuration serveur")
    try:
        return pwd_context.verify(password, stored_hash)
    except ValueError:
        logger.error("ADMIN_PASSWORD_HASH is not a supported hash.")
        return False


def sign_session() -> str:
    return _serializer().dumps({"role": "admin"})


def verify_session(token: str | None) -> bool:
    if not token:
        return False
    try:
        payload = _serializer().loads(token, max_age=settings.SESSION_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired):
        return False
    return payload.get("role") == "admin"


def is_admin(request: Request) -> bool:
    try:
        return verify_session(request.cookies.get(SESSION_COOKIE))
    except AuthenticationError:
        return False


def require_admin(request: Request) -> None:
    """FastAPI dependency guarding every /api/admin route."""
    if not is_admin(request):
        raise AuthenticationError("Unauthorized: Admin session required")
