import logging
import re
import time
from pathlib import Path

from fornaccio.core.config import settings
from fornaccio.domain.errors import InvalidOrderError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/png", "image/jpeg", "image/webp", "image/gif"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
PUBLIC_PREFIX = "/static/uploads"
DEFAULT_UPLOAD_DIR = Path(__file__).resolve().parent.parent / "static" / "uploads"


def sanitize_filename(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", filename or "upload")


def save_upload(filename: str, content_type: str, data: bytes, upload_dir: str | None = None) -> str:
    """Stores a menu picture and returns its public URL."""
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidOrderError(f"Type de fichier non supporté: {content_type}")
    if not data:
        raise InvalidOrderError("Fichier vide")
    if len(data) > MAX_UPLOAD_BYTES:
        raise InvalidOrderError("Fichier trop volumineux (5 Mo max)")

    # Timestamp prefix keeps uploads with the same name apart.
    unique_name = f"{int(time.time() * 1000)}-{sanitize_filename(filename)}"
    directory = Path(upload_dir or settings.UPLOAD_DIR or DEFAULT_UPLOAD_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    (directory / unique_name).write_bytes(data)

    logger.info(f"🖼️ Upload stored: {unique_name} ({len(data)} bytes)")
    return f"{PUBLIC_PREFIX}/{unique_name}"
