import phonenumbers
from phonenumbers import NumberParseException

from fornaccio.core.config import settings


def normalize_phone(raw: str, region: str | None = None) -> str:
    """
    Local format -> E.164 using the pizzeria's region ("0470 12 34 56" -> "+32470123456").
    Input that cannot be parsed at all is returned stripped.
    """
    raw = (raw or "").strip()
    try:
        parsed = phonenumbers.parse(raw, region or settings.PHONE_REGION)
    except NumberParseException:
        return raw
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def is_valid_phone(raw: str, region: str | None = None) -> bool:
    try:
        parsed = phonenumbers.parse((raw or "").strip(), region or settings.PHONE_REGION)
    except NumberParseException:
        return False
    return phonenumbers.is_valid_number(parsed)


def validate_phone(raw: str, region: str | None = None) -> str:
    """Strict variant used by the public checkout. Raises ValueError for pydantic validators."""
    if not is_valid_phone(raw, region):
        raise ValueError("Numéro de téléphone invalide (ex: 0470...)")
    return normalize_phone(raw, region)


def split_full_name(full_name: str) -> tuple[str, str]:
    """'Jean Dupont' -> ('Jean', 'Dupont'); a single word fills both parts."""
    parts = full_name.strip().split()
    if not parts:
        return "", ""
    last_name = parts.pop()
    first_name = " ".join(parts) or last_name
    return first_name, last_name
