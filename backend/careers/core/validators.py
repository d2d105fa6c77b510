import re
from typing import Optional

from careers.core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")
UNSAFE_CHARACTERS = re.compile(r"[<>\"'()]")


def normalize_email(value: str) -> str:
    """Validate email format and return it lower-cased."""
    email = (value or "").strip()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email.lower()


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """Strip characters that would let stored names carry markup."""
    if value is None:
        return None
    return UNSAFE_CHARACTERS.sub("", value).strip()


def require_text(value: Optional[str], message: str) -> str:
    """Sanitize a mandatory field; raise when nothing survives the stripping."""
    cleaned = sanitize_text(value)
    if not cleaned:
        raise ValidationError(message)
    return cleaned
