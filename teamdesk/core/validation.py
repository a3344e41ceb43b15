"""Input normalization helpers"""
import re

from .errors import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Trim and lowercase an email, raising ValidationError if malformed"""
    if not isinstance(email, str):
        raise ValidationError("Email address is required")
    normalized = email.strip().lower()
    if not normalized:
        raise ValidationError("Email address is required")
    if not _EMAIL_RE.match(normalized):
        raise ValidationError(f"Invalid email format: {email!r}")
    return normalized


def emails_match(left: str, right: str) -> bool:
    return (left or "").strip().lower() == (right or "").strip().lower()
