"""
Field-level validators used by the service layer.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_ALLOWED_PATTERN = re.compile(r"^[\d\s\-+()]+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MIN_PHONE_DIGITS = 6
MAX_PHONE_DIGITS = 15


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_phone_number(phone: Optional[str]) -> bool:
    """
    Digits, spaces, hyphens, parentheses and '+' only, with 6 to 15 digits
    once the separators are stripped.
    """
    if not phone or not PHONE_ALLOWED_PATTERN.match(phone):
        return False
    digits = re.sub(r"\D", "", phone)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string. Returns None when malformed."""
    if not value or not DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_email(email: str) -> str:
    """Canonical stored form for user and applicant emails."""
    return email.strip().lower()
