"""Input rules for registration and password changes. Each check raises ValidationError."""
import re

from app.services.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Passport / national id: alphanumeric, at least 5 characters
LEGAL_ID_RE = re.compile(r"^[a-zA-Z0-9]{5,}$")
# E.164-style: optional +, no leading zero, up to 15 digits
PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and include uppercase, lowercase, number, and special character."
)


def require_fields(data: dict, names) -> None:
    missing = [n for n in names if not (data.get(n) or "").strip()]
    if missing:
        raise ValidationError("All fields are required.")


def validate_lengths(data: dict, limits: dict) -> None:
    """Reject string values longer than their storage limit."""
    for name, value in data.items():
        limit = limits.get(name)
        if limit and isinstance(value, str) and len(value.strip()) > limit:
            label = name.replace("_", " ").capitalize()
            raise ValidationError(f"{label} must be at most {limit} characters.")


def validate_email(email: str) -> None:
    if not EMAIL_RE.match(email or ""):
        raise ValidationError("Invalid email address")


def validate_legal_id(legal_id: str, label: str = "Legal ID") -> None:
    if not LEGAL_ID_RE.match(legal_id or ""):
        raise ValidationError(f"Invalid {label} format.")


def validate_phone_number(phone_number: str) -> None:
    if not PHONE_RE.match(phone_number or ""):
        raise ValidationError("Invalid phone number")


def validate_password(password: str) -> None:
    if not PASSWORD_RE.match(password or ""):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)


def validate_password_pair(password: str, confirm_password: str) -> None:
    validate_password(password)
    if password != confirm_password:
        raise ValidationError("Password does not match.")
