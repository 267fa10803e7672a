"""
Field validation for user create requests.
"""

from typing import List

from email_validator import validate_email, EmailNotValidError

from .models import FieldError, UserCreateRequest


NAME_REQUIRED = "Name is required"
INVALID_EMAIL = "Invalid email format"


def is_email(value: str) -> bool:
    """Check address syntax only; no DNS or deliverability lookup."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_user_payload(payload: UserCreateRequest) -> List[FieldError]:
    """Run every field check and collect the failures, name first."""
    errors: List[FieldError] = []

    if not payload.name:
        errors.append(FieldError(path="name", msg=NAME_REQUIRED, value=payload.name))

    if not payload.email or not is_email(payload.email):
        errors.append(FieldError(path="email", msg=INVALID_EMAIL, value=payload.email))

    return errors
