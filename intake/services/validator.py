"""
Input validation for registration submissions.

- Email: standard address grammar via email-validator (no DNS lookups)
- Mobile: international phone number, optional leading "+", 7-15 digits
"""

import re
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email

from intake.core.exceptions import ValidationError

PHONE_SEPARATORS = re.compile(r"[\s\-\.\(\)]")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{6,14}$")


def is_email(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False

    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_mobile_phone(value: Any) -> bool:
    """
    Validates an international mobile number.

    Separators (spaces, dashes, dots, parentheses) are ignored, so
    "+1 (415) 555-0100" and "+14155550100" are both accepted.
    """
    if not isinstance(value, str) or not value.strip():
        return False

    phone = PHONE_SEPARATORS.sub("", value.strip())
    return bool(PHONE_PATTERN.match(phone))


def validate_submission(fields: Mapping[str, Any]) -> None:
    """
    Raises ValidationError for the first invalid field. Email is checked
    before mobile.
    """
    if not is_email(fields.get("email")):
        raise ValidationError("Invalid email", field="email")
    if not is_mobile_phone(fields.get("mobile")):
        raise ValidationError("Invalid mobile number", field="mobile")
