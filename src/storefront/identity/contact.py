"""Format checks for contact details shared by users and shipping addresses."""

import re

from protean.exceptions import ValidationError

PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
ZIP_CODE_PATTERN = re.compile(r"^\d{6}$")
_FORBIDDEN_EMAIL_CHARS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def check_email(field, email):
    """Ensure that the email address follows a basic valid structure."""
    error = ValidationError({field: [f"Invalid email address: {email!r}"]})

    if any(ch.isspace() for ch in email) or email.count("@") != 1:
        raise error

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        raise error
    if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        raise error
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        raise error
    if ".." in email or any(ch in email for ch in _FORBIDDEN_EMAIL_CHARS):
        raise error


def check_phone(field, phone):
    if not PHONE_PATTERN.match(phone):
        raise ValidationError({field: ["Phone number must be 10 digits starting with 6-9"]})


def check_zip_code(field, zip_code):
    if not ZIP_CODE_PATTERN.match(zip_code):
        raise ValidationError({field: ["ZIP code must be 6 digits"]})
