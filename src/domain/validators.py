"""
Field validators - Pure predicates for registration fields.

The name policy is deliberately narrow (Latin letters, whitespace,
hyphen and apostrophe only). See DESIGN.md for the open question on
internationalised names.
"""

import re

from .sanitizer import sanitize

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8

NAME_ERROR = "Please enter a valid name (2-100 characters, letters only)"
EMAIL_ERROR = "Please enter a valid email address"
PASSWORD_ERROR = "Password must be 8+ characters with uppercase, lowercase, and numbers"

_NAME_PATTERN = re.compile(r"[A-Za-z\s'-]+")

# local-part: dotted atoms or a quoted string; domain: labels + 2+ letter TLD, or [IPv4]
_EMAIL_PATTERN = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))"
)


def is_valid_name(name: str) -> bool:
    """True iff the sanitized name is 2-100 chars of letters, spaces, hyphens or apostrophes."""
    sanitized = sanitize(name)
    return (
        NAME_MIN_LENGTH <= len(sanitized) <= NAME_MAX_LENGTH
        and _NAME_PATTERN.fullmatch(sanitized) is not None
    )


def is_valid_email(email: str) -> bool:
    """True iff the address matches a conventional local-part@domain pattern."""
    return _EMAIL_PATTERN.fullmatch(email.lower()) is not None


def is_strong_password(password: str) -> bool:
    """
    Check password strength.

    At least 8 characters with one uppercase letter, one lowercase
    letter and one digit. No special character is required.
    """
    return (
        len(password) >= PASSWORD_MIN_LENGTH
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
        and re.search(r"[0-9]", password) is not None
    )


def validate_registration(full_name: str, email: str, password: str) -> dict[str, str]:
    """
    Validate every registration field without short-circuiting.

    Args:
        full_name: Sanitized full name
        email: Sanitized email address
        password: Raw password

    Returns:
        Mapping of field name to user-facing error message,
        empty when all fields are valid
    """
    errors: dict[str, str] = {}
    if not full_name or not is_valid_name(full_name):
        errors["fullName"] = NAME_ERROR
    if not is_valid_email(email):
        errors["email"] = EMAIL_ERROR
    if not is_strong_password(password):
        errors["password"] = PASSWORD_ERROR
    return errors
