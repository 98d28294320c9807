"""
Input validation utilities.

Handles:
- Email address shape (to/from)
- YYYY-MM-DD dates for stats filters
- Content format for template library reads

Pure functions: raise ValueError with a readable message, no I/O.
pydantic turns the ValueError into a validation error at the schema layer.
"""

import re
from datetime import date

# =============================================================================
# PATTERNS
# =============================================================================

# Pragmatic address check: local@domain.tld, no whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Content variants a template may carry
CONTENT_FORMATS = ("html", "text")
DEFAULT_CONTENT_FORMAT = "html"


# =============================================================================
# VALIDATORS
# =============================================================================

def validate_email(value: str) -> str:
    """
    Validate a single email address.

    Accepts plain addresses only ("user@example.com"), not display-name forms.

    Raises:
        ValueError: If value doesn't look like an email address
    """
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError(f"Invalid email address: {value!r}")
    return value


def validate_date(value: str) -> str:
    """
    Validate a YYYY-MM-DD date string.

    The shape is checked first, then the calendar (2025-02-30 is rejected).

    Raises:
        ValueError: If value isn't a real YYYY-MM-DD date
    """
    if not DATE_PATTERN.match(value):
        raise ValueError(f"Date must be in YYYY-MM-DD format, got {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Not a valid calendar date: {value!r}") from None
    return value


def normalize_content_format(value: str | None) -> str | None:
    """
    Resolve a loosely-typed format argument.

    Returns the format ('html' default when omitted), or None if value is
    not one of CONTENT_FORMATS. Never raises: an unknown format is a handled
    answer, not a schema rejection.
    """
    if value is None:
        return DEFAULT_CONTENT_FORMAT
    if value in CONTENT_FORMATS:
        return value
    return None
