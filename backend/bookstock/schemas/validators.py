"""Reusable Pydantic validators for book and order payloads.

Provides:
- Required text fields (trimmed; blank counts as missing)
- Calendar dates in strict YYYY-MM-DD form
- Order status normalisation
- The quantity ceiling shared by books and orders
"""

import re
from datetime import date
from typing import Any

DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_FORMAT_MESSAGE = "Invalid date format. Use YYYY-MM-DD."

# Upper bound of the INTEGER columns quantities are stored in.
MAX_QUANTITY = 2**31 - 1


def validate_required_text(value: Any, max_length: int = 255) -> str:
    """Trim a required string field.

    Args:
        value: Raw input value
        max_length: Maximum allowed length after trimming

    Returns:
        Trimmed string

    Raises:
        ValueError: If the value is not a string, blank, or too long
    """
    if not isinstance(value, str):
        raise ValueError("Must be a string")

    value = value.strip()

    if not value:
        raise ValueError("Field is required")

    if len(value) > max_length:
        raise ValueError(f"String too long (max {max_length} characters)")

    return value


def validate_iso_date(value: Any) -> date:
    """Parse a YYYY-MM-DD date.

    The pattern is checked before parsing so that other formats Pydantic
    would otherwise accept (timestamps, DD-MM-YYYY) are rejected.

    Args:
        value: Raw input value (string or date)

    Returns:
        Parsed date

    Raises:
        ValueError: If the value does not match YYYY-MM-DD or is not a real date
    """
    if isinstance(value, date):
        return value

    if not isinstance(value, str) or not DATE_REGEX.match(value.strip()):
        raise ValueError(DATE_FORMAT_MESSAGE)

    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"Invalid calendar date: {value.strip()}") from None


def normalize_status(value: Any) -> Any:
    """Lower-case and trim a status string; other values pass through."""
    if isinstance(value, str):
        return value.strip().lower()
    return value
