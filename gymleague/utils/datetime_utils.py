"""
Datetime utility functions.
Provides replacements for deprecated datetime functions.
"""

from datetime import date, datetime
from typing import Union
import pytz


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string, the format stored on every record."""
    return utcnow().isoformat()


def parse_record_date(date_input: Union[str, date, datetime]) -> date:
    """
    Parse a record date field into a date.

    Records store dates as strings. Accepts a plain ISO date ("2024-04-15"),
    a full ISO timestamp ("2024-04-15T10:00:00+00:00") or a date/datetime.

    Args:
        date_input: Date as string or date/datetime object

    Returns:
        The calendar date

    Raises:
        ValueError: If the string is not an ISO date or timestamp

    Examples:
        >>> parse_record_date("2024-04-15")
        datetime.date(2024, 4, 15)
    """
    if isinstance(date_input, datetime):
        return date_input.date()
    if isinstance(date_input, date):
        return date_input

    if not isinstance(date_input, str):
        raise ValueError(f"Expected string or date, got {type(date_input)}")

    date_str = date_input.strip()
    if len(date_str) == 10:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    return datetime.fromisoformat(date_str.replace("Z", "+00:00")).date()
