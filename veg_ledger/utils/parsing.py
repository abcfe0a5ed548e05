"""Common parsing utility functions.

This module contains helper functions for parsing calendar days and amounts
read back from the record store or typed in by a user.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

logger = logging.getLogger(__name__)


def parse_date(value: Optional[Union[str, date, datetime]]) -> Optional[date]:
    """
    Parse a calendar day.

    Args:
        value: ISO string, date, datetime (time of day is dropped) or None

    Returns:
        date object or None if parsing fails
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    # Try different date formats
    date_formats = [
        '%Y-%m-%d',     # 2025-01-30
        '%d-%m-%Y',     # 30-01-2025
        '%d/%m/%Y',     # 30/01/2025
        '%d-%b-%Y',     # 30-Jan-2025
        '%d %b %Y',     # 30 Jan 2025
    ]

    text = str(value).strip()
    # Full ISO timestamps ("2025-01-30T10:15:00.000Z") keep only the day
    if len(text) > 10 and text[4] == '-' and text[10] in ('T', ' '):
        text = text[:10]

    for fmt in date_formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.warning(f"Could not parse date string: {value}")
    return None


def parse_amount(amount_value: Optional[Union[str, int, float]]) -> Optional[float]:
    """
    Parse an amount value into a float.

    Args:
        amount_value: Amount as string, int, or float

    Returns:
        float value or None if parsing fails
    """
    if amount_value is None:
        return None

    # bool is an int subclass; a flag is never an amount
    if isinstance(amount_value, bool):
        logger.warning(f"Unknown amount type: {type(amount_value)}, value: {amount_value}")
        return None

    if isinstance(amount_value, (int, float)):
        return float(amount_value)

    if isinstance(amount_value, str):
        try:
            # Remove currency symbols and thousands separators
            clean_amount = amount_value.replace(',', '')
            clean_amount = ''.join(c for c in clean_amount if c.isdigit() or c in '.-')
            return float(clean_amount) if clean_amount else None
        except ValueError:
            logger.warning(f"Could not parse amount: {amount_value}")
            return None

    logger.warning(f"Unknown amount type: {type(amount_value)}, value: {amount_value}")
    return None


def format_amount(amount: Optional[float]) -> str:
    """Format an amount with two decimals for exports and statements."""
    return f"{(amount or 0.0):.2f}"
