"""Display formatting shared by the PDF report and the report e-mails"""

import re
from datetime import date, datetime
from typing import Optional, Union

NOT_SPECIFIED = "Non spécifié"

# French month names, so output never depends on the process locale
FRENCH_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)


def _coerce_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, (date, datetime)):
        return value
    text = value.strip()
    # fromisoformat rejects the trailing Z emitted by JavaScript toISOString()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_date(value: Optional[Union[date, datetime, str]]) -> str:
    """
    Format a date in long French form, e.g. "12 juin 2025".

    Args:
        value: date, datetime or ISO 8601 string

    Returns:
        Formatted date, or "Non spécifié" when no value is given
    """
    if not value:
        return NOT_SPECIFIED

    dt = _coerce_date(value)
    return f"{dt.day} {FRENCH_MONTHS[dt.month - 1]} {dt.year}"


def format_phone_number(phone: Optional[str]) -> str:
    """Format a French phone number as "06 12 34 56 78" """
    if not phone:
        return NOT_SPECIFIED

    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return " ".join(digits[i : i + 2] for i in range(0, 10, 2))

    # Unknown layout, keep what the user typed
    return phone


def short_reference(report_id: str, length: int = 8) -> str:
    """Short, upper-cased reference shown on the report header"""
    return str(report_id)[:length].upper()
