from datetime import date, datetime

import pytest

from piscineo.utils.formatting import (
    NOT_SPECIFIED,
    format_date,
    format_phone_number,
    short_reference,
)
from piscineo.utils.sanitization import sanitize_filename_part, sanitize_string


@pytest.mark.parametrize(
    "value,expected",
    [
        (datetime(2025, 6, 12, 9, 30), "12 juin 2025"),
        (date(2025, 8, 1), "1 août 2025"),
        (datetime(2024, 12, 31), "31 décembre 2024"),
        ("2025-02-03", "3 février 2025"),
        ("2025-06-12T08:00:00.000Z", "12 juin 2025"),
    ],
)
def test_format_date(value, expected):
    assert format_date(value) == expected


def test_format_date_without_value():
    assert format_date(None) == NOT_SPECIFIED
    assert format_date("") == NOT_SPECIFIED


def test_format_date_rejects_garbage():
    with pytest.raises(ValueError):
        format_date("demain")


@pytest.mark.parametrize(
    "phone,expected",
    [
        ("0612345678", "06 12 34 56 78"),
        ("06.12.34.56.78", "06 12 34 56 78"),
        ("+33 6 12 34 56 78", "+33 6 12 34 56 78"),
        ("", NOT_SPECIFIED),
        (None, NOT_SPECIFIED),
    ],
)
def test_format_phone_number(phone, expected):
    assert format_phone_number(phone) == expected


def test_short_reference():
    assert short_reference("c7f3a9e2b41d4f0a") == "C7F3A9E2"
    assert short_reference(42) == "42"


def test_sanitize_string_escapes_html():
    assert sanitize_string('<a href="x">') == "&lt;a href=&quot;x&quot;&gt;"
    assert sanitize_string(None) is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Dupont_Jean", "Dupont_Jean"),
        ("Le  Gall", "Le_Gall"),
        ("../../etc/passwd", "etcpasswd"),
        ("Hélène", "Hélène"),
        ("", ""),
        (None, ""),
    ],
)
def test_sanitize_filename_part(value, expected):
    assert sanitize_filename_part(value) == expected
