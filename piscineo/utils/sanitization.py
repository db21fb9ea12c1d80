import html
import re
from typing import Optional

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\-.]", re.UNICODE)


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_filename_part(value: Optional[str]) -> str:
    """
    Make a value safe to embed in an attachment filename.

    Runs of whitespace become a single underscore, path separators and other
    characters outside word characters, dashes and dots are dropped.
    Accented letters are kept.
    """
    if not value:
        return ""

    value = re.sub(r"\s+", "_", str(value).strip())
    value = _UNSAFE_FILENAME_CHARS.sub("", value)

    # Never let a fragment collapse into a relative path component
    return value.strip(".")
