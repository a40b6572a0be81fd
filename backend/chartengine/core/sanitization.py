"""
Sanitization helpers for column names that reach logs or error messages.
"""
import re

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')
# Tabs and newlines are common in spreadsheet headers and stay allowed.
_UNSAFE_NAME_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def sanitize_for_logging(value, max_length: int = 200) -> str:
    """
    Make a value safe to interpolate into a log line.

    Newlines become spaces, other control characters are dropped and the
    result is truncated to ``max_length`` characters.
    """
    if value is None:
        return ""
    text = str(value)
    if not text:
        return ""

    text = re.sub(r'[\r\n]', ' ', text)
    text = _CONTROL_CHARS.sub('', text)

    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text


def validate_column_name(name: str, max_length: int = 1000) -> bool:
    """Return True when ``name`` is usable as a column key."""
    if not isinstance(name, str) or not name.strip() or len(name) > max_length:
        return False
    return not _UNSAFE_NAME_CHARS.search(name)
