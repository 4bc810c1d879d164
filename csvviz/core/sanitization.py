"""
Sanitization helpers for user-provided names before they reach logs or
become column headers.
"""
import re

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')


def sanitize_filename(filename: str, max_length: int = 255) -> str:
    """
    Reduce a client-supplied file name to a bare, printable name.

    Args:
        filename: Name as sent by the caller
        max_length: Maximum length of the result

    Returns:
        The name without directories or control characters, or "unknown"
    """
    if not filename:
        return "unknown"

    filename = filename.split('/')[-1].split('\\')[-1]
    filename = _CONTROL_CHARS.sub('', filename)
    filename = filename.strip('. ')

    return filename[:max_length] or "unknown"


def sanitize_for_logging(value: str, max_length: int = 500) -> str:
    """Flatten a value onto one printable line so it cannot forge log entries."""
    if not value:
        return ""

    value = re.sub(r'[\r\n]', ' ', value)
    value = _CONTROL_CHARS.sub('', value)

    if len(value) > max_length:
        value = value[:max_length] + "..."

    return value


def validate_column_name(name: str) -> bool:
    """
    Check a user-chosen column name (e.g. from a rename).

    Tabs and newlines are allowed since spreadsheet headers often contain
    them; other control characters and blank names are not.
    """
    if not name or not name.strip() or len(name) > 1000:
        return False

    if re.search(r'[\x00-\x08\x0b\x0c\x0e-\x1f]', name):
        return False

    return True
