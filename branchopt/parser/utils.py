# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Value coercion helpers for branchopt options.

Functions:
- coerce_bool: Parse "true"/"false" style words, used by environment fallback.
- coerce_int: Strict base-10 integer conversion.
- coerce_float: Float conversion.
- expand_int_range: Expand an ascending "a..b" range into a list of ints.
- is_int_or_range: Check whether a token can be saved into an int slice option.
- is_float: Check whether a token converts to float.

Conversion helpers raise `ValueError`; the `Option` that calls them turns
that into a `ConversionError` naming the option and the offending text.
"""


def coerce_bool(value: str) -> bool:
    """
    Convert "true" or "false" in any casing to a boolean.

    Args:
        value (str): The input string.

    Returns:
        bool: Parsed boolean result.

    Raises:
        ValueError: If the value is neither "true" nor "false".
    """
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"'{value}' is not a boolean")


def coerce_int(value: str) -> int:
    """Convert a string to int. Only plain ASCII base-10 digits with an optional sign."""
    text = value.strip()
    if text != value or "_" in text or not text.isascii():
        raise ValueError(f"'{value}' is not an int")
    return int(text, 10)


def coerce_float(value: str) -> float:
    """Convert a string to float."""
    if value.strip() != value or "_" in value or not value.isascii():
        raise ValueError(f"'{value}' is not a float")
    return float(value)


def expand_int_range(value: str) -> list[int]:
    """
    Expand an integer range of the form "start..end" (inclusive).

    Only ascending ranges are valid: "1..3" → [1, 2, 3]. Descending or
    single element ranges ("3..1", "2..2") are rejected.

    Raises:
        ValueError: If either end is not an int or the range is not ascending.
    """
    start_text, _, end_text = value.partition("..")
    start = coerce_int(start_text)
    end = coerce_int(end_text)
    if start >= end:
        raise ValueError(f"'{value}' is not an ascending range")
    return list(range(start, end + 1))


def is_int_or_range(value: str) -> bool:
    try:
        if ".." in value:
            expand_int_range(value)
        else:
            coerce_int(value)
    except ValueError:
        return False
    return True


def is_float(value: str) -> bool:
    try:
        coerce_float(value)
    except ValueError:
        return False
    return True
