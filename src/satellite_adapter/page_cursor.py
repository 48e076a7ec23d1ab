"""
Page cursor normalisation for Satellite page envelopes

The Satellite API returns the ``page`` field as an integer when no ``page``
query parameter was sent and as a string when one was; floats show up when
an intermediary re-encodes the payload. All of them are folded into a plain
integer here.
"""

import math
import re
from typing import Any, Union

from .errors import SatelliteAdapterError

# Wire shapes accepted for the "page" field
PageCursor = Union[int, float, str]

_DECIMAL_INTEGER = re.compile(r"[+-]?[0-9]+")


class UnsupportedCursorType(SatelliteAdapterError, TypeError):
    """Raised when the page field has a shape pagination cannot interpret"""

    def __init__(self, value: Any):
        self.value_type = type(value).__name__
        super().__init__(f"unexpected type in pagination API result: {self.value_type}")


def normalize_page_cursor(value: Any) -> int:
    """
    Convert the envelope's page field into an integer page number

    Numeric strings are parsed as base-10 integers; any other string
    normalises to 0 so a malformed cursor does not abort the listing.

    Args:
        value: Raw 'page' value from the decoded envelope

    Returns:
        Page number as int

    Raises:
        UnsupportedCursorType: For booleans, None, containers and non-finite floats
    """
    # bool is a subclass of int and must not be read as page 0/1
    if isinstance(value, bool):
        raise UnsupportedCursorType(value)

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedCursorType(value)
        return int(value)

    if isinstance(value, str):
        if _DECIMAL_INTEGER.fullmatch(value):
            return int(value)
        return 0

    raise UnsupportedCursorType(value)
