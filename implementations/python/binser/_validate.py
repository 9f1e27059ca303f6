"""Field-level semantic checks run inline during decode.

Each check runs right after its field is read, before the next one, and
raises DecodeError on the first violation.  Nothing here runs on encode:
an application may build and encode a record that would not survive a
decode.
"""

from __future__ import annotations

import math
from typing import Optional

from ._errors import (
    ERR_BOOL,
    ERR_ENUM,
    ERR_FLOAT,
    ERR_RANGE,
    ERR_STRING_REQUIRED,
    DecodeError,
)


def check_range(name: str, value: int, minimum: Optional[int], maximum: Optional[int]) -> int:
    """Zero means unset and is always accepted."""
    if value == 0:
        return value
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise DecodeError(
            ERR_RANGE,
            "{} = {} outside [{}, {}]".format(name, value, minimum, maximum),
        )
    return value


def check_enum(name: str, value: int, first: int, sentinel: int) -> int:
    if value < first or value >= sentinel:
        raise DecodeError(
            ERR_ENUM,
            "{} ordinal {} outside [{}, {})".format(name, value, first, sentinel),
        )
    return value


def check_bool(name: str, raw: int) -> bool:
    # Only the two canonical bytes are booleans; 0x02..0xFF are not "true".
    if raw == 0:
        return False
    if raw == 1:
        return True
    raise DecodeError(ERR_BOOL, "{} has invalid boolean byte 0x{:02x}".format(name, raw))


def check_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise DecodeError(ERR_FLOAT, "{} is not finite".format(name))
    return value


def check_text(name: str, value: str, required: bool) -> str:
    if required and not value:
        raise DecodeError(ERR_STRING_REQUIRED, "{} is required".format(name))
    return value
