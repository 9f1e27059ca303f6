"""binser error codes, exception classes, and the fatal-invariant primitive.

There are two disjoint failure channels:

  * Recoverable: anything an attacker can cause by handing us bytes.
    Raised internally as DecodeError and turned into a failed
    DecodeResult at the decode() boundary.  Never escapes decode().

  * Fatal: the codec caught itself breaking its own bookkeeping after
    every input-derived check already passed.  fatal() kills the process.
    There is no way to recover from it and nothing should try.
"""

from __future__ import annotations

import os
import sys
from typing import NoReturn

# ── Error codes ──────────────────────────────────────────────
# Plain strings so they show up verbatim in CLI output and logs.

ERR_EMPTY: str = "ERR_EMPTY"                      # zero-length input
ERR_TRUNCATED: str = "ERR_TRUNCATED"              # read would overrun the span
ERR_RANGE: str = "ERR_RANGE"                      # numeric outside [min, max]
ERR_ENUM: str = "ERR_ENUM"                        # ordinal outside [first, sentinel)
ERR_BOOL: str = "ERR_BOOL"                        # boolean byte not 0x00/0x01
ERR_FLOAT: str = "ERR_FLOAT"                      # NaN or infinity
ERR_UTF8: str = "ERR_UTF8"                        # string bytes not valid UTF-8
ERR_STRING_REQUIRED: str = "ERR_STRING_REQUIRED"  # required string is empty
ERR_STRING_LENGTH: str = "ERR_STRING_LENGTH"      # string exceeds max length
ERR_COUNT: str = "ERR_COUNT"                      # array count cannot fit
ERR_TRAILING: str = "ERR_TRAILING"                # leftover bytes (exact mode)
ERR_VALUE: str = "ERR_VALUE"                      # encode: value not representable
ERR_SCHEMA: str = "ERR_SCHEMA"                    # JSON adapter: bad shape


class BinserError(Exception):
    """Base exception for binser processing errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code


class DecodeError(BinserError):
    """Input rejected during decode.  Internal to the decode path."""


class EncodeError(BinserError, ValueError):
    """An in-memory value cannot be represented on the wire."""

    def __init__(self, msg: str) -> None:
        super().__init__(ERR_VALUE, msg)


# ── Fatal invariant violations ───────────────────────────────

def _abort() -> NoReturn:
    os.abort()


def fatal(msg: str) -> NoReturn:
    """Report a broken codec invariant and terminate the process."""
    try:
        sys.stderr.write("binser: fatal invariant violation: {}\n".format(msg))
        sys.stderr.flush()
    finally:
        _abort()
