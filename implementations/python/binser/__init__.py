"""binser — bounds-checked binary serialization for nested records.

Encode in-memory records into an aligned, length-prefixed binary layout
and decode untrusted bytes back, rejecting anything truncated, oversized
or semantically invalid.

Quick start:
    >>> from binser import SchoolClass, Student, Attendance, encode, decode
    >>> cls = SchoolClass(year=2023, name="Class of 2023", students=[
    ...     Student(age=21, status=Attendance.ENROLLED, given_name="John")])
    >>> blob = encode(cls)
    >>> result = decode(SchoolClass, blob)
    >>> result.ok, result.record == cls, result.consumed == len(blob)
    (True, True, True)

Decoding never raises for bad input.  A failed decode hands back a
default-valued record and an ERR_* code:
    >>> decode(SchoolClass, blob[:-1]).error
    'ERR_TRUNCATED'
"""

from __future__ import annotations

from typing import Any, Type

from ._constants import (
    ALIGN_BY,
    CHAR_SIZE,
    MAX_ALLOWED_AGE,
    MAX_ALLOWED_YEAR,
    MAX_NAME_LEN_1,
    MAX_NAME_LEN_2,
    MIN_ALLOWED_AGE,
    MIN_ALLOWED_YEAR,
)
from ._cursor import aligned, check_alignment
from ._errors import (
    ERR_BOOL,
    ERR_COUNT,
    ERR_EMPTY,
    ERR_ENUM,
    ERR_FLOAT,
    ERR_RANGE,
    ERR_SCHEMA,
    ERR_STRING_LENGTH,
    ERR_STRING_REQUIRED,
    ERR_TRAILING,
    ERR_TRUNCATED,
    ERR_UTF8,
    ERR_VALUE,
    BinserError,
    DecodeError,
    EncodeError,
)
from ._fields import (
    ArrayField,
    BoolField,
    EnumField,
    Field,
    Float64Field,
    Int32Field,
    TextField,
)
from ._models import Attendance, SchoolClass, Student, sample_class
from ._record import DecodeResult, Record

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "encode",
    "encode_into",
    "encoded_size",
    "decode",
    "aligned",
    "check_alignment",
    # Record building blocks
    "Record",
    "DecodeResult",
    "Field",
    "Int32Field",
    "EnumField",
    "BoolField",
    "Float64Field",
    "TextField",
    "ArrayField",
    # Sample records
    "Attendance",
    "Student",
    "SchoolClass",
    "sample_class",
    # Exceptions
    "BinserError",
    "DecodeError",
    "EncodeError",
    # Error codes
    "ERR_EMPTY",
    "ERR_TRUNCATED",
    "ERR_RANGE",
    "ERR_ENUM",
    "ERR_BOOL",
    "ERR_FLOAT",
    "ERR_UTF8",
    "ERR_STRING_REQUIRED",
    "ERR_STRING_LENGTH",
    "ERR_COUNT",
    "ERR_TRAILING",
    "ERR_VALUE",
    "ERR_SCHEMA",
    # Constants
    "ALIGN_BY",
    "CHAR_SIZE",
    "MIN_ALLOWED_AGE",
    "MAX_ALLOWED_AGE",
    "MIN_ALLOWED_YEAR",
    "MAX_ALLOWED_YEAR",
    "MAX_NAME_LEN_1",
    "MAX_NAME_LEN_2",
]


# ── Core API ──────────────────────────────────────────────────

def encode(record: Record, *, align: int = ALIGN_BY) -> bytes:
    """Encode a record.  Raises EncodeError if a value can't be represented."""
    return record.encode(align=align)


def encoded_size(record: Record, *, align: int = ALIGN_BY) -> int:
    """Number of bytes encode() would produce for this record."""
    return record.encoded_size(align=align)


def encode_into(record: Record, buf: Any, *, align: int = ALIGN_BY) -> int:
    """Encode into a writable buffer.

    Returns the number of bytes written, or 0 if buf is smaller than
    encoded_size(record); nothing is written in that case.
    """
    return record.encode_into(buf, align=align)


def decode(record_type: Type[Record], data: Any, *,
           align: int = ALIGN_BY, exact: bool = False) -> DecodeResult:
    """Decode one record_type from the front of data.

    Returns DecodeResult(record, consumed, error, message).  On success
    error is None; on failure record is a fresh default instance and
    consumed is 0.  exact=True also rejects trailing bytes.
    """
    return record_type.decode(data, align=align, exact=exact)
