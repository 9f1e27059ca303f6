"""Field descriptors: one class per semantic field kind.

A descriptor knows how to size, write, and read one attribute of a record,
and which constraints apply to it on decode.  Record types list their
descriptors in wire order in their FIELDS tuple.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, List, Optional, Type

from ._cursor import ReadCursor, WriteCursor
from ._errors import ERR_COUNT, DecodeError, EncodeError
from ._primitives import (
    BOOL8,
    FLOAT64,
    INT32,
    SIZE,
    UINT32,
    Scalar,
    decode_primitive,
    encode_primitive,
    primitive_size,
)
from ._strings import decode_text, encode_text, text_size
from ._validate import check_bool, check_enum, check_finite, check_range, check_text

if TYPE_CHECKING:
    from ._record import Record


class Field:
    """Base descriptor.  Subclasses fill in the five hooks below."""

    kind: str = "field"

    def __init__(self, name: str) -> None:
        if not name.isidentifier():
            raise ValueError("field name must be an identifier: {!r}".format(name))
        self.name = name

    def __repr__(self) -> str:
        return "{}({!r})".format(type(self).__name__, self.name)

    def default(self) -> Any:
        raise NotImplementedError

    def size(self, value: Any, align: int) -> int:
        """Wire size of value; raises EncodeError if it can't be written."""
        raise NotImplementedError

    def min_size(self, align: int) -> int:
        """Smallest wire size any value of this field can have."""
        raise NotImplementedError

    def encode(self, cursor: WriteCursor, value: Any) -> None:
        raise NotImplementedError

    def decode(self, cursor: ReadCursor) -> Any:
        raise NotImplementedError


class _ScalarField(Field):
    scalar: Scalar

    def size(self, value: Any, align: int) -> int:
        try:
            self.scalar.check(self._wire_value(value))
        except EncodeError as e:
            raise EncodeError("{}: {}".format(self.name, e))
        return primitive_size(self.scalar, align)

    def min_size(self, align: int) -> int:
        return primitive_size(self.scalar, align)

    def encode(self, cursor: WriteCursor, value: Any) -> None:
        encode_primitive(cursor, self.scalar, self._wire_value(value))

    def _wire_value(self, value: Any) -> Any:
        return value


class Int32Field(_ScalarField):
    """Signed 32-bit integer; 0 is unset, anything else must be in [minimum, maximum]."""

    kind = "int32"
    scalar = INT32

    def __init__(self, name: str, minimum: Optional[int] = None,
                 maximum: Optional[int] = None) -> None:
        super().__init__(name)
        self.minimum = minimum
        self.maximum = maximum

    def default(self) -> int:
        return 0

    def _wire_value(self, value: Any) -> Any:
        if isinstance(value, bool):
            raise EncodeError("expected int, got bool")
        return value

    def decode(self, cursor: ReadCursor) -> int:
        value = decode_primitive(cursor, self.scalar)
        return check_range(self.name, value, self.minimum, self.maximum)


class EnumField(_ScalarField):
    """uint32 ordinal of an IntEnum, valid in [first member, sentinel).

    The sentinel defaults to one past the largest member.
    """

    kind = "enum"
    scalar = UINT32

    def __init__(self, name: str, enum_type: Type[enum.IntEnum],
                 sentinel: Optional[int] = None) -> None:
        super().__init__(name)
        members = list(enum_type)
        if not members:
            raise ValueError("{} has no members".format(enum_type.__name__))
        for m in members:
            if not UINT32.lo <= int(m) <= UINT32.hi:
                raise ValueError("{}.{} = {} does not fit a uint32 ordinal".format(
                    enum_type.__name__, m.name, int(m)))
        self.enum_type = enum_type
        self.first = min(int(m) for m in members)
        self.sentinel = max(int(m) for m in members) + 1 if sentinel is None else sentinel

    def default(self) -> enum.IntEnum:
        return self.enum_type(self.first)

    def _wire_value(self, value: Any) -> Any:
        if isinstance(value, bool):
            raise EncodeError("expected {}, got bool".format(self.enum_type.__name__))
        return int(value) if isinstance(value, int) else value

    def decode(self, cursor: ReadCursor) -> Any:
        value = decode_primitive(cursor, self.scalar)
        check_enum(self.name, value, self.first, self.sentinel)
        try:
            return self.enum_type(value)
        except ValueError:
            # Gap in a sparse enum: inside the range but not a member.
            return value


class BoolField(_ScalarField):
    kind = "bool"
    scalar = BOOL8

    def default(self) -> bool:
        return False

    def _wire_value(self, value: Any) -> Any:
        if not isinstance(value, bool):
            raise EncodeError("expected bool, got {}".format(type(value).__name__))
        return int(value)

    def decode(self, cursor: ReadCursor) -> bool:
        return check_bool(self.name, decode_primitive(cursor, self.scalar))


class Float64Field(_ScalarField):
    kind = "float64"
    scalar = FLOAT64

    def default(self) -> float:
        return 0.0

    def decode(self, cursor: ReadCursor) -> float:
        return check_finite(self.name, decode_primitive(cursor, self.scalar))


class TextField(Field):
    """UTF-8 string.  required: must be non-empty.  max_chars: 0 = unlimited."""

    kind = "text"

    def __init__(self, name: str, required: bool = False, max_chars: int = 0) -> None:
        super().__init__(name)
        if max_chars < 0:
            raise ValueError("max_chars must be >= 0")
        self.required = required
        self.max_chars = max_chars

    def default(self) -> str:
        return ""

    def size(self, value: Any, align: int) -> int:
        try:
            return text_size(value, align)
        except EncodeError as e:
            raise EncodeError("{}: {}".format(self.name, e))

    def min_size(self, align: int) -> int:
        return primitive_size(SIZE, align)

    def encode(self, cursor: WriteCursor, value: str) -> None:
        encode_text(cursor, value)

    def decode(self, cursor: ReadCursor) -> str:
        return check_text(self.name, decode_text(cursor, self.max_chars), self.required)


class ArrayField(Field):
    """SIZE count followed by that many consecutively encoded sub-records."""

    kind = "array"

    def __init__(self, name: str, record_type: Type["Record"]) -> None:
        super().__init__(name)
        self.record_type = record_type

    def default(self) -> List["Record"]:
        return []

    def size(self, value: Any, align: int) -> int:
        if not isinstance(value, (list, tuple)):
            raise EncodeError("{}: expected a list, got {}".format(
                self.name, type(value).__name__))
        total = primitive_size(SIZE, align)
        for i, item in enumerate(value):
            if not isinstance(item, self.record_type):
                raise EncodeError("{}[{}]: expected {}, got {}".format(
                    self.name, i, self.record_type.__name__, type(item).__name__))
            total += item.encoded_size(align=align)
        return total

    def min_size(self, align: int) -> int:
        return primitive_size(SIZE, align)

    def encode(self, cursor: WriteCursor, value: List["Record"]) -> None:
        encode_primitive(cursor, SIZE, len(value))
        for item in value:
            item._write(cursor)

    def decode(self, cursor: ReadCursor) -> List["Record"]:
        count = decode_primitive(cursor, SIZE)

        # Every element costs at least min_size bytes, so a count the
        # remaining input can't possibly hold is rejected up front.
        ceiling = cursor.remaining() // self.record_type.min_encoded_size(cursor.align)
        if count > ceiling:
            raise DecodeError(
                ERR_COUNT,
                "{}: count {} exceeds the {} elements {} bytes can hold".format(
                    self.name, count, ceiling, cursor.remaining()),
            )

        items: List["Record"] = []
        for _ in range(count):
            items.append(self.record_type._read(cursor))
        return items
