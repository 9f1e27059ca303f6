"""Fixed-width scalar codec.

Each scalar occupies aligned(size) bytes on the wire: the raw value in
native byte order, then zero padding.  Decoding never looks at the
padding.
"""

from __future__ import annotations

import math
import struct
from typing import Any

from ._constants import ALIGN_BY
from ._cursor import ReadCursor, WriteCursor, aligned
from ._errors import ERR_FLOAT, DecodeError, EncodeError


class Scalar:
    """One wire scalar kind: a name, a struct layout, and a value range."""

    __slots__ = ("name", "packer", "size", "is_float", "lo", "hi")

    def __init__(self, name: str, fmt: str) -> None:
        self.name = name
        self.packer = struct.Struct("=" + fmt)
        self.size = self.packer.size
        self.is_float = fmt in "fd"
        if self.is_float:
            self.lo = self.hi = None
        else:
            bits = self.size * 8
            signed = fmt.islower()
            self.lo = -(1 << (bits - 1)) if signed else 0
            self.hi = (1 << (bits - 1)) - 1 if signed else (1 << bits) - 1

    def __repr__(self) -> str:
        return "Scalar({})".format(self.name)

    def check(self, value: Any) -> None:
        """Raise EncodeError unless value can be packed as this kind."""
        if self.is_float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise EncodeError("{} expects a float, got {}".format(
                    self.name, type(value).__name__))
            if isinstance(value, int):
                try:
                    float(value)
                except OverflowError:
                    raise EncodeError("{} value {} too large".format(self.name, value))
            return
        if not isinstance(value, int):
            raise EncodeError("{} expects an int, got {}".format(
                self.name, type(value).__name__))
        if value < self.lo or value > self.hi:
            raise EncodeError("{} value {} outside [{}, {}]".format(
                self.name, value, self.lo, self.hi))


INT32 = Scalar("int32", "i")
UINT32 = Scalar("uint32", "I")
BOOL8 = Scalar("bool8", "B")
FLOAT64 = Scalar("float64", "d")
SIZE = Scalar("size", "Q")  # string lengths and array counts


def primitive_size(kind: Scalar, align: int = ALIGN_BY) -> int:
    return aligned(kind.size, align)


def decode_primitive(cursor: ReadCursor, kind: Scalar) -> Any:
    """Read one scalar; floats must be finite."""
    (value,) = kind.packer.unpack(cursor.take(kind.size))
    if kind.is_float and not math.isfinite(value):
        raise DecodeError(ERR_FLOAT, "non-finite {} {!r}".format(kind.name, value))
    return value


def encode_primitive(cursor: WriteCursor, kind: Scalar, value: Any) -> None:
    # Representability was checked during the size pass.
    cursor.put(kind.packer.pack(value))
