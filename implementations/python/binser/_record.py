"""Record codec — field composition over the size-query and fill passes.

A record type is a Record subclass with a FIELDS tuple listing its field
descriptors in wire order:

    class Point(Record):
        FIELDS = (
            Int32Field("x"),
            Int32Field("y"),
        )

Encoding is two passes over the same field order.  The size pass computes
the exact byte count and rejects values the wire can't represent; the fill
pass writes into a zeroed buffer of exactly that size and must land on the
same count.  A mismatch means the two passes disagree about the format and
is fatal.

Decoding builds a fresh instance field by field.  The first failure
abandons it; the caller gets a default-valued instance and an error code,
never a half-filled record.
"""

from __future__ import annotations

from typing import Any, NamedTuple, Optional, Tuple

from ._constants import ALIGN_BY
from ._cursor import ReadCursor, WriteCursor, check_alignment
from ._errors import ERR_EMPTY, ERR_TRAILING, DecodeError, fatal
from ._fields import Field


class DecodeResult(NamedTuple):
    """Outcome of decode(): a complete record, or a default one plus an error code."""

    record: Any
    consumed: int
    error: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class Record:
    """Base class for record types.  Subclasses set FIELDS."""

    FIELDS: Tuple[Field, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        fields = tuple(cls.FIELDS)
        if not fields:
            raise TypeError("{} declares no FIELDS".format(cls.__name__))
        seen = set()
        for f in fields:
            if not isinstance(f, Field):
                raise TypeError("{}.FIELDS entry {!r} is not a Field".format(cls.__name__, f))
            if f.name in seen:
                raise TypeError("{} declares field {!r} twice".format(cls.__name__, f.name))
            seen.add(f.name)
        cls.FIELDS = fields

    def __init__(self, **values: Any) -> None:
        # No validation here: constraints are a decode-time concern.
        for f in self.FIELDS:
            setattr(self, f.name, values.pop(f.name) if f.name in values else f.default())
        if values:
            raise TypeError("{} got unexpected field(s): {}".format(
                type(self).__name__, ", ".join(sorted(values))))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, f.name) == getattr(other, f.name) for f in self.FIELDS)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join("{}={!r}".format(f.name, getattr(self, f.name)) for f in self.FIELDS)
        return "{}({})".format(type(self).__name__, body)

    # ── Encode ───────────────────────────────────────────────

    def encoded_size(self, *, align: int = ALIGN_BY) -> int:
        """Size-query mode: bytes needed to encode this record."""
        check_alignment(align)
        return sum(f.size(getattr(self, f.name), align) for f in self.FIELDS)

    def encode_into(self, buf: Any, *, align: int = ALIGN_BY) -> int:
        """Fill mode: write into buf, return bytes written (0 if buf is too small)."""
        size = self.encoded_size(align=align)
        with memoryview(buf) as mv, mv.cast("B") as view:
            if view.readonly:
                raise TypeError("destination buffer is read-only")
            if len(view) < size:
                return 0
            self._fill(view, size, align)
        return size

    def encode(self, *, align: int = ALIGN_BY) -> bytes:
        size = self.encoded_size(align=align)
        out = bytearray(size)
        with memoryview(out) as view:
            self._fill(view, size, align)
        return bytes(out)

    def _fill(self, view: memoryview, size: int, align: int) -> None:
        view[:size] = bytes(size)
        cursor = WriteCursor(view, size, align)
        self._write(cursor)
        if cursor.position != size:
            fatal("{} wrote {} bytes, size pass computed {}".format(
                type(self).__name__, cursor.position, size))

    def _write(self, cursor: WriteCursor) -> None:
        for f in self.FIELDS:
            f.encode(cursor, getattr(self, f.name))

    # ── Decode ───────────────────────────────────────────────

    @classmethod
    def min_encoded_size(cls, align: int = ALIGN_BY) -> int:
        """Smallest possible encoding of this type (empty strings and arrays)."""
        return sum(f.min_size(align) for f in cls.FIELDS)

    @classmethod
    def _read(cls, cursor: ReadCursor) -> "Record":
        values = {}
        for f in cls.FIELDS:
            values[f.name] = f.decode(cursor)
        return cls(**values)

    @classmethod
    def decode(cls, data: Any, *, align: int = ALIGN_BY, exact: bool = False) -> DecodeResult:
        """Decode one record from the start of data.

        Never raises for bad input; check `.ok` on the result.  With
        exact=True, bytes left over after the record are an error.
        A non-contiguous buffer is copied before decoding.
        """
        check_alignment(align)
        if not memoryview(data).c_contiguous:
            data = bytes(data)
        with memoryview(data) as mv, mv.cast("B") as view:
            total = len(view)
            try:
                if total == 0:
                    raise DecodeError(ERR_EMPTY, "no input")
                cursor = ReadCursor(view, align)
                record = cls._read(cursor)
                consumed = cursor.position
                if consumed > total:
                    fatal("{} consumed {} of {} bytes".format(cls.__name__, consumed, total))
                if exact and consumed != total:
                    raise DecodeError(
                        ERR_TRAILING,
                        "{} trailing bytes after {}".format(total - consumed, cls.__name__),
                    )
            except DecodeError as e:
                return DecodeResult(cls(), 0, e.code, str(e))
        return DecodeResult(record, consumed)
