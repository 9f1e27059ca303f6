"""Alignment arithmetic and bounded cursors.

Every bounds check in binser has the same shape: compare the size we are
about to consume against remaining(), which is derived from two offsets
we already trust.  A length that came off the wire is never added to the
position until it has passed that comparison.
"""

from __future__ import annotations

from ._constants import ALIGN_BY
from ._errors import ERR_TRUNCATED, DecodeError, fatal


def check_alignment(align: int) -> int:
    """Return `align` if it is a positive power of two, else raise ValueError."""
    # bool is an int subclass; align=True would silently mean 1.
    if isinstance(align, bool) or not isinstance(align, int):
        raise ValueError("alignment must be an int, got {}".format(type(align).__name__))
    if align < 1 or align & (align - 1):
        raise ValueError("alignment must be a power of two, got {}".format(align))
    return align


def aligned(n: int, align: int = ALIGN_BY) -> int:
    """Round n up to the next multiple of align.

    >>> aligned(0, 8), aligned(1, 8), aligned(8, 8), aligned(9, 8)
    (0, 8, 8, 16)
    """
    return n + ((-n) & (align - 1))


class _Cursor:
    __slots__ = ("_pos", "_end", "align")

    def __init__(self, end: int, align: int) -> None:
        self._pos = 0
        self._end = end
        self.align = align

    @property
    def position(self) -> int:
        return self._pos

    @property
    def end(self) -> int:
        return self._end

    def remaining(self) -> int:
        return self._end - self._pos

    def _advance(self, size: int) -> None:
        # Callers have already compared size against remaining().  Getting
        # here with a size that doesn't fit means that comparison was wrong.
        if size < 0 or size > self._end - self._pos:
            fatal("cursor advance by {} with {} remaining".format(size, self.remaining()))
        self._pos += size


class ReadCursor(_Cursor):
    """Read position over an immutable view, bounded by len(view)."""

    __slots__ = ("_view",)

    def __init__(self, view: memoryview, align: int = ALIGN_BY) -> None:
        super().__init__(len(view), align)
        self._view = view

    def take(self, size: int) -> memoryview:
        """Return the next `size` bytes and skip past their padding."""
        step = aligned(size, self.align)
        if step > self.remaining():
            raise DecodeError(
                ERR_TRUNCATED,
                "need {} bytes at offset {}, only {} remain".format(
                    step, self._pos, self.remaining()),
            )
        start = self._pos
        self._advance(step)
        return self._view[start:start + size]


class WriteCursor(_Cursor):
    """Write position over the first `size` bytes of a caller buffer."""

    __slots__ = ("_buf",)

    def __init__(self, buf: memoryview, size: int, align: int = ALIGN_BY) -> None:
        if size > len(buf):
            fatal("write cursor of {} bytes over a {}-byte buffer".format(size, len(buf)))
        super().__init__(size, align)
        self._buf = buf

    def put(self, data: bytes) -> None:
        """Write data followed by zero padding up to the alignment boundary."""
        n = len(data)
        step = aligned(n, self.align)
        start = self._pos
        self._advance(step)
        self._buf[start:start + n] = data
        if step > n:
            self._buf[start + n:start + step] = bytes(step - n)
