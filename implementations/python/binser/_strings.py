"""Length-prefixed text codec.

Wire shape: [SIZE prefix, padded][UTF-8 bytes][padding].  The prefix and
max_chars both count UTF-8 code units, not code points.
"""

from __future__ import annotations

from ._constants import ALIGN_BY, CHAR_SIZE
from ._cursor import ReadCursor, WriteCursor, aligned
from ._errors import ERR_STRING_LENGTH, ERR_TRUNCATED, ERR_UTF8, DecodeError, EncodeError
from ._primitives import SIZE, decode_primitive, encode_primitive, primitive_size


def text_bytes(s: str) -> bytes:
    """UTF-8 encode s, raising EncodeError for anything that isn't clean text."""
    if not isinstance(s, str):
        raise EncodeError("expected str, got {}".format(type(s).__name__))
    try:
        return s.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates are the only way a str fails to encode.
        raise EncodeError("unencodable text: {}".format(e.reason))


def text_size(s: str, align: int = ALIGN_BY) -> int:
    return primitive_size(SIZE, align) + aligned(len(text_bytes(s)) * CHAR_SIZE, align)


def encode_text(cursor: WriteCursor, s: str) -> None:
    raw = text_bytes(s)
    encode_primitive(cursor, SIZE, len(raw))
    cursor.put(raw)


def decode_text(cursor: ReadCursor, max_chars: int = 0) -> str:
    """Read one string.  max_chars = 0 means no length limit."""
    n = decode_primitive(cursor, SIZE)

    # The prefix came off the wire: bound it by what's left before slicing.
    if aligned(n * CHAR_SIZE, cursor.align) > cursor.remaining():
        raise DecodeError(
            ERR_TRUNCATED,
            "string of {} bytes, only {} remain".format(n, cursor.remaining()),
        )
    raw = cursor.take(n * CHAR_SIZE)

    try:
        s = str(raw, "utf-8")
    except UnicodeDecodeError:
        raise DecodeError(ERR_UTF8, "invalid utf-8 in string")

    if max_chars > 0 and n > max_chars:
        raise DecodeError(
            ERR_STRING_LENGTH,
            "string of {} characters exceeds maximum {}".format(n, max_chars),
        )
    return s
