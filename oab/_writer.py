"""Writer — primitive writes plus whole-value encoding over a ByteSink."""

from __future__ import annotations

import numbers
from typing import Any, Iterable, Optional, Union

from ._buffer import F64, U16, U32, ByteSink, BytesLike
from ._constants import (
    DEFAULT_INITIAL_CAPACITY,
    DEFAULT_MAX_DEPTH,
    U8_MASK,
    U16_MASK,
)
from ._core import encode_value
from ._dictionary import KeyDictionary
from ._errors import OabError, RecursionLimitExceeded, UnsupportedType
from ._text import encode_text
from ._varint import as_int, encode_svarint, encode_uvarint, to_u32, uvarint_size


class Writer(ByteSink):
    """Encoder for one outgoing message at a time.

    Options must match the Reader on the other end:

        dictionary   shared KeyDictionary (or iterable of str); default empty
        ascii_only   one byte per character instead of UTF-8; default off

    Writer-only options:

        initial_capacity   starting buffer size in bytes (default 1024)
        max_depth          container nesting limit, None to disable (default 256)
        warn_unknown_keys  log map keys missing from the dictionary at WARNING

    Primitive writes return the writer, so calls can be chained:

        >>> Writer().text("Hello!").uvarint(123).svarint(-123).finalize()
        b'\\x06Hello!{\\xf5\\x01'

    Fixed-width integer writes wrap modulo 2**bits; varints wrap to 32 bits.
    Not safe for concurrent use; give each thread its own Writer.
    """

    def __init__(self, *,
                 dictionary: Union[KeyDictionary, Iterable[str], None] = None,
                 initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
                 ascii_only: bool = False,
                 max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
                 warn_unknown_keys: bool = False) -> None:
        super().__init__(initial_capacity)
        self.dictionary = KeyDictionary.coerce(dictionary)
        self.ascii_only = ascii_only
        self.max_depth = max_depth
        self.warn_unknown_keys = warn_unknown_keys

    # ── Fixed width ──────────────────────────────────────────

    def u8(self, n) -> "Writer":
        self.append_byte(as_int(n) & U8_MASK)
        return self

    i8 = u8

    def u16(self, n) -> "Writer":
        self.pack(U16, as_int(n) & U16_MASK)
        return self

    i16 = u16

    def u32(self, n) -> "Writer":
        self.pack(U32, to_u32(n))
        return self

    i32 = u32

    def f64(self, x) -> "Writer":
        # Raw primitive: NaN and infinities are written as-is here.
        if not isinstance(x, numbers.Real):
            raise UnsupportedType("expected a real number, got {}".format(type(x).__name__))
        self.pack(F64, float(x))
        return self

    # ── Variable width ───────────────────────────────────────

    def uvarint(self, n) -> "Writer":
        self.append(encode_uvarint(n))
        return self

    def svarint(self, n) -> "Writer":
        self.append(encode_svarint(n))
        return self

    # ── Byte runs and text ───────────────────────────────────

    def raw(self, data: BytesLike) -> "Writer":
        """Append bytes with no length prefix."""
        self.append(data)
        return self

    def blob(self, data: BytesLike) -> "Writer":
        """Append a byte run: uvarint length, then the bytes."""
        n = len(data)
        self.ensure_capacity(uvarint_size(n) + n)
        self.uvarint(n)
        self.append(data)
        return self

    def text(self, s: str) -> "Writer":
        """Append a string: uvarint *byte* length, then the encoded bytes."""
        return self.blob(encode_text(s, self.ascii_only))

    # ── Values ───────────────────────────────────────────────

    def value(self, val: Any) -> "Writer":
        """Append a whole value tree.

        On any error the buffer is rewound to where it was before the call,
        so a rejected value leaves no partial bytes behind.
        """
        start = len(self)
        try:
            encode_value(self, val)
        except OabError:
            self._truncate(start)
            raise
        except RecursionError:
            self._truncate(start)
            raise RecursionLimitExceeded("value nesting exceeds the interpreter stack") from None
        return self
