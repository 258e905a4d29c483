"""Reader — primitive reads plus whole-value decoding over a ByteSource."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from ._buffer import F64, I8, I16, I32, U8, U16, U32, ByteSource, BytesLike
from ._constants import DEFAULT_MAX_DEPTH
from ._core import decode_value
from ._dictionary import KeyDictionary
from ._errors import RecursionLimitExceeded
from ._text import decode_text
from ._varint import decode_svarint, decode_uvarint


class Reader(ByteSource):
    """Decoder over one incoming buffer.

    `dictionary` and `ascii_only` must match the Writer that produced the
    bytes; neither is recorded on the wire.  Reads must happen in the same
    order as the writes.  After any error the reader is not resumable;
    reset() it or build a new one.
    """

    def __init__(self, data: BytesLike, *,
                 dictionary: Union[KeyDictionary, Iterable[str], None] = None,
                 ascii_only: bool = False,
                 max_depth: Optional[int] = DEFAULT_MAX_DEPTH) -> None:
        super().__init__(data)
        self.dictionary = KeyDictionary.coerce(dictionary)
        self.ascii_only = ascii_only
        self.max_depth = max_depth

    # ── Fixed width ──────────────────────────────────────────

    def u8(self) -> int:
        return self.unpack(U8)

    def i8(self) -> int:
        return self.unpack(I8)

    def u16(self) -> int:
        return self.unpack(U16)

    def i16(self) -> int:
        return self.unpack(I16)

    def u32(self) -> int:
        return self.unpack(U32)

    def i32(self) -> int:
        return self.unpack(I32)

    def f64(self) -> float:
        return self.unpack(F64)

    # ── Variable width ───────────────────────────────────────

    def uvarint(self) -> int:
        val, self._off = decode_uvarint(self._buf, self._off)
        return val

    def svarint(self) -> int:
        val, self._off = decode_svarint(self._buf, self._off)
        return val

    # ── Byte runs and text ───────────────────────────────────

    def raw(self, n: int) -> bytes:
        """Read exactly `n` bytes with no length prefix."""
        return self.take(n)

    def blob(self) -> bytes:
        """Read a byte run written by Writer.blob()."""
        return self.take(self.uvarint())

    def text(self) -> str:
        return decode_text(self.blob(), self.ascii_only)

    # ── Values ───────────────────────────────────────────────

    def value(self) -> Any:
        """Read one whole value tree."""
        try:
            return decode_value(self)
        except RecursionError:
            raise RecursionLimitExceeded("value nesting exceeds the interpreter stack") from None
