"""Text codec — UTF-8 with an optional one-byte-per-character fast path.

UTF-8 picks 1, 2, 3 or 4 bytes per code point by range:

    U+0000..U+007F      0xxxxxxx
    U+0080..U+07FF      110xxxxx 10xxxxxx
    U+0800..U+FFFF      1110xxxx 10xxxxxx 10xxxxxx
    U+10000..U+10FFFF   11110xxx 10xxxxxx 10xxxxxx 10xxxxxx

Python's codec does the per-range work.  What it doesn't do for us:

  - A str can still hold a UTF-16 surrogate *pair* (e.g. built from
    "\\ud83d\\ude00").  The pair is one supplementary character and must
    become one 4-byte sequence, so pairs are recombined before encoding.
  - A lone surrogate has no UTF-8 form; that is InvalidSequence.

The fast path (ascii_only=True) writes the low 8 bits of each code point and
reads each byte back as the code point of the same value.  It is exact for
text in U+0000..U+00FF and silently lossy above.  Both ends must agree on
the mode; nothing on the wire says which one was used.
"""

from __future__ import annotations

import logging

from ._errors import InvalidSequence, UnsupportedType

logger = logging.getLogger(__name__)


def _join_surrogate_pairs(s: str) -> str:
    try:
        return s.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeDecodeError as e:
        # Offsets are in UTF-16 code units, two bytes each.
        raise InvalidSequence(
            "lone surrogate at index {}".format(e.start // 2)) from None


def encode_text(s: str, ascii_only: bool = False) -> bytes:
    """Return the payload bytes for `s` (without the length prefix)."""
    if not isinstance(s, str):
        raise UnsupportedType("expected str, got {}".format(type(s).__name__))

    if ascii_only:
        try:
            return s.encode("latin-1")
        except UnicodeEncodeError:
            lossy = sum(1 for ch in s if ord(ch) > 0xFF)
            logger.warning(
                "single-byte text mode truncated %d character(s) above U+00FF",
                lossy)
            return bytes(ord(ch) & 0xFF for ch in s)

    try:
        return s.encode("utf-8")
    except UnicodeEncodeError:
        return _join_surrogate_pairs(s).encode("utf-8")


def decode_text(raw: bytes, ascii_only: bool = False) -> str:
    """Decode payload bytes produced by encode_text() in the same mode."""
    if ascii_only:
        return raw.decode("latin-1")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidSequence(
            "invalid UTF-8 at byte {} (0x{:02x}): {}".format(
                e.start, raw[e.start], e.reason)) from None
