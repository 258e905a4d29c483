"""Variable-length integer codec and 32-bit integer casts.

Unsigned varints carry 7 payload bits per byte, least-significant group
first, with the high bit set on every byte except the last.  Values are cast
to the unsigned 32-bit range before encoding, so at most 5 bytes are ever
produced:

    0          -> 00
    127        -> 7f
    128        -> 80 01
    16384      -> 80 80 01
    0xFFFFFFFF -> ff ff ff ff 0f

Signed varints are zigzag-mapped onto unsigned ones so small magnitudes of
either sign stay short (0 -> 0, -1 -> 1, 1 -> 2, -2 -> 3, ...).

The decode helpers take (buf, off) and return (value, new_off), so they work
both inside a Reader and on a bare bytes object.
"""

from __future__ import annotations

import operator
from typing import Tuple

from ._constants import (
    U32_MASK,
    VARINT_LAST_GROUP_MAX,
    VARINT_MAX_BYTES,
)
from ._errors import MalformedVarint, OutOfBounds, UnsupportedType


# ── Casts ────────────────────────────────────────────────────

def as_int(n) -> int:
    """Return `n` as a Python int; anything without __index__ is rejected.

    Floats are rejected on purpose: silently truncating 5.4 to 5 on a
    primitive write would be a data-loss bug at the call site.
    """
    try:
        return operator.index(n)
    except TypeError:
        raise UnsupportedType(
            "expected an integer, got {}".format(type(n).__name__)) from None


def to_u32(n) -> int:
    """Wrap to the unsigned 32-bit range (two's complement for negatives)."""
    return as_int(n) & U32_MASK


def to_i32(n) -> int:
    """Wrap to the signed 32-bit range."""
    u = to_u32(n)
    return u - 0x100000000 if u & 0x80000000 else u


# ── Zigzag ───────────────────────────────────────────────────

def zigzag_encode(n) -> int:
    n = to_i32(n)
    if n < 0:
        return ((~n << 1) | 1) & U32_MASK
    return n << 1


def zigzag_decode(v: int) -> int:
    return ~(v >> 1) if v & 1 else v >> 1


# ── Encode ───────────────────────────────────────────────────

def encode_uvarint(n) -> bytes:
    """Encode `n` (cast to unsigned 32-bit) as an unsigned varint."""
    n = to_u32(n)
    out = bytearray()
    while True:
        part = n & 0x7F
        n >>= 7
        if n:
            out.append(part | 0x80)
        else:
            out.append(part)
            return bytes(out)


def encode_svarint(n) -> bytes:
    """Encode `n` (cast to signed 32-bit) as a zigzag varint."""
    return encode_uvarint(zigzag_encode(n))


def uvarint_size(n) -> int:
    """Number of bytes encode_uvarint(n) produces."""
    n = to_u32(n)
    size = 1
    while n > 0x7F:
        n >>= 7
        size += 1
    return size


# ── Decode ───────────────────────────────────────────────────

def decode_uvarint(buf: bytes, off: int) -> Tuple[int, int]:
    """Decode one unsigned varint from buf at off.

    Raises OutOfBounds if the input ends mid-varint and MalformedVarint if
    the value would need more than 32 bits.
    """
    result = 0
    shift = 0
    for i in range(VARINT_MAX_BYTES):
        if off >= len(buf):
            raise OutOfBounds("truncated varint at offset {}".format(off))
        b = buf[off]
        off += 1
        if i == VARINT_MAX_BYTES - 1:
            # Fifth group: bits 28..31 only, and no continuation.
            if b & 0x80:
                raise MalformedVarint(
                    "varint continues past {} bytes at offset {}".format(
                        VARINT_MAX_BYTES, off - 1))
            if b > VARINT_LAST_GROUP_MAX:
                raise MalformedVarint(
                    "varint exceeds 32 bits at offset {}".format(off - 1))
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            return result, off
        shift += 7
    # Unreachable: the fifth byte either returns or raises above.
    raise MalformedVarint("varint too long")


def decode_svarint(buf: bytes, off: int) -> Tuple[int, int]:
    v, off = decode_uvarint(buf, off)
    return zigzag_decode(v), off
