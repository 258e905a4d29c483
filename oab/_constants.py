"""OAB v1 constants — value tags, map key tags, and codec defaults.

The tag numbers are the wire contract between a writer and a reader.  They
never change within a major version; a reader that meets an unknown tag
raises UnknownTag rather than guessing.
"""

from __future__ import annotations

__format_version__ = "1"

# ── Value tags (single byte each) ────────────────────────────
TAG_TRUE: int = 0x01
TAG_FALSE: int = 0x02
TAG_NULL: int = 0x03
TAG_POS_INT: int = 0x04   # unsigned varint magnitude, zero included
TAG_NEG_INT: int = 0x05   # unsigned varint absolute magnitude
TAG_FLOAT: int = 0x06     # binary64, little-endian
TAG_TEXT: int = 0x07      # varint byte length + text bytes
TAG_ARRAY: int = 0x08     # varint count + values
TAG_MAP: int = 0x09       # varint count + (key tag, key, value) triples

# ── Map key tags ─────────────────────────────────────────────
KEY_INLINE: int = 0x01    # length-prefixed text follows
KEY_INDEXED: int = 0x02   # varint index into the shared KeyDictionary

# Smallest possible map entry: key tag + one-byte key payload + one-byte value.
MIN_MAP_ENTRY_BYTES: int = 3

# ── Integer ranges ───────────────────────────────────────────
# Python ints are arbitrary-precision; the wire carries 32-bit magnitudes.
U8_MASK: int = 0xFF
U16_MASK: int = 0xFFFF
U32_MASK: int = 0xFFFFFFFF
U32_MAX: int = 0xFFFFFFFF
I32_MIN: int = -(2**31)
I32_MAX: int = 2**31 - 1

# ⌈32 / 7⌉ groups.  The fifth group may only carry bits 28–31.
VARINT_MAX_BYTES: int = 5
VARINT_LAST_GROUP_MAX: int = 0x0F

# ── Defaults ─────────────────────────────────────────────────
DEFAULT_INITIAL_CAPACITY: int = 1024
DEFAULT_MAX_DEPTH: int = 256
