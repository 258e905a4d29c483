"""OAB v1 core — recursive tagged-value encode/decode.

Every value is one tag byte followed by a tag-determined payload:

    0x01 true      (none)
    0x02 false     (none)
    0x03 null      (none)
    0x04 int >= 0  uvarint magnitude
    0x05 int < 0   uvarint absolute magnitude
    0x06 float     binary64, little-endian
    0x07 text      uvarint byte length + bytes
    0x08 array     uvarint count + values
    0x09 map       uvarint count + (key tag, key, value) triples

Map keys are either inline text (key tag 0x01) or an index into the shared
KeyDictionary (key tag 0x02).  The writer picks the index whenever it can.

These functions drive a Writer / Reader; they own no state of their own.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Optional

from ._constants import (
    KEY_INDEXED,
    KEY_INLINE,
    MIN_MAP_ENTRY_BYTES,
    TAG_ARRAY,
    TAG_FALSE,
    TAG_FLOAT,
    TAG_MAP,
    TAG_NEG_INT,
    TAG_NULL,
    TAG_POS_INT,
    TAG_TEXT,
    TAG_TRUE,
    U32_MAX,
)
from ._errors import (
    OutOfBounds,
    RecursionLimitExceeded,
    UnknownTag,
    UnrepresentableValue,
    UnsupportedType,
)

logger = logging.getLogger(__name__)


def _enter_container(depth: int, max_depth: Optional[int]) -> None:
    if max_depth is not None and depth + 1 > max_depth:
        raise RecursionLimitExceeded(
            "nesting depth exceeds max_depth={}".format(max_depth))


# ── Encode ───────────────────────────────────────────────────

def _encode_integer(w, n: int) -> None:
    magnitude = -n if n < 0 else n
    if magnitude > U32_MAX:
        raise UnrepresentableValue(
            "integer {} exceeds the 32-bit magnitude range".format(n))
    # Zero is always tag 0x04, whatever sign it came with.
    w.append_byte(TAG_NEG_INT if n < 0 else TAG_POS_INT)
    w.uvarint(magnitude)


def encode_value(w, val: Any, depth: int = 0) -> None:
    """Append `val` to writer `w`.

    Dispatch order matters: bool is a subclass of int, so it is checked
    first or True would go out as integer 1.
    """
    if val is None:
        w.append_byte(TAG_NULL)
        return

    if isinstance(val, bool):
        w.append_byte(TAG_TRUE if val else TAG_FALSE)
        return

    if isinstance(val, int):
        _encode_integer(w, val)
        return

    if isinstance(val, float):
        if not math.isfinite(val):
            raise UnrepresentableValue("cannot encode {!r}".format(val))
        # Integral floats inside the 32-bit budget travel as integers;
        # -0.0 lands here and becomes tag 0x04, magnitude 0.
        if val.is_integer() and abs(val) <= U32_MAX:
            _encode_integer(w, int(val))
            return
        w.append_byte(TAG_FLOAT)
        w.f64(val)
        return

    if isinstance(val, str):
        w.append_byte(TAG_TEXT)
        w.text(val)
        return

    if isinstance(val, (list, tuple)):
        _enter_container(depth, w.max_depth)
        w.append_byte(TAG_ARRAY)
        w.uvarint(len(val))
        for item in val:
            encode_value(w, item, depth + 1)
        return

    if isinstance(val, Mapping):
        _enter_container(depth, w.max_depth)
        w.append_byte(TAG_MAP)
        w.uvarint(len(val))
        for k, v in val.items():
            if not isinstance(k, str):
                raise UnsupportedType(
                    "map key must be str, got {}".format(type(k).__name__))
            index = w.dictionary.index_of(k)
            if index is None:
                if w.warn_unknown_keys:
                    logger.warning("key %r is not in the dictionary; sent inline", k)
                else:
                    logger.debug("key %r is not in the dictionary; sent inline", k)
                w.append_byte(KEY_INLINE)
                w.text(k)
            else:
                w.append_byte(KEY_INDEXED)
                w.uvarint(index)
            encode_value(w, v, depth + 1)
        return

    raise UnsupportedType("cannot encode {}".format(type(val).__name__))


# ── Decode ───────────────────────────────────────────────────

def decode_value(r, depth: int = 0) -> Any:
    """Read one value from reader `r`.

    Any error is fatal to the whole decode; the reader's cursor is left
    wherever the failure was detected and must not be resumed.
    """
    tag_off = r.offset
    tag = r.u8()

    if tag == TAG_TRUE:
        return True
    if tag == TAG_FALSE:
        return False
    if tag == TAG_NULL:
        return None
    if tag == TAG_POS_INT:
        return r.uvarint()
    if tag == TAG_NEG_INT:
        return -r.uvarint()
    if tag == TAG_FLOAT:
        return r.f64()
    if tag == TAG_TEXT:
        return r.text()

    if tag == TAG_ARRAY:
        _enter_container(depth, r.max_depth)
        count = r.uvarint()
        # Each element needs at least its tag byte; reject absurd counts
        # before looping over them.
        if count > r.remaining:
            raise OutOfBounds(
                "array count {} exceeds the {} byte(s) left".format(count, r.remaining))
        return [decode_value(r, depth + 1) for _ in range(count)]

    if tag == TAG_MAP:
        _enter_container(depth, r.max_depth)
        count = r.uvarint()
        if count * MIN_MAP_ENTRY_BYTES > r.remaining:
            raise OutOfBounds(
                "map count {} exceeds the {} byte(s) left".format(count, r.remaining))
        out = {}
        for _ in range(count):
            key_off = r.offset
            key_tag = r.u8()
            if key_tag == KEY_INLINE:
                key = r.text()
            elif key_tag == KEY_INDEXED:
                key = r.dictionary.key_at(r.uvarint())
            else:
                raise UnknownTag(
                    "unknown map key tag 0x{:02x} at offset {}".format(key_tag, key_off))
            out[key] = decode_value(r, depth + 1)
        return out

    raise UnknownTag("unknown value tag 0x{:02x} at offset {}".format(tag, tag_off))
