"""oab — compact binary encoding for tree-shaped data.

Values are null, booleans, numbers, strings, arrays and string-keyed maps.
Map keys can be replaced by indices into a KeyDictionary that both ends
agree on out of band, which makes repeated keys nearly free.

Quick start:
    >>> from oab import encode, decode
    >>> data = encode([{"username": "cat"}], dictionary=["username"])
    >>> data.hex()
    '0801090102000703636174'
    >>> decode(data, dictionary=["username"])
    [{'username': 'cat'}]

For hand-rolled formats, Writer and Reader expose the primitives directly:
    >>> from oab import Writer, Reader
    >>> buf = Writer().text("Hello!").uvarint(123).svarint(-123).f64(5.4).finalize()
    >>> r = Reader(buf)
    >>> r.text(), r.uvarint(), r.svarint(), r.f64()
    ('Hello!', 123, -123, 5.4)

Both ends must use the same dictionary and the same ascii_only setting.
Nothing on the wire records either; a mismatch decodes to wrong data
rather than raising.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from ._buffer import ByteSink, ByteSource, BytesLike
from ._constants import DEFAULT_INITIAL_CAPACITY, DEFAULT_MAX_DEPTH
from ._dictionary import EMPTY_DICTIONARY, KeyDictionary
from ._errors import (
    ERR_DEPTH,
    ERR_DICTIONARY,
    ERR_INVALID_SEQUENCE,
    ERR_JSON,
    ERR_KEY_REFERENCE,
    ERR_MALFORMED_VARINT,
    ERR_OUT_OF_BOUNDS,
    ERR_TRAILING_DATA,
    ERR_UNKNOWN_TAG,
    ERR_UNREPRESENTABLE,
    ERR_UNSUPPORTED_TYPE,
    InvalidSequence,
    JsonInputError,
    KeyDictionaryError,
    MalformedKeyReference,
    MalformedVarint,
    OabError,
    OutOfBounds,
    RecursionLimitExceeded,
    TrailingData,
    UnknownTag,
    UnrepresentableValue,
    UnsupportedType,
)
from ._json_adapter import json_to_value, load_dictionary, value_to_json
from ._reader import Reader
from ._varint import (
    decode_svarint,
    decode_uvarint,
    encode_svarint,
    encode_uvarint,
    zigzag_decode,
    zigzag_encode,
)
from ._writer import Writer

__version__ = "1.0.0"

__all__ = [
    # Whole-message API
    "encode",
    "decode",
    # Codec objects
    "Writer",
    "Reader",
    "ByteSink",
    "ByteSource",
    "KeyDictionary",
    "EMPTY_DICTIONARY",
    # Standalone varint helpers
    "encode_uvarint",
    "decode_uvarint",
    "encode_svarint",
    "decode_svarint",
    "zigzag_encode",
    "zigzag_decode",
    # JSON adapter
    "json_to_value",
    "value_to_json",
    "load_dictionary",
    # Exceptions
    "OabError",
    "OutOfBounds",
    "InvalidSequence",
    "UnsupportedType",
    "UnrepresentableValue",
    "MalformedKeyReference",
    "UnknownTag",
    "MalformedVarint",
    "RecursionLimitExceeded",
    "TrailingData",
    "KeyDictionaryError",
    "JsonInputError",
    # Error codes
    "ERR_OUT_OF_BOUNDS",
    "ERR_INVALID_SEQUENCE",
    "ERR_UNSUPPORTED_TYPE",
    "ERR_UNREPRESENTABLE",
    "ERR_KEY_REFERENCE",
    "ERR_UNKNOWN_TAG",
    "ERR_MALFORMED_VARINT",
    "ERR_DEPTH",
    "ERR_TRAILING_DATA",
    "ERR_DICTIONARY",
    "ERR_JSON",
]

DictionaryLike = Union[KeyDictionary, Iterable[str], None]


def encode(value: Any, *,
           dictionary: DictionaryLike = None,
           ascii_only: bool = False,
           initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
           max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
           warn_unknown_keys: bool = False) -> bytes:
    """Encode one value tree into a standalone message."""
    w = Writer(dictionary=dictionary,
               initial_capacity=initial_capacity,
               ascii_only=ascii_only,
               max_depth=max_depth,
               warn_unknown_keys=warn_unknown_keys)
    return w.value(value).finalize()


def decode(data: BytesLike, *,
           dictionary: DictionaryLike = None,
           ascii_only: bool = False,
           max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
           allow_trailing: bool = False) -> Any:
    """Decode a message produced by encode().

    The message must hold exactly one value.  Bytes left over after it
    raise TrailingData unless allow_trailing=True.
    """
    r = Reader(data, dictionary=dictionary, ascii_only=ascii_only,
               max_depth=max_depth)
    val = r.value()
    if not allow_trailing and not r.at_end:
        raise TrailingData(
            "{} byte(s) left after the root value at offset {}".format(
                r.remaining, r.offset))
    return val
