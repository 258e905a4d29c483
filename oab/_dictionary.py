"""Key dictionary — the out-of-band key table shared by writer and reader.

A map key found in the dictionary travels as its index (key tag 2) instead
of its text (key tag 1).  For payloads whose maps repeat the same keys,
which is most of them, that is the bulk of the saving.

The dictionary has no identity on the wire.  Both ends must be built from
the same strings in the same order; a mismatch decodes to the wrong keys
without any error.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple

from ._errors import KeyDictionaryError, MalformedKeyReference


class KeyDictionary:
    """Immutable ordered table of distinct strings with an inverse map."""

    __slots__ = ("_keys", "_index")

    def __init__(self, keys: Iterable[str] = ()) -> None:
        if isinstance(keys, (str, bytes)):
            raise KeyDictionaryError(
                "dictionary must be an iterable of strings, not a single {}".format(
                    type(keys).__name__))
        ordered = tuple(keys)
        index = {}
        for i, k in enumerate(ordered):
            if not isinstance(k, str):
                raise KeyDictionaryError(
                    "dictionary entry {} is {}, not str".format(i, type(k).__name__))
            if k in index:
                raise KeyDictionaryError(
                    "duplicate dictionary entry {!r} at {} and {}".format(k, index[k], i))
            index[k] = i
        self._keys: Tuple[str, ...] = ordered
        self._index = MappingProxyType(index)

    @classmethod
    def coerce(cls, source) -> "KeyDictionary":
        """Accept None, an existing KeyDictionary, or any iterable of str."""
        if source is None:
            return EMPTY_DICTIONARY
        if isinstance(source, KeyDictionary):
            return source
        return cls(source)

    @property
    def keys(self) -> Tuple[str, ...]:
        return self._keys

    def index_of(self, key: str) -> Optional[int]:
        return self._index.get(key)

    def key_at(self, index: int) -> str:
        if 0 <= index < len(self._keys):
            return self._keys[index]
        raise MalformedKeyReference(
            "key index {} has no entry (dictionary size {})".format(
                index, len(self._keys)))

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyDictionary):
            return NotImplemented
        return self._keys == other._keys

    def __hash__(self) -> int:
        return hash(self._keys)

    def __repr__(self) -> str:
        return "KeyDictionary({!r})".format(list(self._keys))


EMPTY_DICTIONARY = KeyDictionary()
