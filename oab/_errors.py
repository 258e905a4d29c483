"""OAB v1 error codes and exception classes.

Every failure surfaces as an OabError subclass with a `.code` string.  The
codes are stable and grep-friendly; tests and the CLI compare against them.
Each subclass also derives from the closest builtin so that ordinary
`except IndexError` / `except ValueError` / `except TypeError` clauses keep
working for callers who don't know about this package.

None of these errors is recoverable mid-message: once raised, the buffer is
not decodable under the current configuration.
"""

from __future__ import annotations

from typing import Optional

ERR_OUT_OF_BOUNDS: str = "ERR_OUT_OF_BOUNDS"          # read past end of input
ERR_INVALID_SEQUENCE: str = "ERR_INVALID_SEQUENCE"    # malformed text bytes
ERR_UNSUPPORTED_TYPE: str = "ERR_UNSUPPORTED_TYPE"    # runtime kind not encodable
ERR_UNREPRESENTABLE: str = "ERR_UNREPRESENTABLE"      # NaN, ±inf, int too large
ERR_KEY_REFERENCE: str = "ERR_KEY_REFERENCE"          # dictionary index has no entry
ERR_UNKNOWN_TAG: str = "ERR_UNKNOWN_TAG"              # tag byte not in the table
ERR_MALFORMED_VARINT: str = "ERR_MALFORMED_VARINT"    # varint longer than 32 bits
ERR_DEPTH: str = "ERR_DEPTH"                          # nesting exceeds max_depth
ERR_TRAILING_DATA: str = "ERR_TRAILING_DATA"          # bytes left after root value
ERR_DICTIONARY: str = "ERR_DICTIONARY"                # bad KeyDictionary contents
ERR_JSON: str = "ERR_JSON"                            # JSON adapter input rejected


class OabError(Exception):
    """Base exception for OAB encode/decode errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    code: str = "ERR_OAB"

    def __init__(self, msg: str = "", code: Optional[str] = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(msg or self.code)


class OutOfBounds(OabError, IndexError):
    code = ERR_OUT_OF_BOUNDS


class InvalidSequence(OabError, ValueError):
    code = ERR_INVALID_SEQUENCE


class UnsupportedType(OabError, TypeError):
    code = ERR_UNSUPPORTED_TYPE


class UnrepresentableValue(OabError, ValueError):
    code = ERR_UNREPRESENTABLE


class MalformedKeyReference(OabError, LookupError):
    code = ERR_KEY_REFERENCE


class UnknownTag(OabError, ValueError):
    code = ERR_UNKNOWN_TAG


class MalformedVarint(OabError, ValueError):
    code = ERR_MALFORMED_VARINT


class RecursionLimitExceeded(OabError):
    code = ERR_DEPTH


class TrailingData(OabError, ValueError):
    code = ERR_TRAILING_DATA


class KeyDictionaryError(OabError, ValueError):
    code = ERR_DICTIONARY


class JsonInputError(OabError, ValueError):
    code = ERR_JSON
