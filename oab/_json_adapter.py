"""JSON adapter — JSON text in and out of the OAB value model.

Used by the CLI, and handy for tests and fixtures.  JSON and OAB values
line up almost one to one:

    object  <-> map      (key order preserved)
    array   <-> array
    string  <-> text
    number  <-> integer or float
    true / false / null

Two JSON quirks need handling:

  - Python's json module accepts NaN, Infinity and -Infinity by default.
    OAB cannot carry them, so they are rejected at parse time with the
    same error the encoder would raise.
  - JSON allows duplicate object keys and json.loads silently keeps the
    last one.  An OAB map has unique keys, so duplicates are an input
    error rather than something to guess about.
"""

from __future__ import annotations

import json
from typing import Any, List, Tuple, Union

from ._dictionary import KeyDictionary
from ._errors import JsonInputError, UnrepresentableValue


def _reject_constant(token: str) -> Any:
    raise UnrepresentableValue("JSON constant {} cannot be encoded".format(token))


def _pairs_hook(pairs: List[Tuple[str, Any]]) -> dict:
    out: dict = {}
    for key, value in pairs:
        if key in out:
            raise JsonInputError("duplicate key {!r} in JSON object".format(key))
        out[key] = value
    return out


def _as_text(raw: Union[bytes, str]) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise JsonInputError("JSON input is not valid UTF-8") from None


def json_to_value(raw: Union[bytes, str]) -> Any:
    """Parse JSON text into a value tree ready for Writer.value()."""
    try:
        return json.loads(
            _as_text(raw),
            object_pairs_hook=_pairs_hook,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as e:
        raise JsonInputError("JSON parse error: {}".format(e)) from None


def value_to_json(val: Any, indent: Union[int, None] = None) -> str:
    """Render a decoded value tree as JSON text."""
    return json.dumps(val, ensure_ascii=False, allow_nan=False, indent=indent)


def load_dictionary(raw: Union[bytes, str]) -> KeyDictionary:
    """Build a KeyDictionary from a JSON array of strings."""
    keys = json_to_value(raw)
    if not isinstance(keys, list):
        raise JsonInputError("dictionary file must hold a JSON array of strings")
    return KeyDictionary(keys)
