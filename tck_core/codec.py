"""
tck_core.codec
--------------
JSON encoding for the JSON-RPC wire that never routes integers through float.

Python's json module already parses integer literals into exact ``int``.
What needs care is everything else: non-integral numbers are decoded to
``Decimal`` so nothing is rounded, and dumps() writes a Decimal back out as
its exact number text. 64-bit signed fields that the server expects as
strings go through encode_int64/decode_int64.

INT64_MIN (-9223372036854775808) is not supported by default: the server side
cannot negate it symmetrically, so both helpers refuse it unless the caller
opts in with ``allow_min=True``.
"""

from __future__ import annotations
import json
import re
from decimal import Decimal
from typing import Any, Union

from .constants import INT64_MAX, INT64_MIN
from .errors import Int64RangeError

_INT_TEXT = re.compile(r"-?[0-9]+")


def _number(d: Decimal) -> str:
    if not d.is_finite():
        raise ValueError(f"{d} is not a JSON number")
    # Decimal's str() is valid JSON number syntax and keeps the literal as read
    # ("5", "1.50", "1E+400")
    return str(d)


def _encode(o: Any) -> str:
    # json.JSONEncoder has no hook for raw number text, so containers are walked here
    # and only scalars are handed to json.dumps
    if isinstance(o, Decimal):
        return _number(o)
    if isinstance(o, dict):
        items = []
        for k, v in o.items():
            if not isinstance(k, str):
                if isinstance(k, bool) or not isinstance(k, int):
                    raise TypeError(f"keys must be str or int, not {type(k).__name__}")
                k = str(k)
            items.append(json.dumps(k, ensure_ascii=False) + ":" + _encode(v))
        return "{" + ",".join(items) + "}"
    if isinstance(o, (list, tuple)):
        return "[" + ",".join(_encode(v) for v in o) + "]"
    if isinstance(o, (bytes, bytearray)):
        return json.dumps(o.hex())
    if hasattr(o, "to_params"):
        return _encode(o.to_params())
    return json.dumps(o, ensure_ascii=False)


def dumps(obj: Any) -> bytes:
    return _encode(obj).encode("utf-8")


def loads(raw: Union[bytes, str]) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    return json.loads(raw, parse_float=Decimal)


def _check_int64(value: int, allow_min: bool) -> int:
    if value > INT64_MAX or value < INT64_MIN:
        raise Int64RangeError(f"{value} is outside the signed 64-bit range")
    if value == INT64_MIN and not allow_min:
        raise Int64RangeError("INT64_MIN is not supported on the wire; pass allow_min=True to send it anyway")
    return value


def encode_int64(value: int, *, allow_min: bool = False) -> str:
    """Render a signed 64-bit integer as its exact base-10 wire string."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise Int64RangeError(f"expected int, got {type(value).__name__}")
    return str(_check_int64(value, allow_min))


def decode_int64(text: Union[str, int], *, allow_min: bool = False) -> int:
    if isinstance(text, bool):
        raise Int64RangeError("expected an integer string, got bool")
    if isinstance(text, int):
        value = text
    elif isinstance(text, str) and _INT_TEXT.fullmatch(text):
        value = int(text, 10)
    else:
        # "-" is the only sign; no "+", underscores, whitespace or non-ASCII digits
        raise Int64RangeError(f"not a base-10 integer string: {text!r}")
    return _check_int64(value, allow_min)
