# json_writer.py
# Tree -> text. Output is compact and always accepted back by parse_document.

import math
from decimal import Decimal
from typing import List

from json_values import (
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
)

# ---------------------------------------------------------------------------
# STRING ESCAPING
# ---------------------------------------------------------------------------
_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_string(text: str) -> str:
    """Quote `text`, escaping quote, backslash and every control character."""
    out = ['"']
    for ch in text:
        if ch in _SHORT_ESCAPES:
            out.append(_SHORT_ESCAPES[ch])
        elif ch < " ":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)

# ---------------------------------------------------------------------------
# NUMBERS
# ---------------------------------------------------------------------------
def format_number(value: float) -> str:
    """
    Positional decimal text for `value`.

    The grammar has no exponent, so repr() output like 1e-07 is expanded
    from its shortest round-tripping digits: 1e-07 -> 0.0000001. Integral
    values drop the trailing ".0".
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot serialize non-finite number {value!r}")
    text = format(Decimal(repr(float(value))), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text

# ---------------------------------------------------------------------------
# SERIALIZER
# ---------------------------------------------------------------------------
def _write(value: JsonValue, out: List[str]) -> None:
    if isinstance(value, JsonNull):
        out.append("null")
    elif isinstance(value, JsonBoolean):
        out.append("true" if value.value else "false")
    elif isinstance(value, JsonNumber):
        out.append(format_number(value.value))
    elif isinstance(value, JsonString):
        out.append(escape_string(value.value))
    elif isinstance(value, JsonArray):
        out.append("[")
        for i, item in enumerate(value.items):
            if i:
                out.append(",")
            _write(item, out)
        out.append("]")
    elif isinstance(value, JsonObject):
        out.append("{")
        for i, (name, member) in enumerate(value.members):
            if i:
                out.append(",")
            out.append(escape_string(name))
            out.append(":")
            _write(member, out)
        out.append("}")
    else:
        raise TypeError(f"not a JSON value: {type(value).__name__}")


def serialize(value: JsonValue) -> str:
    out: List[str] = []
    _write(value, out)
    return "".join(out)


__all__ = ["escape_string", "format_number", "serialize"]
