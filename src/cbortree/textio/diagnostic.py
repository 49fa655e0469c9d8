from __future__ import annotations
import json
import math
from typing import Iterable

from ..models.common import SimpleValue
from ..models.value import (
    Array,
    ByteString,
    Float,
    Invalid,
    Map,
    NegativeInt,
    Simple,
    Tag,
    TextString,
    UnsignedInt,
    Value,
)

_SIMPLE_NAMES = {
    SimpleValue.FALSE: "false",
    SimpleValue.TRUE: "true",
    SimpleValue.NULL: "null",
    SimpleValue.UNDEFINED: "undefined",
}

def _float(v: float) -> str:
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    # repr always carries a '.' or an exponent: 1.0, -0.0, 1e+300
    return repr(v)

def to_diagnostic(value: Value) -> str:
    """Render a decoded value in CBOR diagnostic notation (RFC 8949 section 8)."""
    if isinstance(value, (UnsignedInt, NegativeInt)):
        return str(value.value)
    if isinstance(value, ByteString):
        return f"h'{value.value.hex()}'"
    if isinstance(value, TextString):
        return json.dumps(value.value, ensure_ascii=False)
    if isinstance(value, Array):
        return "[" + ", ".join(to_diagnostic(v) for v in value.items) + "]"
    if isinstance(value, Map):
        return "{" + ", ".join(f"{to_diagnostic(k)}: {to_diagnostic(v)}" for k, v in value.entries) + "}"
    if isinstance(value, Tag):
        return f"{value.number}({to_diagnostic(value.value)})"
    if isinstance(value, Simple):
        return _SIMPLE_NAMES[value.value]
    if isinstance(value, Float):
        return _float(value.value)
    if isinstance(value, Invalid):
        return f"invalid(0x{value.initial_byte:02x})"
    raise TypeError(f"not a decoded CBOR value: {type(value).__name__}")

def to_diagnostic_seq(values: Iterable[Value]) -> str:
    """Render a top-level item sequence, items separated by ', '."""
    return ", ".join(to_diagnostic(v) for v in values)
