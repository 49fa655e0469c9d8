from __future__ import annotations
import base64
import math
from typing import Annotated, Any, Iterator, Literal, NamedTuple, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from .common import NEGATIVE_INT_MIN, UINT64_MAX, SimpleValue


class Tagged(NamedTuple):
    """Plain-Python stand-in for a tag, returned by Tag.to_python()."""
    tag: int
    value: Any


def _hashable(obj: Any) -> Any:
    # lists and dicts produced by to_python() can't be dict keys
    if isinstance(obj, list):
        return tuple(_hashable(o) for o in obj)
    if isinstance(obj, dict):
        return tuple((_hashable(k), _hashable(v)) for k, v in obj.items())
    if isinstance(obj, Tagged):
        return Tagged(obj.tag, _hashable(obj.value))
    return obj


class _Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_python(self) -> Any:
        return getattr(self, "value")


class UnsignedInt(_Item):
    kind: Literal["uint"] = "uint"
    value: int = Field(..., ge=0, le=UINT64_MAX)

    def __init__(self, value: int, **data: Any):
        super().__init__(value=value, **data)


class NegativeInt(_Item):
    kind: Literal["nint"] = "nint"
    value: int = Field(..., ge=NEGATIVE_INT_MIN, le=-1)

    def __init__(self, value: int, **data: Any):
        super().__init__(value=value, **data)


class ByteString(_Item):
    kind: Literal["bytes"] = "bytes"
    value: bytes

    def __init__(self, value: bytes, **data: Any):
        super().__init__(value=value, **data)

    @field_serializer("value", when_used="json")
    def serialize_value(self, value: bytes) -> str:
        # standard alphabet with padding, not the URL-safe one
        return base64.b64encode(value).decode("ascii")


class TextString(_Item):
    kind: Literal["text"] = "text"
    value: str

    def __init__(self, value: str, **data: Any):
        super().__init__(value=value, **data)


class Simple(_Item):
    kind: Literal["simple"] = "simple"
    value: SimpleValue

    def __init__(self, value: SimpleValue, **data: Any):
        super().__init__(value=value, **data)

    def to_python(self) -> Any:
        if self.value is SimpleValue.FALSE:
            return False
        if self.value is SimpleValue.TRUE:
            return True
        return None  # null and undefined


class Float(_Item):
    """Any float item; half and single precision are widened to a Python float."""
    kind: Literal["float"] = "float"
    value: float

    def __init__(self, value: float, **data: Any):
        super().__init__(value=value, **data)

    @field_serializer("value", when_used="json")
    def serialize_value(self, value: float) -> Union[float, str]:
        # JSON has no literal for these; use the diagnostic-notation spellings
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return value


class Invalid(_Item):
    """Placeholder for an item whose header used a reserved/unsupported encoding."""
    kind: Literal["invalid"] = "invalid"
    initial_byte: int = Field(..., ge=0, le=0xFF)

    def __init__(self, initial_byte: int, **data: Any):
        super().__init__(initial_byte=initial_byte, **data)

    def to_python(self) -> Any:
        return None


class Array(_Item):
    kind: Literal["array"] = "array"
    items: Tuple["Value", ...] = ()

    def __init__(self, items: Any = (), **data: Any):
        super().__init__(items=tuple(items), **data)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, idx: int) -> "Value":
        return self.items[idx]

    def to_python(self) -> Any:
        return [v.to_python() for v in self.items]


class Map(_Item):
    """
    Decoded map. Entries keep the order in which keys first appeared; keys are
    compared structurally over the whole Value union, so UnsignedInt(1) and
    TextString("1") are distinct keys.
    """
    kind: Literal["map"] = "map"
    entries: Tuple[Tuple["Value", "Value"], ...] = ()

    def __init__(self, entries: Any = (), **data: Any):
        if isinstance(entries, dict):
            entries = entries.items()
        super().__init__(entries=tuple(tuple(e) for e in entries), **data)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def __getitem__(self, key: "Value") -> "Value":
        for k, v in self.entries:
            if k == key:
                return v
        raise KeyError(key)

    def get(self, key: "Value", default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def keys(self) -> Iterator["Value"]:
        return (k for k, _ in self.entries)

    def values(self) -> Iterator["Value"]:
        return (v for _, v in self.entries)

    def items(self) -> Iterator[Tuple["Value", "Value"]]:
        return iter(self.entries)

    def to_python(self) -> Any:
        return {_hashable(k.to_python()): v.to_python() for k, v in self.entries}


class Tag(_Item):
    kind: Literal["tag"] = "tag"
    number: int = Field(..., ge=0, le=UINT64_MAX)
    value: "Value"

    def __init__(self, number: int, value: "Value", **data: Any):
        super().__init__(number=number, value=value, **data)

    def to_python(self) -> Any:
        return Tagged(self.number, self.value.to_python())


Value = Annotated[
    Union[UnsignedInt, NegativeInt, ByteString, TextString, Array, Map, Tag, Simple, Float, Invalid],
    Field(discriminator="kind"),
]

for _model in (Array, Map, Tag):
    _model.model_rebuild()

FALSE = Simple(SimpleValue.FALSE)
TRUE = Simple(SimpleValue.TRUE)
NULL = Simple(SimpleValue.NULL)
UNDEFINED = Simple(SimpleValue.UNDEFINED)
