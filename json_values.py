# json_values.py
# The parsed tree: a closed set of immutable node types.
#
# Objects are ordered (key, value) pair lists rather than dicts. Duplicate
# keys survive parsing and lookups resolve to the first occurrence.

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# NODE TYPES
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class JsonNull:
    pass


@dataclass(frozen=True)
class JsonBoolean:
    value: bool


@dataclass(frozen=True)
class JsonNumber:
    value: float


@dataclass(frozen=True)
class JsonString:
    value: str


@dataclass(frozen=True)
class JsonArray:
    items: Tuple["JsonValue", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["JsonValue"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "JsonValue":
        return self.items[index]


@dataclass(frozen=True)
class JsonObject:
    """
    Ordered member list.

    `get` implements the field-lookup contract used by record binding:
    the first pair whose key matches wins, and a missing key yields None
    (never JsonNull, which is a present value).
    """
    members: Tuple[Tuple[str, "JsonValue"], ...] = ()

    def get(self, key: str) -> Optional["JsonValue"]:
        for name, value in self.members:
            if name == key:
                return value
        return None

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.members)

    def __len__(self) -> int:
        return len(self.members)

    def keys(self) -> List[str]:
        return [name for name, _ in self.members]


JsonValue = Union[JsonNull, JsonBoolean, JsonNumber, JsonString, JsonArray, JsonObject]

JSON_VALUE_TYPES = (JsonNull, JsonBoolean, JsonNumber, JsonString, JsonArray, JsonObject)

# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------
def kind_name(value: JsonValue) -> str:
    """Short human name of a node's kind, used in mismatch messages."""
    if isinstance(value, JsonNull):
        return "null"
    if isinstance(value, JsonBoolean):
        return "boolean"
    if isinstance(value, JsonNumber):
        return "number"
    if isinstance(value, JsonString):
        return "string"
    if isinstance(value, JsonArray):
        return "array"
    if isinstance(value, JsonObject):
        return "object"
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def to_python(value: JsonValue) -> Any:
    """
    Unwrap a tree into plain Python data.

    Objects become dicts; when a key repeats, the first occurrence is kept
    so the result agrees with JsonObject.get.
    """
    if isinstance(value, JsonNull):
        return None
    if isinstance(value, (JsonBoolean, JsonNumber, JsonString)):
        return value.value
    if isinstance(value, JsonArray):
        return [to_python(item) for item in value.items]
    if isinstance(value, JsonObject):
        out = {}
        for name, member in value.members:
            if name not in out:
                out[name] = to_python(member)
        return out
    raise TypeError(f"not a JSON value: {type(value).__name__}")


__all__ = [
    "JsonNull", "JsonBoolean", "JsonNumber", "JsonString", "JsonArray",
    "JsonObject", "JsonValue", "JSON_VALUE_TYPES", "kind_name", "to_python",
]
