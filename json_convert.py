# json_convert.py
# Typed conversion between parsed trees and application values.
#
# =============================================================================
#  CAPABILITIES
# =============================================================================
#
# A capability is a plain callable JsonValue -> T. converter_for(T) resolves
# the capability for a target type once and caches it; container types
# (Optional[T], List[T]) compose by resolving their inner type's capability.
#
# Base capabilities cover str, float, int, bool and JsonValue itself. New
# target types plug in through register(); records (classes built from
# named fields) plug in through register_record(). Neither touches the
# lexer or the parser.
#
# Record fields are looked up with JsonObject.get: first matching key wins,
# and "absent" is distinguished from "present but wrong type".
# =============================================================================

import dataclasses
import functools
import logging
import math
import types
import typing
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from json_errors import ConversionError
from json_parser import parse_document
from json_values import (
    JSON_VALUE_TYPES,
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    kind_name,
)
from json_writer import serialize

logger = logging.getLogger(__name__)

Capability = Callable[[JsonValue], Any]

_NONE_TYPE = type(None)
_UNION_ORIGINS = tuple(o for o in (Union, getattr(types, "UnionType", None)) if o is not None)

_capabilities: Dict[Any, Capability] = {}
# None marks a dataclass whose annotations are resolved on first use.
_records: Dict[type, Optional[Dict[str, Any]]] = {}

# ---------------------------------------------------------------------------
# REGISTRATION
# ---------------------------------------------------------------------------
def register(target):
    """
    Decorator installing `func` as the capability for `target`.

        @register(Decimal)
        def _decimal(value):
            ...
    """
    def wrap(func: Capability) -> Capability:
        _capabilities[target] = func
        converter_for.cache_clear()
        return func
    return wrap


def register_record(cls=None, fields: Optional[Mapping[str, Any]] = None):
    """
    Bind a record class to an explicit field name -> target type table.

    With no `fields`, a dataclass's init fields and their annotations are
    used, and fields with a default may be absent from the document. Works
    both as a call and as a class decorator:

        @register_record
        @dataclass
        class User:
            name: str
            tags: List[str]
    """
    def bind(klass):
        if fields is None and not dataclasses.is_dataclass(klass):
            raise TypeError(f"{klass.__name__} is not a dataclass; pass fields explicitly")
        _records[klass] = dict(fields) if fields is not None else None
        converter_for.cache_clear()
        logger.debug("registered record %s", klass.__name__)
        return klass

    if cls is None:
        return bind
    return bind(cls)

# ---------------------------------------------------------------------------
# COMPOSED CAPABILITIES
# ---------------------------------------------------------------------------
def _optional_of(inner: Capability) -> Capability:
    def convert(value: JsonValue):
        if isinstance(value, JsonNull):
            return None
        return inner(value)
    return convert


def _list_of(inner: Capability) -> Capability:
    def convert(value: JsonValue) -> list:
        if not isinstance(value, JsonArray):
            raise ConversionError.type_mismatch("array", kind_name(value))
        out = []
        for index, item in enumerate(value.items):
            try:
                out.append(inner(item))
            except ConversionError as exc:
                raise ConversionError.array_element(index, exc) from exc
        return out
    return convert


def _is_optional(target) -> bool:
    return typing.get_origin(target) in _UNION_ORIGINS and _NONE_TYPE in typing.get_args(target)


def _field_table(cls: type) -> Dict[str, Any]:
    table = _records[cls]
    if table is None:
        # Deferred so annotations may name classes defined later, e.g. List["Node"].
        hints = typing.get_type_hints(cls)
        table = {f.name: hints[f.name] for f in dataclasses.fields(cls) if f.init}
        _records[cls] = table
    return table


def _has_default(cls: type, name: str) -> bool:
    if not dataclasses.is_dataclass(cls):
        return False
    for f in dataclasses.fields(cls):
        if f.name == name:
            return f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
    return False


def _record_of(cls: type) -> Capability:
    bound: Optional[List[Tuple[str, Capability, bool, bool]]] = None

    def convert(value: JsonValue):
        nonlocal bound
        if not isinstance(value, JsonObject):
            raise ConversionError.type_mismatch("object", kind_name(value))
        if bound is None:
            # Single assignment: concurrent first calls each build a full list.
            bound = [(name, converter_for(tp), _is_optional(tp), _has_default(cls, name))
                     for name, tp in _field_table(cls).items()]
        kwargs = {}
        for name, capability, optional, defaulted in bound:
            member = value.get(name)
            if member is None:
                if defaulted:
                    continue
                if not optional:
                    raise ConversionError.missing_field(name)
                kwargs[name] = None
                continue
            try:
                kwargs[name] = capability(member)
            except ConversionError as exc:
                raise ConversionError.field_error(name, exc) from exc
        return cls(**kwargs)
    return convert


@functools.lru_cache(maxsize=None)
def converter_for(target) -> Capability:
    """
    Resolve the capability for `target`.

    Raises TypeError for a type nobody registered: that is a programming
    error, not a bad document.
    """
    if target in _capabilities:
        return _capabilities[target]
    if isinstance(target, type) and target in _records:
        return _record_of(target)
    origin = typing.get_origin(target)
    args = typing.get_args(target)
    if origin in _UNION_ORIGINS and _NONE_TYPE in args:
        rest = tuple(a for a in args if a is not _NONE_TYPE)
        inner = rest[0] if len(rest) == 1 else Union[rest]
        return _optional_of(converter_for(inner))
    if target is list:
        return _list_of(_to_raw)
    if origin is list:
        return _list_of(converter_for(args[0]) if args else _to_raw)
    raise TypeError(f"no JSON conversion registered for {target!r}")

# ---------------------------------------------------------------------------
# BASE CAPABILITIES
# ---------------------------------------------------------------------------
@register(str)
def _to_str(value: JsonValue) -> str:
    if isinstance(value, JsonString):
        return value.value
    raise ConversionError.type_mismatch("string", kind_name(value))


@register(float)
def _to_float(value: JsonValue) -> float:
    if isinstance(value, JsonNumber):
        return float(value.value)
    raise ConversionError.type_mismatch("number", kind_name(value))


@register(int)
def _to_int(value: JsonValue) -> int:
    if isinstance(value, JsonNumber) and float(value.value).is_integer():
        return int(value.value)
    found = "non-integral number" if isinstance(value, JsonNumber) else kind_name(value)
    raise ConversionError.type_mismatch("integer", found)


@register(bool)
def _to_bool(value: JsonValue) -> bool:
    if isinstance(value, JsonBoolean):
        return value.value
    raise ConversionError.type_mismatch("boolean", kind_name(value))


@register(JsonValue)
def _to_raw(value: JsonValue) -> JsonValue:
    return value

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def from_value(target, value: JsonValue):
    """Convert a parsed tree into `target`."""
    return converter_for(target)(value)


def from_json(target, text: str, **parse_kwargs):
    """Parse `text` and convert the root into `target`."""
    return from_value(target, parse_document(text, **parse_kwargs))


def to_value(obj: Any) -> JsonValue:
    """
    Build a tree from a typed value.

    Registered records are written with their fields in registration order.
    Dict keys must be strings.
    """
    if obj is None:
        return JsonNull()
    if isinstance(obj, bool):
        return JsonBoolean(obj)
    if isinstance(obj, (int, float)):
        try:
            number = float(obj)
        except OverflowError:
            raise ConversionError.unsupported_type("int too large for a float") from None
        if not math.isfinite(number):
            raise ConversionError.unsupported_type("non-finite float")
        return JsonNumber(number)
    if isinstance(obj, str):
        return JsonString(obj)
    if isinstance(obj, JSON_VALUE_TYPES):
        return obj
    if isinstance(obj, (list, tuple)):
        return JsonArray(tuple(to_value(item) for item in obj))
    if type(obj) in _records:
        return JsonObject(tuple((name, to_value(getattr(obj, name)))
                                for name in _field_table(type(obj))))
    if isinstance(obj, dict):
        if not all(isinstance(key, str) for key in obj):
            raise ConversionError.unsupported_type("dict with non-string keys")
        return JsonObject(tuple((key, to_value(item)) for key, item in obj.items()))
    raise ConversionError.unsupported_type(type(obj).__name__)


def to_json(obj: Any) -> str:
    return serialize(to_value(obj))


__all__ = [
    "Capability", "converter_for", "from_json", "from_value",
    "register", "register_record", "to_json", "to_value",
]
