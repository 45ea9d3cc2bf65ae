from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

import pytest

import json_parser as jp
from json_convert import (
    converter_for,
    from_json,
    from_value,
    register,
    register_record,
    to_json,
    to_value,
)
from json_errors import ConversionError, ConversionErrorKind
from json_values import (
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
)


@register_record
@dataclass
class Address:
    city: str
    zip_code: Optional[str] = None


@register_record
@dataclass
class User:
    name: str
    age: int
    admin: bool
    scores: List[float]
    address: Optional[Address]
    tags: List[str] = field(default_factory=list)


@register_record
@dataclass
class TreeNode:
    label: str
    children: List["TreeNode"]


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


register_record(Point, {"x": float, "y": float})


class Money:
    def __init__(self, amount):
        self.amount = amount


@register(Money)
def _money(value):
    return Money(Decimal(from_value(str, value)))


def test_base_capabilities():
    assert from_value(str, JsonString("x")) == "x"
    assert from_value(float, JsonNumber(3.5)) == 3.5
    assert from_value(bool, JsonBoolean(False)) is False
    assert from_value(int, JsonNumber(4.0)) == 4


@pytest.mark.parametrize("target,value,expected", [
    (str, JsonNumber(1), "string"),
    (float, JsonString("1"), "number"),
    (bool, JsonNull(), "boolean"),
    (int, JsonNumber(1.5), "integer"),
    (List[str], JsonObject(()), "array"),
    (Address, JsonArray(()), "object"),
])
def test_type_mismatch(target, value, expected):
    with pytest.raises(ConversionError) as ei:
        from_value(target, value)
    assert ei.value.kind is ConversionErrorKind.TYPE_MISMATCH
    assert ei.value.expected == expected


def test_optional():
    assert from_value(Optional[str], JsonNull()) is None
    assert from_value(Optional[float], JsonNumber(3.5)) == 3.5
    with pytest.raises(ConversionError) as ei:
        from_value(Optional[float], JsonString("x"))
    assert ei.value.kind is ConversionErrorKind.TYPE_MISMATCH


def test_sequence():
    assert from_value(List[float], jp.parse_document("[1, 2.5]")) == [1.0, 2.5]
    assert from_value(List[float], JsonArray(())) == []
    assert from_value(List[Optional[bool]], jp.parse_document("[true,null]")) == [True, None]


def test_string_is_not_a_sequence():
    with pytest.raises(ConversionError) as ei:
        from_value(List[float], JsonString("x"))
    assert ei.value.kind is ConversionErrorKind.TYPE_MISMATCH


def test_sequence_reports_failing_index():
    with pytest.raises(ConversionError) as ei:
        from_value(List[List[float]], jp.parse_document('[[1],[2,"x"]]'))
    err = ei.value
    assert err.kind is ConversionErrorKind.ARRAY_ELEMENT
    assert err.index == 1
    assert err.cause.kind is ConversionErrorKind.ARRAY_ELEMENT
    assert err.cause.index == 1
    assert err.innermost().kind is ConversionErrorKind.TYPE_MISMATCH
    assert err.path() == "[1][1]"


def test_builtin_generic_list():
    assert from_value(list[int], jp.parse_document("[1,2]")) == [1, 2]
    assert from_value(list, jp.parse_document("[1]")) == [JsonNumber(1)]


def test_raw_value_passthrough():
    tree = jp.parse_document('{"a":[1]}')
    assert from_value(JsonValue, tree) is tree
    assert from_value(Optional[JsonValue], JsonNull()) is None


def test_record_from_json():
    user = from_json(User, """
        {"scores": [9.5, 7], "name": "ada", "admin": false, "age": 36,
         "address": {"city": "London"}, "name": "ignored"}
    """)
    assert user == User(name="ada", age=36, admin=False, scores=[9.5, 7.0],
                        address=Address(city="London"), tags=[])


def test_record_optional_field_accepts_null():
    user = from_json(User, '{"name":"x","age":1,"admin":true,"scores":[],'
                           '"address":null,"tags":["t"]}')
    assert user.address is None
    assert user.tags == ["t"]


def test_record_missing_field():
    with pytest.raises(ConversionError) as ei:
        from_json(User, '{"name":"x","admin":true,"scores":[],"address":null,"tags":[]}')
    assert ei.value.kind is ConversionErrorKind.MISSING_FIELD
    assert ei.value.field == "age"


def test_record_field_error_wraps_cause():
    doc = '{"name":"x","age":1,"admin":true,"scores":[1,"two"],"address":null,"tags":[]}'
    with pytest.raises(ConversionError) as ei:
        from_json(User, doc)
    err = ei.value
    assert err.kind is ConversionErrorKind.FIELD_ERROR
    assert err.field == "scores"
    assert err.path() == "scores[1]"
    assert err.innermost().expected == "number"


def test_nested_record_path():
    doc = '{"name":"x","age":1,"admin":true,"scores":[],"address":{"city":5},"tags":[]}'
    with pytest.raises(ConversionError) as ei:
        from_json(User, doc)
    assert ei.value.path() == "address.city"


def test_self_referencing_record():
    tree = from_json(TreeNode, '{"label":"root","children":[{"label":"leaf","children":[]}]}')
    assert tree.children[0].label == "leaf"
    assert tree.children[0].children == []


def test_explicit_field_table():
    point = from_json(Point, '{"y":2,"x":1,"z":3}')
    assert (point.x, point.y) == (1.0, 2.0)


def test_register_custom_type():
    money = from_json(List[Money], '["1.10"]')[0]
    assert money.amount == Decimal("1.10")


def test_unregistered_type_is_a_programming_error():
    class Unknown:
        pass
    with pytest.raises(TypeError):
        converter_for(Unknown)


def test_register_record_requires_fields_for_plain_classes():
    class Plain:
        pass
    with pytest.raises(TypeError):
        register_record(Plain)


def test_parse_errors_pass_through():
    with pytest.raises(SyntaxError):
        from_json(User, '{"name":')


def test_to_value_and_back():
    user = User(name="q\"uote", age=3, admin=True, scores=[0.5],
                address=Address(city="Oslo", zip_code="0150"), tags=["a"])
    text = to_json(user)
    assert text == ('{"name":"q\\"uote","age":3,"admin":true,"scores":[0.5],'
                    '"address":{"city":"Oslo","zip_code":"0150"},"tags":["a"]}')
    assert from_json(User, text) == user


def test_to_value_plain_data():
    assert to_value({"a": (1, None, True)}) == JsonObject((
        ("a", JsonArray((JsonNumber(1), JsonNull(), JsonBoolean(True)))),
    ))
    assert to_value(JsonString("raw")) == JsonString("raw")


@pytest.mark.parametrize("obj", [object(), {1: "a"}, {"a": {2}}])
def test_to_value_unsupported(obj):
    with pytest.raises(ConversionError) as ei:
        to_value(obj)
    assert ei.value.kind is ConversionErrorKind.UNSUPPORTED_TYPE


@pytest.mark.parametrize("obj", [10 ** 400, float("inf"), float("nan")])
def test_to_value_unrepresentable_numbers(obj):
    with pytest.raises(ConversionError) as ei:
        to_value(obj)
    assert ei.value.kind is ConversionErrorKind.UNSUPPORTED_TYPE


def test_record_converts_concurrently():
    from concurrent.futures import ThreadPoolExecutor

    @register_record
    @dataclass
    class Pair:
        left: str
        right: Optional[float] = None

    doc = jp.parse_document('{"left":"l","right":2}')
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: from_value(Pair, doc), range(64)))
    assert all(r == Pair(left="l", right=2.0) for r in results)
