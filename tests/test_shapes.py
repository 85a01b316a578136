import pytest

from devmcp.analysis.shapes import type_tag, validate_shape

ID_SHAPE = {"type": "object", "properties": {"id": {"type": "number"}}, "required": ["id"]}


@pytest.mark.parametrize(
    "value, tag",
    [
        ([], "array"),
        ((1, 2), "array"),
        ({}, "object"),
        ("x", "string"),
        (1, "number"),
        (1.5, "number"),
        (True, "boolean"),
        (None, "null"),
    ],
)
def test_type_tag(value, tag):
    assert type_tag(value) == tag


def test_missing_required_field():
    assert validate_shape({}, ID_SHAPE) == ["Missing required field: id"]


def test_type_mismatch():
    assert validate_shape({"id": "x"}, ID_SHAPE) == ["Type mismatch at id: expected number, got string"]


def test_valid_value_has_no_errors():
    assert validate_shape({"id": 3, "extra": "ignored"}, ID_SHAPE) == []


def test_optional_absent_property_is_fine():
    shape = {"type": "object", "properties": {"name": {"type": "string"}}}
    assert validate_shape({}, shape) == []


def test_array_is_not_an_object():
    shape = {"type": "object", "properties": {"tags": {"type": "object"}}}
    assert validate_shape({"tags": ["a"]}, shape) == ["Type mismatch at tags: expected object, got array"]


def test_boolean_is_not_a_number():
    assert validate_shape({"id": True}, ID_SHAPE) == ["Type mismatch at id: expected number, got boolean"]


def test_integer_accepts_whole_numbers_only():
    shape = {"type": "object", "properties": {"n": {"type": "integer"}}}
    assert validate_shape({"n": 4}, shape) == []
    assert validate_shape({"n": 4.0}, shape) == []
    assert validate_shape({"n": 4.5}, shape) == ["Type mismatch at n: expected integer, got number"]


def test_integer_check_handles_arbitrarily_large_values():
    shape = {"type": "object", "properties": {"n": {"type": "integer"}}}
    assert validate_shape({"n": 10**400}, shape) == []
    assert validate_shape({"n": float("inf")}, {"type": "integer"}) == ["Type mismatch at $: expected integer, got number"]


def test_non_object_root_is_one_mismatch():
    assert validate_shape([1, 2], ID_SHAPE) == ["Type mismatch at $: expected object, got array"]
    assert validate_shape(None, ID_SHAPE) == ["Type mismatch at $: expected object, got null"]


def test_errors_follow_declared_property_order():
    shape = {
        "type": "object",
        "properties": {"b": {"type": "string"}, "a": {"type": "string"}, "c": {"type": "number"}},
        "required": ["a", "b", "c"],
    }
    assert validate_shape({"c": "3"}, shape) == [
        "Missing required field: b",
        "Missing required field: a",
        "Type mismatch at c: expected number, got string",
    ]


def test_recurses_into_declared_nested_shapes():
    shape = {
        "type": "object",
        "properties": {
            "user": {
                "type": "object",
                "properties": {"email": {"type": "string"}},
                "required": ["email"],
            },
            "items": {
                "type": "array",
                "items": {"type": "object", "properties": {"qty": {"type": "number"}}, "required": ["qty"]},
            },
        },
    }
    value = {"user": {}, "items": [{"qty": 1}, {"qty": "2"}, {}]}
    assert validate_shape(value, shape) == [
        "Missing required field: user.email",
        "Type mismatch at items[1].qty: expected number, got string",
        "Missing required field: items[2].qty",
    ]


def test_undeclared_nested_shape_is_not_inspected():
    shape = {"type": "object", "properties": {"meta": {"type": "object"}}}
    assert validate_shape({"meta": {"anything": [1, {"deep": None}]}}, shape) == []


def test_property_without_type_accepts_anything():
    shape = {"type": "object", "properties": {"payload": {"description": "any"}}, "required": ["payload"]}
    assert validate_shape({"payload": [1]}, shape) == []
    assert validate_shape({"payload": None}, shape) == []


def test_non_dict_shape_never_raises():
    assert validate_shape({"a": 1}, None) == []
    assert validate_shape({"a": 1}, {"type": "object", "properties": "bogus"}) == []


@pytest.mark.parametrize("value", [{}, {"id": "x"}, {"id": 1}, [], "text"])
def test_validation_is_idempotent(value):
    assert validate_shape(value, ID_SHAPE) == validate_shape(value, ID_SHAPE)
