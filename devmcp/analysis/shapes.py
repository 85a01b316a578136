"""
Minimal structural validation of JSON-like values.

Checks presence of required keys and primitive/array type tags only; there is
no support for $ref, composition keywords, formats or numeric bounds. Nested
objects and array items are checked only when their shape is declared
explicitly on the property.
"""

from typing import Any, Dict, List


def type_tag(value: Any) -> str:
    """Runtime type tag of a decoded JSON value; array wins over object."""
    if isinstance(value, (list, tuple)):
        return "array"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _tag_matches(expected: str, value: Any) -> bool:
    actual = type_tag(value)
    if expected == "integer":
        if actual != "number":
            return False
        return isinstance(value, int) or value.is_integer()
    return actual == expected


def _check(value: Any, shape: Dict[str, Any], path: str, errors: List[str]) -> None:
    expected = shape.get("type")
    if isinstance(expected, str) and not _tag_matches(expected, value):
        errors.append(f"Type mismatch at {path or '$'}: expected {expected}, got {type_tag(value)}")
        return
    _descend(value, shape, path, errors)


def _descend(value: Any, shape: Dict[str, Any], path: str, errors: List[str]) -> None:
    properties = shape.get("properties")
    if isinstance(properties, dict) and isinstance(value, dict):
        required = shape.get("required") or []
        for key, prop_shape in properties.items():
            child_path = f"{path}.{key}" if path else key
            if key not in value:
                if key in required:
                    errors.append(f"Missing required field: {child_path}")
                continue
            _check(value[key], prop_shape if isinstance(prop_shape, dict) else {}, child_path, errors)

    items = shape.get("items")
    if isinstance(items, dict) and isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _check(item, items, f"{path}[{index}]", errors)


def validate_shape(value: Any, shape: Dict[str, Any]) -> List[str]:
    """Return every mismatch between value and shape, in declared property order. Never raises."""
    errors: List[str] = []
    if isinstance(shape, dict):
        _check(value, shape, "", errors)
    return errors
