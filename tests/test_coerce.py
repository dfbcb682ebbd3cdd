"""Coercion runs and default synthesis."""
import pytest

from shapecheck import ErrorCode, coerce, validate
from shapecheck.validation import ValidationOptions, synthesize_default


def test_coerce_integer_string():
    outcome = coerce("42", {"type": "integer"})
    assert outcome.valid
    assert outcome.value == 42
    assert outcome.data == 42


def test_coerce_failure_keeps_invalid_type():
    outcome = coerce("abc", {"type": "integer"})
    assert not outcome.valid
    assert outcome.value is None
    assert outcome.findings[0].code is ErrorCode.INVALID_TYPE
    assert outcome.findings[0].message == "Invalid type: string"


def test_non_coercing_validation_never_converts():
    outcome = validate("42", {"type": "integer"})
    assert not outcome.valid
    assert outcome.data == "42"


def test_coerce_leaves_caller_data_untouched():
    data = {"port": "8080", "extra": True, "tags": ["1", "2"]}
    schema = {
        "properties": {"port": {"type": "integer"}, "tags": {"items": {"type": "number"}}},
        "additionalProperties": False,
    }
    outcome = coerce(data, schema)
    assert outcome.valid
    assert outcome.value == {"port": 8080, "tags": [1, 2]}
    assert data == {"port": "8080", "extra": True, "tags": ["1", "2"]}


def test_coerced_values_feed_later_stages():
    outcome = coerce("5", {"type": "integer", "minimum": 10})
    assert [f.code for f in outcome.findings] == [ErrorCode.NUMBER_MINIMUM]
    assert outcome.data == 5


def test_additional_properties_false_deletes_silently_when_coercing():
    outcome = coerce({"a": 1, "b": 2, "c": 3}, {"properties": {"a": {}}, "additionalProperties": False})
    assert outcome.valid
    assert outcome.value == {"a": 1}


def test_invalid_coercion_returns_partial_data_without_value():
    outcome = coerce({"a": "1", "b": "x"}, {"properties": {"a": {"type": "integer"}, "b": {"type": "integer"}}})
    assert not outcome.valid
    assert outcome.value is None
    assert outcome.data == {"a": 1, "b": "x"}


# =============================================================================
# Default synthesis
# =============================================================================

SCHEMA = {"type": "object", "properties": {"a": {"type": "string", "default": "x"}}, "required": ["a"]}
IMPLICIT = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]}


def test_required_property_takes_explicit_default():
    outcome = coerce({}, SCHEMA)
    assert outcome.valid
    assert outcome.value == {"a": "x"}


def test_required_property_takes_implicit_default():
    assert coerce({}, IMPLICIT).value == {"a": ""}


def test_no_implicit_default_reports_required():
    outcome = coerce({}, IMPLICIT, {"no_implicit_default": True})
    assert not outcome.valid
    finding = outcome.findings[0]
    assert finding.code is ErrorCode.OBJECT_REQUIRED
    assert finding.schema_path == "/required/0"


def test_no_implicit_default_still_honors_explicit_default():
    assert coerce({}, SCHEMA, {"no_implicit_default": True}).value == {"a": "x"}


def test_validate_never_synthesizes():
    assert validate({}, SCHEMA).findings[0].code is ErrorCode.OBJECT_REQUIRED


@pytest.mark.parametrize("types, expected", [
    ("null", None),
    ("boolean", True),
    ("integer", 0),
    ("number", 0),
    ("string", ""),
    ("object", {}),
    ("array", []),
    (["array", "string"], []),
    (["string", "null"], ""),
])
def test_implicit_default_follows_first_declared_type(types, expected):
    schema = {"properties": {"k": {"type": types}}, "required": ["k"]}
    outcome = coerce({}, schema)
    assert outcome.valid
    assert outcome.value == {"k": expected}


def test_default_is_deep_copied():
    default = {"nested": [1]}
    schema = {"properties": {"k": {"default": default}}, "required": ["k"]}
    value = coerce({}, schema).value
    value["k"]["nested"].append(2)
    assert default == {"nested": [1]}


def test_default_from_pattern_then_additional_properties():
    schema = {
        "patternProperties": {"^n_": {"type": "integer"}},
        "additionalProperties": {"type": "boolean"},
        "required": ["n_count", "flag"],
    }
    assert coerce({}, schema).value == {"n_count": 0, "flag": True}


def test_no_governing_schema_means_required_finding():
    outcome = coerce({}, {"required": ["a"]})
    assert [f.code for f in outcome.findings] == [ErrorCode.OBJECT_REQUIRED]


def test_untyped_schema_without_default_fails_synthesis():
    outcome = coerce({}, {"properties": {"a": {}}, "required": ["a"]})
    assert not outcome.valid


def test_synthesized_default_is_then_validated():
    schema = {"properties": {"a": {"type": "string", "default": 5}}, "required": ["a"]}
    outcome = coerce({}, schema)
    assert outcome.valid
    assert outcome.value == {"a": "5"}


def test_set_missing_to_default_fills_optional_properties():
    schema = {"properties": {"a": {"type": "integer", "default": 3}, "b": {"type": "string"}}}
    assert coerce({}, schema).value == {}
    assert coerce({}, schema, {"set_missing_to_default": True}).value == {"a": 3}
    # Not coercing: nothing is written
    assert validate({}, schema, {"set_missing_to_default": True}).data == {}


def test_synthesize_default_direct():
    target: dict = {}
    options = ValidationOptions()
    assert synthesize_default(target, {"properties": {"a": {"type": "array"}}}, "a", options)
    assert target == {"a": []}
    assert not synthesize_default(target, {"properties": {}}, "b", options)
    assert not synthesize_default(target, {"additionalProperties": True}, "b", options)
    assert "b" not in target
