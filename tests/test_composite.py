"""allOf / anyOf / oneOf / not."""
import pytest

from shapecheck import ErrorCode, SchemaFaultError, coerce, is_valid, validate


# =============================================================================
# allOf
# =============================================================================

def test_all_of_accumulates_every_branch():
    schema = {"allOf": [{"type": "string"}, {"minimum": 10}, {"enum": ["x"]}]}
    outcome = validate(3, schema)
    assert [(f.code, f.schema_path) for f in outcome.findings] == [
        (ErrorCode.INVALID_TYPE, "/allOf/0/type"),
        (ErrorCode.NUMBER_MINIMUM, "/allOf/1/minimum"),
        (ErrorCode.ENUM_MISMATCH, "/allOf/2/enum"),
    ]


def test_all_of_coerces_in_sequence():
    schema = {"allOf": [{"type": "integer"}, {"type": "string"}]}
    outcome = coerce("7.0", schema)
    assert outcome.valid
    assert outcome.value == "7"


# =============================================================================
# anyOf
# =============================================================================

def test_any_of_success_discards_earlier_findings():
    schema = {"anyOf": [{"type": "string"}, {"type": "integer"}]}
    assert validate(3, schema).valid


def test_any_of_total_failure_nests_each_branch():
    schema = {"anyOf": [{"type": "string"}, {"type": "integer", "minimum": 0}]}
    outcome = validate({"v": 1.5}, {"properties": {"v": schema}})
    assert len(outcome.findings) == 1
    finding = outcome.findings[0]
    assert finding.code is ErrorCode.ANY_OF_MISSING
    assert finding.data_path == "/v"
    assert finding.schema_path == "/properties/v/anyOf"
    assert finding.message == "Value must satisfy at least one of the options"
    assert len(finding.sub_findings) == 2
    assert [f.schema_path for f in finding.sub_findings[0]] == ["/properties/v/anyOf/0/type"]
    assert [f.schema_path for f in finding.sub_findings[1]] == ["/properties/v/anyOf/1/type"]
    assert finding.sub_findings[1][0].data_path == "/v"


def test_any_of_adopts_first_successful_coercion():
    schema = {"anyOf": [{"type": "boolean"}, {"type": "integer"}]}
    assert coerce("1", schema).value is True
    schema = {"anyOf": [{"type": "integer", "maximum": 0}, {"type": "number"}]}
    assert coerce("2", schema).value == 2


def test_any_of_branches_do_not_see_each_others_coercion():
    schema = {"anyOf": [
        {"properties": {"a": {"type": "integer"}}, "required": ["b"]},
        {"properties": {"a": {"type": "string"}}},
    ]}
    outcome = coerce({"a": "5"}, schema, {"no_implicit_default": True})
    assert outcome.valid
    assert outcome.value == {"a": "5"}


def test_any_of_later_branches_not_evaluated():
    # The second branch is malformed; reaching it would raise a fault
    schema = {"anyOf": [{"type": "integer"}, {"type": "bogus"}]}
    assert validate(1, schema).valid
    with pytest.raises(SchemaFaultError) as exc_info:
        validate("x", schema)
    assert exc_info.value.schema_path == "/anyOf/1/type"


# =============================================================================
# oneOf
# =============================================================================

def test_one_of_single_match():
    schema = {"oneOf": [{"type": "string"}, {"type": "integer"}]}
    outcome = validate(1, schema)
    assert outcome.valid
    assert outcome.findings == ()


def test_one_of_no_match_nests_every_branch():
    schema = {"oneOf": [{"type": "string"}, {"type": "boolean"}, {"type": "null"}]}
    outcome = validate(1, schema)
    finding = outcome.findings[0]
    assert finding.code is ErrorCode.ONE_OF_MISSING
    assert finding.schema_path == "/oneOf"
    assert len(finding.sub_findings) == 3
    assert finding.sub_findings[2][0].schema_path == "/oneOf/2/type"


def test_one_of_multiple_names_successive_pairs():
    schema = {"oneOf": [{"type": "number"}, {"type": "string"}, {"minimum": 0}, {}]}
    outcome = validate(5, schema)
    assert [f.code for f in outcome.findings] == [ErrorCode.ONE_OF_MULTIPLE] * 2
    assert [f.message for f in outcome.findings] == [
        "Value satisfies more than one of the options (0 and 2)",
        "Value satisfies more than one of the options (2 and 3)",
    ]


def test_one_of_evaluates_every_branch():
    schema = {"oneOf": [{"type": "integer"}, {"type": "bogus"}]}
    with pytest.raises(SchemaFaultError) as exc_info:
        validate(1, schema)
    assert exc_info.value.schema_path == "/oneOf/1/type"


def test_one_of_adopts_first_success_copy():
    schema = {"oneOf": [{"type": "integer"}, {"type": "boolean", "enum": [False]}]}
    outcome = coerce("3", schema)
    assert outcome.valid
    assert outcome.value == 3


# =============================================================================
# not
# =============================================================================

def test_not_rejects_matching_data():
    finding = validate("x", {"not": {"type": "string"}}).findings[0]
    assert finding.code is ErrorCode.NOT_PASSED
    assert finding.schema_path == "/not"
    assert finding.message == "Value satisfies prohibited schema"
    assert validate(1, {"not": {"type": "string"}}).valid


def test_not_never_coerces():
    outcome = coerce("5", {"not": {"type": "integer"}})
    assert outcome.valid
    assert outcome.value == "5"


def test_fault_inside_not_is_rerooted():
    with pytest.raises(SchemaFaultError) as exc_info:
        validate({"a": 1}, {"properties": {"a": {"not": {"enum": 3}}}})
    assert exc_info.value.schema_path == "/properties/a/not/enum"


@pytest.mark.parametrize("keyword", ["allOf", "anyOf", "oneOf"])
def test_combinator_needs_array(keyword):
    with pytest.raises(SchemaFaultError) as exc_info:
        validate(1, {keyword: {"type": "integer"}})
    assert exc_info.value.schema_path == f"/{keyword}"


def test_fail_fast_stops_inside_composites():
    schema = {"allOf": [{"type": "string"}, {"minimum": 10}]}
    assert is_valid(3, schema) is False
    assert is_valid("x", {"anyOf": [{"type": "integer"}, {"minLength": 1}]}) is True
