"""Constraint Dispatcher

Runs every keyword family of one schema node against one data node, in a
fixed order:

    type -> enum -> object -> array -> string -> number -> composite

Each stage returns a Result: ``CONTINUE`` to go on, ``Err(HALT)`` once
fail-fast mode has its finding, or ``Err(SchemaFault)`` for a malformed
keyword. Nested schemas get their own child Dispatcher; the parent
re-roots the child's findings and, when coercing, writes the child's
resulting node back into its own container.

Usage:
    config = ValidationConfig(mode=ValidationMode.COLLECT_ALL)
    dispatcher = Dispatcher.run(data, schema, config)
    dispatcher.valid, dispatcher.findings, dispatcher.fault
"""
from __future__ import annotations

from typing import Any, Callable

from shapecheck.errors import Err, Result
from . import builders
from .coercion import coerce_to_types
from .defaults import synthesize_default
from .equality import describe_kind, is_number, matches_type
from .errors import CONTINUE, HALT, Abort, Finding, SchemaFault, create_accumulator
from .pointer import pointer_join
from .schema import (
    ALLOW_ANY,
    Forbidden,
    KeyList,
    KeyName,
    SubSchema,
    ValidationConfig,
    declared_types,
    resolve_additional,
    resolve_dependency,
)
from .validators import (
    Validators,
    array_validators,
    compile_pattern,
    enum_validators,
    number_validators,
    property_count_validators,
    run_validators,
    string_validators,
)

Stage = Callable[[], Result[None, Abort]]


class Dispatcher:
    """Validates one (data, schema) pair; bound for a single ``run``."""

    def __init__(self, data: Any, schema: Any, config: ValidationConfig):
        self.data = data
        self.schema = schema
        self.config = config
        self.accumulator = create_accumulator(config.mode, config.max_errors)
        self.fault: SchemaFault | None = None

    @classmethod
    def run(cls, data: Any, schema: Any, config: ValidationConfig) -> Dispatcher:
        dispatcher = cls(data, schema, config)
        result = dispatcher._dispatch()
        if result.is_err() and isinstance(fault := result.unwrap_err(), SchemaFault):
            dispatcher.fault = fault
        return dispatcher

    @property
    def valid(self) -> bool:
        return self.fault is None and not self.accumulator.has_findings()

    @property
    def findings(self) -> tuple[Finding, ...]:
        return tuple(self.accumulator.get_findings())

    @property
    def coercing(self) -> bool:
        return self.config.coerce

    def _dispatch(self) -> Result[None, Abort]:
        if not isinstance(self.schema, dict):
            return builders.schema_fault("", "Schema must be an object")
        stages: tuple[Stage, ...] = (
            self._check_type,
            self._check_enum,
            self._check_object,
            self._check_array,
            self._check_string,
            self._check_number,
            self._check_composite,
        )
        for stage in stages:
            if (result := stage()).is_err():
                return result
        return CONTINUE

    # =========================================================================
    # Plumbing shared with the composite evaluator
    # =========================================================================

    def child(self, data: Any, schema: Any, *, coerce: bool = True) -> Dispatcher:
        """Validate a nested node. Children may narrow coercion, never enable it."""
        return Dispatcher.run(data, schema, self.config.with_coercion(coerce))

    def fail(self, finding: Finding) -> Result[None, Abort]:
        return CONTINUE if self.accumulator.add(finding) else Err(HALT)

    def include(self, sub: Dispatcher, data_prefix: str, schema_prefix: str) -> Result[None, Abort]:
        """Merge a child's outcome, re-rooted under the given prefixes."""
        if sub.fault is not None:
            return Err(sub.fault.prefixed(schema_prefix))
        for finding in sub.findings:
            if (result := self.fail(finding.prefixed(data_prefix, schema_prefix))).is_err():
                return result
        return CONTINUE

    def _run_validators(self, built: Result[Validators, SchemaFault]) -> Result[None, Abort]:
        if built.is_err():
            return built
        for finding in run_validators(built.unwrap(), self.data):
            if (result := self.fail(finding)).is_err():
                return result
        return CONTINUE

    def _visit_member(self, container: dict | list, key: str | int, schema: Any, schema_path: str) -> Result[None, Abort]:
        """Validate ``container[key]`` against ``schema`` and write back when coercing."""
        sub = self.child(container[key], schema)
        if self.coercing and sub.fault is None:
            container[key] = sub.data
        return self.include(sub, pointer_join([key]), schema_path)

    # =========================================================================
    # Type and enum
    # =========================================================================

    def _check_type(self) -> Result[None, Abort]:
        if "type" not in self.schema:
            return CONTINUE
        types = declared_types(self.schema)
        if types.is_err():
            return builders.schema_fault("/type", types.unwrap_err())
        if any(matches_type(self.data, name) for name in types.unwrap()):
            return CONTINUE
        if self.coercing and (coerced := coerce_to_types(self.data, types.unwrap())).is_ok():
            self.data = coerced.unwrap()
            return CONTINUE
        return self.fail(builders.invalid_type(describe_kind(self.data)))

    def _check_enum(self) -> Result[None, Abort]:
        return self._run_validators(enum_validators(self.schema))

    # =========================================================================
    # Objects
    # =========================================================================

    def _check_object(self) -> Result[None, Abort]:
        if not isinstance(self.data, dict):
            return CONTINUE
        schema, options = self.schema, self.config.options

        if options.enable_ignore_null_properties and schema.get("ignoreNullProperties") is True:
            self.data = {key: value for key, value in self.data.items() if value is not None}

        stages: tuple[Stage, ...] = (
            self._check_required,
            self._check_members,
            self._check_dependencies,
            lambda: self._run_validators(property_count_validators(schema)),
        )
        for stage in stages:
            if (result := stage()).is_err():
                return result
        return CONTINUE

    def _check_required(self) -> Result[None, Abort]:
        if "required" not in self.schema:
            return CONTINUE
        required = self.schema["required"]
        if not isinstance(required, list) or not all(isinstance(key, str) for key in required):
            return builders.schema_fault("/required", "required must be an array of property names")
        for index, key in enumerate(required):
            if key in self.data:
                continue
            if self.coercing and synthesize_default(self.data, self.schema, key, self.config.options):
                continue
            if (result := self.fail(builders.required_missing(index, key))).is_err():
                return result
        return CONTINUE

    def _check_members(self) -> Result[None, Abort]:
        """properties, patternProperties, then additionalProperties for the rest."""
        schema, options = self.schema, self.config.options
        checked: set[str] = set()

        if "properties" in schema:
            if not isinstance(properties := schema["properties"], dict):
                return builders.schema_fault("/properties", "properties must be an object")
            for key, sub_schema in properties.items():
                checked.add(key)
                schema_path = pointer_join(["properties", key])
                if (key not in self.data and self.coercing and options.set_missing_to_default
                        and isinstance(sub_schema, dict) and "default" in sub_schema):
                    if not synthesize_default(self.data, schema, key, options):
                        if (result := self.fail(builders.no_default(key))).is_err():
                            return result
                if key in self.data:
                    if (result := self._visit_member(self.data, key, sub_schema, schema_path)).is_err():
                        return result

        if "patternProperties" in schema:
            if not isinstance(patterns := schema["patternProperties"], dict):
                return builders.schema_fault("/patternProperties", "patternProperties must be an object")
            for pattern, sub_schema in patterns.items():
                schema_path = pointer_join(["patternProperties", pattern])
                compiled = compile_pattern(pattern)
                if compiled.is_err():
                    return builders.schema_fault(schema_path, compiled.unwrap_err())
                for key in [key for key in self.data if compiled.unwrap().search(key)]:
                    checked.add(key)
                    if (result := self._visit_member(self.data, key, sub_schema, schema_path)).is_err():
                        return result

        if "additionalProperties" in schema:
            additional = resolve_additional(schema["additionalProperties"])
            if additional.is_err():
                return builders.schema_fault("/additionalProperties", f"additionalProperties {additional.unwrap_err()}")
            policy = additional.unwrap()
            for key in [key for key in self.data if key not in checked]:
                if isinstance(policy, Forbidden):
                    if self.coercing:
                        del self.data[key]
                        continue
                    result = self.fail(builders.additional_property(key))
                elif isinstance(policy, SubSchema):
                    result = self._visit_member(self.data, key, policy.schema, "/additionalProperties")
                else:
                    result = CONTINUE
                if result.is_err():
                    return result
        return CONTINUE

    def _check_dependencies(self) -> Result[None, Abort]:
        if "dependencies" not in self.schema:
            return CONTINUE
        if not isinstance(dependencies := self.schema["dependencies"], dict):
            return builders.schema_fault("/dependencies", "dependencies must be an object")
        for key, raw in dependencies.items():
            schema_path = pointer_join(["dependencies", key])
            dependency = resolve_dependency(raw)
            if dependency.is_err():
                return builders.schema_fault(schema_path, f"dependency {dependency.unwrap_err()}")
            if key not in self.data:
                continue
            match dependency.unwrap():
                case SubSchema(schema=sub_schema):
                    sub = self.child(self.data, sub_schema)
                    if self.coercing and sub.fault is None:
                        self.data = sub.data
                    result = self.include(sub, "", schema_path)
                case KeyList(keys=names):
                    result = CONTINUE
                    for index, name in enumerate(names):
                        if name not in self.data and (result := self.fail(
                                builders.dependency_missing(key, name, index))).is_err():
                            break
                case KeyName(key=name):
                    result = CONTINUE if name in self.data else self.fail(builders.dependency_missing(key, name))
            if result.is_err():
                return result
        return CONTINUE

    # =========================================================================
    # Arrays, strings, numbers
    # =========================================================================

    def _check_array(self) -> Result[None, Abort]:
        if not isinstance(self.data, list):
            return CONTINUE
        if "items" in self.schema:
            items = self.schema["items"]
            if isinstance(items, dict):
                for index in range(len(self.data)):
                    if (result := self._visit_member(self.data, index, items, "/items")).is_err():
                        return result
            elif isinstance(items, list):
                if (result := self._check_tuple_items(items)).is_err():
                    return result
            else:
                return builders.schema_fault("/items", "items must be an object or an array")
        return self._run_validators(array_validators(self.schema))

    def _check_tuple_items(self, items: list) -> Result[None, Abort]:
        policy = ALLOW_ANY
        if "additionalItems" in self.schema:
            additional = resolve_additional(self.schema["additionalItems"])
            if additional.is_err():
                return builders.schema_fault("/additionalItems", f"additionalItems {additional.unwrap_err()}")
            policy = additional.unwrap()
        for index in range(len(self.data)):
            if index < len(items):
                result = self._visit_member(self.data, index, items[index], pointer_join(["items", index]))
            elif isinstance(policy, Forbidden):
                result = self.fail(builders.additional_item(index, len(items)))
            elif isinstance(policy, SubSchema):
                result = self._visit_member(self.data, index, policy.schema, "/additionalItems")
            else:
                continue
            if result.is_err():
                return result
        return CONTINUE

    def _check_string(self) -> Result[None, Abort]:
        if not isinstance(self.data, str):
            return CONTINUE
        return self._run_validators(string_validators(self.schema))

    def _check_number(self) -> Result[None, Abort]:
        if not is_number(self.data):
            return CONTINUE
        return self._run_validators(number_validators(self.schema))

    def _check_composite(self) -> Result[None, Abort]:
        from .composite import check_composite  # Lazy import to avoid circular dependency
        return check_composite(self)
