"""Composite Evaluator

allOf / anyOf / oneOf / not, evaluated through child Dispatchers.

Data ownership per combinator:
- allOf: every branch sees the same node; when coercing, branches run in
  order and each one's result becomes the node the next branch sees
- anyOf / oneOf: non-coercing branches share the node; coercing branches
  each get a deep copy of the pre-branch node, and only a successful
  branch's copy is adopted
- not: always non-coercing against the shared node
"""
from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable

from shapecheck.errors import Err, Ok, Result
from . import builders
from .errors import CONTINUE, Abort, Finding
from .pointer import pointer_join

if TYPE_CHECKING:
    from .dispatcher import Dispatcher

Combinator = Callable[["Dispatcher", Any], Result[None, Abort]]


def _branches(keyword: str, value: Any) -> Result[list, Abort]:
    if not isinstance(value, list):
        return builders.schema_fault(f"/{keyword}", f"{keyword} must be an array of schemas")
    return Ok(value)


def _branch(dispatcher: Dispatcher, keyword: str, index: int, schema: Any) -> tuple[Dispatcher, str]:
    """Run one anyOf/oneOf branch on its own node."""
    node = copy.deepcopy(dispatcher.data) if dispatcher.coercing else dispatcher.data
    return dispatcher.child(node, schema), pointer_join([keyword, index])


def _group(sub: Dispatcher, schema_prefix: str) -> tuple[Finding, ...]:
    return tuple(finding.prefixed("", schema_prefix) for finding in sub.findings)


def all_of(dispatcher: Dispatcher, value: Any) -> Result[None, Abort]:
    branches = _branches("allOf", value)
    if branches.is_err():
        return branches
    for index, schema in enumerate(branches.unwrap()):
        sub = dispatcher.child(dispatcher.data, schema)
        if dispatcher.coercing and sub.fault is None:
            dispatcher.data = sub.data
        if (result := dispatcher.include(sub, "", pointer_join(["allOf", index]))).is_err():
            return result
    return CONTINUE


def any_of(dispatcher: Dispatcher, value: Any) -> Result[None, Abort]:
    branches = _branches("anyOf", value)
    if branches.is_err():
        return branches
    groups: list[tuple[Finding, ...]] = []
    for index, schema in enumerate(branches.unwrap()):
        sub, prefix = _branch(dispatcher, "anyOf", index, schema)
        if sub.fault is not None:
            return Err(sub.fault.prefixed(prefix))
        if sub.valid:
            if dispatcher.coercing:
                dispatcher.data = sub.data
            return CONTINUE
        groups.append(_group(sub, prefix))
    return dispatcher.fail(builders.any_of_missing(groups))


def one_of(dispatcher: Dispatcher, value: Any) -> Result[None, Abort]:
    branches = _branches("oneOf", value)
    if branches.is_err():
        return branches
    groups: list[tuple[Finding, ...]] = []
    successes: list[int] = []
    adopted: Any = None
    for index, schema in enumerate(branches.unwrap()):
        sub, prefix = _branch(dispatcher, "oneOf", index, schema)
        if sub.fault is not None:
            return Err(sub.fault.prefixed(prefix))
        if sub.valid:
            if not successes:
                adopted = sub.data
            successes.append(index)
        else:
            groups.append(_group(sub, prefix))

    if not successes:
        return dispatcher.fail(builders.one_of_missing(groups))
    if dispatcher.coercing:
        dispatcher.data = adopted
    for first, second in zip(successes, successes[1:]):
        if (result := dispatcher.fail(builders.one_of_multiple(first, second))).is_err():
            return result
    return CONTINUE


def not_(dispatcher: Dispatcher, value: Any) -> Result[None, Abort]:
    sub = dispatcher.child(dispatcher.data, value, coerce=False)
    if sub.fault is not None:
        return Err(sub.fault.prefixed("/not"))
    if sub.valid:
        return dispatcher.fail(builders.not_passed())
    return CONTINUE


COMBINATORS: tuple[tuple[str, Combinator], ...] = (
    ("allOf", all_of),
    ("anyOf", any_of),
    ("oneOf", one_of),
    ("not", not_),
)


def check_composite(dispatcher: Dispatcher) -> Result[None, Abort]:
    """Run every combinator present on the dispatcher's schema, in order."""
    for keyword, combinator in COMBINATORS:
        if keyword in dispatcher.schema:
            if (result := combinator(dispatcher, dispatcher.schema[keyword])).is_err():
                return result
    return CONTINUE
