# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""Payload shape and the helpers that keep it well-formed.

A payload maps field -> operator -> values::

    {"name": {"=": ["Max", "John"]}, "age": {">": [18]}}

Invariants every helper preserves: a field is present only if it has at least
one operator, an operator only if it has at least one value, and no value
list holds the same value twice (as judged by ``same_value``).
"""

import copy
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .errors import PayloadError

Values = list[Any]
OperatorBuckets = dict[str, Values]
Payload = dict[str, OperatorBuckets]

_RAW_PAYLOAD_ADAPTER = TypeAdapter(dict[str, dict[str, Any]])


def as_values(value: Any) -> list[Any]:
    """Treat lists and tuples as several values, anything else as one."""
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


def clone_payload(payload: Payload) -> Payload:
    """Deep copy sharing no mutable node with ``payload``; key order is kept."""
    return copy.deepcopy(payload)


def ensure_bucket(payload: Payload, field: str, op: str) -> Values:
    """Return the value list for ``(field, op)``, creating it when missing."""
    return payload.setdefault(field, {}).setdefault(op, [])


def prune_bucket(payload: Payload, field: str, op: str) -> None:
    """Drop ``(field, op)`` if it holds no values, then ``field`` if it holds no operators."""
    operators = payload.get(field)
    if operators is None:
        return
    if op in operators and not operators[op]:
        del operators[op]
    if not operators:
        del payload[field]


def same_value(a: Any, b: Any) -> bool:
    """Equality that keeps ``True``/``False`` apart from ``1``/``0``."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def index_of(values: Values, candidate: Any) -> int | None:
    for i, value in enumerate(values):
        if same_value(value, candidate):
            return i
    return None


def contains(values: Values, candidate: Any) -> bool:
    return index_of(values, candidate) is not None


def append_unique(values: Values, candidates: list[Any]) -> int:
    """Append each candidate not already in ``values``; return how many were added."""
    added = 0
    for candidate in candidates:
        if contains(values, candidate):
            continue
        values.append(candidate)
        added += 1
    return added


def normalize_payload(raw: Any) -> Payload:
    """Build a well-formed payload from loosely shaped plain data.

    Values are deep-copied, a scalar stands for a one-element list, repeated
    values keep their first occurrence, and empty operators and fields are
    dropped.

    Raises:
        PayloadError: If ``raw`` is not a mapping of field to a mapping of operator to values
    """
    try:
        shaped = _RAW_PAYLOAD_ADAPTER.validate_python(raw)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            problems.append(f"{location}: {err['msg']}" if location else err["msg"])
        raise PayloadError(problems) from e

    payload: Payload = {}
    for field, operators in shaped.items():
        for op, value in operators.items():
            candidates = copy.deepcopy(as_values(value))
            if not candidates:
                continue
            append_unique(ensure_bucket(payload, field, op), candidates)
    return payload
