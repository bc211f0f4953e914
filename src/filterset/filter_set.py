# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""Immutable container of filter criteria.

A ``FilterSet`` accumulates accepted values per field and operator and never
changes after construction. Operations that would change it return a new
instance wrapping a fresh payload; operations that would change nothing
return the instance itself, so ``a.add("name", "Max") is a`` tells a caller
that ``"Max"`` was already there.

Example:
    filters = FilterSet().add("name", ["Max", "John"]).add("age", 18, ">=")
    filters.get_payload()
    # {"name": {"=": ["Max", "John"]}, "age": {">=": [18]}}
"""

import json
from typing import Any, Generic, Self, TypeVar

from .config import ConfigOverride, FilterSetConfig, merge_config
from .config import configure as configure_default
from .config import get_config as get_default_config
from .log import get_logger
from .payload import (
    OperatorBuckets,
    Payload,
    Values,
    append_unique,
    as_values,
    clone_payload,
    contains,
    ensure_bucket,
    index_of,
    normalize_payload,
    prune_bucket,
)
from .schema import Schema, check_field, check_operator, check_values

logger = get_logger(name=__name__, category="core")

_NO_VALUE: Any = object()

S = TypeVar("S")


class FilterSet(Generic[S]):
    """Field -> operator -> values criteria with copy-on-write updates.

    ``S`` names the caller's schema for type checkers only. Pass ``schema=``
    a pydantic model to have field names, operators and values checked at
    runtime as well.

    Thread-safe for concurrent readers: no instance is ever mutated after it
    is returned, and no two instances share a payload.
    """

    def __init__(self, config: ConfigOverride = None, *, schema: Schema | None = None) -> None:
        """Create an empty filter set.

        Args:
            config: Overrides merged onto the process-wide configuration
            schema: Optional pydantic model enabling runtime checks

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        self._config: FilterSetConfig = merge_config(get_default_config(), config)
        self._schema = schema
        self._payload: Payload = {}

    @staticmethod
    def configure(config: ConfigOverride = None) -> FilterSetConfig:
        """Merge ``config`` into the process-wide configuration used by new instances."""
        return configure_default(config)

    @staticmethod
    def get_config() -> FilterSetConfig:
        """Return the process-wide configuration."""
        return get_default_config()

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        config: ConfigOverride = None,
        *,
        schema: Schema | None = None,
    ) -> Self:
        """Build a filter set from plain data such as decoded JSON.

        The data is copied and normalised: scalars become one-element lists,
        repeated values are dropped and empty operators and fields vanish.
        """
        instance = cls(config, schema=schema)
        normalized = normalize_payload(payload)
        instance._check_payload(normalized)
        return instance.attach(normalized)

    @property
    def config(self) -> FilterSetConfig:
        """Configuration this instance and every instance derived from it use."""
        return self._config

    @property
    def schema(self) -> Schema | None:
        return self._schema

    @property
    def is_empty(self) -> bool:
        return not self._payload

    def add(self, field: str, value: Any, op: str | None = None) -> Self:
        """Accept ``value`` (one value, or a list or tuple of them) for ``field``.

        Returns ``self`` when every value is already present, otherwise a new
        instance with the missing values appended in the order given.
        """
        op = self._resolve_operator(field, op)
        values = as_values(value)
        check_values(self._schema, field, values)
        if self._contains_all(field, op, values):
            return self

        payload = clone_payload(self._payload)
        added = append_unique(ensure_bucket(payload, field, op), values)
        logger.debug(f"Added {added} value(s) under {field!r} {op!r}")
        return self.attach(payload)

    def remove(self, field: str, value: Any = _NO_VALUE, op: str | None = None) -> Self:
        """Stop accepting ``value`` for ``field``.

        Values that are not present are ignored; when none of them is
        present, or ``value`` is omitted, ``self`` is returned. Emptied
        operators and fields are dropped.
        """
        op = self._resolve_operator(field, op)
        if value is _NO_VALUE:
            return self
        bucket = self._bucket(field, op)
        targets = [v for v in as_values(value) if contains(bucket, v)]
        return self._without(field, op, targets)

    def remove_all(self, field: str, op: str | None = None) -> Self:
        """Drop every value accepted for ``field`` under ``op``; ``self`` if there are none."""
        op = self._resolve_operator(field, op)
        return self._without(field, op, list(self._bucket(field, op)))

    def exists(self, field: str, value: Any, op: str | None = None) -> bool:
        """True when every given value is accepted for ``field`` under ``op``.

        ``op`` only selects the bucket to look in; values are compared by
        equality, with booleans never equal to numbers. An empty list of
        values is vacuously present.
        """
        op = self._resolve_operator(field, op)
        return self._contains_all(field, op, as_values(value))

    def get_payload(self) -> Payload:
        """Return the payload itself. Callers must not mutate it."""
        return self._payload

    def get_partial_payload(self, field: str) -> OperatorBuckets:
        check_field(self._schema, field)
        return self._payload.get(field, {})

    def get_values(self, field: str, op: str | None = None) -> Values:
        op = self._resolve_operator(field, op)
        return self.get_partial_payload(field).get(op, [])

    def fields(self) -> tuple[str, ...]:
        return tuple(self._payload)

    def clear(self) -> Self:
        if self.is_empty:
            return self
        return self.attach({})

    def includes(self, other: "FilterSet[S]") -> bool:
        """True when every criterion of ``other`` is also a criterion of ``self``.

        Fields and operators that only ``self`` has do not matter. An empty
        filter set is included in every filter set.
        """
        for field, operators in other._payload.items():
            own_operators = self._payload.get(field)
            if own_operators is None:
                return False
            for op, values in operators.items():
                own_values = own_operators.get(op)
                if own_values is None:
                    return False
                if not all(contains(own_values, v) for v in values):
                    return False
        return True

    def concat(self, other: "FilterSet[S]") -> "FilterSet[S]":
        """Union of both filter sets.

        Returns ``self`` when ``other`` adds nothing and ``other`` when
        ``self`` is empty. Otherwise values from ``other`` are appended after
        the ones already present, skipping duplicates. The criteria of
        ``other`` are checked against the schema of ``self`` either way, but
        an empty ``self`` hands back ``other`` with its own configuration and
        schema.
        """
        if other.is_empty:
            return self
        if self.is_empty:
            self._check_payload(other._payload)
            return other
        if self.includes(other):
            return self

        incoming = clone_payload(other._payload)
        self._check_payload(incoming)
        payload = clone_payload(self._payload)
        for field, operators in incoming.items():
            for op, values in operators.items():
                append_unique(ensure_bucket(payload, field, op), values)
        logger.debug(f"Merged fields {list(incoming)} into filter set")
        return self.attach(payload)

    def attach(self, payload: Payload) -> Self:
        """Wrap ``payload`` in a new instance sharing this configuration and schema.

        The payload is taken as is, without a copy: it must not be referenced
        by any other instance.
        """
        result = type(self).__new__(type(self))
        result._config = self._config
        result._schema = self._schema
        result._payload = payload
        return result

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self._payload, **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterSet):
            return NotImplemented
        return self._payload == other._payload and self._config == other._config

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._payload!r})"

    def _resolve_operator(self, field: str, op: str | None) -> str:
        op = self._config.default_operator if op is None else op
        check_field(self._schema, field)
        check_operator(self._schema, self._config, op)
        return op

    def _bucket(self, field: str, op: str) -> Values:
        return self._payload.get(field, {}).get(op, [])

    def _contains_all(self, field: str, op: str, values: list[Any]) -> bool:
        bucket = self._bucket(field, op)
        return all(contains(bucket, v) for v in values)

    def _without(self, field: str, op: str, targets: list[Any]) -> Self:
        if not targets:
            return self

        payload = clone_payload(self._payload)
        remaining = payload[field][op]
        for target in targets:
            index = index_of(remaining, target)
            if index is not None:
                del remaining[index]
        prune_bucket(payload, field, op)
        logger.debug(f"Removed {len(targets)} value(s) under {field!r} {op!r}")
        return self.attach(payload)

    def _check_payload(self, payload: Payload) -> None:
        if self._schema is None:
            return
        for field, operators in payload.items():
            for op, values in operators.items():
                self._resolve_operator(field, op)
                check_values(self._schema, field, values)
