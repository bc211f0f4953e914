# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""Runtime checks for filter sets bound to a pydantic schema.

Filter sets are permissive by default. Binding a ``BaseModel`` subclass as
schema turns on three checks: the field must be declared by the model, the
operator must be configured, and added values must match the field's
annotation under strict validation. Values are stored as given.
"""

from collections.abc import Iterable
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import FilterSetConfig
from .errors import FieldValueError, UnknownFieldError, UnknownOperatorError
from .log import get_logger

logger = get_logger(name=__name__, category="schema")

Schema = type[BaseModel]


@lru_cache(maxsize=512)
def _field_adapter(schema: Schema, field: str) -> TypeAdapter:
    return TypeAdapter(schema.model_fields[field].annotation)


def check_field(schema: Schema | None, field: str) -> None:
    if schema is None:
        return
    if field not in schema.model_fields:
        logger.debug(f"{schema.__name__} rejected unknown field {field!r}")
        raise UnknownFieldError(field, list(schema.model_fields))


def check_operator(schema: Schema | None, config: FilterSetConfig, op: str) -> None:
    if schema is None:
        return
    if op not in config.operators:
        logger.debug(f"{schema.__name__} rejected unconfigured operator {op!r}")
        raise UnknownOperatorError(op, config.operators)


def check_values(schema: Schema | None, field: str, values: Iterable[Any]) -> None:
    """Validate each value against the annotation ``schema`` gives ``field``.

    Raises:
        UnknownFieldError: If ``schema`` does not declare ``field``
        FieldValueError: On the first value that fails strict validation
    """
    if schema is None:
        return
    check_field(schema, field)
    adapter = _field_adapter(schema, field)
    for value in values:
        try:
            adapter.validate_python(value, strict=True)
        except ValidationError as e:
            detail = e.errors()[0]["msg"]
            logger.debug(f"{schema.__name__} rejected {value!r} for field {field!r}: {detail}")
            raise FieldValueError(field, value, detail) from e
