# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""Configuration for filter sets.

A configuration names the operators a filter set accepts and the one used
when a caller does not pass an operator. There is one process-wide
configuration, read by every ``FilterSet`` constructed without its own
override; ``configure()`` replaces it.

Reconfiguration is serialized by a lock, but it still races with
constructions running on other threads: such a construction sees either the
previous or the new configuration. Configure once, at startup.
"""

import threading
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError
from .log import get_logger

logger = get_logger(name=__name__, category="config")


class FilterSetConfig(BaseModel):
    """Operators available to a filter set.

    Attributes:
        default_operator: Operator used when a call does not name one
        operators: Every operator the filter set accepts
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_operator: str = Field(
        description="Operator used when a call does not name one; must be one of `operators`",
    )
    operators: tuple[str, ...] = Field(
        description="Every operator the filter set accepts",
    )

    @field_validator("default_operator")
    @classmethod
    def validate_default_operator(cls, v: str) -> str:
        if not v:
            raise ValueError("default operator not found")
        return v

    @field_validator("operators")
    @classmethod
    def validate_operators(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("no operators found")
        return v

    @model_validator(mode="after")
    def validate_default_is_listed(self) -> "FilterSetConfig":
        if self.default_operator not in self.operators:
            raise ValueError(
                f"default operator '{self.default_operator}' must be included in operators {list(self.operators)}"
            )
        return self


ConfigOverride = FilterSetConfig | Mapping[str, Any] | None

DEFAULT_CONFIG = FilterSetConfig(
    default_operator="=",
    operators=("=", "!=", ">", ">=", "<", "<=", "^", "~"),
)


def _describe_errors(error: ValidationError) -> list[str]:
    problems = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        message = err["msg"].removeprefix("Value error, ")
        problems.append(f"{location}: {message}" if location else message)
    return problems


def merge_config(base: FilterSetConfig, override: ConfigOverride = None) -> FilterSetConfig:
    """Shallow-merge ``override`` onto ``base`` and validate the result.

    Args:
        base: Configuration being overridden
        override: Fields to replace. A ``FilterSetConfig`` contributes only the
            fields it was constructed with; a mapping contributes all its keys.

    Returns:
        ``base`` itself when there is nothing to merge, otherwise a new configuration

    Raises:
        ConfigError: If the merged configuration is invalid
    """
    if not override:
        return base

    if isinstance(override, FilterSetConfig):
        updates = override.model_dump(exclude_unset=True)
    else:
        updates = dict(override)

    try:
        return FilterSetConfig.model_validate({**base.model_dump(), **updates})
    except ValidationError as e:
        problems = _describe_errors(e)
        logger.error(f"Rejected filter set configuration {updates!r}: {'; '.join(problems)}")
        raise ConfigError(problems) from e


_config_lock = threading.Lock()
_active_config: FilterSetConfig = DEFAULT_CONFIG


def get_config() -> FilterSetConfig:
    """Return the process-wide configuration."""
    return _active_config


def configure(override: ConfigOverride = None) -> FilterSetConfig:
    """Merge ``override`` into the process-wide configuration.

    The previous configuration is kept when the merged one is invalid.

    Raises:
        ConfigError: If the merged configuration is invalid
    """
    global _active_config
    with _config_lock:
        merged = merge_config(_active_config, override)
        if merged is not _active_config:
            logger.info(
                f"Filter set configuration updated: default_operator={merged.default_operator!r}, "
                f"operators={list(merged.operators)}"
            )
        _active_config = merged
        return merged


def reset_config() -> FilterSetConfig:
    """Restore the built-in default configuration."""
    global _active_config
    with _config_lock:
        _active_config = DEFAULT_CONFIG
        return _active_config
