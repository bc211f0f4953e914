# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
FilterSet

Immutable, copy-on-write containers of filter criteria (field -> operator ->
accepted values) meant to be handed to whatever turns them into a database
query or a query string.

Example usage:
    from filterset import FilterSet

    active_adults = FilterSet().add("age", 18, ">=").add("is_active", True)
    active_adults.get_payload()
    # {"age": {">=": [18]}, "is_active": {"=": [True]}}
"""

__version__ = "0.1.0"

from .config import DEFAULT_CONFIG, ConfigOverride, FilterSetConfig, configure, get_config, reset_config
from .errors import (
    ConfigError,
    FieldValueError,
    FilterSetError,
    PayloadError,
    UnknownFieldError,
    UnknownOperatorError,
)
from .filter_set import FilterSet
from .payload import Payload

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigError",
    "ConfigOverride",
    "FieldValueError",
    "FilterSet",
    "FilterSetConfig",
    "FilterSetError",
    "Payload",
    "PayloadError",
    "UnknownFieldError",
    "UnknownOperatorError",
    "configure",
    "get_config",
    "reset_config",
]
