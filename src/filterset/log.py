# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""Category-aware logging for filterset.

Every module asks for its logger with ``get_logger(name=__name__, category=...)``.
Levels are configured per category through the ``FILTERSET_LOGGING``
environment variable, e.g. ``FILTERSET_LOGGING="all=WARNING;config=DEBUG"``.
"""

import logging
import os
import re
import threading

from rich.logging import RichHandler

LOGGING_ENV_VAR = "FILTERSET_LOGGING"
PACKAGE_LOGGER_NAME = "filterset"
DEFAULT_LOG_LEVEL = logging.WARNING

CATEGORIES = [
    "core",
    "config",
    "schema",
]

_setup_lock = threading.Lock()
_handler_installed = False


def parse_environment_config(env_config: str) -> dict[str, int]:
    """Parse a ``category=LEVEL`` list into a mapping of category to level.

    Pairs may be separated by ``;`` or ``,``. The special category ``all``
    applies its level to every known category; pairs listed after it still
    override individual categories.

    Args:
        env_config: The raw value, e.g. ``"all=WARNING;core=DEBUG"``

    Returns:
        Mapping of category name to numeric logging level
    """
    category_levels: dict[str, int] = {}
    for pair in re.split(r"[;,]", env_config):
        if not pair.strip():
            continue

        category, sep, level = pair.partition("=")
        if not sep:
            logging.getLogger(PACKAGE_LOGGER_NAME).warning(
                f"Invalid logging configuration: '{pair}'. Expected format: 'category=level'."
            )
            continue

        category = category.strip().lower()
        level_value = logging.getLevelNamesMapping().get(level.strip().upper())
        if level_value is None:
            logging.getLogger(PACKAGE_LOGGER_NAME).warning(
                f"Unknown log level '{level.strip()}' for category '{category}'. Ignoring."
            )
            continue

        if category == "all":
            for cat in CATEGORIES:
                category_levels[cat] = level_value
        elif category in CATEGORIES:
            category_levels[category] = level_value
        else:
            logging.getLogger(PACKAGE_LOGGER_NAME).warning(f"Unknown logging category: {category}. No changes made.")

    return category_levels


def _install_handler() -> None:
    global _handler_installed
    with _setup_lock:
        if _handler_installed:
            return
        handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("[%(category)s] %(message)s", defaults={"category": "filterset"}))
        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        package_logger.addHandler(handler)
        _handler_installed = True


def get_logger(name: str, category: str = "core") -> logging.LoggerAdapter:
    """Return a logger tagged with ``category``, levelled from the environment.

    Args:
        name: Logger name, normally ``__name__``
        category: One of ``CATEGORIES``; ``"a::b"`` falls back to ``"a"``

    Returns:
        A LoggerAdapter carrying the category in every record
    """
    _install_handler()

    category_levels = parse_environment_config(os.environ.get(LOGGING_ENV_VAR, ""))
    root_category = category.split("::")[0]
    log_level = category_levels.get(category, category_levels.get(root_category, DEFAULT_LOG_LEVEL))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    return logging.LoggerAdapter(logger, {"category": category})
