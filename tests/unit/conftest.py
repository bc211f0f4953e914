# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

import os
import warnings

# Logging levels are read when filterset is first imported.
os.environ.setdefault("FILTERSET_LOGGING", "all=WARNING")

import pytest  # noqa: E402
from pydantic import BaseModel  # noqa: E402

from filterset import reset_config  # noqa: E402


def pytest_sessionstart(session) -> None:
    # Silence common deprecation spam during unit tests.
    warnings.filterwarnings("ignore", category=DeprecationWarning)
    warnings.filterwarnings("ignore", category=PendingDeprecationWarning)


@pytest.fixture(autouse=True)
def restore_default_config():
    """Undo process-wide configuration changes made by a test."""
    reset_config()
    yield
    reset_config()


class UserFilter(BaseModel):
    name: str
    age: int
    is_active: bool
    created_at: str


@pytest.fixture
def user_schema() -> type[UserFilter]:
    return UserFilter
