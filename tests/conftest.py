"""Shared fixtures for rulecraft tests."""
from __future__ import annotations

import pytest

from rulecraft.validation import ValidatorConfiguration


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def configuration() -> ValidatorConfiguration:
    """Configuration independent of RULECRAFT_* environment variables."""
    return ValidatorConfiguration()
