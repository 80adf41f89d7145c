"""Pytest fixtures for hookable tests."""

from unittest.mock import MagicMock

import pytest
from loguru import logger

from hookable import HookRegistry


@pytest.fixture
def warn() -> MagicMock:
    """Spy standing in for the warn capability."""
    return MagicMock()


@pytest.fixture
def hooks(warn: MagicMock) -> HookRegistry:
    """Fresh registry wired to the warn spy."""
    return HookRegistry(warn=warn)


@pytest.fixture
def log_messages():
    """Capture loguru output for the duration of a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="TRACE")
    yield messages
    logger.remove(handler_id)
