"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from collections.abc import Callable, Iterator

import pytest
from loguru import logger

from emgcoach.fatigue.types import RepFeature


@pytest.fixture
def make_rep() -> Callable[..., RepFeature]:
    """Factory for rep features with full confidence by default."""

    def _make_rep(idx: int, rms_norm: float, signal_confidence: float = 1.0) -> RepFeature:
        return RepFeature(idx=idx, rms_norm=rms_norm, signal_confidence=signal_confidence)

    return _make_rep


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Capture loguru messages emitted during a test.

    Usage:
        def test_something(log_messages):
            do_work()
            assert any("[SIGNAL]" in m for m in log_messages)
    """
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
