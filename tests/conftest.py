"""Pytest configuration and fixtures for commitment tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from commitment.core.models import set_default_config
from commitment.scheduling import ManualScheduler, set_default_scheduler


@pytest.fixture(autouse=True)
def _reset_default_config() -> Iterator[None]:
    """Reload the default configuration from the environment after each test."""
    yield
    set_default_config(None)


@pytest.fixture()
def manual_scheduler() -> Iterator[ManualScheduler]:
    """Install a ManualScheduler as the process default for the test."""
    scheduler = ManualScheduler()
    previous = set_default_scheduler(scheduler)
    yield scheduler
    set_default_scheduler(previous)


@pytest.fixture()
def settler():
    """Capture the fulfill/reject capabilities of a pending commitment."""

    class Settler:
        def __init__(self) -> None:
            self.fulfill = None
            self.reject = None

        def __call__(self, fulfill, reject) -> None:
            self.fulfill = fulfill
            self.reject = reject

    return Settler
