# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- Report store and pending queue instances
- Recording doubles for host channels and the scheduler
- A fully wired dispatcher with a host environment
"""

from collections.abc import Generator
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from brainmatch_analytics.core.config import AnalyticsSettings, clear_settings_cache
from brainmatch_analytics.domains.analytics import SessionReportStore
from brainmatch_analytics.infrastructure.delivery import (
    DeliveryEnvironment,
    ReportDispatcher,
    resolve_transports,
)
from brainmatch_analytics.infrastructure.events import HostEventBus, Scheduler
from brainmatch_analytics.infrastructure.storage import InMemoryPendingQueue


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")


# =============================================================================
# Test Doubles
# =============================================================================


class RecordingScheduler(Scheduler):
    """Scheduler that keeps callbacks until the test runs them."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[float, Callable[[], object]]] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], object]) -> None:
        self.scheduled.append((delay_seconds, callback))

    def run_all(self) -> None:
        pending, self.scheduled = self.scheduled, []
        for _, callback in pending:
            callback()


class FakeRedis:
    """Minimal stand-in for a sync redis client with decode_responses=True."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Ensure every test reads settings fresh."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def analytics_settings() -> AnalyticsSettings:
    """Analytics settings with default values and an in-memory queue."""
    return AnalyticsSettings(queue_backend="memory")


@pytest.fixture
def store() -> SessionReportStore:
    """Provide an initialized report store."""
    report_store = SessionReportStore()
    report_store.initialize("G", "S")
    return report_store


@pytest.fixture
def queue(analytics_settings: AnalyticsSettings) -> InMemoryPendingQueue:
    """Provide an empty in-memory pending queue."""
    return InMemoryPendingQueue(analytics_settings.pending_queue_key)


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def host_events() -> HostEventBus:
    return HostEventBus()


@pytest.fixture
def webview() -> MagicMock:
    """Webview bridge double exposing post_message(json_string)."""
    return MagicMock(spec=["post_message"])


@pytest.fixture
def parent() -> MagicMock:
    """Parent context double exposing post_message(payload, origin)."""
    return MagicMock(spec=["post_message"])


@pytest.fixture
def make_dispatcher(
    store: SessionReportStore,
    queue: InMemoryPendingQueue,
    host_events: HostEventBus,
    scheduler: RecordingScheduler,
    analytics_settings: AnalyticsSettings,
) -> Callable[..., ReportDispatcher]:
    """Factory building a dispatcher over the given host channels."""

    def factory(**channels: Any) -> ReportDispatcher:
        environment = DeliveryEnvironment(
            transports=resolve_transports(**channels),
            events=host_events,
            scheduler=scheduler,
        )
        return ReportDispatcher(store, queue, environment, analytics_settings)

    return factory


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
