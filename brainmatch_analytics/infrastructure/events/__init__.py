# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Host event infrastructure.

Components:
- HostEventBus: synchronous pub/sub for host lifecycle signals
- HostEvents: event type constants (online, load, message)
- Scheduler / AsyncioScheduler: one-shot deferred callbacks

Quick Start:
    from brainmatch_analytics.infrastructure.events import HostEventBus, HostEvents

    bus = HostEventBus()
    bus.subscribe(HostEvents.LOAD, on_page_load)
    bus.publish(HostEvents.LOAD)
"""

from brainmatch_analytics.infrastructure.events.bus import (
    EventData,
    EventHandler,
    HostEventBus,
)
from brainmatch_analytics.infrastructure.events.scheduler import (
    AsyncioScheduler,
    Scheduler,
)
from brainmatch_analytics.infrastructure.events.types import HostEvents

__all__ = [
    # Event Bus
    "EventData",
    "EventHandler",
    "HostEventBus",
    # Event Types
    "HostEvents",
    # Scheduling
    "AsyncioScheduler",
    "Scheduler",
]
