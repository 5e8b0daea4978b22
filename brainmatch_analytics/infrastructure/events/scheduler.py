# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""One-shot task scheduling for deferred pending-queue flushes.

The host owns the clock. A scheduler only needs to run a callback once,
later, on the host's thread; no threads are started here.

Example:
    scheduler = AsyncioScheduler(asyncio.get_running_loop())
    scheduler.call_later(2.0, dispatcher.flush_pending)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Runs a callback once after a delay."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], object]) -> None:
        """Schedule ``callback`` to run once after ``delay_seconds``."""


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    The loop is bound at construction, so submissions made from plain
    synchronous host code still schedule onto the host loop.

    Attributes:
        _loop: Loop the callbacks are scheduled on.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def call_later(self, delay_seconds: float, callback: Callable[[], object]) -> None:
        self._loop.call_later(delay_seconds, callback)
        logger.debug("Scheduled %s in %.3fs", getattr(callback, "__name__", callback), delay_seconds)
