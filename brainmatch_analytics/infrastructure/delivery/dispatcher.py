# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Report delivery with durable fallback.

The dispatcher snapshots the session report and offers it to every
available transport. When no transport accepts it, the payload is
appended to the pending queue, and queued payloads are retried when the
host comes back online, when the page (re)loads, and shortly after each
submission.

Delivery is best-effort. A flush clears the whole queue after one pass
whatever the individual sends did, so a payload can be delivered twice
or lost when channels are unstable.

Architecture:
    hooks -> SessionReportStore -> ReportDispatcher.submit_report()
          -> transports (all tried) -> PendingQueue on total failure
    HostEventBus(online/load) + Scheduler(flush delay) -> flush_pending()
    HostEventBus(message: ANALYTICS_CONFIG) -> parent origin

Example:
    environment = DeliveryEnvironment(
        transports=resolve_transports(webview=host.webview, parent=host.parent),
        events=host_bus,
        scheduler=AsyncioScheduler(loop),
    )
    dispatcher = ReportDispatcher(store, queue, environment, settings.analytics)
    payload = dispatcher.submit_report()
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from brainmatch_analytics.core.config.settings import AnalyticsSettings
from brainmatch_analytics.domains.analytics.store import SessionReportStore
from brainmatch_analytics.infrastructure.delivery.transports import Payload, Transport
from brainmatch_analytics.infrastructure.events import (
    EventData,
    HostEventBus,
    HostEvents,
    Scheduler,
)
from brainmatch_analytics.infrastructure.storage import PendingQueue, PendingQueueError

logger = logging.getLogger(__name__)


@dataclass
class DeliveryEnvironment:
    """What the host offers for delivery.

    Attributes:
        transports: Channels in priority order.
        events: Bus the host publishes lifecycle signals on.
        scheduler: Facility for one-shot deferred callbacks.
    """

    transports: list[Transport]
    events: HostEventBus
    scheduler: Scheduler


@dataclass
class DeliveryResult:
    """Outcome of one delivery attempt across all transports."""

    delivered_via: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return bool(self.delivered_via)


class ReportDispatcher:
    """Delivers report snapshots and manages the pending queue.

    Attributes:
        parent_origin: Target origin used by the parent-frame channel.
    """

    def __init__(
        self,
        store: SessionReportStore,
        queue: PendingQueue,
        environment: Optional[DeliveryEnvironment] = None,
        settings: Optional[AnalyticsSettings] = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            store: Report store to snapshot on submission.
            queue: Durable queue for undelivered payloads.
            environment: Host delivery environment. None means a
                non-interactive context: submissions return the payload
                without any delivery attempt.
            settings: Analytics settings (defaults when omitted).
        """
        self._store = store
        self._queue = queue
        self._environment = environment
        self._settings = settings or AnalyticsSettings()
        self.parent_origin = self._settings.default_parent_origin
        self._triggers_registered = False

    def submit_report(self) -> Optional[Payload]:
        """Snapshot the report and deliver or queue it.

        Returns:
            The submitted payload, or None when the store was never
            initialized.
        """
        if not self._store.is_initialized:
            logger.error("Attempted to submit report without initialization")
            return None

        self._store.touch_timestamp()
        payload = self._store.get_report_data()

        if self._environment is None:
            return payload

        result = self.try_send(payload)
        if not result.delivered:
            self._persist(payload)

        self._register_triggers()
        self._schedule_flush()

        return payload

    def try_send(self, payload: Payload) -> DeliveryResult:
        """Offer a payload to every transport in priority order.

        Every transport is tried even after one succeeds. Transport
        failures never propagate.

        Returns:
            Which transports accepted and which failed.
        """
        result = DeliveryResult()
        transports = self._environment.transports if self._environment else []

        for transport in transports:
            try:
                transport.send(payload, self.parent_origin)
            except Exception as e:
                logger.warning("Delivery via %s failed: %s", transport.name, e)
                result.failed.append(transport.name)
                continue
            result.delivered_via.append(transport.name)

        if result.delivered:
            logger.debug("Report delivered via %s", ", ".join(result.delivered_via))
        else:
            logger.info("Payload:%s", json.dumps(payload, ensure_ascii=False, default=str))

        return result

    def flush_pending(self) -> int:
        """Retry every queued payload once, then clear the queue.

        The queue is cleared regardless of individual outcomes.

        Returns:
            Number of payloads attempted.
        """
        if self._environment is None:
            return 0

        try:
            pending = self._queue.load()
        except PendingQueueError as e:
            logger.warning("Could not read pending reports: %s", e)
            return 0

        if not pending:
            return 0

        logger.info("Flushing %d pending report(s)", len(pending))
        for payload in pending:
            self.try_send(payload)

        try:
            self._queue.clear()
        except PendingQueueError as e:
            logger.warning("Could not clear pending reports: %s", e)

        return len(pending)

    def _persist(self, payload: Payload) -> None:
        try:
            self._queue.append(payload)
        except PendingQueueError as e:
            # No secondary fallback: the report is dropped
            logger.warning("Could not queue undelivered report: %s", e)

    def _register_triggers(self) -> None:
        """Subscribe to host flush triggers and the handshake, once."""
        if self._triggers_registered or self._environment is None:
            return

        events = self._environment.events
        for event_type in HostEvents.FLUSH_TRIGGERS:
            events.subscribe(event_type, self._on_flush_trigger)
        events.subscribe(HostEvents.MESSAGE, self._on_message)

        self._triggers_registered = True
        logger.debug("Registered pending-report flush triggers")

    def _schedule_flush(self) -> None:
        if self._environment is None:
            return
        try:
            self._environment.scheduler.call_later(
                self._settings.flush_delay_seconds,
                self.flush_pending,
            )
        except Exception as e:
            logger.warning("Could not schedule pending-report flush: %s", e)

    def _on_flush_trigger(self, event: EventData) -> None:
        logger.debug("Flush triggered by host event: %s", event.event_type)
        self.flush_pending()

    def _on_message(self, event: EventData) -> None:
        """Pick up a negotiated parent origin from a handshake message."""
        origin = parse_handshake(event.payload, self._settings.handshake_message_type)
        if origin is not None:
            self.parent_origin = origin
            logger.info("Parent origin set to %s", origin)


def parse_handshake(data: Any, message_type: str) -> Optional[str]:
    """Extract the parent origin from a handshake message.

    Args:
        data: Message data, either a mapping or its JSON string.
        message_type: Expected value of the ``type`` field.

    Returns:
        The ``parentOrigin`` value, or None if this is not a handshake.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

    if not isinstance(data, dict) or data.get("type") != message_type:
        return None

    origin = data.get("parentOrigin")
    if not origin or not isinstance(origin, str):
        return None
    return origin
