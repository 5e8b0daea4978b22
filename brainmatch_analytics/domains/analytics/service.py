# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics session wiring.

create_analytics() builds one explicitly owned analytics context per
game session: an initialized report store, the pending queue selected
in settings, a dispatcher bound to the host environment, and a tracker
ready to be hooked into the game.

Example:
    environment = DeliveryEnvironment(
        transports=resolve_transports(webview=host.webview, parent=host.parent),
        events=host.events,
        scheduler=AsyncioScheduler(asyncio.get_running_loop()),
    )
    analytics = create_analytics(environment=environment)
    install_hooks(game, analytics.tracker)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from brainmatch_analytics.core.config import Settings, get_settings
from brainmatch_analytics.domains.analytics.store import SessionReportStore
from brainmatch_analytics.domains.gaming.tracker import (
    GameSessionTracker,
    generate_session_id,
)
from brainmatch_analytics.infrastructure.delivery import (
    DeliveryEnvironment,
    ReportDispatcher,
)
from brainmatch_analytics.infrastructure.storage import (
    PendingQueue,
    create_pending_queue,
)
from brainmatch_analytics.utils.logging import bind_context, setup_logging

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsContext:
    """Everything one game session needs for analytics.

    Attributes:
        settings: Settings the context was built from.
        store: Initialized session report store.
        queue: Durable queue for undelivered payloads.
        dispatcher: Delivery dispatcher bound to the store.
        tracker: Event-hook layer feeding the store.
    """

    settings: Settings
    store: SessionReportStore
    queue: PendingQueue
    dispatcher: ReportDispatcher
    tracker: GameSessionTracker

    @property
    def session_id(self) -> str:
        return self.store.session_id

    def submit_report(self) -> Optional[dict]:
        """Submit the current report through the dispatcher."""
        return self.dispatcher.submit_report()


def create_analytics(
    settings: Optional[Settings] = None,
    environment: Optional[DeliveryEnvironment] = None,
    queue: Optional[PendingQueue] = None,
    session_id: Optional[str] = None,
    configure_logging: bool = True,
) -> AnalyticsContext:
    """Build and initialize an analytics context for a new session.

    Args:
        settings: Settings to use (cached settings when omitted).
        environment: Host delivery environment; None for offline use.
        queue: Pending queue override (backend from settings when omitted).
        session_id: Session id override (generated when omitted).
        configure_logging: Install the structured log output for the
            package loggers. Pass False when the host configures logging.

    Returns:
        A ready AnalyticsContext.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings)

    queue = queue or create_pending_queue(settings)
    session_id = session_id or generate_session_id()

    store = SessionReportStore()
    store.initialize(settings.analytics.game_id, session_id)
    bind_context(game_id=settings.analytics.game_id, session_id=session_id)

    dispatcher = ReportDispatcher(store, queue, environment, settings.analytics)
    tracker = GameSessionTracker(store, dispatcher)

    logger.info(
        "Analytics context ready (queue=%s, environment=%s)",
        type(queue).__name__,
        "yes" if environment is not None else "none",
    )

    return AnalyticsContext(
        settings=settings,
        store=store,
        queue=queue,
        dispatcher=dispatcher,
        tracker=tracker,
    )
