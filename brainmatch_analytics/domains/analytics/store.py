# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session report store.

This module owns the single mutable report-in-progress of a game
session. Game hooks feed it level and task outcomes; the delivery
dispatcher reads immutable snapshots from it.

None of the operations raise: calls made before ``initialize`` and
calls that target an unknown level are logged and ignored, so a
broken analytics integration can never interrupt the game.

Usage:
    store = SessionReportStore()
    store.initialize("BrainMatch_Flags", "session_1700000000000_k3j9x0a1b")

    store.start_level("campaign_level_1")
    store.record_task("campaign_level_1", "task_1", "Match: cat", "cat", "cat", 0, 0)
    store.end_level("campaign_level_1", True, 5000, 100)

    payload = store.get_report_data()
"""

import logging
import re
from typing import Any

from brainmatch_analytics.domains.analytics.models import (
    LevelEntry,
    LevelStats,
    Number,
    RawMetric,
    SessionReport,
    TaskEntry,
)
from brainmatch_analytics.utils.datetime import utc_now_iso

logger = logging.getLogger(__name__)

CAMPAIGN_LEVEL_PATTERN = re.compile(r"campaign_level_(\d+)")


def campaign_level_number(level_id: str) -> int | None:
    """Extract the campaign number from ids like ``campaign_level_7``.

    Returns:
        The level number, or None for non-campaign ids.
    """
    match = CAMPAIGN_LEVEL_PATTERN.search(level_id)
    if match is None:
        return None
    return int(match.group(1))


class SessionReportStore:
    """Owner of the session report and its update rules.

    One instance corresponds to one game session. It is created by the
    caller and handed to the hook layer and the dispatcher explicitly.

    Attributes:
        _report: The report being accumulated.
        _initialized: Whether initialize() has been called.
    """

    def __init__(self) -> None:
        """Create an uninitialized store."""
        self._report = SessionReport()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Whether initialize() has been called."""
        return self._initialized

    @property
    def game_id(self) -> str:
        return self._report.game_id

    @property
    def session_id(self) -> str:
        return self._report.session_id

    def initialize(self, game_id: str, session_id: str) -> None:
        """Start a fresh report for a session.

        Every call replaces all prior state, identity included.

        Args:
            game_id: Identifier of the game being played.
            session_id: Identifier of this play session.
        """
        self._report = SessionReport(
            game_id=game_id,
            session_id=session_id,
            timestamp=utc_now_iso(),
        )
        self._initialized = True
        logger.info("Analytics initialized for: %s (session %s)", game_id, session_id)

    def start_level(self, level_id: str) -> None:
        """Append a new, not yet completed, attempt for a level.

        Args:
            level_id: Level identifier. Repeated ids create new attempts.
        """
        if not self._initialized:
            logger.warning("Analytics not initialized; ignoring start_level(%s)", level_id)
            return

        self._report.diagnostics.levels.append(LevelEntry(level_id=level_id))

    def end_level(
        self,
        level_id: str,
        successful: bool,
        time_taken_ms: Number,
        xp: Number,
    ) -> None:
        """Complete the most recent attempt of a level and update totals.

        Args:
            level_id: Level identifier.
            successful: Whether the level was won.
            time_taken_ms: Duration of the attempt in milliseconds.
            xp: XP earned for the attempt.
        """
        if not self._initialized:
            logger.warning("Analytics not initialized; ignoring end_level(%s)", level_id)
            return

        level = self._find_level(level_id)
        if level is None:
            logger.warning("End level called for unknown level: %s", level_id)
            return

        level.successful = successful
        level.time_taken = time_taken_ms
        level.xp_earned = xp

        report = self._report
        report.add_xp(xp)

        stats = report.per_level_analytics.get(level_id)
        if stats is None:
            stats = LevelStats()
            report.per_level_analytics[level_id] = stats
        stats.record_attempt(successful, time_taken_ms, xp)

        report.last_played_level = level_id
        self._update_highest_level(level_id)

    def record_task(
        self,
        level_id: str,
        task_id: str,
        question: Any,
        correct_choice: Any,
        choice_made: Any,
        time_ms: Number,
        xp: Number,
    ) -> None:
        """Append a task outcome to the most recent attempt of a level.

        The task counts as successful when the choice made equals the
        correct choice. Choices of any type are compared as given and
        stored in their string form.
        """
        if not self._initialized:
            logger.warning("Analytics not initialized; ignoring record_task(%s)", level_id)
            return

        level = self._find_level(level_id)
        if level is None:
            logger.warning("Record task called for unknown level: %s", level_id)
            return

        level.tasks.append(
            TaskEntry(
                task_id=task_id,
                question=stringify(question),
                correct_choice=stringify(correct_choice),
                choice_made=stringify(choice_made),
                successful=correct_choice == choice_made,
                time_taken=time_ms,
                xp_earned=xp,
            )
        )

    def add_raw_metric(self, key: str, value: Any) -> None:
        """Append a generic metric (FPS, latency, turns...).

        Args:
            key: Metric name. Duplicates are kept.
            value: Metric value, stored as its string form.
        """
        if not self._initialized:
            logger.warning("Analytics not initialized; ignoring metric %s", key)
            return

        self._report.raw_data.append(RawMetric(key=key, value=stringify(value)))

    def touch_timestamp(self) -> None:
        """Refresh the report timestamp to the current time."""
        self._report.timestamp = utc_now_iso()

    def get_report_data(self) -> dict[str, Any]:
        """Return a deep, independent copy of the report in wire format."""
        return self._report.to_payload()

    def reset(self) -> None:
        """Clear totals, statistics, metrics and history.

        Identity (game and session ids) and the initialized flag survive.
        """
        report = self._report
        self._report = SessionReport(
            game_id=report.game_id,
            session_id=report.session_id,
            timestamp=report.timestamp,
        )
        logger.info("Analytics data reset")

    def _find_level(self, level_id: str) -> LevelEntry | None:
        """Find the newest attempt for a level id."""
        for level in reversed(self._report.diagnostics.levels):
            if level.level_id == level_id:
                return level
        return None

    def _update_highest_level(self, level_id: str) -> None:
        report = self._report
        level_number = campaign_level_number(level_id)

        if level_number is None:
            # Non-campaign levels only fill an empty slot
            if not report.highest_level_played:
                report.highest_level_played = level_id
            return

        current = campaign_level_number(report.highest_level_played) or 0
        if level_number > current:
            report.highest_level_played = level_id


def stringify(value: Any) -> str:
    """String form of a metric value or task choice, as browser hosts render it.

    Booleans become ``true``/``false``, None becomes ``null`` and
    integral floats drop their fractional part.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
