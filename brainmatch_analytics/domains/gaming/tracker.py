# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Game session tracker.

Translates BrainMatch gameplay signals into report store updates:
campaign and reflex level starts, card-match judgments, wins, and timer
expiry. Level completions submit the report through the dispatcher.

Every hook swallows and logs its own errors; the game must keep running
whatever happens to analytics.

Level identifiers:
- Campaign levels: ``campaign_level_<n>``
- Reflex mode: ``reflex_mode``
- Anything else: ``unknown_level``
"""

import logging
import random
import string
from enum import Enum
from typing import Callable, Optional

from brainmatch_analytics.domains.analytics.store import SessionReportStore
from brainmatch_analytics.infrastructure.delivery.dispatcher import ReportDispatcher
from brainmatch_analytics.utils.datetime import epoch_millis

logger = logging.getLogger(__name__)

REFLEX_LEVEL_ID = "reflex_mode"
UNKNOWN_LEVEL_ID = "unknown_level"

XPCalculator = Callable[[int, int], int | float]
StarsCalculator = Callable[[int], int]

_SESSION_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class GameMode(str, Enum):
    """BrainMatch play modes."""

    CAMPAIGN = "campaign"
    REFLEX = "reflex"


def campaign_level_id(level: int | str) -> str:
    return f"campaign_level_{level}"


def generate_session_id(clock: Callable[[], int] = epoch_millis) -> str:
    """Generate ``session_<epoch ms>_<9 base36 chars>``."""
    suffix = "".join(random.choices(_SESSION_SUFFIX_ALPHABET, k=9))
    return f"session_{clock()}_{suffix}"


def fallback_xp(turns: int) -> int:
    """XP award used when the game does not provide its own calculator."""
    if turns <= 10:
        return 100
    if turns <= 15:
        return 75
    return 50


class GameSessionTracker:
    """Event-hook layer between the game and the analytics core.

    Attributes:
        calculate_xp: Game-provided ``(level, turns) -> xp``, optional.
        calculate_stars: Game-provided ``(turns) -> stars`` for reflex
            mode, optional.
        mode: Current game mode, None before the first level starts.
        current_level_id: Level id of the attempt in progress.
        task_counter: Tasks recorded in the current attempt.
    """

    def __init__(
        self,
        store: SessionReportStore,
        dispatcher: ReportDispatcher,
        calculate_xp: Optional[XPCalculator] = None,
        calculate_stars: Optional[StarsCalculator] = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._clock = clock
        self.calculate_xp = calculate_xp
        self.calculate_stars = calculate_stars

        self.mode: Optional[GameMode] = None
        self.current_level_id: Optional[str] = None
        self.task_counter = 0
        self._level_started_at: Optional[int] = None

    def level_id(self) -> str:
        """Level id for the mode in progress."""
        if self.mode is GameMode.CAMPAIGN and self.current_level_id:
            return self.current_level_id
        if self.mode is GameMode.REFLEX:
            return REFLEX_LEVEL_ID
        return UNKNOWN_LEVEL_ID

    def elapsed_ms(self) -> int:
        """Milliseconds since the current level started, 0 if none did."""
        if self._level_started_at is None:
            return 0
        return self._clock() - self._level_started_at

    def on_campaign_start(self, level: int | str) -> None:
        try:
            self._begin(GameMode.CAMPAIGN, campaign_level_id(level))
            logger.info("Started level: %s", self.current_level_id)
        except Exception:
            logger.error("Error in campaign start hook", exc_info=True)

    def on_reflex_start(self) -> None:
        try:
            self._begin(GameMode.REFLEX, REFLEX_LEVEL_ID)
            logger.info("Started reflex mode")
        except Exception:
            logger.error("Error in reflex start hook", exc_info=True)

    def on_match(self, question: str, correct_choice: str, choice_made: str) -> None:
        """Record one card-match judgment as a task of the current level."""
        try:
            self.task_counter += 1
            self._store.record_task(
                self.level_id(),
                f"task_{self.task_counter}",
                f"Match: {question}",
                correct_choice,
                choice_made,
                0,  # not tracked per task
                0,  # XP is awarded at level end
            )
            logger.debug(
                "Task recorded: %s, expected %s, got %s",
                question,
                correct_choice,
                choice_made,
            )
        except Exception:
            logger.error("Error in match hook", exc_info=True)

    def on_campaign_win(self, level: int, turns: int) -> None:
        """Complete a campaign level, add its metrics and submit."""
        try:
            time_taken = self.elapsed_ms()
            xp = self._campaign_xp(level, turns)
            level_id = campaign_level_id(level)

            self._store.end_level(level_id, True, time_taken, xp)
            self._store.add_raw_metric("level", level)
            self._store.add_raw_metric("turns", turns)
            self._store.add_raw_metric("xp_earned", xp)
            self._store.add_raw_metric("game_mode", GameMode.CAMPAIGN.value)
            self._dispatcher.submit_report()

            logger.info(
                "Completed level: %s, success: true, time: %dms, XP: %s",
                level_id,
                time_taken,
                xp,
            )
        except Exception:
            logger.error("Error in campaign win hook", exc_info=True)

    def on_reflex_end(self, turns: int) -> None:
        """Complete reflex mode, add its metrics and submit. Reflex awards no XP."""
        try:
            time_taken = self.elapsed_ms()

            self._store.end_level(REFLEX_LEVEL_ID, True, time_taken, 0)
            self._store.add_raw_metric("total_moves", turns)
            self._store.add_raw_metric("game_mode", GameMode.REFLEX.value)
            if self.calculate_stars is not None:
                self._store.add_raw_metric("stars", self.calculate_stars(turns))
            self._dispatcher.submit_report()

            logger.info("Completed reflex mode, time: %dms, moves: %s", time_taken, turns)
        except Exception:
            logger.error("Error in reflex end hook", exc_info=True)

    def on_timeout(self, turns: int) -> None:
        """Record the current level as failed because its timer ran out."""
        try:
            level_id = self.level_id()

            self._store.end_level(level_id, False, self.elapsed_ms(), 0)
            self._store.add_raw_metric("failure_reason", "timeout")
            self._store.add_raw_metric("turns", turns)
            self._dispatcher.submit_report()

            logger.info("Level failed: %s, reason: timeout", level_id)
        except Exception:
            logger.error("Error in timeout hook", exc_info=True)

    def _begin(self, mode: GameMode, level_id: str) -> None:
        self.mode = mode
        self.current_level_id = level_id
        self._level_started_at = self._clock()
        self.task_counter = 0
        self._store.start_level(level_id)

    def _campaign_xp(self, level: int, turns: int) -> int | float:
        if self.calculate_xp is not None:
            return self.calculate_xp(level, turns)
        return fallback_xp(turns)
