# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Attach a GameSessionTracker to a game object without changing its code.

install_hooks() replaces known lifecycle methods on the game instance
with wrappers that notify the tracker first and then call the original,
whose return value is passed through unchanged.

Wrapped methods (each only when present and callable):
- start_game(level)
- start_reflex_mode()
- handle_correct_match() / handle_incorrect_match()
- handle_campaign_win()
- handle_reflex_mode_end()

Game state is read from ``game.game_state`` (a mapping or an object)
before the original runs, since the originals reset it.

Usage:
    tracker = GameSessionTracker(store, dispatcher)
    hooked = install_hooks(game, tracker)
"""

import functools
import logging
from collections.abc import Mapping
from typing import Any, Callable

from brainmatch_analytics.domains.gaming.tracker import GameSessionTracker

logger = logging.getLogger(__name__)

UNKNOWN_CARD_VALUE = "Unknown"


def state_value(state: Any, name: str, default: Any = 0) -> Any:
    """Read a game state field from a mapping or an object."""
    if state is None:
        return default
    if isinstance(state, Mapping):
        value = state.get(name, default)
    else:
        value = getattr(state, name, default)
    return default if value is None else value


def card_value(card: Any, name: str) -> str:
    """Read ``card.dataset[name]``, the data attribute of a card element."""
    dataset = state_value(card, "dataset", None)
    value = state_value(dataset, name, None)
    return str(value) if value else UNKNOWN_CARD_VALUE


def _wrap(game: Any, name: str, before: Callable[..., None]) -> bool:
    original = getattr(game, name, None)
    if not callable(original):
        return False

    @functools.wraps(original)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            before(*args, **kwargs)
        except Exception:
            logger.error("Error in %s hook", name, exc_info=True)
        return original(*args, **kwargs)

    setattr(game, name, wrapper)
    logger.debug("Hooked into %s()", name)
    return True


def install_hooks(game: Any, tracker: GameSessionTracker) -> list[str]:
    """Wrap the game's lifecycle methods so they feed the tracker.

    The game's own ``calculate_xp`` and ``calculate_reflex_stars`` are
    adopted by the tracker when it has none configured.

    Args:
        game: Game instance exposing the lifecycle methods.
        tracker: Tracker that receives the notifications.

    Returns:
        Names of the methods that were hooked.
    """
    if tracker.calculate_xp is None and callable(getattr(game, "calculate_xp", None)):
        tracker.calculate_xp = game.calculate_xp
    if tracker.calculate_stars is None and callable(
        getattr(game, "calculate_reflex_stars", None)
    ):
        tracker.calculate_stars = game.calculate_reflex_stars

    def game_state() -> Any:
        return getattr(game, "game_state", None)

    def on_start_game(level: Any, *args: Any, **kwargs: Any) -> None:
        tracker.on_campaign_start(level)

    def on_start_reflex(*args: Any, **kwargs: Any) -> None:
        tracker.on_reflex_start()

    def on_match(*args: Any, **kwargs: Any) -> None:
        flipped = state_value(game_state(), "flipped_cards", [])
        if len(flipped) != 2:
            return
        first, second = flipped
        tracker.on_match(
            card_value(first, "value"),
            card_value(first, "match"),
            card_value(second, "value"),
        )

    def on_campaign_win(*args: Any, **kwargs: Any) -> None:
        state = game_state()
        tracker.on_campaign_win(
            state_value(state, "current_campaign_level", 0),
            state_value(state, "turns", 0),
        )

    def on_reflex_end(*args: Any, **kwargs: Any) -> None:
        tracker.on_reflex_end(state_value(game_state(), "turns", 0))

    hooks: dict[str, Callable[..., None]] = {
        "start_game": on_start_game,
        "start_reflex_mode": on_start_reflex,
        "handle_correct_match": on_match,
        "handle_incorrect_match": on_match,
        "handle_campaign_win": on_campaign_win,
        "handle_reflex_mode_end": on_reflex_end,
    }

    hooked = [name for name, before in hooks.items() if _wrap(game, name, before)]
    logger.info("Analytics hooks installed: %s", ", ".join(hooked) or "none")
    return hooked
