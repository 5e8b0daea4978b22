# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Gaming domain: BrainMatch lifecycle hooks feeding the analytics core."""

from brainmatch_analytics.domains.gaming.hooks import install_hooks
from brainmatch_analytics.domains.gaming.tracker import (
    GameMode,
    GameSessionTracker,
    fallback_xp,
    generate_session_id,
)

__all__ = [
    "GameMode",
    "GameSessionTracker",
    "fallback_xp",
    "generate_session_id",
    "install_hooks",
]
