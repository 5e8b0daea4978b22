# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package.

Example:
    >>> from brainmatch_analytics.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.analytics.game_id
    'BrainMatch_Flags'
"""

from brainmatch_analytics.core.config.settings import (
    AnalyticsSettings,
    RedisSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "AnalyticsSettings",
    "RedisSettings",
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
