"""BrainMatch analytics bridge.

Client-side telemetry aggregator for the BrainMatch matching game:
accumulates level and task outcomes into a per-session report and
delivers it to the embedding host, queuing it durably when no channel
accepts it.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
