# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Host event type definitions.

Names follow the browser events the embedding hosts forward, so a
bridge can pass them through without a translation table.
"""


class HostEvents:
    """Lifecycle signals published by the embedding host."""

    ONLINE = "online"
    LOAD = "load"
    MESSAGE = "message"

    # Events that trigger a flush of the pending queue
    FLUSH_TRIGGERS = (ONLINE, LOAD)
