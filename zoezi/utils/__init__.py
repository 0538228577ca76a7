# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for Zoezi.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from zoezi.utils.datetime import (
    add_years,
    combine_utc,
    ensure_utc,
    format_iso,
    is_expired,
    parse_clock,
    utc_now,
)
from zoezi.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "is_expired",
    "add_years",
    "parse_clock",
    "combine_utc",
    "format_iso",
]
