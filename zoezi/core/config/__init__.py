# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for Zoezi.

Example:
    >>> from zoezi.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from zoezi.core.config.settings import (
    DatabaseSettings,
    NotificationSettings,
    Settings,
    SMTPSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "SMTPSettings",
    "NotificationSettings",
]
