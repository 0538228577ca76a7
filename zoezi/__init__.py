"""Zoezi lifecycle core.

Learner lifecycle for the Zoezi school platform: registration, course
enrollment, tutor and group assignment, curriculum progress, certification
and alumni subscriptions.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
