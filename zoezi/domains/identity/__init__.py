# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity domain package.

This package provides learner and tutor records including:
- Registration with admission numbers
- Kind-agnostic learner lookup
- CPD records
"""

from zoezi.domains.errors import (
    DuplicateEmailError,
    EnrollmentNotFoundError,
    LearnerNotFoundError,
    TutorNotFoundError,
)
from zoezi.domains.identity.admission import (
    admission_prefix,
    format_admission_number,
    next_admission_number,
    next_sequence,
)
from zoezi.domains.identity.service import IdentityService, subscription_state

__all__ = [
    "IdentityService",
    "subscription_state",
    "admission_prefix",
    "format_admission_number",
    "next_admission_number",
    "next_sequence",
    "DuplicateEmailError",
    "EnrollmentNotFoundError",
    "LearnerNotFoundError",
    "TutorNotFoundError",
]
