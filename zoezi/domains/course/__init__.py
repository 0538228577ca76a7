# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog domain package."""

from zoezi.domains.course.service import CourseCatalogService
from zoezi.domains.errors import CourseNotFoundError, DuplicateCourseError, TutorNotFoundError

__all__ = [
    "CourseCatalogService",
    "CourseNotFoundError",
    "DuplicateCourseError",
    "TutorNotFoundError",
]
