# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group and curriculum domain package.

This package provides:
- Group lifecycle (create, rename, delete with placement cleanup)
- Curriculum items and their per-group completion flags
- Learner responses and tutor remarks
"""

from zoezi.domains.errors import (
    CourseNotFoundError,
    CurriculumItemNotFoundError,
    ForbiddenError,
    GroupNotFoundError,
    ItemNotReleasedError,
    NotGroupMemberError,
    ResponseNotFoundError,
    TutorNotFoundError,
)
from zoezi.domains.group.curriculum import GroupCurriculumService, normalize_attachments
from zoezi.domains.group.service import GroupService, to_group_response

__all__ = [
    "GroupService",
    "GroupCurriculumService",
    "normalize_attachments",
    "to_group_response",
    "CourseNotFoundError",
    "CurriculumItemNotFoundError",
    "ForbiddenError",
    "GroupNotFoundError",
    "ItemNotReleasedError",
    "NotGroupMemberError",
    "ResponseNotFoundError",
    "TutorNotFoundError",
]
