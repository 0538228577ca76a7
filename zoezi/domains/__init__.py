# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the Zoezi lifecycle core.

Each domain module provides a service bound to one AsyncSession. Every
multi-record mutation runs inside a single atomic() unit of work.

Domains:
    identity: Learner and tutor records, admission numbers, CPD.
    course: Course catalog and course rosters.
    group: Groups, curriculum items and learner responses.
    enrollment: Enrolling learners in courses.
    assignment: Tutor assignment and group placement.
    progress: Curriculum completion and certification rosters.
    certification: Exams and graduation.
    payment: Payment-gateway transaction ledger.
    subscription: Alumni subscriptions.
"""
