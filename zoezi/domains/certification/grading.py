# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade points and GPA calculation."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from zoezi.models.common import GRADE_POINTS, Grade

_CENTS = Decimal("0.01")


def grade_points(grade: Grade | str) -> Decimal:
    """Grade points of a grade as an exact decimal."""
    return Decimal(str(GRADE_POINTS[Grade(grade)]))


def compute_gpa(grades: Sequence[Grade | str]) -> float:
    """Mean grade points, rounded half-up to two decimals.

    Returns 0.0 when there are no grades.
    """
    if not grades:
        return 0.0
    mean = sum((grade_points(g) for g in grades), Decimal(0)) / len(grades)
    return float(mean.quantize(_CENTS, rounding=ROUND_HALF_UP))


def final_grade(grades: Sequence[Grade | str]) -> Grade | None:
    """The most recently recorded grade, or None."""
    if not grades:
        return None
    return Grade(grades[-1])


def has_failing_grade(grades: Sequence[Grade | str]) -> bool:
    return any(Grade(g) == Grade.FAIL for g in grades)
