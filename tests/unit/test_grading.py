# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for grade points, GPA and curriculum completion."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from zoezi.domains.certification.grading import (
    compute_gpa,
    final_grade,
    grade_points,
    has_failing_grade,
)
from zoezi.domains.progress.service import completion_of
from zoezi.models.common import Grade


def _items(completed: int, total: int) -> list[SimpleNamespace]:
    return [SimpleNamespace(is_completed=index < completed) for index in range(total)]


class TestGradePoints:
    """Tests for the grade point table."""

    @pytest.mark.parametrize(
        ("grade", "points"),
        [
            (Grade.DISTINCTION, Decimal("4.0")),
            (Grade.MERIT, Decimal("3.7")),
            (Grade.CREDIT, Decimal("3.0")),
            (Grade.PASS, Decimal("2.0")),
            (Grade.FAIL, Decimal("0.0")),
        ],
    )
    def test_points(self, grade: Grade, points: Decimal) -> None:
        assert grade_points(grade) == points

    def test_accepts_stored_string(self) -> None:
        assert grade_points("Merit") == Decimal("3.7")

    def test_unknown_grade_rejected(self) -> None:
        with pytest.raises(ValueError):
            grade_points("Excellent")


class TestComputeGpa:
    """Tests for GPA calculation."""

    def test_no_grades(self) -> None:
        assert compute_gpa([]) == 0.0

    def test_single_grade(self) -> None:
        assert compute_gpa([Grade.DISTINCTION]) == 4.0

    def test_mean_is_rounded_to_two_decimals(self) -> None:
        # (4.0 + 3.7 + 3.0) / 3 = 3.5666...
        assert compute_gpa([Grade.DISTINCTION, Grade.MERIT, Grade.CREDIT]) == 3.57

    def test_half_rounds_up(self) -> None:
        # (3.7 + 3.0 + 3.0 + 2.0) / 4 = 2.925
        assert compute_gpa([Grade.MERIT, Grade.CREDIT, Grade.CREDIT, Grade.PASS]) == 2.93

    def test_fail_counts_as_zero(self) -> None:
        assert compute_gpa([Grade.PASS, Grade.FAIL]) == 1.0


class TestFinalGrade:
    """Tests for the final grade."""

    def test_none_without_exams(self) -> None:
        assert final_grade([]) is None

    def test_last_recorded_grade(self) -> None:
        assert final_grade(["Pass", "Merit", "Credit"]) == Grade.CREDIT

    def test_failing_detection(self) -> None:
        assert has_failing_grade([Grade.PASS, Grade.FAIL]) is True
        assert has_failing_grade([Grade.PASS, Grade.MERIT]) is False
        assert has_failing_grade([]) is False


class TestCompletion:
    """Tests for curriculum completion."""

    def test_empty_curriculum(self) -> None:
        result = completion_of([])

        assert (result.completed, result.total, result.percentage) == (0, 0, 0)

    def test_all_completed(self) -> None:
        result = completion_of(_items(3, 3))

        assert (result.completed, result.total, result.percentage) == (3, 3, 100)

    @pytest.mark.parametrize(
        ("completed", "total", "percentage"),
        [
            (1, 3, 33),
            (2, 3, 67),
            (1, 2, 50),
            (1, 8, 13),
            (4, 5, 80),
            (0, 4, 0),
        ],
    )
    def test_rounding(self, completed: int, total: int, percentage: int) -> None:
        assert completion_of(_items(completed, total)).percentage == percentage
