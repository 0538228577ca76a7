# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

Service tests run against the real schema on a per-test SQLite file, so
cross-record invariants can be checked from a fresh session after each
unit of work. Factories go through the services themselves.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from zoezi.bootstrap import LifecycleServices, build_services
from zoezi.infrastructure.database import create_schema, create_sessionmaker, drop_schema
from zoezi.models.common import CurriculumItemType, LearnerKind
from zoezi.models.course import CreateCourseRequest
from zoezi.models.enrollment import EnrollRequest, PaymentAttempt
from zoezi.models.group import CreateGroupRequest, CurriculumItemRequest
from zoezi.models.learner import RegisterLearnerRequest, RegisterTutorRequest


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "scenario: mark test as a multi-step lifecycle scenario"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """Create an engine on a fresh SQLite file with the schema in place."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'zoezi.db'}")
    await create_schema(engine)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker configured like the application's."""
    return create_sessionmaker(db_engine)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Session used by the services under test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def services(db_session: AsyncSession) -> LifecycleServices:
    """Every lifecycle service bound to the test session, without notifier."""
    return build_services(db_session)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_learner(services: LifecycleServices) -> Callable[..., Awaitable[UUID]]:
    """Register a learner and return its id."""

    async def _make(kind: LearnerKind = LearnerKind.STUDENT, **overrides: Any) -> UUID:
        data: dict[str, Any] = {
            "first_name": "Wanjiku",
            "last_name": "Kamau",
            "email": f"learner-{uuid4().hex[:10]}@example.com",
            "phone": "+254700000001",
        }
        data.update(overrides)
        learner = await services.identity.register_learner(RegisterLearnerRequest(**data), kind=kind)
        return learner.id

    return _make


@pytest.fixture
def make_tutor(services: LifecycleServices) -> Callable[..., Awaitable[UUID]]:
    """Register a tutor and return its id."""

    async def _make(**overrides: Any) -> UUID:
        data: dict[str, Any] = {
            "first_name": "Otieno",
            "last_name": "Odhiambo",
            "email": f"tutor-{uuid4().hex[:10]}@example.com",
            "phone": "+254711000002",
        }
        data.update(overrides)
        tutor = await services.identity.register_tutor(RegisterTutorRequest(**data))
        return tutor.id

    return _make


@pytest.fixture
def make_course(services: LifecycleServices) -> Callable[..., Awaitable[UUID]]:
    """Create a course and return its id."""

    async def _make(**overrides: Any) -> UUID:
        data: dict[str, Any] = {
            "name": f"Sports Massage {uuid4().hex[:6]}",
            "duration": 3,
            "duration_type": "months",
            "course_fee": Decimal("15000.00"),
        }
        data.update(overrides)
        course = await services.courses.create_course(CreateCourseRequest(**data))
        return course.id

    return _make


@pytest.fixture
def enroll(services: LifecycleServices) -> Callable[..., Awaitable[Any]]:
    """Enroll a learner, paid with a transaction id unless told otherwise."""

    async def _enroll(
        learner_id: UUID,
        course_id: UUID,
        kind: LearnerKind = LearnerKind.STUDENT,
        paid: bool = True,
    ) -> Any:
        payment = (
            PaymentAttempt(transaction_id=f"QX{uuid4().hex[:8].upper()}", phone="254700000001", amount=Decimal("15000"))
            if paid
            else PaymentAttempt()
        )
        return await services.enrollment.enroll(
            learner_id,
            course_id,
            EnrollRequest(learner_kind=kind, payment=payment),
        )

    return _enroll


@pytest.fixture
def make_group(services: LifecycleServices) -> Callable[..., Awaitable[UUID]]:
    """Create a group with a number of curriculum items and return its id."""

    async def _make(tutor_id: UUID, course_id: UUID, items: int = 0, name: str = "Cohort A") -> UUID:
        group = await services.groups.create_group(
            CreateGroupRequest(name=name, tutor_id=tutor_id, course_id=course_id)
        )
        for index in range(items):
            await services.curriculum.add_item(
                group.id,
                CurriculumItemRequest(item_type=CurriculumItemType.LESSON, name=f"Lesson {index + 1}"),
            )
        return group.id

    return _make


@pytest.fixture
def placed_learner(
    services: LifecycleServices,
    make_learner,
    make_tutor,
    make_course,
    enroll,
    make_group,
) -> Callable[..., Awaitable[dict[str, UUID]]]:
    """Build a learner enrolled, assigned and placed in a group.

    Returns a dict with learner_id, tutor_id, course_id and group_id.
    """

    async def _make(items: int = 3, paid: bool = True) -> dict[str, UUID]:
        learner_id = await make_learner()
        tutor_id = await make_tutor()
        course_id = await make_course()
        await enroll(learner_id, course_id, paid=paid)
        await services.assignment.assign_tutor(learner_id, course_id, tutor_id)
        group_id = await make_group(tutor_id, course_id, items=items)
        await services.assignment.add_to_group(group_id, learner_id)
        return {
            "learner_id": learner_id,
            "tutor_id": tutor_id,
            "course_id": course_id,
            "group_id": group_id,
        }

    return _make
