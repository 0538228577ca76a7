# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Process wiring for the Zoezi lifecycle core.

The request/response layer that fronts the core calls startup() once,
opens lifecycle_services() per request and calls shutdown() on exit.

Example:
    from zoezi.bootstrap import lifecycle_services, shutdown, startup

    await startup()
    async with lifecycle_services(request_id="abc-123") as services:
        await services.enrollment.enroll(learner_id, course_id, request)
    await shutdown()
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.core.config import Settings, get_settings
from zoezi.domains.assignment import AssignmentService
from zoezi.domains.certification import CertificationService
from zoezi.domains.course import CourseCatalogService
from zoezi.domains.enrollment import EnrollmentService
from zoezi.domains.group import GroupCurriculumService, GroupService
from zoezi.domains.identity import IdentityService
from zoezi.domains.payment import PaymentService
from zoezi.domains.progress import ProgressService
from zoezi.domains.subscription import SubscriptionService
from zoezi.infrastructure.database import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_sessionmaker,
    init_database,
)
from zoezi.infrastructure.notifications import NotificationService, create_notification_service
from zoezi.utils.logging import bind_context, clear_context, get_logger, setup_logging

logger = get_logger(__name__)

_notifier: NotificationService | None = None


@dataclass
class LifecycleServices:
    """Lifecycle services bound to one session."""

    session: AsyncSession
    identity: IdentityService
    courses: CourseCatalogService
    groups: GroupService
    curriculum: GroupCurriculumService
    enrollment: EnrollmentService
    assignment: AssignmentService
    progress: ProgressService
    certification: CertificationService
    subscriptions: SubscriptionService
    payments: PaymentService


def build_services(session: AsyncSession, notifier: NotificationService | None = None) -> LifecycleServices:
    """Bind every lifecycle service to a session.

    Args:
        session: Async database session shared by all services.
        notifier: Notification service for the services that notify.

    Returns:
        The service bundle.
    """
    return LifecycleServices(
        session=session,
        identity=IdentityService(session),
        courses=CourseCatalogService(session),
        groups=GroupService(session),
        curriculum=GroupCurriculumService(session),
        enrollment=EnrollmentService(session, notifier),
        assignment=AssignmentService(session, notifier),
        progress=ProgressService(session),
        certification=CertificationService(session, notifier),
        subscriptions=SubscriptionService(session, notifier),
        payments=PaymentService(session),
    )


async def startup(settings: Settings | None = None) -> None:
    """Configure logging, the database pool and the notifier.

    Args:
        settings: Application settings, defaults to get_settings().

    Raises:
        DatabaseError: If the database cannot be reached.
    """
    global _notifier

    settings = settings or get_settings()
    setup_logging(settings)
    logger.info(
        "Starting Zoezi lifecycle core",
        environment=settings.environment,
        debug=settings.debug,
    )

    await init_database(settings)
    if not await check_database_connection():
        raise DatabaseError("Database is not reachable")
    _notifier = create_notification_service(settings)
    logger.info(
        "Lifecycle core ready",
        database="sqlite" if settings.database.is_sqlite else "postgresql",
        notifications=settings.notifications.enabled,
    )


async def shutdown() -> None:
    """Release the database pool."""
    global _notifier

    await close_database()
    _notifier = None
    logger.info("Zoezi lifecycle core stopped")


@asynccontextmanager
async def lifecycle_services(**context: object) -> AsyncIterator[LifecycleServices]:
    """Open a session and yield the services bound to it.

    Each service commits its own units of work; the session is closed on
    exit. Keyword arguments are bound to the structured logging context
    for the duration of the block.

    Raises:
        DatabaseError: If startup() has not been called.
    """
    sessionmaker = get_sessionmaker()
    if context:
        bind_context(**context)
    try:
        async with sessionmaker() as session:
            yield build_services(session, _notifier)
    finally:
        if context:
            clear_context()
