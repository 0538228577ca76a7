# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admission number allocation.

Admission numbers look like ``JAN-2025-001``: month, year and a three digit
sequence that restarts every month. Sequences live in persisted counters so
concurrent registrations never hand out the same number.
"""

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from zoezi.infrastructure.database.models import SequenceCounter
from zoezi.utils.datetime import utc_now

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def admission_prefix(when: datetime) -> str:
    """Return the ``MON-YYYY`` prefix for a registration time."""
    return f"{MONTHS[when.month - 1]}-{when.year}"


def format_admission_number(prefix: str, sequence: int) -> str:
    """Format a prefix and sequence as an admission number."""
    return f"{prefix}-{sequence:03d}"


async def next_sequence(db: AsyncSession, name: str) -> int:
    """Atomically increment a named counter and return the new value.

    The first call for a name creates the counter at 1. If another
    transaction creates it first, the increment is retried.

    Args:
        db: Session of the surrounding unit of work.
        name: Counter name.

    Returns:
        The incremented value.
    """
    value = await _increment(db, name)
    if value is not None:
        return value

    try:
        async with db.begin_nested():
            db.add(SequenceCounter(name=name, value=1))
        return 1
    except IntegrityError:
        value = await _increment(db, name)
        if value is None:
            raise
        return value


async def next_admission_number(db: AsyncSession, when: datetime | None = None) -> str:
    """Allocate the next admission number for the month of ``when``."""
    prefix = admission_prefix(when or utc_now())
    sequence = await next_sequence(db, f"admission:{prefix}")
    return format_admission_number(prefix, sequence)


async def _increment(db: AsyncSession, name: str) -> int | None:
    result = await db.execute(
        update(SequenceCounter)
        .where(SequenceCounter.name == name)
        .values(value=SequenceCounter.value + 1)
        .returning(SequenceCounter.value)
    )
    return result.scalar_one_or_none()
