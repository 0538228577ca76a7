# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared mixins for Zoezi models.

Identifiers are UUID strings so the same schema runs on PostgreSQL and on
SQLite in tests.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from zoezi.utils.datetime import utc_now


def new_id() -> str:
    """Generate a new primary key value."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Declarative base for all Zoezi tables."""


class IdMixin:
    """UUID string primary key."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """Creation and last-update timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


__all__ = ["Base", "IdMixin", "TimestampMixin", "new_id", "utc_now"]
