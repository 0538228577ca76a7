# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Persisted monotonic counters."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from zoezi.infrastructure.database.models.base import Base


class SequenceCounter(Base):
    """Named counter, e.g. ``admission:MON-2025``."""

    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
