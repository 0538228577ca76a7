# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the Zoezi lifecycle core.

Example:
    from zoezi.infrastructure.database import atomic, get_sessionmaker

    async with get_sessionmaker()() as session:
        async with atomic(session):
            session.add(course)
"""

from zoezi.infrastructure.database.connection import (
    DatabaseError,
    TransactionAbortedError,
    atomic,
    check_database_connection,
    close_database,
    create_engine_from_settings,
    create_schema,
    create_sessionmaker,
    drop_schema,
    get_engine,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "TransactionAbortedError",
    "atomic",
    "check_database_connection",
    "close_database",
    "create_engine_from_settings",
    "create_schema",
    "create_sessionmaker",
    "drop_schema",
    "get_engine",
    "get_sessionmaker",
    "init_database",
]
