# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the mapping store.

Example:
    from integracao.infrastructure.database import (
        MappingStore,
        get_session,
        unit_of_work,
    )

    async with get_session() as session:
        async with unit_of_work(session):
            await MappingStore(session).add(MappingKind.COURSE, 42, 7)
"""

from integracao.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_session,
    get_sessionmaker,
    init_database,
)
from integracao.infrastructure.database.mappings import MappingConflictError, MappingStore
from integracao.infrastructure.database.models import Base, MappingKind, MappingRecord
from integracao.infrastructure.database.transaction import UnitOfWork, unit_of_work

__all__ = [
    # Connection
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "get_session",
    "get_sessionmaker",
    "init_database",
    # Mapping store
    "Base",
    "MappingKind",
    "MappingRecord",
    "MappingStore",
    "MappingConflictError",
    # Transactions
    "UnitOfWork",
    "unit_of_work",
]
