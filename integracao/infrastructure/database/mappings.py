# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""External id mapping store.

Pure data access over the integration_mappings table. The store never
commits: callers run it inside unit_of_work() so that mapping rows and the
platform calls they describe succeed or fail together.

Example:
    >>> store = MappingStore(session)
    >>> record = await store.resolve(MappingKind.COURSE, 42)
    >>> record.internal_id if record else None
    7
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from integracao.infrastructure.database.connection import DatabaseError
from integracao.infrastructure.database.models.mapping import MappingKind, MappingRecord

logger = logging.getLogger(__name__)


class MappingConflictError(DatabaseError):
    """Raised when a mapping already exists for (kind, external_id)."""

    def __init__(self, kind: MappingKind, external_id: int, original_error: Exception | None = None) -> None:
        super().__init__(
            f"Mapping already exists for {kind.value} {external_id}",
            original_error,
        )
        self.kind = kind
        self.external_id = external_id


class MappingStore:
    """Data access for MappingRecord rows.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def resolve(self, kind: MappingKind, external_id: int) -> MappingRecord | None:
        """Translate an external id into its mapping.

        Args:
            kind: Entity kind.
            external_id: Identifier in the gestor.

        Returns:
            The MappingRecord, or None when the id is not mapped.
        """
        stmt = select(MappingRecord).where(
            MappingRecord.kind == kind.value,
            MappingRecord.external_id == external_id,
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_internal(self, kind: MappingKind, internal_id: int) -> MappingRecord | None:
        """Find the mapping that points at a platform id, if any."""
        stmt = (
            select(MappingRecord)
            .where(
                MappingRecord.kind == kind.value,
                MappingRecord.internal_id == internal_id,
            )
            .limit(1)
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_in_course(
        self,
        kind: MappingKind,
        course_id: int,
        *,
        internal_id: int | None = None,
        owner_id: int | None = None,
    ) -> list[MappingRecord]:
        """List mappings of a kind inside a platform course.

        Args:
            kind: Entity kind.
            course_id: Platform course id.
            internal_id: Optional platform id filter.
            owner_id: Optional owner filter.

        Returns:
            Matching mappings ordered by external id.
        """
        stmt = select(MappingRecord).where(
            MappingRecord.kind == kind.value,
            MappingRecord.course_id == course_id,
        )
        if internal_id is not None:
            stmt = stmt.where(MappingRecord.internal_id == internal_id)
        if owner_id is not None:
            stmt = stmt.where(MappingRecord.owner_id == owner_id)
        stmt = stmt.order_by(MappingRecord.external_id)

        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def add(
        self,
        kind: MappingKind,
        external_id: int,
        internal_id: int,
        *,
        course_id: int | None = None,
        group_id: int | None = None,
        owner_id: int | None = None,
    ) -> MappingRecord:
        """Insert a new mapping.

        The row is flushed immediately so the unique constraint on
        (kind, external_id) is checked before any later platform call.

        Raises:
            MappingConflictError: If (kind, external_id) is already mapped.
        """
        record = MappingRecord(
            kind=kind.value,
            external_id=external_id,
            internal_id=internal_id,
            course_id=course_id,
            group_id=group_id,
            owner_id=owner_id,
        )
        self._db.add(record)
        try:
            await self._db.flush()
        except IntegrityError as e:
            raise MappingConflictError(kind, external_id, e) from e

        logger.debug(
            "Mapping added: %s %s -> %s",
            kind.value,
            external_id,
            internal_id,
        )
        return record

    async def remove(self, record: MappingRecord) -> None:
        """Delete a single mapping."""
        await self._db.delete(record)
        await self._db.flush()

        logger.debug(
            "Mapping removed: %s %s -> %s",
            record.kind,
            record.external_id,
            record.internal_id,
        )

    async def remove_in_course(self, course_id: int) -> int:
        """Delete every mapping that lives inside a platform course.

        Returns:
            Number of deleted rows.
        """
        stmt = delete(MappingRecord).where(MappingRecord.course_id == course_id)
        result = await self._db.execute(stmt)
        return result.rowcount or 0

    async def remove_in_group(self, kind: MappingKind, group_id: int) -> int:
        """Delete every mapping of a kind attached to a platform group.

        Returns:
            Number of deleted rows.
        """
        stmt = delete(MappingRecord).where(
            MappingRecord.kind == kind.value,
            MappingRecord.group_id == group_id,
        )
        result = await self._db.execute(stmt)
        return result.rowcount or 0

    async def remove_for_user_in_course(self, kind: MappingKind, course_id: int, user_id: int) -> int:
        """Delete mappings of a kind pointing at a user inside a course.

        Returns:
            Number of deleted rows.
        """
        stmt = delete(MappingRecord).where(
            MappingRecord.kind == kind.value,
            MappingRecord.course_id == course_id,
            MappingRecord.internal_id == user_id,
        )
        result = await self._db.execute(stmt)
        return result.rowcount or 0
