# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for unit_of_work transaction scopes."""

import pytest

from integracao.infrastructure.database import MappingKind, MappingStore, unit_of_work


class Boom(Exception):
    """Failure raised inside a transaction scope."""


class TestUnitOfWork:
    """Tests for commit, rollback and compensations."""

    @pytest.mark.asyncio
    async def test_commit_on_success(self, db):
        """Store mutations are committed when the block completes."""
        store = MappingStore(db)

        async with unit_of_work(db):
            await store.add(MappingKind.COURSE, 42, 7, course_id=7)

        await db.rollback()
        assert await store.resolve(MappingKind.COURSE, 42) is not None

    @pytest.mark.asyncio
    async def test_rollback_on_exception(self, db):
        """No store mutation survives an exception in the block."""
        store = MappingStore(db)

        with pytest.raises(Boom):
            async with unit_of_work(db):
                await store.add(MappingKind.COURSE, 42, 7, course_id=7)
                raise Boom()

        assert await store.resolve(MappingKind.COURSE, 42) is None

    @pytest.mark.asyncio
    async def test_compensations_run_newest_first(self, db):
        """Registered compensations undo platform work in reverse order."""
        undone: list[str] = []

        async def undo(label: str) -> None:
            undone.append(label)

        with pytest.raises(Boom):
            async with unit_of_work(db) as uow:
                uow.on_rollback(lambda: undo("course"), "delete course")
                uow.on_rollback(lambda: undo("group"), "delete group")
                raise Boom()

        assert undone == ["group", "course"]

    @pytest.mark.asyncio
    async def test_compensations_skipped_on_success(self, db):
        """Compensations never run for a committed scope."""
        undone: list[str] = []

        async def undo() -> None:
            undone.append("course")

        async with unit_of_work(db) as uow:
            uow.on_rollback(undo, "delete course")

        assert undone == []

    @pytest.mark.asyncio
    async def test_failing_compensation_does_not_stop_others(self, db):
        """A broken compensation is logged and the rest still run."""
        undone: list[str] = []

        async def broken() -> None:
            raise RuntimeError("platform down")

        async def undo() -> None:
            undone.append("course")

        with pytest.raises(Boom):
            async with unit_of_work(db) as uow:
                uow.on_rollback(undo, "delete course")
                uow.on_rollback(broken, "delete group")
                raise Boom()

        assert undone == ["course"]
