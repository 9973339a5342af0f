# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scoped transactions spanning the mapping store and the platform.

unit_of_work() commits only when its block finishes normally. Any exception
rolls back every store mutation made in the session and then runs the
compensating platform calls registered with on_rollback(), newest first.
The exception is always re-raised.

Example:
    async with unit_of_work(session) as uow:
        course_id = await platform.create_course(data)
        uow.on_rollback(lambda: platform.delete_course(course_id), "delete course")
        await store.add(MappingKind.COURSE, 42, course_id)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[Any]]


class UnitOfWork:
    """Tracks compensations for one transaction scope.

    Attributes:
        session: The session whose transaction the scope controls.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._compensations: list[tuple[str, Compensation]] = []

    def on_rollback(self, callback: Compensation, description: str) -> None:
        """Register a platform call that undoes work done in this scope.

        Args:
            callback: Zero-argument coroutine function.
            description: Short label used in logs.
        """
        self._compensations.append((description, callback))

    async def compensate(self) -> None:
        """Run registered compensations, newest first.

        A failing compensation is logged and the remaining ones still run.
        """
        while self._compensations:
            description, callback = self._compensations.pop()
            try:
                await callback()
                logger.info("Compensation applied: %s", description)
            except Exception:
                logger.exception("Compensation failed: %s", description)


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[UnitOfWork]:
    """Open a transaction scope on the session.

    Yields:
        UnitOfWork for registering compensations.
    """
    uow = UnitOfWork(session)
    try:
        yield uow
        await session.commit()
    except Exception:
        await session.rollback()
        await uow.compensate()
        raise
