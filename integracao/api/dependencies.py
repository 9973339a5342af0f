# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints:
- Get mapping store sessions
- Get the learning platform client
- Get application settings

Example:
    @router.post("/rpc/{method}")
    async def call_method(
        db: AsyncSession = Depends(get_db),
        platform: HostPlatform = Depends(get_platform),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from integracao.core.config import Settings, get_settings
from integracao.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from integracao.infrastructure.platform import HostPlatform, MoodleClient

logger = logging.getLogger(__name__)

# Platform client singleton
_platform: HostPlatform | None = None


async def init_db() -> None:
    """Initialize the mapping store database."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the mapping store database."""
    await close_database()


def init_platform(settings: Settings | None = None) -> HostPlatform:
    """Create the Moodle client singleton."""
    global _platform
    settings = settings or get_settings()
    _platform = MoodleClient(settings.moodle)
    return _platform


async def close_platform() -> None:
    """Close the Moodle client singleton."""
    global _platform
    if _platform is not None:
        await _platform.close()
        _platform = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a mapping store session.

    Yields:
        AsyncSession for the mapping store.
    """
    async with get_session() as session:
        yield session


def get_platform() -> HostPlatform:
    """Get the learning platform client.

    Raises:
        HTTPException: If the client has not been initialized.
    """
    if _platform is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Platform client not initialized",
        )
    return _platform


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()
