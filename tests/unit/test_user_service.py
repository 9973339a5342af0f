# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for User and Ping services."""

import pytest

from integracao.domains.base import ErrorKind
from integracao.domains.ping import PingService
from integracao.domains.user import UserService
from integracao.infrastructure.database import MappingKind, MappingStore
from integracao.models.common import OperationStatus, PingRequest
from integracao.models.user import GetUserRequest, MapUserRequest, UpdateUserRequest


@pytest.fixture
def user_service(db, platform, settings):
    """Create user service with the fake platform."""
    return UserService(db=db, platform=platform, settings=settings)


@pytest.fixture
async def mapped_user(db, platform):
    """Create account maria.silva and map it to pes_id 501."""
    user = platform.add_user("maria.silva", firstname="Maria", lastname="Silva")
    await MappingStore(db).add(MappingKind.USER, 501, user.id)
    await db.commit()
    return user


class TestUserServiceUpdate:
    """Tests for update_user."""

    @pytest.mark.asyncio
    async def test_update_user(self, user_service, platform, mapped_user):
        """Profile fields are pushed to the account."""
        result = await user_service.update_user(
            UpdateUserRequest(
                pes_id=501,
                firstname="Maria",
                lastname="Souza",
                email="maria.souza@example.com",
                username="maria.silva",
                city="Pelotas",
            )
        )

        assert result.ok
        assert result.payload.id == mapped_user.id
        assert result.payload.message == "Usuário atualizado com sucesso"
        assert platform.users[mapped_user.id].lastname == "Souza"
        assert platform.users[mapped_user.id].city == "Pelotas"

    @pytest.mark.asyncio
    async def test_update_unmapped_user(self, user_service, platform):
        """An unmapped person is not updated."""
        result = await user_service.update_user(
            UpdateUserRequest(
                pes_id=404,
                firstname="X",
                lastname="Y",
                email="x@example.com",
                username="xy",
            )
        )

        assert not result.ok
        assert result.kind == ErrorKind.NOT_MAPPED
        assert platform.calls == []


class TestUserServiceGet:
    """Tests for get_user."""

    @pytest.mark.asyncio
    async def test_get_user(self, user_service, mapped_user):
        """The platform profile is returned with the pes_id."""
        result = await user_service.get_user(GetUserRequest(pes_id=501))

        assert result.ok
        assert result.payload.status == OperationStatus.SUCCESS
        assert result.payload.user.id == mapped_user.id
        assert result.payload.user.pes_id == 501
        assert result.payload.user.username == "maria.silva"

    @pytest.mark.asyncio
    async def test_get_deleted_account(self, user_service, platform, mapped_user):
        """A mapping to a vanished account is reported as not found."""
        del platform.users[mapped_user.id]

        result = await user_service.get_user(GetUserRequest(pes_id=501))

        assert not result.ok
        assert result.kind == ErrorKind.NOT_FOUND


class TestUserServiceMap:
    """Tests for map_user."""

    @pytest.mark.asyncio
    async def test_map_user(self, user_service, platform, db):
        """A person is bound to an existing account."""
        user = platform.add_user("carlos.melo")

        result = await user_service.map_user(MapUserRequest(pes_id=510, username="carlos.melo"))

        assert result.ok
        assert result.payload.id == user.id
        assert result.payload.message == "Usuário mapeado com sucesso"
        record = await MappingStore(db).resolve(MappingKind.USER, 510)
        assert record.internal_id == user.id

    @pytest.mark.asyncio
    async def test_map_unknown_username(self, user_service):
        """A username without account is reported as not found."""
        result = await user_service.map_user(MapUserRequest(pes_id=510, username="ninguem"))

        assert not result.ok
        assert result.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_map_already_mapped_person(self, user_service, platform, mapped_user):
        """A person already mapped cannot be mapped again."""
        platform.add_user("outra.conta")

        result = await user_service.map_user(MapUserRequest(pes_id=501, username="outra.conta"))

        assert not result.ok
        assert result.kind == ErrorKind.ALREADY_MAPPED
        assert result.message == f"Essa pessoa ja esta mapeada com o usuário de id: {mapped_user.id}"

    @pytest.mark.asyncio
    async def test_map_account_of_another_person(self, user_service, mapped_user):
        """An account bound to another person is not shared."""
        result = await user_service.map_user(MapUserRequest(pes_id=510, username="maria.silva"))

        assert not result.ok
        assert result.kind == ErrorKind.ALREADY_MAPPED
        assert "501" in result.message


class TestPingService:
    """Tests for ping."""

    @pytest.mark.asyncio
    async def test_ping(self, db, platform):
        """Ping answers without touching the platform."""
        result = await PingService(db, platform).ping(PingRequest())

        assert result.ok
        assert result.payload.status == OperationStatus.SUCCESS
        assert result.payload.message == "pong"
        assert platform.calls == []
