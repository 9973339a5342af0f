# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Group service."""

import pytest

from integracao.domains.base import ErrorKind
from integracao.domains.group import GroupService
from integracao.infrastructure.database import MappingKind, MappingStore
from integracao.models.group import (
    CreateGroupRequest,
    RemoveGroupRequest,
    UpdateGroupRequest,
)


@pytest.fixture
def group_service(db, platform, settings):
    """Create group service with the fake platform."""
    return GroupService(db=db, platform=platform, settings=settings)


class TestGroupServiceCreate:
    """Tests for group creation."""

    @pytest.mark.asyncio
    async def test_create_group_success(self, group_service, platform, db, course_id):
        """The group is created in the turma's course and mapped."""
        result = await group_service.create_group(
            CreateGroupRequest(trm_id=42, grp_id=10, name="Polo Centro", description="Turma A")
        )

        assert result.ok
        assert result.payload.message == "Grupo criado com sucesso"
        group_id = result.payload.id
        assert platform.groups[group_id]["course_id"] == course_id

        record = await MappingStore(db).resolve(MappingKind.GROUP, 10)
        assert record.internal_id == group_id
        assert record.course_id == course_id

    @pytest.mark.asyncio
    async def test_create_group_unmapped_course(self, group_service, platform):
        """A group cannot be created for a turma without a course."""
        result = await group_service.create_group(
            CreateGroupRequest(trm_id=999, grp_id=10, name="Polo Centro")
        )

        assert not result.ok
        assert result.kind == ErrorKind.NOT_MAPPED
        assert platform.called("create_group") == []

    @pytest.mark.asyncio
    async def test_create_group_twice_rejected(self, group_service, platform, group_id):
        """A mapped group is not created again."""
        result = await group_service.create_group(
            CreateGroupRequest(trm_id=42, grp_id=10, name="Polo Centro")
        )

        assert not result.ok
        assert result.kind == ErrorKind.ALREADY_MAPPED
        assert result.message == f"Esse grupo ja esta mapeado com o grupo de id: {group_id}"
        assert len(platform.called("create_group")) == 1


class TestGroupServiceUpdateRemove:
    """Tests for group update and removal."""

    @pytest.mark.asyncio
    async def test_update_group(self, group_service, platform, group_id):
        """The mapped group is updated on the platform."""
        result = await group_service.update_group(
            UpdateGroupRequest(grp_id=10, name="Polo Norte", description="Turma B")
        )

        assert result.ok
        assert result.payload.id == group_id
        assert platform.groups[group_id]["name"] == "Polo Norte"

    @pytest.mark.asyncio
    async def test_remove_group(self, group_service, platform, db, group_id):
        """Removal deletes the group and its mapping."""
        result = await group_service.remove_group(RemoveGroupRequest(grp_id=10))

        assert result.ok
        assert result.payload.id == 1
        assert result.payload.message == "Grupo excluído com sucesso"
        assert group_id not in platform.groups
        assert await MappingStore(db).resolve(MappingKind.GROUP, 10) is None

    @pytest.mark.asyncio
    async def test_remove_unmapped_group(self, group_service, platform):
        """Removing an unmapped group touches nothing."""
        result = await group_service.remove_group(RemoveGroupRequest(grp_id=77))

        assert not result.ok
        assert result.kind == ErrorKind.NOT_MAPPED
        assert result.message == "Nenhum grupo mapeado com o grupo com grp_id: 77"
        assert platform.called("delete_group") == []
