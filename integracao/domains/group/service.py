# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group service.

Groups of the gestor become platform groups inside the course of their
turma. The group mapping records that course so later enrolments can be
checked against it.
"""

import functools
import logging

from integracao.domains.base import BaseService, operation
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.database.transaction import unit_of_work
from integracao.models.common import OperationResponse
from integracao.models.group import (
    CreateGroupRequest,
    RemoveGroupRequest,
    UpdateGroupRequest,
)

logger = logging.getLogger(__name__)


class GroupService(BaseService):
    """Service for group lifecycle operations."""

    @operation
    async def create_group(self, request: CreateGroupRequest) -> OperationResponse:
        """Create a group in the course of a turma.

        Raises:
            MappingNotFoundError: If the turma has no course.
            AlreadyMappedError: If the group is already mapped.
        """
        course = await self._require(MappingKind.COURSE, request.trm_id)
        await self._guard_unmapped(MappingKind.GROUP, request.grp_id)

        async with unit_of_work(self._db) as uow:
            group_id = self._created_id(
                await self._platform.create_group(
                    course.internal_id,
                    request.name,
                    request.description,
                ),
                "Erro ao tentar criar o grupo",
            )
            uow.on_rollback(
                functools.partial(self._platform.delete_group, group_id),
                f"delete group {group_id}",
            )

            await self._add_mapping(
                MappingKind.GROUP,
                request.grp_id,
                group_id,
                course_id=course.internal_id,
            )

        logger.info(
            "Group created: grp_id=%s, group_id=%s, course_id=%s",
            request.grp_id,
            group_id,
            course.internal_id,
        )
        return OperationResponse.success(group_id, "Grupo criado com sucesso")

    @operation
    async def update_group(self, request: UpdateGroupRequest) -> OperationResponse:
        """Update a mapped group."""
        record = await self._require(MappingKind.GROUP, request.grp_id)

        async with unit_of_work(self._db):
            await self._platform.update_group(
                record.internal_id,
                request.name,
                request.description,
            )

        return OperationResponse.success(record.internal_id, "Grupo atualizado com sucesso")

    @operation
    async def remove_group(self, request: RemoveGroupRequest) -> OperationResponse:
        """Delete a mapped group."""
        record = await self._require(MappingKind.GROUP, request.grp_id)
        group_id = record.internal_id

        async with unit_of_work(self._db):
            await self._store.remove(record)
            await self._platform.delete_group(group_id)

        logger.info("Group removed: grp_id=%s, group_id=%s", request.grp_id, group_id)
        return OperationResponse.success(1, "Grupo excluído com sucesso")
