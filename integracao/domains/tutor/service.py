# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor service.

A tutor is enrolled in the course of a group with the role of their
tutoring type (presencial or distancia) and added to the group.
"""

import functools
import logging

from integracao.domains.base import BaseService, operation
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.database.transaction import unit_of_work
from integracao.models.common import OperationResponse
from integracao.models.tutor import EnrolTutorRequest, UnenrolTutorGroupRequest

logger = logging.getLogger(__name__)


class TutorService(BaseService):
    """Service for tutor enrolments."""

    @operation
    async def enrol_tutor(self, request: EnrolTutorRequest) -> OperationResponse:
        """Enrol a tutor in a group, creating their account if needed.

        On failure the course enrolment is undone only for people mapped by
        this call; an already mapped tutor may hold it for other groups.

        Raises:
            MappingNotFoundError: If the group is not mapped.
        """
        group = await self._require(MappingKind.GROUP, request.grp_id)
        role_id = self._settings.roles.tutor_role(request.ttg_tipo_tutoria)

        known = await self._store.resolve(MappingKind.USER, request.pes_id)

        async with unit_of_work(self._db) as uow:
            user_id = await self._ensure_user(uow, request)

            await self._platform.enrol_user(group.course_id, user_id, role_id)
            if known is None:
                uow.on_rollback(
                    functools.partial(self._platform.unenrol_user, group.course_id, user_id),
                    f"unenrol tutor {user_id} from course {group.course_id}",
                )
            await self._platform.add_group_member(group.internal_id, user_id)
            uow.on_rollback(
                functools.partial(self._platform.remove_group_member, group.internal_id, user_id),
                f"remove user {user_id} from group {group.internal_id}",
            )

        logger.info(
            "Tutor enrolled: pes_id=%s, user_id=%s, group_id=%s, role=%s",
            request.pes_id,
            user_id,
            group.internal_id,
            role_id,
        )
        return OperationResponse.success(user_id, "Tutor vinculado com sucesso")

    @operation
    async def unenrol_tutor_group(self, request: UnenrolTutorGroupRequest) -> OperationResponse:
        """Remove a tutor from a group.

        The course enrolment is kept: the tutor may still serve other
        groups of the same course.
        """
        group = await self._require(MappingKind.GROUP, request.grp_id)
        user = await self._require(MappingKind.USER, request.pes_id)

        async with unit_of_work(self._db):
            await self._platform.remove_group_member(group.internal_id, user.internal_id)

        return OperationResponse.success(user.internal_id, "Tutor desvinculado do grupo com sucesso")
