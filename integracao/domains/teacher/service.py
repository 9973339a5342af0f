# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher service."""

import functools
import logging

from integracao.domains.base import BaseService, operation
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.database.transaction import unit_of_work
from integracao.models.common import OperationResponse
from integracao.models.discipline import ChangeTeacherRequest

logger = logging.getLogger(__name__)


class TeacherService(BaseService):
    """Service for discipline teacher changes."""

    @operation
    async def change_teacher(self, request: ChangeTeacherRequest) -> OperationResponse:
        """Replace the teacher (owner) of a discipline.

        The new teacher is enrolled with the teacher role and added to the
        discipline group. The previous teacher leaves the group and is
        unenrolled from the course only when they own no other discipline
        there.

        Raises:
            MappingNotFoundError: If the discipline offer is not mapped.
        """
        record = await self._require(MappingKind.DISCIPLINE, request.ofd_id)
        course_id = record.course_id
        group_id = record.group_id
        previous_id = record.owner_id
        teacher_role = self._settings.roles.teacher

        async with unit_of_work(self._db) as uow:
            teacher_id = await self._ensure_user(uow, request.teacher)
            if teacher_id == previous_id:
                return OperationResponse.success(teacher_id, "Professor alterado com sucesso")

            owned = await self._store.list_in_course(
                MappingKind.DISCIPLINE,
                course_id,
                owner_id=teacher_id,
            )
            await self._platform.enrol_user(course_id, teacher_id, teacher_role)
            if not owned:
                uow.on_rollback(
                    functools.partial(self._platform.unenrol_user, course_id, teacher_id),
                    f"unenrol teacher {teacher_id} from course {course_id}",
                )
            await self._platform.add_group_member(group_id, teacher_id)
            uow.on_rollback(
                functools.partial(self._platform.remove_group_member, group_id, teacher_id),
                f"remove user {teacher_id} from group {group_id}",
            )

            record.owner_id = teacher_id
            await self._db.flush()

            if previous_id is not None:
                await self._platform.remove_group_member(group_id, previous_id)
                uow.on_rollback(
                    functools.partial(self._platform.add_group_member, group_id, previous_id),
                    f"restore user {previous_id} in group {group_id}",
                )

                still_owned = await self._store.list_in_course(
                    MappingKind.DISCIPLINE,
                    course_id,
                    owner_id=previous_id,
                )
                if not still_owned:
                    await self._platform.unenrol_user(course_id, previous_id)
                    uow.on_rollback(
                        functools.partial(self._platform.enrol_user, course_id, previous_id, teacher_role),
                        f"re-enrol teacher {previous_id} in course {course_id}",
                    )

        logger.info(
            "Teacher changed: ofd_id=%s, previous=%s, teacher=%s",
            request.ofd_id,
            previous_id,
            teacher_id,
        )
        return OperationResponse.success(teacher_id, "Professor alterado com sucesso")
