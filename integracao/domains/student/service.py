# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student service.

A matricula (mat_id) of the gestor enrols one person in the course of a
turma. The student_enrolment mapping binds mat_id to the platform user and
records the course, so the other operations only need the mat_id.
"""

import functools
import logging

from integracao.domains.base import BaseService, InvalidRequestError, operation
from integracao.infrastructure.database.models.mapping import MappingKind, MappingRecord
from integracao.infrastructure.database.transaction import unit_of_work
from integracao.models.common import OperationResponse
from integracao.models.student import (
    ChangeRoleStudentCourseRequest,
    ChangeStudentGroupRequest,
    EnrolStudentRequest,
    UnenrolStudentGroupRequest,
    UnenrolStudentRequest,
)

logger = logging.getLogger(__name__)


def check_same_course(group: MappingRecord, course_id: int | None) -> None:
    """Fail when a group does not belong to the given course.

    Raises:
        InvalidRequestError: If the group lives in another course.
    """
    if group.course_id != course_id:
        raise InvalidRequestError(
            f"O grupo com grp_id: {group.external_id} não pertence ao curso de id: {course_id}"
        )


class StudentService(BaseService):
    """Service for student enrolments."""

    @operation
    async def enrol_student(self, request: EnrolStudentRequest) -> OperationResponse:
        """Enrol a student in the course of a turma, optionally in a group.

        Raises:
            MappingNotFoundError: If the turma or the group is not mapped.
            AlreadyMappedError: If the matricula is already mapped.
            InvalidRequestError: If the group belongs to another course.
        """
        course = await self._require(MappingKind.COURSE, request.trm_id)
        group = None
        if request.grp_id is not None:
            group = await self._require(MappingKind.GROUP, request.grp_id)
            check_same_course(group, course.internal_id)
        await self._guard_unmapped(MappingKind.STUDENT_ENROLMENT, request.mat_id)

        async with unit_of_work(self._db) as uow:
            user_id = await self._ensure_user(uow, request)

            await self._platform.enrol_user(
                course.internal_id,
                user_id,
                self._settings.roles.student,
            )
            uow.on_rollback(
                functools.partial(self._platform.unenrol_user, course.internal_id, user_id),
                f"unenrol user {user_id} from course {course.internal_id}",
            )

            if group is not None:
                await self._platform.add_group_member(group.internal_id, user_id)

            await self._add_mapping(
                MappingKind.STUDENT_ENROLMENT,
                request.mat_id,
                user_id,
                course_id=course.internal_id,
            )

        logger.info(
            "Student enrolled: mat_id=%s, user_id=%s, course_id=%s",
            request.mat_id,
            user_id,
            course.internal_id,
        )
        return OperationResponse.success(user_id, "Aluno matriculado com sucesso")

    @operation
    async def unenrol_student(self, request: UnenrolStudentRequest) -> OperationResponse:
        """Cancel a matricula together with its discipline enrolments."""
        enrolment = await self._require(MappingKind.STUDENT_ENROLMENT, request.mat_id)
        user_id = enrolment.internal_id
        course_id = enrolment.course_id

        async with unit_of_work(self._db):
            await self._store.remove_for_user_in_course(
                MappingKind.DISCIPLINE_ENROLMENT,
                course_id,
                user_id,
            )
            await self._store.remove(enrolment)
            await self._platform.unenrol_user(course_id, user_id)

        logger.info("Student unenrolled: mat_id=%s, user_id=%s", request.mat_id, user_id)
        return OperationResponse.success(user_id, "Aluno desmatriculado com sucesso")

    @operation
    async def change_role_student_course(
        self,
        request: ChangeRoleStudentCourseRequest,
    ) -> OperationResponse:
        """Switch a student's course role to the one of their new status.

        Raises:
            InvalidRequestError: If the status has no configured role.
        """
        status_roles = self._settings.roles.status_roles
        new_status = request.new_status.lower()
        if new_status not in status_roles:
            raise InvalidRequestError(f"Status de matrícula inválido: {request.new_status}")

        enrolment = await self._require(MappingKind.STUDENT_ENROLMENT, request.mat_id)
        role_id = status_roles[new_status]
        stale_roles = sorted(set(status_roles.values()) | {self._settings.roles.student})

        async with unit_of_work(self._db):
            for stale_role in stale_roles:
                if stale_role != role_id:
                    await self._platform.unassign_role(
                        enrolment.course_id,
                        enrolment.internal_id,
                        stale_role,
                    )
            await self._platform.assign_role(enrolment.course_id, enrolment.internal_id, role_id)

        logger.info(
            "Student role changed: mat_id=%s, status=%s, role=%s",
            request.mat_id,
            new_status,
            role_id,
        )
        return OperationResponse.success(enrolment.internal_id, "Papel do aluno alterado com sucesso")

    @operation
    async def change_student_group(self, request: ChangeStudentGroupRequest) -> OperationResponse:
        """Move a student from one group to another of the same course."""
        enrolment = await self._require(MappingKind.STUDENT_ENROLMENT, request.mat_id)
        old_group = await self._require(MappingKind.GROUP, request.old_grp_id)
        new_group = await self._require(MappingKind.GROUP, request.new_grp_id)
        check_same_course(old_group, enrolment.course_id)
        check_same_course(new_group, enrolment.course_id)

        user_id = enrolment.internal_id
        async with unit_of_work(self._db) as uow:
            await self._platform.remove_group_member(old_group.internal_id, user_id)
            uow.on_rollback(
                functools.partial(self._platform.add_group_member, old_group.internal_id, user_id),
                f"restore user {user_id} in group {old_group.internal_id}",
            )
            await self._platform.add_group_member(new_group.internal_id, user_id)

        return OperationResponse.success(user_id, "Aluno trocado de grupo com sucesso")

    @operation
    async def unenrol_student_group(self, request: UnenrolStudentGroupRequest) -> OperationResponse:
        """Remove a student from a group, keeping the course enrolment."""
        enrolment = await self._require(MappingKind.STUDENT_ENROLMENT, request.mat_id)
        group = await self._require(MappingKind.GROUP, request.grp_id)
        check_same_course(group, enrolment.course_id)

        async with unit_of_work(self._db):
            await self._platform.remove_group_member(group.internal_id, enrolment.internal_id)

        return OperationResponse.success(enrolment.internal_id, "Aluno desvinculado do grupo com sucesso")
