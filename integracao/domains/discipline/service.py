# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discipline service.

A discipline offer (oferta de disciplina, ofd_id) is materialized as a
course section plus a group holding its teacher and students. The
discipline mapping binds ofd_id to the section and records the course,
the group and the teacher (owner).

Discipline enrolments (mof_id) bind a student's matricula to that group.
Batch variants run every item in one unit of work: either all items are
applied or none is.
"""

import functools
import logging

from integracao.domains.base import BaseService, InvalidRequestError, operation
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.database.transaction import UnitOfWork, unit_of_work
from integracao.models.common import OperationResponse
from integracao.models.discipline import (
    BatchEnrolStudentDisciplineRequest,
    BatchUnenrolStudentDisciplineRequest,
    CreateDisciplineRequest,
    EnrolStudentDisciplineRequest,
    RemoveDisciplineRequest,
    UnenrolStudentDisciplineRequest,
)

logger = logging.getLogger(__name__)


class DisciplineService(BaseService):
    """Service for discipline offers and discipline enrolments."""

    @operation
    async def create_discipline(self, request: CreateDisciplineRequest) -> OperationResponse:
        """Create the section and group of a discipline and enrol its teacher.

        Args:
            request: Discipline creation request.

        Returns:
            Payload with the new section id.

        Raises:
            MappingNotFoundError: If the turma has no course.
            AlreadyMappedError: If the discipline offer is already mapped.
            PlatformError: If the section or the group is not created.
        """
        course = await self._require(MappingKind.COURSE, request.trm_id)
        await self._guard_unmapped(MappingKind.DISCIPLINE, request.ofd_id)
        course_id = course.internal_id

        async with unit_of_work(self._db) as uow:
            teacher_id = await self._ensure_user(uow, request.teacher)

            section_id = self._created_id(
                await self._platform.create_section(course_id, request.name),
                "Erro ao tentar criar a seção da disciplina",
            )
            uow.on_rollback(
                functools.partial(self._platform.delete_section, course_id, section_id),
                f"delete section {section_id}",
            )

            group_id = self._created_id(
                await self._platform.create_group(course_id, request.name),
                "Erro ao tentar criar o grupo da disciplina",
            )
            uow.on_rollback(
                functools.partial(self._platform.delete_group, group_id),
                f"delete group {group_id}",
            )

            owned = await self._store.list_in_course(
                MappingKind.DISCIPLINE,
                course_id,
                owner_id=teacher_id,
            )
            await self._platform.enrol_user(course_id, teacher_id, self._settings.roles.teacher)
            if not owned:
                uow.on_rollback(
                    functools.partial(self._platform.unenrol_user, course_id, teacher_id),
                    f"unenrol teacher {teacher_id} from course {course_id}",
                )
            await self._platform.add_group_member(group_id, teacher_id)

            await self._add_mapping(
                MappingKind.DISCIPLINE,
                request.ofd_id,
                section_id,
                course_id=course_id,
                group_id=group_id,
                owner_id=teacher_id,
            )

        logger.info(
            "Discipline created: ofd_id=%s, section_id=%s, group_id=%s, teacher=%s",
            request.ofd_id,
            section_id,
            group_id,
            teacher_id,
        )
        return OperationResponse.success(section_id, "Disciplina criada com sucesso")

    @operation
    async def enrol_student_discipline(
        self,
        request: EnrolStudentDisciplineRequest,
    ) -> OperationResponse:
        """Enrol a student of the course in a discipline."""
        async with unit_of_work(self._db) as uow:
            user_id = await self._enrol(uow, request)

        return OperationResponse.success(user_id, "Aluno matriculado na disciplina com sucesso")

    @operation
    async def unenrol_student_discipline(
        self,
        request: UnenrolStudentDisciplineRequest,
    ) -> OperationResponse:
        """Cancel a discipline enrolment."""
        async with unit_of_work(self._db) as uow:
            user_id = await self._unenrol(uow, request)

        return OperationResponse.success(user_id, "Aluno desmatriculado da disciplina com sucesso")

    @operation
    async def batch_enrol_student_discipline(
        self,
        request: BatchEnrolStudentDisciplineRequest,
    ) -> OperationResponse:
        """Enrol several students; a failing item undoes the whole batch.

        Returns:
            Payload whose id is the number of enrolments.
        """
        async with unit_of_work(self._db) as uow:
            for item in request.enrols:
                await self._enrol(uow, item)

        logger.info("Batch discipline enrolment: %d students", len(request.enrols))
        return OperationResponse.success(
            len(request.enrols),
            "Alunos matriculados na disciplina com sucesso",
        )

    @operation
    async def batch_unenrol_student_discipline(
        self,
        request: BatchUnenrolStudentDisciplineRequest,
    ) -> OperationResponse:
        """Cancel several discipline enrolments; all or nothing.

        Returns:
            Payload whose id is the number of cancelled enrolments.
        """
        async with unit_of_work(self._db) as uow:
            for item in request.unenrols:
                await self._unenrol(uow, item)

        logger.info("Batch discipline unenrolment: %d students", len(request.unenrols))
        return OperationResponse.success(
            len(request.unenrols),
            "Alunos desmatriculados da disciplina com sucesso",
        )

    @operation
    async def remove_discipline(self, request: RemoveDisciplineRequest) -> OperationResponse:
        """Delete a discipline, its enrolments, its section and its group."""
        record = await self._require(MappingKind.DISCIPLINE, request.ofd_id)
        section_id = record.internal_id
        course_id = record.course_id
        group_id = record.group_id

        async with unit_of_work(self._db):
            removed = await self._store.remove_in_group(MappingKind.DISCIPLINE_ENROLMENT, group_id)
            await self._store.remove(record)
            await self._platform.delete_section(course_id, section_id)
            await self._platform.delete_group(group_id)

        logger.info(
            "Discipline removed: ofd_id=%s, section_id=%s, enrolments=%d",
            request.ofd_id,
            section_id,
            removed,
        )
        return OperationResponse.success(1, "Disciplina excluída com sucesso")

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _enrol(self, uow: UnitOfWork, request: EnrolStudentDisciplineRequest) -> int:
        """Add a student to a discipline group and map the enrolment.

        Raises:
            MappingNotFoundError: If the discipline or the matricula is not mapped.
            InvalidRequestError: If the matricula belongs to another course.
            AlreadyMappedError: If the discipline enrolment is already mapped.
        """
        discipline = await self._require(MappingKind.DISCIPLINE, request.ofd_id)
        enrolment = await self._require(MappingKind.STUDENT_ENROLMENT, request.mat_id)
        if enrolment.course_id != discipline.course_id:
            raise InvalidRequestError(
                f"A matrícula com mat_id: {request.mat_id} não pertence ao curso "
                f"da disciplina com ofd_id: {request.ofd_id}"
            )
        await self._guard_unmapped(MappingKind.DISCIPLINE_ENROLMENT, request.mof_id)

        user_id = enrolment.internal_id
        await self._platform.add_group_member(discipline.group_id, user_id)
        uow.on_rollback(
            functools.partial(self._platform.remove_group_member, discipline.group_id, user_id),
            f"remove user {user_id} from group {discipline.group_id}",
        )

        await self._add_mapping(
            MappingKind.DISCIPLINE_ENROLMENT,
            request.mof_id,
            user_id,
            course_id=discipline.course_id,
            group_id=discipline.group_id,
        )
        return user_id

    async def _unenrol(self, uow: UnitOfWork, request: UnenrolStudentDisciplineRequest) -> int:
        """Remove a discipline enrolment mapping and its group membership."""
        record = await self._require(MappingKind.DISCIPLINE_ENROLMENT, request.mof_id)
        user_id = record.internal_id
        group_id = record.group_id

        await self._store.remove(record)
        await self._platform.remove_group_member(group_id, user_id)
        uow.on_rollback(
            functools.partial(self._platform.add_group_member, group_id, user_id),
            f"restore user {user_id} in group {group_id}",
        )
        return user_id
