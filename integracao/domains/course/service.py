# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service.

Each turma of the gestor is materialized as one platform course. The
course mapping (trm_id -> course id) is the root of every other mapping:
groups, disciplines and enrolments all record the course they live in, so
removing a course removes them too.

Example:
    >>> service = CourseService(db, platform)
    >>> result = await service.create_course(request)
    >>> result.payload.message
    'Curso criado com sucesso'
"""

import functools
import logging

from integracao.domains.base import BaseService, operation
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.database.transaction import unit_of_work
from integracao.infrastructure.platform.base import CourseData
from integracao.models.common import OperationResponse
from integracao.models.course import (
    CreateCourseRequest,
    RemoveCourseRequest,
    UpdateCourseRequest,
)

logger = logging.getLogger(__name__)


class CourseService(BaseService):
    """Service for course lifecycle operations."""

    @operation
    async def create_course(self, request: CreateCourseRequest) -> OperationResponse:
        """Create the course of a turma and map it.

        Args:
            request: Course creation request.

        Returns:
            Payload with the new course id.

        Raises:
            AlreadyMappedError: If the turma already has a course.
            PlatformError: If the platform does not create the course.
        """
        await self._guard_unmapped(MappingKind.COURSE, request.trm_id)

        async with unit_of_work(self._db) as uow:
            course_id = self._created_id(
                await self._platform.create_course(
                    CourseData(
                        category=request.category,
                        shortname=request.shortname,
                        fullname=request.fullname,
                        summaryformat=request.summaryformat,
                        format=request.format,
                        numsections=request.numsections,
                    )
                ),
                "Erro ao tentar criar o curso",
            )
            uow.on_rollback(
                functools.partial(self._platform.delete_course, course_id),
                f"delete course {course_id}",
            )

            await self._add_mapping(
                MappingKind.COURSE,
                request.trm_id,
                course_id,
                course_id=course_id,
            )

        logger.info("Course created: trm_id=%s, course_id=%s", request.trm_id, course_id)
        return OperationResponse.success(course_id, "Curso criado com sucesso")

    @operation
    async def update_course(self, request: UpdateCourseRequest) -> OperationResponse:
        """Rename the course mapped to a turma.

        Raises:
            MappingNotFoundError: If the turma has no course.
        """
        record = await self._require(MappingKind.COURSE, request.trm_id)

        async with unit_of_work(self._db):
            await self._platform.update_course(
                record.internal_id,
                shortname=request.shortname,
                fullname=request.fullname,
            )

        return OperationResponse.success(record.internal_id, "Curso atualizado com sucesso")

    @operation
    async def remove_course(self, request: RemoveCourseRequest) -> OperationResponse:
        """Delete the course of a turma and every mapping inside it.

        Removal is not idempotent: a second call fails because the turma
        is no longer mapped.

        Raises:
            MappingNotFoundError: If the turma has no course.
        """
        record = await self._require(MappingKind.COURSE, request.trm_id)
        course_id = record.internal_id

        async with unit_of_work(self._db):
            removed = await self._store.remove_in_course(course_id)
            await self._platform.delete_course(course_id)

        logger.info(
            "Course removed: trm_id=%s, course_id=%s, mappings=%d",
            request.trm_id,
            course_id,
            removed,
        )
        return OperationResponse.success(1, "Curso excluído com sucesso")
