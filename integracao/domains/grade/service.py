# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade service.

Final grades are read from the platform gradebook. The grade item of a
discipline is the one whose idnumber is ``ofd_<ofd_id>``; when the course
has no such item the course total is reported.
"""

import logging

from integracao.domains.base import BaseService, operation
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.platform.base import GradeItem
from integracao.models.common import OperationStatus
from integracao.models.grade import GetGradesBatchRequest, GradesResponse, StudentGrade

logger = logging.getLogger(__name__)

COURSE_TOTAL_ITEM = "course"


def discipline_idnumber(ofd_id: int) -> str:
    """Grade item idnumber of a discipline offer."""
    return f"ofd_{ofd_id}"


def pick_final_grade(items: list[GradeItem], ofd_id: int) -> float | None:
    """Select the final grade of a discipline among a user's grade items.

    Args:
        items: Grade items of one user in the course.
        ofd_id: Discipline offer id.

    Returns:
        The grade, or None when no suitable item is graded.
    """
    idnumber = discipline_idnumber(ofd_id)
    for item in items:
        if item.idnumber == idnumber:
            return item.grade
    for item in items:
        if item.item_type == COURSE_TOTAL_ITEM:
            return item.grade
    return None


class GradeService(BaseService):
    """Read-only service for final grades."""

    @operation
    async def get_grades_batch(self, request: GetGradesBatchRequest) -> GradesResponse:
        """Final grades of several people in one discipline.

        Every pes_id must be mapped; the first unmapped one fails the
        whole request.

        Raises:
            MappingNotFoundError: If the discipline or a person is not mapped.
        """
        discipline = await self._require(MappingKind.DISCIPLINE, request.ofd_id)
        users = [await self._require(MappingKind.USER, pes_id) for pes_id in request.pes_ids]

        grades: list[StudentGrade] = []
        for user in users:
            items = await self._platform.get_grade_items(discipline.course_id, user.internal_id)
            grades.append(
                StudentGrade(
                    pes_id=user.external_id,
                    grade=pick_final_grade(items, request.ofd_id),
                )
            )

        logger.debug("Grades read: ofd_id=%s, count=%d", request.ofd_id, len(grades))
        return GradesResponse(
            id=request.ofd_id,
            status=OperationStatus.SUCCESS,
            message="Notas recuperadas com sucesso",
            grades=grades,
        )
