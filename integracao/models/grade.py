# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade query models."""

from pydantic import BaseModel, Field

from integracao.models.common import OperationStatus, RequestModel


class GetGradesBatchRequest(RequestModel):
    """Final grades of several people in one discipline."""

    ofd_id: int
    pes_ids: list[int] = Field(min_length=1)


class StudentGrade(BaseModel):
    """A person's final grade; None when the platform has no grade yet."""

    pes_id: int
    grade: float | None = None


class GradesResponse(BaseModel):
    """Result of get_grades_batch."""

    id: int
    status: OperationStatus
    message: str
    grades: list[StudentGrade] = Field(default_factory=list)
