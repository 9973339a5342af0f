# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course (turma) operation requests."""

from pydantic import Field

from integracao.models.common import RequestModel


class CreateCourseRequest(RequestModel):
    """Create a course for a turma of the gestor."""

    trm_id: int = Field(description="Turma id in the gestor")
    category: int = Field(description="Course category")
    shortname: str = Field(min_length=1, description="Course short name")
    fullname: str = Field(min_length=1, description="Course full name")
    summaryformat: int = Field(description="Summary format")
    format: str = Field(min_length=1, description="Course format")
    numsections: int = Field(ge=0, description="Number of sections")


class UpdateCourseRequest(RequestModel):
    """Rename the course mapped to a turma."""

    trm_id: int
    shortname: str = Field(min_length=1)
    fullname: str = Field(min_length=1)


class RemoveCourseRequest(RequestModel):
    """Delete the course mapped to a turma."""

    trm_id: int
