# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student enrolment (matricula) operation requests."""

from pydantic import Field

from integracao.models.common import PersonFields, RequestModel


class EnrolStudentRequest(PersonFields):
    """Enrol a student in the course of a turma."""

    trm_id: int = Field(description="Turma id in the gestor")
    mat_id: int = Field(description="Matricula id in the gestor")
    grp_id: int | None = Field(default=None, description="Optional group id in the gestor")


class UnenrolStudentRequest(RequestModel):
    """Cancel a matricula."""

    mat_id: int


class ChangeRoleStudentCourseRequest(RequestModel):
    """Change a student's role after a matricula status change."""

    mat_id: int
    new_status: str = Field(min_length=1, description="New matricula status in the gestor")


class ChangeStudentGroupRequest(RequestModel):
    """Move a student between groups of the same course."""

    mat_id: int
    old_grp_id: int
    new_grp_id: int


class UnenrolStudentGroupRequest(RequestModel):
    """Remove a student from a group."""

    mat_id: int
    grp_id: int
