# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discipline offer (oferta de disciplina) operation requests."""

from pydantic import Field

from integracao.models.common import PersonFields, RequestModel


class CreateDisciplineRequest(RequestModel):
    """Create a discipline section in the course of a turma."""

    trm_id: int = Field(description="Turma id in the gestor")
    ofd_id: int = Field(description="Discipline offer id in the gestor")
    name: str = Field(min_length=1)
    teacher: PersonFields


class EnrolStudentDisciplineRequest(RequestModel):
    """Enrol an enrolled student in a discipline."""

    ofd_id: int
    mof_id: int = Field(description="Discipline enrolment id in the gestor")
    mat_id: int


class UnenrolStudentDisciplineRequest(RequestModel):
    """Cancel a discipline enrolment."""

    mof_id: int


class BatchEnrolStudentDisciplineRequest(RequestModel):
    """Enrol several students at once, all or nothing."""

    enrols: list[EnrolStudentDisciplineRequest] = Field(min_length=1)


class BatchUnenrolStudentDisciplineRequest(RequestModel):
    """Cancel several discipline enrolments at once, all or nothing."""

    unenrols: list[UnenrolStudentDisciplineRequest] = Field(min_length=1)


class RemoveDisciplineRequest(RequestModel):
    """Delete a discipline and its enrolments."""

    ofd_id: int


class ChangeTeacherRequest(RequestModel):
    """Replace the teacher of a discipline."""

    ofd_id: int
    teacher: PersonFields
