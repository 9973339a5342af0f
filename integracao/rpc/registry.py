# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Operation registry.

Declares every RPC method: its request model, the service that runs it
and a short description. The transport validates the body against the
request model once, builds the service and awaits the handler.

Methods are also reachable under their platform web service names
(``local_integracao_<name>``), where removals are called ``delete_*``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from integracao.core.config.settings import Settings
from integracao.domains.base import BaseService, Result
from integracao.domains.course import CourseService
from integracao.domains.discipline import DisciplineService
from integracao.domains.grade import GradeService
from integracao.domains.group import GroupService
from integracao.domains.ping import PingService
from integracao.domains.student import StudentService
from integracao.domains.teacher import TeacherService
from integracao.domains.tutor import TutorService
from integracao.domains.user import UserService
from integracao.infrastructure.platform.base import HostPlatform
from integracao.models.common import PingRequest
from integracao.models.course import (
    CreateCourseRequest,
    RemoveCourseRequest,
    UpdateCourseRequest,
)
from integracao.models.discipline import (
    BatchEnrolStudentDisciplineRequest,
    BatchUnenrolStudentDisciplineRequest,
    ChangeTeacherRequest,
    CreateDisciplineRequest,
    EnrolStudentDisciplineRequest,
    RemoveDisciplineRequest,
    UnenrolStudentDisciplineRequest,
)
from integracao.models.grade import GetGradesBatchRequest
from integracao.models.group import (
    CreateGroupRequest,
    RemoveGroupRequest,
    UpdateGroupRequest,
)
from integracao.models.student import (
    ChangeRoleStudentCourseRequest,
    ChangeStudentGroupRequest,
    EnrolStudentRequest,
    UnenrolStudentGroupRequest,
    UnenrolStudentRequest,
)
from integracao.models.tutor import EnrolTutorRequest, UnenrolTutorGroupRequest
from integracao.models.user import GetUserRequest, MapUserRequest, UpdateUserRequest

PLATFORM_PREFIX = "local_integracao_"

# Platform web service names that differ from the method name
PLATFORM_ALIASES = {
    "delete_course": "remove_course",
    "delete_group": "remove_group",
    "delete_discipline": "remove_discipline",
}


class MethodKind(str, Enum):
    """Whether a method changes state."""

    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class RpcMethod:
    """Registry entry of one RPC method."""

    name: str
    request_model: type[BaseModel]
    service_class: type[BaseService]
    description: str
    kind: MethodKind = MethodKind.WRITE

    def bind(
        self,
        db: AsyncSession,
        platform: HostPlatform,
        settings: Settings | None = None,
    ) -> Callable[[Any], Awaitable[Result[Any]]]:
        """Build the service and return its bound handler."""
        service = self.service_class(db, platform, settings)
        return getattr(service, self.name)

    @property
    def platform_name(self) -> str:
        """Name of the method as a platform web service function."""
        for alias, name in PLATFORM_ALIASES.items():
            if name == self.name:
                return PLATFORM_PREFIX + alias
        return PLATFORM_PREFIX + self.name


_METHODS = [
    # Courses
    RpcMethod("create_course", CreateCourseRequest, CourseService, "Cria um curso para uma turma"),
    RpcMethod("update_course", UpdateCourseRequest, CourseService, "Atualiza o curso de uma turma"),
    RpcMethod("remove_course", RemoveCourseRequest, CourseService, "Exclui o curso de uma turma"),
    # Groups
    RpcMethod("create_group", CreateGroupRequest, GroupService, "Cria um grupo no curso de uma turma"),
    RpcMethod("update_group", UpdateGroupRequest, GroupService, "Atualiza um grupo"),
    RpcMethod("remove_group", RemoveGroupRequest, GroupService, "Exclui um grupo"),
    # Tutors
    RpcMethod("enrol_tutor", EnrolTutorRequest, TutorService, "Vincula um tutor a um grupo"),
    RpcMethod(
        "unenrol_tutor_group",
        UnenrolTutorGroupRequest,
        TutorService,
        "Desvincula um tutor de um grupo",
    ),
    # Students
    RpcMethod("enrol_student", EnrolStudentRequest, StudentService, "Matricula um aluno no curso"),
    RpcMethod("unenrol_student", UnenrolStudentRequest, StudentService, "Desmatricula um aluno do curso"),
    RpcMethod(
        "change_role_student_course",
        ChangeRoleStudentCourseRequest,
        StudentService,
        "Altera o papel do aluno conforme a situação da matrícula",
    ),
    RpcMethod(
        "change_student_group",
        ChangeStudentGroupRequest,
        StudentService,
        "Troca o aluno de grupo",
    ),
    RpcMethod(
        "unenrol_student_group",
        UnenrolStudentGroupRequest,
        StudentService,
        "Desvincula o aluno de um grupo",
    ),
    # Disciplines
    RpcMethod(
        "create_discipline",
        CreateDisciplineRequest,
        DisciplineService,
        "Cria uma disciplina no curso de uma turma",
    ),
    RpcMethod(
        "enrol_student_discipline",
        EnrolStudentDisciplineRequest,
        DisciplineService,
        "Matricula um aluno em uma disciplina",
    ),
    RpcMethod(
        "unenrol_student_discipline",
        UnenrolStudentDisciplineRequest,
        DisciplineService,
        "Desmatricula um aluno de uma disciplina",
    ),
    RpcMethod(
        "batch_enrol_student_discipline",
        BatchEnrolStudentDisciplineRequest,
        DisciplineService,
        "Matricula vários alunos em disciplinas",
    ),
    RpcMethod(
        "batch_unenrol_student_discipline",
        BatchUnenrolStudentDisciplineRequest,
        DisciplineService,
        "Desmatricula vários alunos de disciplinas",
    ),
    RpcMethod(
        "remove_discipline",
        RemoveDisciplineRequest,
        DisciplineService,
        "Exclui uma disciplina",
    ),
    RpcMethod("change_teacher", ChangeTeacherRequest, TeacherService, "Troca o professor de uma disciplina"),
    # Grades
    RpcMethod(
        "get_grades_batch",
        GetGradesBatchRequest,
        GradeService,
        "Retorna as notas finais de vários alunos em uma disciplina",
        MethodKind.READ,
    ),
    # Users
    RpcMethod("update_user", UpdateUserRequest, UserService, "Atualiza o perfil de um usuário"),
    RpcMethod("get_user", GetUserRequest, UserService, "Retorna o perfil de um usuário", MethodKind.READ),
    RpcMethod("map_user", MapUserRequest, UserService, "Mapeia uma pessoa a um usuário existente"),
    # Liveness
    RpcMethod("ping", PingRequest, PingService, "Verifica se o serviço está no ar", MethodKind.READ),
]

METHODS: dict[str, RpcMethod] = {method.name: method for method in _METHODS}


def get_method(name: str) -> RpcMethod | None:
    """Look up a method by name or by platform web service name.

    Example:
        >>> get_method("local_integracao_delete_course").name
        'remove_course'
    """
    if name.startswith(PLATFORM_PREFIX):
        name = name[len(PLATFORM_PREFIX):]
        name = PLATFORM_ALIASES.get(name, name)
    return METHODS.get(name)


def list_methods() -> list[RpcMethod]:
    """All registered methods in declaration order."""
    return list(_METHODS)
