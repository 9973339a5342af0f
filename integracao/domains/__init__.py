# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Operation services of the integration.

Each domain module exposes one service whose public methods are RPC
operations. Every operation resolves gestor ids through the mapping store,
calls the platform and writes mappings inside one unit of work.

Domains:
    course: Courses of turmas.
    group: Groups inside courses.
    tutor: Tutor enrolments in groups.
    student: Student enrolments, roles and group membership.
    discipline: Discipline offers and discipline enrolments.
    grade: Final grades of disciplines.
    teacher: Teacher changes of disciplines.
    user: Profiles and explicit user mapping.
    ping: Liveness check.
"""

from integracao.domains.base import (
    AlreadyMappedError,
    BaseService,
    EntityNotFoundError,
    Err,
    ErrorKind,
    IntegrationError,
    InvalidRequestError,
    MappingNotFoundError,
    MappingRaceError,
    Ok,
    Result,
    operation,
)

__all__ = [
    "AlreadyMappedError",
    "BaseService",
    "EntityNotFoundError",
    "Err",
    "ErrorKind",
    "IntegrationError",
    "InvalidRequestError",
    "MappingNotFoundError",
    "MappingRaceError",
    "Ok",
    "Result",
    "operation",
]
