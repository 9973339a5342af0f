# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared building blocks of the operation services.

Every public service method is wrapped by @operation and returns a Result:

- Ok(payload): the operation committed; payload is the response model.
- Err(kind, message): nothing was committed; kind tells the transport
  which protocol error to answer with.

Inside the services, failures are raised as IntegrationError subclasses
(or PlatformError from the platform client) and converted into Err at a
single point, BaseService._run().

The base service also implements the mapping conventions shared by all
entity kinds:
- _require(): external id must be mapped, checked before any write.
- _guard_unmapped(): external id must not be mapped yet (create guard).
- _add_mapping(): insert, turning a unique-constraint race into
  AlreadyMappedError.
- _ensure_user(): resolve a person, binding or creating the platform user.
"""

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, ParamSpec, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from integracao.core.config.settings import Settings, get_settings
from integracao.infrastructure.database.connection import DatabaseError
from integracao.infrastructure.database.mappings import MappingConflictError, MappingStore
from integracao.infrastructure.database.models.mapping import MappingKind, MappingRecord
from integracao.infrastructure.database.transaction import UnitOfWork
from integracao.infrastructure.platform.base import HostPlatform, PlatformError, UserData
from integracao.models.common import OperationResponse, PersonFields

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


class ErrorKind(str, Enum):
    """Category of a failed operation."""

    VALIDATION = "validation"
    NOT_MAPPED = "not_mapped"
    ALREADY_MAPPED = "already_mapped"
    NOT_FOUND = "not_found"
    PLATFORM = "platform"
    STORAGE = "storage"


# =============================================================================
# Exceptions
# =============================================================================


class IntegrationError(Exception):
    """Base exception for operation failures.

    Attributes:
        message: Human-readable error description.
        kind: Error category reported in the Err result.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(IntegrationError):
    """Raised when a request is well-formed but not acceptable."""

    kind = ErrorKind.VALIDATION


class MappingNotFoundError(IntegrationError):
    """Raised when an external id has no mapping."""

    kind = ErrorKind.NOT_MAPPED


class AlreadyMappedError(IntegrationError):
    """Raised when a create targets an external id that is already mapped."""

    kind = ErrorKind.ALREADY_MAPPED


class EntityNotFoundError(IntegrationError):
    """Raised when the platform has no entity for a lookup."""

    kind = ErrorKind.NOT_FOUND


class MappingRaceError(AlreadyMappedError):
    """Raised when another writer mapped the same external id after the guard.

    Attributes:
        mapping_kind: Entity kind of the conflicting mapping.
        external_id: External id both writers tried to map.
    """

    def __init__(self, mapping_kind: MappingKind, external_id: int) -> None:
        super().__init__(
            f"Mapeamento duplicado para {mapping_kind.value} com id externo: {external_id}"
        )
        self.mapping_kind = mapping_kind
        self.external_id = external_id


# =============================================================================
# Result type
# =============================================================================


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful operation outcome."""

    payload: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed operation outcome."""

    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_response(self) -> OperationResponse:
        """Render the error as the uniform three-field payload."""
        return OperationResponse.error(self.message)


Result = Union[Ok[T], Err]


def operation(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[Result[T]]]:
    """Turn a service coroutine into one that returns a Result."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        service = args[0]
        return await service._run(func.__name__, func(*args, **kwargs))  # type: ignore[attr-defined]

    return wrapper


# =============================================================================
# Messages
# =============================================================================

NOT_MAPPED_MESSAGES = {
    MappingKind.COURSE: "Nenhum curso mapeado com a turma com trm_id: {external_id}",
    MappingKind.GROUP: "Nenhum grupo mapeado com o grupo com grp_id: {external_id}",
    MappingKind.USER: "Nenhum usuário mapeado com a pessoa com pes_id: {external_id}",
    MappingKind.STUDENT_ENROLMENT: "Nenhuma matrícula mapeada com mat_id: {external_id}",
    MappingKind.DISCIPLINE: "Nenhuma disciplina mapeada com a oferta com ofd_id: {external_id}",
    MappingKind.DISCIPLINE_ENROLMENT: "Nenhuma matrícula em disciplina mapeada com mof_id: {external_id}",
}

ALREADY_MAPPED_MESSAGES = {
    MappingKind.COURSE: "Essa turma ja esta mapeada com o curso de id: {internal_id}",
    MappingKind.GROUP: "Esse grupo ja esta mapeado com o grupo de id: {internal_id}",
    MappingKind.USER: "Essa pessoa ja esta mapeada com o usuário de id: {internal_id}",
    MappingKind.STUDENT_ENROLMENT: "Essa matrícula ja esta mapeada com o usuário de id: {internal_id}",
    MappingKind.DISCIPLINE: "Essa oferta de disciplina ja esta mapeada com a seção de id: {internal_id}",
    MappingKind.DISCIPLINE_ENROLMENT: "Essa matrícula em disciplina ja esta mapeada com o usuário de id: {internal_id}",
}


# =============================================================================
# Base service
# =============================================================================


class BaseService:
    """Base class of the operation services.

    Attributes:
        _db: Async database session of the mapping store.
        _platform: Learning platform client.
        _store: Mapping store bound to the session.
        _settings: Application settings.
    """

    def __init__(
        self,
        db: AsyncSession,
        platform: HostPlatform,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            db: Async database session.
            platform: Learning platform client.
            settings: Application settings (defaults to get_settings()).
        """
        self._db = db
        self._platform = platform
        self._store = MappingStore(db)
        self._settings = settings or get_settings()

    async def _run(self, name: str, work: Awaitable[T]) -> Result[T]:
        """Await an operation body and convert failures into Err."""
        try:
            payload = await work
        except MappingRaceError as e:
            message = await self._race_message(e)
            logger.warning("%s rejected: %s", name, message)
            return Err(e.kind, message)
        except IntegrationError as e:
            logger.warning("%s rejected: %s", name, e.message)
            return Err(e.kind, e.message)
        except PlatformError as e:
            logger.error("%s failed on the platform: %s", name, e.message)
            return Err(ErrorKind.PLATFORM, e.message)
        except (DatabaseError, SQLAlchemyError) as e:
            logger.error("%s failed on the mapping store: %s", name, str(e))
            return Err(ErrorKind.STORAGE, "Erro ao acessar a base de mapeamentos")

        logger.info("%s completed", name)
        return Ok(payload)

    async def _require(self, kind: MappingKind, external_id: int) -> MappingRecord:
        """Resolve an external id or fail.

        Raises:
            MappingNotFoundError: If the id is not mapped.
        """
        record = await self._store.resolve(kind, external_id)
        if record is None:
            raise MappingNotFoundError(
                NOT_MAPPED_MESSAGES[kind].format(external_id=external_id)
            )
        return record

    async def _guard_unmapped(self, kind: MappingKind, external_id: int) -> None:
        """Fail when an external id is already mapped.

        Raises:
            AlreadyMappedError: Naming the internal id already bound.
        """
        record = await self._store.resolve(kind, external_id)
        if record is not None:
            raise AlreadyMappedError(
                ALREADY_MAPPED_MESSAGES[kind].format(internal_id=record.internal_id)
            )

    async def _add_mapping(
        self,
        kind: MappingKind,
        external_id: int,
        internal_id: int,
        **columns: int | None,
    ) -> MappingRecord:
        """Insert a mapping; a concurrent duplicate becomes AlreadyMappedError."""
        try:
            return await self._store.add(kind, external_id, internal_id, **columns)
        except MappingConflictError as e:
            raise MappingRaceError(kind, external_id) from e

    async def _race_message(self, error: MappingRaceError) -> str:
        """Name the internal id the winning writer mapped.

        Runs after the unit of work has rolled back, so the session sees
        the committed row of the other writer.
        """
        try:
            record = await self._store.resolve(error.mapping_kind, error.external_id)
        except SQLAlchemyError:
            logger.exception("Could not resolve the conflicting mapping")
            return error.message
        if record is None:
            return error.message
        return ALREADY_MAPPED_MESSAGES[error.mapping_kind].format(internal_id=record.internal_id)

    @staticmethod
    def _created_id(value: int | None, message: str) -> int:
        """Check the id returned by a platform create call.

        Raises:
            PlatformError: If the platform did not produce an id.
        """
        if not value:
            raise PlatformError(message)
        return value

    async def _ensure_user(self, uow: UnitOfWork, person: PersonFields) -> int:
        """Resolve a person to a platform user id, mapping it if needed.

        An unmapped person is bound to the platform account with the same
        username; the account is created when there is none. Created
        accounts are kept on rollback.

        Args:
            uow: Current unit of work.
            person: Identity fields from the request.

        Returns:
            Platform user id.
        """
        record = await self._store.resolve(MappingKind.USER, person.pes_id)
        if record is not None:
            return record.internal_id

        existing = await self._platform.find_user(person.username)
        if existing is not None:
            owner = await self._store.find_by_internal(MappingKind.USER, existing.id)
            if owner is not None:
                raise AlreadyMappedError(
                    f"O usuário {person.username} ja esta mapeado com a pessoa de pes_id: {owner.external_id}"
                )
            user_id = existing.id
        else:
            user_id = self._created_id(
                await self._platform.create_user(
                    UserData(
                        username=person.username,
                        firstname=person.firstname,
                        lastname=person.lastname,
                        email=person.email,
                        city=person.city,
                        password=person.password,
                    )
                ),
                "Erro ao tentar criar o usuário",
            )
            logger.info("User created: pes_id=%s, user_id=%s", person.pes_id, user_id)

        await self._add_mapping(MappingKind.USER, person.pes_id, user_id)
        return user_id
