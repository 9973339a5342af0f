# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service.

Profile maintenance for mapped people, plus explicit binding of a person
to an account that already exists on the platform.
"""

import logging

from integracao.domains.base import (
    AlreadyMappedError,
    BaseService,
    EntityNotFoundError,
    operation,
)
from integracao.infrastructure.database.models.mapping import MappingKind
from integracao.infrastructure.database.transaction import unit_of_work
from integracao.infrastructure.platform.base import UserData
from integracao.models.common import OperationResponse, OperationStatus
from integracao.models.user import (
    GetUserRequest,
    MapUserRequest,
    UpdateUserRequest,
    UserProfile,
    UserResponse,
)

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Service for platform users of mapped people."""

    @operation
    async def update_user(self, request: UpdateUserRequest) -> OperationResponse:
        """Push profile changes of a person to their platform account."""
        record = await self._require(MappingKind.USER, request.pes_id)

        async with unit_of_work(self._db):
            await self._platform.update_user(
                record.internal_id,
                UserData(
                    username=request.username,
                    firstname=request.firstname,
                    lastname=request.lastname,
                    email=request.email,
                    city=request.city,
                ),
            )

        return OperationResponse.success(record.internal_id, "Usuário atualizado com sucesso")

    @operation
    async def get_user(self, request: GetUserRequest) -> UserResponse:
        """Fetch the platform profile of a person.

        Raises:
            MappingNotFoundError: If the person is not mapped.
            EntityNotFoundError: If the mapped account no longer exists.
        """
        record = await self._require(MappingKind.USER, request.pes_id)

        user = await self._platform.get_user(record.internal_id)
        if user is None:
            raise EntityNotFoundError(
                f"Usuário de id: {record.internal_id} não encontrado na plataforma"
            )

        return UserResponse(
            id=user.id,
            status=OperationStatus.SUCCESS,
            message="Usuário encontrado com sucesso",
            user=UserProfile(
                id=user.id,
                pes_id=request.pes_id,
                username=user.username,
                firstname=user.firstname,
                lastname=user.lastname,
                email=user.email,
                city=user.city,
            ),
        )

    @operation
    async def map_user(self, request: MapUserRequest) -> OperationResponse:
        """Bind a person to the platform account with the given username.

        Raises:
            AlreadyMappedError: If the person or the account is already bound.
            EntityNotFoundError: If no account has that username.
        """
        await self._guard_unmapped(MappingKind.USER, request.pes_id)

        user = await self._platform.find_user(request.username)
        if user is None:
            raise EntityNotFoundError(
                f"Nenhum usuário encontrado com o username: {request.username}"
            )

        owner = await self._store.find_by_internal(MappingKind.USER, user.id)
        if owner is not None:
            raise AlreadyMappedError(
                f"O usuário {request.username} ja esta mapeado com a pessoa de pes_id: {owner.external_id}"
            )

        async with unit_of_work(self._db):
            await self._add_mapping(MappingKind.USER, request.pes_id, user.id)

        logger.info("User mapped: pes_id=%s, user_id=%s", request.pes_id, user.id)
        return OperationResponse.success(user.id, "Usuário mapeado com sucesso")
