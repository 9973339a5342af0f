# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User operation requests and responses."""

from pydantic import BaseModel, Field

from integracao.models.common import OperationStatus, RequestModel


class UpdateUserRequest(RequestModel):
    """Update the platform profile of a mapped person."""

    pes_id: int
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    email: str = Field(min_length=3)
    username: str = Field(min_length=1)
    city: str | None = None


class GetUserRequest(RequestModel):
    """Fetch the platform profile of a mapped person."""

    pes_id: int


class MapUserRequest(RequestModel):
    """Bind a person to an existing platform account."""

    pes_id: int
    username: str = Field(min_length=1)


class UserProfile(BaseModel):
    """Platform profile of a mapped person."""

    id: int
    pes_id: int
    username: str
    firstname: str
    lastname: str
    email: str
    city: str | None = None


class UserResponse(BaseModel):
    """Result of get_user."""

    id: int
    status: OperationStatus
    message: str
    user: UserProfile | None = None
