# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Common request/response models shared by every operation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OperationStatus(str, Enum):
    """Status tag of an operation result."""

    SUCCESS = "success"
    ERROR = "error"


class RequestModel(BaseModel):
    """Base for operation requests.

    Unknown keys are rejected, the same way the platform's own web
    service layer rejects unexpected parameters.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class OperationResponse(BaseModel):
    """Uniform three-field result of every write operation."""

    id: int = Field(description="Platform id affected by the operation, 0 on error")
    status: OperationStatus = Field(description="Operation status")
    message: str = Field(description="Human-readable outcome")

    @classmethod
    def success(cls, id: int, message: str) -> "OperationResponse":
        """Build a success payload."""
        return cls(id=id, status=OperationStatus.SUCCESS, message=message)

    @classmethod
    def error(cls, message: str) -> "OperationResponse":
        """Build an error payload."""
        return cls(id=0, status=OperationStatus.ERROR, message=message)


class PersonFields(RequestModel):
    """Identity of a person (pessoa) in the gestor, used to find or create a platform user."""

    pes_id: int = Field(description="Person id in the gestor")
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    email: str = Field(min_length=3)
    username: str = Field(min_length=1)
    password: str | None = None
    city: str | None = None


class PingRequest(RequestModel):
    """Liveness check request; takes no parameters."""


class PingResponse(BaseModel):
    """Liveness check result."""

    status: OperationStatus = OperationStatus.SUCCESS
    message: str = "pong"
