# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group operation requests."""

from pydantic import Field

from integracao.models.common import RequestModel


class CreateGroupRequest(RequestModel):
    """Create a group in the course of a turma."""

    trm_id: int = Field(description="Turma id in the gestor")
    grp_id: int = Field(description="Group id in the gestor")
    name: str = Field(min_length=1)
    description: str = ""


class UpdateGroupRequest(RequestModel):
    """Update a mapped group."""

    grp_id: int
    name: str = Field(min_length=1)
    description: str = ""


class RemoveGroupRequest(RequestModel):
    """Delete a mapped group."""

    grp_id: int
