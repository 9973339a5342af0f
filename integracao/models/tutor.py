# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor operation requests."""

from typing import Literal

from pydantic import Field

from integracao.models.common import PersonFields, RequestModel


class EnrolTutorRequest(PersonFields):
    """Enrol a tutor in a group's course and add them to the group."""

    grp_id: int = Field(description="Group id in the gestor")
    ttg_tipo_tutoria: Literal["presencial", "distancia"] = "distancia"


class UnenrolTutorGroupRequest(RequestModel):
    """Remove a tutor from a group."""

    grp_id: int
    pes_id: int
