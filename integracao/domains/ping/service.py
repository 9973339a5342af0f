# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ping service."""

from integracao.domains.base import BaseService, operation
from integracao.models.common import PingRequest, PingResponse


class PingService(BaseService):
    """Liveness check; touches neither the mapping store nor the platform."""

    @operation
    async def ping(self, request: PingRequest) -> PingResponse:
        return PingResponse()
