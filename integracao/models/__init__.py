# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models of the RPC operations."""

from integracao.models.common import (
    OperationResponse,
    OperationStatus,
    PersonFields,
    PingRequest,
    PingResponse,
    RequestModel,
)

__all__ = [
    "OperationResponse",
    "OperationStatus",
    "PersonFields",
    "PingRequest",
    "PingResponse",
    "RequestModel",
]
