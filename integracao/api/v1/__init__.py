# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    rpc: RPC method listing and dispatch.
"""

from fastapi import APIRouter

from integracao.api.v1 import rpc

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(rpc.router, prefix="/rpc", tags=["RPC"])

__all__ = ["router"]
