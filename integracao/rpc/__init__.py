# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""RPC method registry."""

from integracao.rpc.registry import (
    METHODS,
    MethodKind,
    RpcMethod,
    get_method,
    list_methods,
)

__all__ = [
    "METHODS",
    "MethodKind",
    "RpcMethod",
    "get_method",
    "list_methods",
]
