# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ping domain."""

from integracao.domains.ping.service import PingService

__all__ = ["PingService"]
