# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database models."""

from integracao.infrastructure.database.models.base import Base, TimestampMixin
from integracao.infrastructure.database.models.mapping import MappingKind, MappingRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "MappingKind",
    "MappingRecord",
]
