# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Group domain: groups inside courses."""

from integracao.domains.group.service import GroupService

__all__ = ["GroupService"]
