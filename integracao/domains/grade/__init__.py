# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade domain: final grades of disciplines."""

from integracao.domains.grade.service import GradeService

__all__ = ["GradeService"]
