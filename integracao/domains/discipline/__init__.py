# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discipline domain: discipline offers and their enrolments."""

from integracao.domains.discipline.service import DisciplineService

__all__ = ["DisciplineService"]
