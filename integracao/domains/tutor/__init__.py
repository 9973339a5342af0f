# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor domain: tutor enrolments in groups."""

from integracao.domains.tutor.service import TutorService

__all__ = ["TutorService"]
