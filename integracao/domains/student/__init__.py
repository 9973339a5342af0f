# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student domain: course enrolments, roles and group membership."""

from integracao.domains.student.service import StudentService, check_same_course

__all__ = ["StudentService", "check_same_course"]
