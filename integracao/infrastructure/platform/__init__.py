# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning platform access.

The integration layer delegates entity management to the platform through
the HostPlatform interface. MoodleClient is the production implementation.
"""

from integracao.infrastructure.platform.base import (
    CourseData,
    GradeItem,
    HostPlatform,
    PlatformError,
    PlatformUnavailableError,
    PlatformUser,
    UserData,
)
from integracao.infrastructure.platform.moodle import MoodleClient, flatten_params

__all__ = [
    "HostPlatform",
    "MoodleClient",
    "PlatformError",
    "PlatformUnavailableError",
    "CourseData",
    "UserData",
    "PlatformUser",
    "GradeItem",
    "flatten_params",
]
