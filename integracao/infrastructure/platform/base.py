# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Abstract base class for the learning platform.

The HostPlatform ABC is the only way the integration layer touches the
platform's entities (courses, groups, sections, users, enrolments, grades).
The integration layer never holds authoritative state about them beyond
the id mappings.

Implementations:
- MoodleClient: Moodle REST web services over HTTP.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class PlatformError(Exception):
    """Base exception for platform errors.

    Attributes:
        message: Error description.
        error_code: Platform error code, when the platform sends one.
        details: Additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class PlatformUnavailableError(PlatformError):
    """Raised when the platform cannot be reached."""

    pass


class CourseData(BaseModel):
    """Fields needed to create a course."""

    category: int
    shortname: str
    fullname: str
    summaryformat: int = 1
    format: str = "topics"
    numsections: int = 0


class UserData(BaseModel):
    """Fields needed to create or update a user."""

    username: str
    firstname: str
    lastname: str
    email: str
    city: str | None = None
    password: str | None = None


class PlatformUser(BaseModel):
    """A user as seen by the platform."""

    id: int
    username: str
    firstname: str = ""
    lastname: str = ""
    email: str = ""
    city: str | None = None


class GradeItem(BaseModel):
    """A user's grade on one grade item."""

    item_type: str = Field(description="course, category, mod or manual")
    idnumber: str | None = None
    grade: float | None = None


class HostPlatform(ABC):
    """Abstract base class for the learning platform.

    Every write method raises PlatformError when the platform rejects the
    call; create methods return the new platform id.
    """

    # =========================================================================
    # Courses
    # =========================================================================

    @abstractmethod
    async def create_course(self, data: CourseData) -> int:
        """Create a course and return its id."""

    @abstractmethod
    async def update_course(self, course_id: int, shortname: str, fullname: str) -> None:
        """Rename a course."""

    @abstractmethod
    async def delete_course(self, course_id: int) -> None:
        """Delete a course together with its groups, sections and enrolments."""

    # =========================================================================
    # Groups and sections
    # =========================================================================

    @abstractmethod
    async def create_group(self, course_id: int, name: str, description: str = "") -> int:
        """Create a group in a course and return its id."""

    @abstractmethod
    async def update_group(self, group_id: int, name: str, description: str = "") -> None:
        """Update a group."""

    @abstractmethod
    async def delete_group(self, group_id: int) -> None:
        """Delete a group."""

    @abstractmethod
    async def add_group_member(self, group_id: int, user_id: int) -> None:
        """Add a user to a group."""

    @abstractmethod
    async def remove_group_member(self, group_id: int, user_id: int) -> None:
        """Remove a user from a group."""

    @abstractmethod
    async def create_section(self, course_id: int, name: str) -> int:
        """Append a named section to a course and return its id."""

    @abstractmethod
    async def delete_section(self, course_id: int, section_id: int) -> None:
        """Delete a course section."""

    # =========================================================================
    # Users
    # =========================================================================

    @abstractmethod
    async def find_user(self, username: str) -> PlatformUser | None:
        """Look a user up by username."""

    @abstractmethod
    async def get_user(self, user_id: int) -> PlatformUser | None:
        """Look a user up by id."""

    @abstractmethod
    async def create_user(self, data: UserData) -> int:
        """Create a user and return its id."""

    @abstractmethod
    async def update_user(self, user_id: int, data: UserData) -> None:
        """Update a user's profile fields."""

    # =========================================================================
    # Enrolments and roles
    # =========================================================================

    @abstractmethod
    async def enrol_user(self, course_id: int, user_id: int, role_id: int) -> None:
        """Enrol a user in a course with a role."""

    @abstractmethod
    async def unenrol_user(self, course_id: int, user_id: int) -> None:
        """Remove a user's enrolment from a course."""

    @abstractmethod
    async def assign_role(self, course_id: int, user_id: int, role_id: int) -> None:
        """Assign a role to a user in a course context."""

    @abstractmethod
    async def unassign_role(self, course_id: int, user_id: int, role_id: int) -> None:
        """Unassign a role from a user in a course context."""

    # =========================================================================
    # Grades
    # =========================================================================

    @abstractmethod
    async def get_grade_items(self, course_id: int, user_id: int) -> list[GradeItem]:
        """Get a user's grades for every grade item of a course."""

    async def close(self) -> None:
        """Release any resources held by the client."""
        return None
