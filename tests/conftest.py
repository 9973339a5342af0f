# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- An in-memory SQLite mapping store (real transactions, real constraints)
- FakePlatform, an in-memory learning platform that can be told to fail
- Settings with the default role ids
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from itertools import count
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from integracao.core.config import Settings
from integracao.domains.course import CourseService
from integracao.domains.group import GroupService
from integracao.infrastructure.database.models import Base
from integracao.infrastructure.platform.base import (
    CourseData,
    GradeItem,
    HostPlatform,
    PlatformError,
    PlatformUser,
    UserData,
)
from integracao.models.course import CreateCourseRequest
from integracao.models.group import CreateGroupRequest


# =============================================================================
# Fake platform
# =============================================================================


class FakePlatform(HostPlatform):
    """In-memory HostPlatform.

    Every call is recorded in ``calls``. Methods named in ``failing`` (or calls in
    ``failing_calls``) raise PlatformError; create methods named in ``falsy`` return 0.
    Coroutines in ``after`` run once the named create call has succeeded.
    """

    def __init__(self) -> None:
        self._ids = count(100)
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failing: set[str] = set()
        self.failing_calls: list[tuple[str, tuple[Any, ...]]] = []
        self.falsy: set[str] = set()
        self.after: dict[str, Callable[[int], Awaitable[Any]]] = {}

        self.courses: dict[int, CourseData] = {}
        self.groups: dict[int, dict[str, Any]] = {}
        self.sections: dict[int, dict[str, Any]] = {}
        self.users: dict[int, PlatformUser] = {}
        self.members: dict[int, set[int]] = {}
        self.enrolments: dict[tuple[int, int], set[int]] = {}
        self.grades: dict[tuple[int, int], list[GradeItem]] = {}

    def fail_on(self, *methods: str) -> None:
        self.failing.update(methods)

    def fail_call(self, method: str, *args: Any) -> None:
        self.failing_calls.append((method, args))

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failing or any(call == (method, args) for call in self.failing_calls):
            raise PlatformError(f"{method} failed", error_code="fake_failure")

    def _new_id(self, method: str) -> int:
        if method in self.falsy:
            return 0
        return next(self._ids)

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    def add_user(self, username: str, **fields: Any) -> PlatformUser:
        user = PlatformUser(
            id=next(self._ids),
            username=username,
            firstname=fields.get("firstname", "Nome"),
            lastname=fields.get("lastname", "Sobrenome"),
            email=fields.get("email", f"{username}@example.com"),
            city=fields.get("city"),
        )
        self.users[user.id] = user
        return user

    async def create_course(self, data: CourseData) -> int:
        self._record("create_course", data)
        course_id = self._new_id("create_course")
        if course_id:
            self.courses[course_id] = data
        if "create_course" in self.after:
            await self.after["create_course"](course_id)
        return course_id

    async def update_course(self, course_id: int, shortname: str, fullname: str) -> None:
        self._record("update_course", course_id, shortname, fullname)
        self.courses[course_id] = self.courses[course_id].model_copy(
            update={"shortname": shortname, "fullname": fullname}
        )

    async def delete_course(self, course_id: int) -> None:
        self._record("delete_course", course_id)
        self.courses.pop(course_id, None)

    async def create_group(self, course_id: int, name: str, description: str = "") -> int:
        self._record("create_group", course_id, name, description)
        group_id = self._new_id("create_group")
        if group_id:
            self.groups[group_id] = {"course_id": course_id, "name": name, "description": description}
            self.members[group_id] = set()
        return group_id

    async def update_group(self, group_id: int, name: str, description: str = "") -> None:
        self._record("update_group", group_id, name, description)
        self.groups[group_id].update(name=name, description=description)

    async def delete_group(self, group_id: int) -> None:
        self._record("delete_group", group_id)
        self.groups.pop(group_id, None)
        self.members.pop(group_id, None)

    async def add_group_member(self, group_id: int, user_id: int) -> None:
        self._record("add_group_member", group_id, user_id)
        self.members.setdefault(group_id, set()).add(user_id)

    async def remove_group_member(self, group_id: int, user_id: int) -> None:
        self._record("remove_group_member", group_id, user_id)
        self.members.get(group_id, set()).discard(user_id)

    async def create_section(self, course_id: int, name: str) -> int:
        self._record("create_section", course_id, name)
        section_id = self._new_id("create_section")
        if section_id:
            self.sections[section_id] = {"course_id": course_id, "name": name}
        return section_id

    async def delete_section(self, course_id: int, section_id: int) -> None:
        self._record("delete_section", course_id, section_id)
        self.sections.pop(section_id, None)

    async def find_user(self, username: str) -> PlatformUser | None:
        self._record("find_user", username)
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    async def get_user(self, user_id: int) -> PlatformUser | None:
        self._record("get_user", user_id)
        return self.users.get(user_id)

    async def create_user(self, data: UserData) -> int:
        self._record("create_user", data)
        user_id = self._new_id("create_user")
        if user_id:
            self.users[user_id] = PlatformUser(
                id=user_id,
                username=data.username,
                firstname=data.firstname,
                lastname=data.lastname,
                email=data.email,
                city=data.city,
            )
        return user_id

    async def update_user(self, user_id: int, data: UserData) -> None:
        self._record("update_user", user_id, data)
        self.users[user_id] = PlatformUser(
            id=user_id,
            username=data.username,
            firstname=data.firstname,
            lastname=data.lastname,
            email=data.email,
            city=data.city,
        )

    async def enrol_user(self, course_id: int, user_id: int, role_id: int) -> None:
        self._record("enrol_user", course_id, user_id, role_id)
        self.enrolments.setdefault((course_id, user_id), set()).add(role_id)

    async def unenrol_user(self, course_id: int, user_id: int) -> None:
        self._record("unenrol_user", course_id, user_id)
        self.enrolments.pop((course_id, user_id), None)

    async def assign_role(self, course_id: int, user_id: int, role_id: int) -> None:
        self._record("assign_role", course_id, user_id, role_id)
        self.enrolments.setdefault((course_id, user_id), set()).add(role_id)

    async def unassign_role(self, course_id: int, user_id: int, role_id: int) -> None:
        self._record("unassign_role", course_id, user_id, role_id)
        self.enrolments.get((course_id, user_id), set()).discard(role_id)

    async def get_grade_items(self, course_id: int, user_id: int) -> list[GradeItem]:
        self._record("get_grade_items", course_id, user_id)
        return list(self.grades.get((course_id, user_id), []))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def engine():
    """Create an in-memory SQLite engine with the schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session configured like the application sessionmaker."""
    sessionmaker = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with sessionmaker() as session:
        yield session


# =============================================================================
# Platform and Settings Fixtures
# =============================================================================


@pytest.fixture
def platform() -> FakePlatform:
    """Provide an empty fake platform."""
    return FakePlatform()


@pytest.fixture
def settings() -> Settings:
    """Provide development settings with the default role ids."""
    return Settings(environment="development")


@pytest.fixture
def person() -> dict[str, Any]:
    """Provide the identity fields of a person in the gestor."""
    return {
        "pes_id": 501,
        "firstname": "Maria",
        "lastname": "Silva",
        "email": "maria.silva@example.com",
        "username": "maria.silva",
        "city": "Santa Maria",
    }


# =============================================================================
# Seed Fixtures
# =============================================================================


@pytest.fixture
async def course_id(db, platform, settings) -> int:
    """Create the course of turma 42 and return its platform id."""
    result = await CourseService(db, platform, settings).create_course(
        CreateCourseRequest(
            trm_id=42,
            category=1,
            shortname="TADS-2025",
            fullname="TADS 2025",
            summaryformat=1,
            format="topics",
            numsections=0,
        )
    )
    assert result.ok
    return result.payload.id


@pytest.fixture
async def group_id(db, platform, settings, course_id) -> int:
    """Create group 10 in the course of turma 42 and return its platform id."""
    result = await GroupService(db, platform, settings).create_group(
        CreateGroupRequest(trm_id=42, grp_id=10, name="Polo Centro")
    )
    assert result.ok
    return result.payload.id


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
