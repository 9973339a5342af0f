# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Moodle REST web service client.

Every call is a POST to /webservice/rest/server.php carrying the token,
the web service function name and the parameters flattened into PHP-style
form keys (courses[0][fullname]=...). Moodle answers 200 even on failure
and reports errors as {"exception": ..., "errorcode": ..., "message": ...}.

Course sections are managed through the local_wsmanagesections plugin,
which must be installed and exposed in the integration web service.

Example:
    client = MoodleClient(settings.moodle)
    course_id = await client.create_course(CourseData(...))
    await client.close()
"""

import logging
from typing import Any

import httpx

from integracao.core.config.settings import MoodleSettings
from integracao.infrastructure.platform.base import (
    CourseData,
    GradeItem,
    HostPlatform,
    PlatformError,
    PlatformUnavailableError,
    PlatformUser,
    UserData,
)

logger = logging.getLogger(__name__)

# Moodle context level for courses (CONTEXT_COURSE)
COURSE_CONTEXT_LEVEL = "course"


def flatten_params(params: Any, prefix: str = "") -> dict[str, str]:
    """Flatten nested dicts/lists into Moodle form keys.

    Example:
        >>> flatten_params({"courses": [{"id": 3}]})
        {'courses[0][id]': '3'}
    """
    flat: dict[str, str] = {}

    if isinstance(params, dict):
        items = params.items()
    elif isinstance(params, (list, tuple)):
        items = enumerate(params)
    else:
        if isinstance(params, bool):
            flat[prefix] = "1" if params else "0"
        elif params is not None:
            flat[prefix] = str(params)
        return flat

    for key, value in items:
        name = f"{prefix}[{key}]" if prefix else str(key)
        flat.update(flatten_params(value, name))
    return flat


class MoodleClient(HostPlatform):
    """HTTP client for Moodle web services.

    Attributes:
        _settings: Moodle configuration.
        _client: Shared async HTTP client.
    """

    def __init__(
        self,
        settings: MoodleSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Moodle configuration.
            transport: Optional transport override (tests).
        """
        self._settings = settings
        self._client = httpx.AsyncClient(
            timeout=settings.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def call(self, function: str, **params: Any) -> Any:
        """Invoke a Moodle web service function.

        Args:
            function: Web service function name.
            **params: Function parameters (nested dicts/lists allowed).

        Returns:
            Decoded JSON response.

        Raises:
            PlatformUnavailableError: If Moodle cannot be reached.
            PlatformError: If Moodle reports an exception or answers with non-JSON.
        """
        data = {
            "wstoken": self._settings.token.get_secret_value(),
            "wsfunction": function,
            "moodlewsrestformat": "json",
            **flatten_params(params),
        }

        try:
            response = await self._client.post(self._settings.rest_url, data=data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Moodle HTTP error on %s: %s", function, e.response.status_code)
            raise PlatformError(
                f"{function} failed with HTTP {e.response.status_code}",
                details={"function": function},
            ) from e
        except httpx.RequestError as e:
            logger.error("Connection error to Moodle: %s", e)
            raise PlatformUnavailableError(
                f"Moodle not available: {e}",
                details={"function": function},
            ) from e

        if not response.content:
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Moodle returned a non-JSON answer on %s", function)
            raise PlatformError(
                f"{function} returned an invalid response",
                details={"function": function, "body": response.text[:200]},
            ) from e

        if isinstance(payload, dict) and "exception" in payload:
            logger.warning(
                "Moodle rejected %s: %s (%s)",
                function,
                payload.get("message"),
                payload.get("errorcode"),
            )
            raise PlatformError(
                payload.get("message") or f"{function} failed",
                error_code=payload.get("errorcode"),
                details={"function": function, "debuginfo": payload.get("debuginfo")},
            )
        return payload

    @staticmethod
    def _first_id(payload: Any, function: str, key: str = "id") -> int:
        """Extract the id of the first created entity."""
        first = payload[0] if isinstance(payload, list) and payload else None
        if isinstance(first, dict) and first.get(key):
            return int(first[key])
        raise PlatformError(f"{function} returned no id", details={"function": function})

    # =========================================================================
    # Courses
    # =========================================================================

    async def create_course(self, data: CourseData) -> int:
        course = {
            "fullname": data.fullname,
            "shortname": data.shortname,
            "categoryid": data.category,
            "summaryformat": data.summaryformat,
            "format": data.format,
            "courseformatoptions": [{"name": "numsections", "value": data.numsections}],
        }
        payload = await self.call("core_course_create_courses", courses=[course])
        return self._first_id(payload, "core_course_create_courses")

    async def update_course(self, course_id: int, shortname: str, fullname: str) -> None:
        await self.call(
            "core_course_update_courses",
            courses=[{"id": course_id, "shortname": shortname, "fullname": fullname}],
        )

    async def delete_course(self, course_id: int) -> None:
        await self.call("core_course_delete_courses", courseids=[course_id])

    # =========================================================================
    # Groups and sections
    # =========================================================================

    async def create_group(self, course_id: int, name: str, description: str = "") -> int:
        payload = await self.call(
            "core_group_create_groups",
            groups=[{"courseid": course_id, "name": name, "description": description}],
        )
        return self._first_id(payload, "core_group_create_groups")

    async def update_group(self, group_id: int, name: str, description: str = "") -> None:
        await self.call(
            "core_group_update_groups",
            groups=[{"id": group_id, "name": name, "description": description}],
        )

    async def delete_group(self, group_id: int) -> None:
        await self.call("core_group_delete_groups", groupids=[group_id])

    async def add_group_member(self, group_id: int, user_id: int) -> None:
        await self.call(
            "core_group_add_group_members",
            members=[{"groupid": group_id, "userid": user_id}],
        )

    async def remove_group_member(self, group_id: int, user_id: int) -> None:
        await self.call(
            "core_group_delete_group_members",
            members=[{"groupid": group_id, "userid": user_id}],
        )

    async def create_section(self, course_id: int, name: str) -> int:
        payload = await self.call(
            "local_wsmanagesections_create_sections",
            courseid=course_id,
            position=0,
            number=1,
        )
        section_id = self._first_id(payload, "local_wsmanagesections_create_sections", key="sectionid")
        await self.call(
            "local_wsmanagesections_update_sections",
            courseid=course_id,
            sections=[{"type": "id", "section": section_id, "name": name}],
        )
        return section_id

    async def delete_section(self, course_id: int, section_id: int) -> None:
        await self.call(
            "local_wsmanagesections_delete_sections",
            courseid=course_id,
            sectionids=[section_id],
        )

    # =========================================================================
    # Users
    # =========================================================================

    async def _get_user_by(self, field: str, value: Any) -> PlatformUser | None:
        payload = await self.call("core_user_get_users_by_field", field=field, values=[value])
        if not payload:
            return None
        user = payload[0]
        return PlatformUser(
            id=user["id"],
            username=user.get("username", ""),
            firstname=user.get("firstname", ""),
            lastname=user.get("lastname", ""),
            email=user.get("email", ""),
            city=user.get("city"),
        )

    async def find_user(self, username: str) -> PlatformUser | None:
        return await self._get_user_by("username", username)

    async def get_user(self, user_id: int) -> PlatformUser | None:
        return await self._get_user_by("id", user_id)

    async def create_user(self, data: UserData) -> int:
        user = data.model_dump(exclude_none=True)
        user["auth"] = "manual"
        if "password" not in user:
            user["createpassword"] = True
        payload = await self.call("core_user_create_users", users=[user])
        return self._first_id(payload, "core_user_create_users")

    async def update_user(self, user_id: int, data: UserData) -> None:
        user = data.model_dump(exclude_none=True, exclude={"password"})
        user["id"] = user_id
        await self.call("core_user_update_users", users=[user])

    # =========================================================================
    # Enrolments and roles
    # =========================================================================

    async def enrol_user(self, course_id: int, user_id: int, role_id: int) -> None:
        await self.call(
            "enrol_manual_enrol_users",
            enrolments=[{"roleid": role_id, "userid": user_id, "courseid": course_id}],
        )

    async def unenrol_user(self, course_id: int, user_id: int) -> None:
        await self.call(
            "enrol_manual_unenrol_users",
            enrolments=[{"userid": user_id, "courseid": course_id}],
        )

    async def assign_role(self, course_id: int, user_id: int, role_id: int) -> None:
        await self.call(
            "core_role_assign_roles",
            assignments=[{
                "roleid": role_id,
                "userid": user_id,
                "contextlevel": COURSE_CONTEXT_LEVEL,
                "instanceid": course_id,
            }],
        )

    async def unassign_role(self, course_id: int, user_id: int, role_id: int) -> None:
        await self.call(
            "core_role_unassign_roles",
            unassignments=[{
                "roleid": role_id,
                "userid": user_id,
                "contextlevel": COURSE_CONTEXT_LEVEL,
                "instanceid": course_id,
            }],
        )

    # =========================================================================
    # Grades
    # =========================================================================

    async def get_grade_items(self, course_id: int, user_id: int) -> list[GradeItem]:
        payload = await self.call(
            "gradereport_user_get_grade_items",
            courseid=course_id,
            userid=user_id,
        )
        items: list[GradeItem] = []
        for usergrade in (payload or {}).get("usergrades", []):
            for item in usergrade.get("gradeitems", []):
                items.append(
                    GradeItem(
                        item_type=item.get("itemtype", ""),
                        idnumber=item.get("idnumber") or None,
                        grade=item.get("graderaw"),
                    )
                )
        return items
