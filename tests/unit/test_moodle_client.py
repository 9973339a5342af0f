# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the Moodle web service client."""

from urllib.parse import parse_qs

import httpx
import pytest

from integracao.core.config import MoodleSettings, Settings
from integracao.domains.base import ErrorKind
from integracao.domains.course import CourseService
from integracao.infrastructure.database import MappingKind, MappingStore
from integracao.infrastructure.platform import (
    CourseData,
    MoodleClient,
    PlatformError,
    PlatformUnavailableError,
    UserData,
    flatten_params,
)
from integracao.models.course import CreateCourseRequest


class MoodleStub:
    """Records form posts and answers from a per-function table."""

    def __init__(self, responses: dict[str, object] | None = None) -> None:
        self.responses = responses or {}
        self.requests: list[dict[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
        self.requests.append(form)
        return httpx.Response(200, json=self.responses.get(form["wsfunction"]))

    def forms(self, function: str) -> list[dict[str, str]]:
        return [form for form in self.requests if form["wsfunction"] == function]


@pytest.fixture
def moodle_settings() -> MoodleSettings:
    return MoodleSettings(base_url="https://ava.example.edu", token="secret-token")  # type: ignore[arg-type]


def make_client(settings: MoodleSettings, handler) -> MoodleClient:
    return MoodleClient(settings, transport=httpx.MockTransport(handler))


class TestFlattenParams:
    """Tests for PHP-style form encoding."""

    def test_nested_structures(self) -> None:
        """Lists and dicts become bracketed keys."""
        flat = flatten_params({"courses": [{"id": 3, "format": "topics"}], "courseid": 7})

        assert flat == {
            "courses[0][id]": "3",
            "courses[0][format]": "topics",
            "courseid": "7",
        }

    def test_booleans_and_none(self) -> None:
        """Booleans are sent as 1/0 and None values are dropped."""
        flat = flatten_params({"users": [{"createpassword": True, "suspended": False, "city": None}]})

        assert flat == {"users[0][createpassword]": "1", "users[0][suspended]": "0"}


class TestMoodleClientCall:
    """Tests for the generic call()."""

    @pytest.mark.asyncio
    async def test_call_posts_token_and_function(self, moodle_settings) -> None:
        """Every call posts the token, the function and the JSON format."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        client = make_client(moodle_settings, handler)
        await client.call("core_webservice_get_site_info")
        await client.close()

        request = seen[0]
        form = parse_qs(request.content.decode())
        assert str(request.url) == "https://ava.example.edu/webservice/rest/server.php"
        assert form["wstoken"] == ["secret-token"]
        assert form["wsfunction"] == ["core_webservice_get_site_info"]
        assert form["moodlewsrestformat"] == ["json"]

    @pytest.mark.asyncio
    async def test_moodle_exception_raises_platform_error(self, moodle_settings) -> None:
        """An exception payload becomes PlatformError with its error code."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "exception": "invalid_parameter_exception",
                    "errorcode": "invalidparameter",
                    "message": "Valor inválido de parâmetro detectado",
                },
            )

        client = make_client(moodle_settings, handler)

        with pytest.raises(PlatformError) as exc_info:
            await client.call("core_course_create_courses")

        assert exc_info.value.error_code == "invalidparameter"
        assert exc_info.value.message == "Valor inválido de parâmetro detectado"

    @pytest.mark.asyncio
    async def test_http_error_raises_platform_error(self, moodle_settings) -> None:
        """Non-2xx answers are platform errors."""
        client = make_client(moodle_settings, lambda request: httpx.Response(500))

        with pytest.raises(PlatformError):
            await client.call("core_course_delete_courses")

    @pytest.mark.asyncio
    async def test_connection_error_raises_unavailable(self, moodle_settings) -> None:
        """Transport failures mean the platform is unavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(moodle_settings, handler)

        with pytest.raises(PlatformUnavailableError):
            await client.call("core_course_delete_courses")

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self, moodle_settings) -> None:
        """Functions without return value answer with an empty body."""
        client = make_client(moodle_settings, lambda request: httpx.Response(200))

        assert await client.call("enrol_manual_enrol_users") is None


class TestMoodleClientOperations:
    """Tests for the HostPlatform methods."""

    @pytest.mark.asyncio
    async def test_create_course(self, moodle_settings) -> None:
        """Course fields and the number of sections are sent."""
        stub = MoodleStub({"core_course_create_courses": [{"id": 77, "shortname": "TADS"}]})
        client = make_client(moodle_settings, stub)

        course_id = await client.create_course(
            CourseData(category=2, shortname="TADS", fullname="TADS 2025", numsections=4)
        )

        assert course_id == 77
        form = stub.forms("core_course_create_courses")[0]
        assert form["courses[0][categoryid]"] == "2"
        assert form["courses[0][courseformatoptions][0][name]"] == "numsections"
        assert form["courses[0][courseformatoptions][0][value]"] == "4"

    @pytest.mark.asyncio
    async def test_create_course_without_id(self, moodle_settings) -> None:
        """An empty create answer is an error."""
        client = make_client(moodle_settings, MoodleStub({"core_course_create_courses": []}))

        with pytest.raises(PlatformError):
            await client.create_course(CourseData(category=2, shortname="TADS", fullname="TADS"))

    @pytest.mark.asyncio
    async def test_create_section_names_it(self, moodle_settings) -> None:
        """The new section is renamed after creation."""
        stub = MoodleStub({"local_wsmanagesections_create_sections": [{"sectionid": 31, "sectionnumber": 5}]})
        client = make_client(moodle_settings, stub)

        section_id = await client.create_section(7, "Algoritmos")

        assert section_id == 31
        update = stub.forms("local_wsmanagesections_update_sections")[0]
        assert update["sections[0][section]"] == "31"
        assert update["sections[0][name]"] == "Algoritmos"

    @pytest.mark.asyncio
    async def test_find_user(self, moodle_settings) -> None:
        """Users are looked up by username."""
        stub = MoodleStub({
            "core_user_get_users_by_field": [{
                "id": 900,
                "username": "maria.silva",
                "firstname": "Maria",
                "lastname": "Silva",
                "email": "maria.silva@example.com",
            }]
        })
        client = make_client(moodle_settings, stub)

        user = await client.find_user("maria.silva")

        assert user.id == 900
        assert user.city is None
        form = stub.forms("core_user_get_users_by_field")[0]
        assert form["field"] == "username"
        assert form["values[0]"] == "maria.silva"

    @pytest.mark.asyncio
    async def test_find_missing_user(self, moodle_settings) -> None:
        """An empty lookup returns None."""
        client = make_client(moodle_settings, MoodleStub({"core_user_get_users_by_field": []}))

        assert await client.find_user("ninguem") is None

    @pytest.mark.asyncio
    async def test_create_user_without_password(self, moodle_settings) -> None:
        """Accounts without password ask Moodle to generate one."""
        stub = MoodleStub({"core_user_create_users": [{"id": 901, "username": "joao"}]})
        client = make_client(moodle_settings, stub)

        user_id = await client.create_user(
            UserData(username="joao", firstname="João", lastname="Souza", email="joao@example.com")
        )

        assert user_id == 901
        form = stub.forms("core_user_create_users")[0]
        assert form["users[0][auth]"] == "manual"
        assert form["users[0][createpassword]"] == "1"
        assert "users[0][password]" not in form

    @pytest.mark.asyncio
    async def test_enrol_user(self, moodle_settings) -> None:
        """Manual enrolment carries role, user and course."""
        stub = MoodleStub()
        client = make_client(moodle_settings, stub)

        await client.enrol_user(7, 900, 5)

        form = stub.forms("enrol_manual_enrol_users")[0]
        assert form["enrolments[0][roleid]"] == "5"
        assert form["enrolments[0][userid]"] == "900"
        assert form["enrolments[0][courseid]"] == "7"

    @pytest.mark.asyncio
    async def test_get_grade_items(self, moodle_settings) -> None:
        """Grade report items are parsed into GradeItem."""
        stub = MoodleStub({
            "gradereport_user_get_grade_items": {
                "usergrades": [{
                    "courseid": 7,
                    "userid": 900,
                    "gradeitems": [
                        {"itemtype": "manual", "idnumber": "ofd_1", "graderaw": 8.5},
                        {"itemtype": "course", "idnumber": "", "graderaw": None},
                    ],
                }]
            }
        })
        client = make_client(moodle_settings, stub)

        items = await client.get_grade_items(7, 900)

        assert [(i.item_type, i.idnumber, i.grade) for i in items] == [
            ("manual", "ofd_1", 8.5),
            ("course", None, None),
        ]


class TestMoodleClientInvalidAnswers:
    """Tests for answers that are not the expected JSON."""

    @pytest.mark.asyncio
    async def test_html_answer_raises_platform_error(self, moodle_settings) -> None:
        """A debug page instead of JSON is a platform error."""
        client = make_client(
            moodle_settings,
            lambda request: httpx.Response(200, text="<html>debug notice</html>"),
        )

        with pytest.raises(PlatformError) as exc_info:
            await client.call("core_course_create_courses")

        assert exc_info.value.message == "core_course_create_courses returned an invalid response"

    @pytest.mark.asyncio
    async def test_create_answer_without_objects(self, moodle_settings) -> None:
        """A list of scalars carries no created id."""
        client = make_client(moodle_settings, MoodleStub({"core_course_create_courses": [77]}))

        with pytest.raises(PlatformError):
            await client.create_course(CourseData(category=2, shortname="TADS", fullname="TADS"))

    @pytest.mark.asyncio
    async def test_html_answer_becomes_err(self, moodle_settings, db) -> None:
        """Services report a non-JSON answer as Err(platform) and map nothing."""
        client = make_client(
            moodle_settings,
            lambda request: httpx.Response(200, text="<html>debug notice</html>"),
        )
        service = CourseService(db, client, Settings(environment="development"))

        result = await service.create_course(
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

        assert not result.ok
        assert result.kind == ErrorKind.PLATFORM
        assert await MappingStore(db).resolve(MappingKind.COURSE, 42) is None
