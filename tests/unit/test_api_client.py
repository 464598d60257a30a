"""
Unit tests for the REST client used as create operation.
"""

import asyncio
import json
from datetime import date

import httpx
import pytest
from pydantic import ValidationError

from bulk_import.clients import ApiClient, ApiError
from bulk_import.entities import UserRecord


pytestmark = pytest.mark.unit


def _client(handler, **kwargs):
    return ApiClient(
        base_url="https://api.test/api",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestUserRecord:
    """Tests for the create-user payload model"""

    def test_blank_values_dropped(self):
        record = UserRecord.model_validate({
            "email": "a@x.com",
            "user_type": "FAMILIA",
            "full_name": "",
            "center_ids": [],
        })

        payload = record.model_dump(mode="json", exclude_none=True)

        assert payload == {"email": "a@x.com", "user_type": "FAMILIA"}

    def test_scalar_list_field_wrapped(self):
        record = UserRecord.model_validate({
            "email": "a@x.com",
            "user_type": "CLINICA",
            "center_ids": "CTR_001",
        })

        assert record.center_ids == ["CTR_001"]

    @pytest.mark.parametrize("value", ["17/05/2010", "2010-05-17"])
    def test_birth_date_formats(self, value):
        record = UserRecord.model_validate({
            "email": "a@x.com",
            "user_type": "FAMILIA",
            "birth_date": value,
        })

        assert record.birth_date == date(2010, 5, 17)

    def test_numbers_become_strings(self):
        record = UserRecord.model_validate({
            "email": "a@x.com",
            "user_type": "FAMILIA",
            "phone": 600123456,
        })

        assert record.phone == "600123456"

    def test_unknown_columns_passed_through(self):
        record = UserRecord.model_validate({
            "email": "a@x.com",
            "user_type": "FAMILIA",
            "tutor_legal": "Sí",
        })

        assert record.model_dump()["tutor_legal"] == "Sí"

    def test_unknown_user_type_rejected(self):
        with pytest.raises(ValidationError):
            UserRecord.model_validate({"email": "a@x.com", "user_type": "PROFESOR"})


class TestApiClient:
    """Tests for ApiClient"""

    def test_create_user_posts_payload(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"id": "u1"})

        async def run():
            async with _client(handler, token="secret") as api:
                return await api.users.create({
                    "email": "a@x.com",
                    "user_type": "ORIENTADOR",
                    "center_id": "CTR_001",
                    "allowed_groups": ["A", "B"],
                    "dni": "",
                })

        body = asyncio.run(run())

        assert body == {"id": "u1"}
        request = requests[0]
        assert request.method == "POST"
        assert request.url == "https://api.test/api/users"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {
            "email": "a@x.com",
            "user_type": "ORIENTADOR",
            "center_id": "CTR_001",
            "allowed_groups": ["A", "B"],
        }

    def test_error_response_raises_api_error(self):
        def handler(request):
            return httpx.Response(409, json={"error": {"message": "El email ya está registrado"}})

        async def run():
            async with _client(handler) as api:
                await api.users.create({"email": "a@x.com", "user_type": "FAMILIA"})

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(run())

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "El email ya está registrado"
        assert str(exc_info.value) == "409: El email ya está registrado"

    def test_error_without_json_body_uses_reason(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        async def run():
            async with _client(handler) as api:
                await api.post("/users", {})

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(run())

        assert exc_info.value.message == "Internal Server Error"

    def test_generic_resource_drops_blank_values(self):
        captured = []

        def handler(request):
            captured.append(json.loads(request.content))
            return httpx.Response(204)

        async def run():
            async with _client(handler) as api:
                return await api.resource("/alumnos").create({"email": "a@x.com", "group": ""})

        assert asyncio.run(run()) is None
        assert captured == [{"email": "a@x.com"}]

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://env.test/api")
        monkeypatch.setenv("API_TOKEN", "from-env")
        monkeypatch.setenv("API_TIMEOUT", "5")

        api = ApiClient()

        assert api.base_url == "https://env.test/api"
        assert api.token == "from-env"
        assert api.timeout == 5.0
        asyncio.run(api.aclose())
