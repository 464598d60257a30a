"""
Thin async REST client providing the create operation for imported records.
"""

import os
from typing import Any

import httpx
from pydantic import BaseModel

from bulk_import.core.models import RawRecord, is_blank
from bulk_import.entities import USERS, EntityDefinition
from bulk_import.observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000/api"


class ApiError(Exception):
    """Raised when the backend rejects a request."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    """Extract the backend's error text ({"error": {"message": ...}}) when present."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or response.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("message"):
            return str(body["message"])
    return response.reason_phrase or response.text


class ResourceClient:
    """Create operation for one REST collection."""

    def __init__(self, api: "ApiClient", path: str, record_model: type[BaseModel] | None = None):
        self.api = api
        self.path = path
        self.record_model = record_model

    def to_payload(self, record: RawRecord) -> dict[str, Any]:
        """
        Convert a raw record into the JSON body for the create call.

        Raises:
            pydantic.ValidationError: If the record does not fit the record model
        """
        if self.record_model is not None:
            return self.record_model.model_validate(record).model_dump(mode="json", exclude_none=True)
        return {key: value for key, value in record.items() if not is_blank(value)}

    async def create(self, record: RawRecord) -> Any:
        return await self.api.post(self.path, self.to_payload(record))


class ApiClient:
    """
    Async client for the platform's REST backend.

    Usage:
        async with ApiClient() as api:
            await api.users.create({"email": "...", "user_type": "FAMILIA"})
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: API root (defaults to env var API_BASE_URL)
            token: Bearer token (defaults to env var API_TOKEN)
            timeout: Request timeout in seconds (defaults to env var API_TIMEOUT or 30)
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url or os.getenv("API_BASE_URL", DEFAULT_BASE_URL)
        self.token = token or os.getenv("API_TOKEN")
        self.timeout = timeout or float(os.getenv("API_TIMEOUT", "30"))

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )
        self.users = self.for_entity(USERS)

    def resource(self, path: str, record_model: type[BaseModel] | None = None) -> ResourceClient:
        return ResourceClient(self, path, record_model)

    def for_entity(self, entity: EntityDefinition) -> ResourceClient:
        return self.resource(entity.resource, entity.record_model)

    async def post(self, path: str, payload: dict[str, Any]) -> Any:
        """
        POST a JSON payload.

        Returns:
            Decoded JSON response body, or None when empty

        Raises:
            ApiError: On a 4xx/5xx response
            httpx.HTTPError: On transport failures
        """
        response = await self._client.post(path, json=payload)
        if response.is_error:
            message = _error_message(response)
            logger.warning(
                f"API rejected POST {path}: {message}",
                extra={"status_code": response.status_code, "path": path},
            )
            raise ApiError(response.status_code, message)
        return response.json() if response.content else None

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
