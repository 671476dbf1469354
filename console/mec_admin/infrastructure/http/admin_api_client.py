"""HTTP admin API client — implements the AdminApi interface.

Talks to the console backend over JSON using httpx. Every route answers
with a ``{success, message?, data?}`` envelope; non-2xx responses are
turned into ``success=False`` envelopes carrying the backend message, and
transport failures propagate as ``httpx.HTTPError``.
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from mec_admin.application.interfaces.admin_api import AdminApi
from mec_admin.application.schemas.api import ApiResult, DashboardResult, UploadResult
from mec_admin.domain.entities import AssetFile, EntityType

logger = logging.getLogger(__name__)

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)

UPLOAD_PATH = "/upload"
DASHBOARD_PATH = "/dashboard"


class HttpAdminApi(AdminApi):
    """Infrastructure adapter — connects to the admin REST API.

    Routes:
        GET    /{entity}            list
        GET    /{entity}/{id}       detail
        POST   /{entity}            create
        PUT    /{entity}/{id}       update
        DELETE /{entity}/{id}       delete one
        DELETE /{entity}            bulk delete, body {"ids": [...]}
        POST   /upload              multipart upload
        DELETE /upload              body {"urls": [...]}
        GET    /dashboard           combined counts
    """

    def __init__(
        self,
        base_url: str,
        api_token: str = "",
        upload_field_name: str = "images",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._upload_field_name = upload_field_name
        self._timeout = timeout
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        method: str,
        path: str,
        envelope: type[EnvelopeT],
        *,
        json: Any = None,
        files: dict[str, Any] | None = None,
    ) -> EnvelopeT:
        url = f"{self._base_url}{path}"
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.request(
                method, url, headers=self._get_headers(), json=json, files=files
            )
        finally:
            if should_close:
                await client.aclose()

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return self._parse_envelope(response, envelope)

    @staticmethod
    def _parse_envelope(response: httpx.Response, envelope: type[EnvelopeT]) -> EnvelopeT:
        """Validate the JSON body; anything unusable becomes ``success=False``."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            logger.warning("Non-JSON response (%d) from %s", response.status_code, response.url)
            return envelope.model_validate(
                {"success": False, "message": f"Unexpected response ({response.status_code})"}
            )

        if response.is_error:
            message = body.get("message") or body.get("error") or f"HTTP {response.status_code}"
            return envelope.model_validate({"success": False, "message": str(message)})

        try:
            return envelope.model_validate(body)
        except PydanticValidationError as exc:
            logger.warning("Malformed envelope from %s: %s", response.url, exc)
            return envelope.model_validate(
                {"success": False, "message": "Malformed response from server"}
            )

    # ── Records ─────────────────────────────────────────────────────

    async def fetch_list(self, entity_type: EntityType) -> ApiResult:
        return await self._request("GET", f"/{entity_type.value}", ApiResult)

    async def fetch_one(self, entity_type: EntityType, record_id: str) -> ApiResult:
        return await self._request("GET", f"/{entity_type.value}/{record_id}", ApiResult)

    async def create_record(
        self, entity_type: EntityType, payload: dict[str, Any]
    ) -> ApiResult:
        return await self._request("POST", f"/{entity_type.value}", ApiResult, json=payload)

    async def update_record(
        self, entity_type: EntityType, record_id: str, payload: dict[str, Any]
    ) -> ApiResult:
        return await self._request(
            "PUT", f"/{entity_type.value}/{record_id}", ApiResult, json=payload
        )

    async def delete_record(self, entity_type: EntityType, record_id: str) -> ApiResult:
        return await self._request("DELETE", f"/{entity_type.value}/{record_id}", ApiResult)

    async def delete_records(
        self, entity_type: EntityType, record_ids: list[str]
    ) -> ApiResult:
        return await self._request(
            "DELETE", f"/{entity_type.value}", ApiResult, json={"ids": list(record_ids)}
        )

    # ── Media ───────────────────────────────────────────────────────

    async def upload_asset(self, file: AssetFile) -> UploadResult:
        files = {self._upload_field_name: (file.filename, file.content, file.mime_type)}
        return await self._request("POST", UPLOAD_PATH, UploadResult, files=files)

    async def delete_assets(self, urls: list[str]) -> ApiResult:
        return await self._request("DELETE", UPLOAD_PATH, ApiResult, json={"urls": list(urls)})

    # ── Dashboard ───────────────────────────────────────────────────

    async def fetch_dashboard_summary(self) -> DashboardResult:
        return await self._request("GET", DASHBOARD_PATH, DashboardResult)
