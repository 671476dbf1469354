"""Abstract admin API interface — port for the remote console backend."""

from abc import ABC, abstractmethod
from typing import Any

from mec_admin.application.schemas.api import ApiResult, DashboardResult, UploadResult
from mec_admin.domain.entities import AssetFile, EntityType


class AdminApi(ABC):
    """Port — everything the console core needs from the backend.

    Implementations return envelopes with ``success`` set to False when
    the backend rejects a request, and raise ``httpx.HTTPError`` (or an
    equivalent transport exception) when the request could not be made.
    """

    @abstractmethod
    async def fetch_list(self, entity_type: EntityType) -> ApiResult:
        """Fetch every record of one entity type, in backend order."""
        ...

    @abstractmethod
    async def fetch_one(self, entity_type: EntityType, record_id: str) -> ApiResult:
        """Fetch a single record."""
        ...

    @abstractmethod
    async def create_record(
        self, entity_type: EntityType, payload: dict[str, Any]
    ) -> ApiResult:
        ...

    @abstractmethod
    async def update_record(
        self, entity_type: EntityType, record_id: str, payload: dict[str, Any]
    ) -> ApiResult:
        ...

    @abstractmethod
    async def delete_record(self, entity_type: EntityType, record_id: str) -> ApiResult:
        ...

    @abstractmethod
    async def delete_records(
        self, entity_type: EntityType, record_ids: list[str]
    ) -> ApiResult:
        """Delete several records in one call (bulk delete)."""
        ...

    @abstractmethod
    async def upload_asset(self, file: AssetFile) -> UploadResult:
        """Upload one media file; the result lists the stored URLs."""
        ...

    @abstractmethod
    async def delete_assets(self, urls: list[str]) -> ApiResult:
        """Remove previously uploaded media from storage."""
        ...

    @abstractmethod
    async def fetch_dashboard_summary(self) -> DashboardResult:
        """Fetch the combined counts for the dashboard."""
        ...
