"""In-memory fakes for the console ports."""

import copy
import itertools
from dataclasses import dataclass, field
from typing import Any

from mec_admin.application.interfaces import AdminApi, Notifier
from mec_admin.application.schemas import (
    ApiResult,
    DashboardResult,
    DashboardSummary,
    UploadedFile,
    UploadResult,
)
from mec_admin.domain.entities import AssetFile, EntityType


class FakeAdminApi(AdminApi):
    """In-memory backend for unit testing.

    ``fail(op, ...)`` makes the next call to ``op`` either return a
    ``success=False`` envelope with ``message`` or raise ``exc``.
    """

    def __init__(self):
        self.documents: dict[EntityType, list[dict[str, Any]]] = {t: [] for t in EntityType}
        self.wrapped_lists: set[EntityType] = set()
        self.live_assets: set[str] = set()
        self.released: list[str] = []
        self.calls: list[str] = []
        self.payloads: list[dict[str, Any]] = []
        self.dashboard: dict[str, Any] = {}
        self._failures: dict[str, tuple[str | None, BaseException | None]] = {}
        self._ids = itertools.count(1)
        self._uploads = itertools.count(1)

    # ── Test helpers ──

    def seed(self, entity_type: EntityType, *documents: dict[str, Any]) -> list[str]:
        ids = []
        for document in documents:
            document = dict(document)
            document.setdefault("_id", f"{entity_type.value}-{next(self._ids)}")
            self.documents[entity_type].append(document)
            ids.append(document["_id"])
        return ids

    def seed_asset(self, url: str) -> str:
        self.live_assets.add(url)
        return url

    def fail(self, op: str, message: str | None = None, exc: BaseException | None = None) -> None:
        self._failures[op] = (message, exc)

    def count(self, op: str) -> int:
        return self.calls.count(op)

    def _enter(self, op: str) -> tuple[bool, str | None]:
        self.calls.append(op)
        if op not in self._failures:
            return False, None
        message, exc = self._failures.pop(op)
        if exc is not None:
            raise exc
        return True, message

    def _find(self, entity_type: EntityType, record_id: str) -> dict[str, Any] | None:
        for document in self.documents[entity_type]:
            if document["_id"] == record_id:
                return document
        return None

    # ── AdminApi ──

    async def fetch_list(self, entity_type: EntityType) -> ApiResult:
        failed, message = self._enter("fetch_list")
        if failed:
            return ApiResult(success=False, message=message)
        documents = copy.deepcopy(self.documents[entity_type])
        if entity_type in self.wrapped_lists:
            return ApiResult(success=True, data={entity_type.value: documents})
        return ApiResult(success=True, data=documents)

    async def fetch_one(self, entity_type: EntityType, record_id: str) -> ApiResult:
        failed, message = self._enter("fetch_one")
        document = self._find(entity_type, record_id)
        if failed or document is None:
            return ApiResult(success=False, message=message or "Not found")
        return ApiResult(success=True, data=copy.deepcopy(document))

    async def create_record(self, entity_type: EntityType, payload: dict[str, Any]) -> ApiResult:
        failed, message = self._enter("create_record")
        self.payloads.append(copy.deepcopy(payload))
        if failed:
            return ApiResult(success=False, message=message)
        document = {"_id": f"{entity_type.value}-{next(self._ids)}", **copy.deepcopy(payload)}
        self.documents[entity_type].append(document)
        return ApiResult(success=True, message="Created", data=copy.deepcopy(document))

    async def update_record(
        self, entity_type: EntityType, record_id: str, payload: dict[str, Any]
    ) -> ApiResult:
        failed, message = self._enter("update_record")
        self.payloads.append(copy.deepcopy(payload))
        document = self._find(entity_type, record_id)
        if failed or document is None:
            return ApiResult(success=False, message=message or "Not found")
        document.update(copy.deepcopy(payload))
        return ApiResult(success=True, message="Updated", data=copy.deepcopy(document))

    async def delete_record(self, entity_type: EntityType, record_id: str) -> ApiResult:
        failed, message = self._enter("delete_record")
        document = self._find(entity_type, record_id)
        if failed or document is None:
            return ApiResult(success=False, message=message)
        self.documents[entity_type].remove(document)
        return ApiResult(success=True, message="Deleted")

    async def delete_records(self, entity_type: EntityType, record_ids: list[str]) -> ApiResult:
        failed, message = self._enter("delete_records")
        if failed:
            return ApiResult(success=False, message=message)
        gone = set(record_ids)
        self.documents[entity_type] = [
            d for d in self.documents[entity_type] if d["_id"] not in gone
        ]
        return ApiResult(success=True, message="Deleted")

    async def upload_asset(self, file: AssetFile) -> UploadResult:
        failed, message = self._enter("upload_asset")
        if failed:
            return UploadResult(success=False, message=message)
        url = f"https://cdn.test/{next(self._uploads)}-{file.filename}"
        self.live_assets.add(url)
        return UploadResult(success=True, files=[UploadedFile(url=url)])

    async def delete_assets(self, urls: list[str]) -> ApiResult:
        failed, message = self._enter("delete_assets")
        if failed:
            return ApiResult(success=False, message=message)
        for url in urls:
            self.live_assets.discard(url)
            self.released.append(url)
        return ApiResult(success=True)

    async def fetch_dashboard_summary(self) -> DashboardResult:
        failed, message = self._enter("fetch_dashboard_summary")
        if failed:
            return DashboardResult(success=False, message=message)
        return DashboardResult(success=True, data=DashboardSummary(**self.dashboard))


def image(name: str = "photo.png") -> AssetFile:
    return AssetFile(filename=name, content=b"\x89PNG fake", content_type="image/png")


@dataclass
class RecordingNotifier(Notifier):
    """Keeps notifications in memory so tests can assert on them."""

    successes: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    def notify_success(self, message: str) -> None:
        self.successes.append(message)

    def notify_failure(self, message: str) -> None:
        self.failures.append(message)
