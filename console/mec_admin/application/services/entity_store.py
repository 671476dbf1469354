"""Cached list of one entity type, kept consistent with the backend."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import httpx

from mec_admin.application.interfaces import AdminApi
from mec_admin.application.schemas.api import ApiResult
from mec_admin.application.services.selection_set import SelectionSet
from mec_admin.domain.entities import EntityFormSchema, EntityType, Record
from mec_admin.domain.exceptions import FetchError, MutationError, NoSelectionError
from mec_admin.infrastructure.logging.colored_logger import ActivityLogger, ActivityStage

logger = logging.getLogger(__name__)
alog = ActivityLogger("EntityStore")

_GENERIC_MUTATION_FAILURE = "Operation failed"


@dataclass
class MutationOutcome:
    """Result of a successful create/update/delete.

    ``record`` is the document echoed by the backend (create/update) or
    the evicted cache entry (delete), when one is available.
    """

    record: Record | None = None
    message: str | None = None


class EntityStore:
    """Owns the cached list for one entity type.

    The backend is the single source of truth: every successful mutation
    is followed by a full refresh instead of merging the returned record.
    A refresh that fails right after a successful mutation does not undo
    the mutation; it is kept on ``refresh_error`` for the caller to report.
    """

    def __init__(self, api: AdminApi, schema: EntityFormSchema):
        self._api = api
        self.schema = schema
        self._records: list[Record] = []
        self._pending = 0
        self._selections: list[SelectionSet] = []
        self.loaded = False
        self.refresh_error: FetchError | None = None

    @property
    def entity_type(self) -> EntityType:
        return self.schema.entity_type

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    @property
    def ids(self) -> list[str]:
        return [record.id for record in self._records]

    @property
    def loading(self) -> bool:
        return self._pending > 0

    def get(self, record_id: str) -> Record | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def attach_selection(self, selection: SelectionSet) -> None:
        """Keep ``selection`` a subset of the cached ids from now on."""
        self._selections.append(selection)
        selection.retain(self.ids)

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    # ── Reads ───────────────────────────────────────────────────────

    async def refresh(self) -> list[Record]:
        """Replace the cache with the backend's list, in backend order."""
        default_message = f"Failed to fetch {self.schema.plural}"
        with self._busy(), alog.timed_step(ActivityStage.FETCH, f"Loading {self.schema.plural}"):
            try:
                result = await self._api.fetch_list(self.entity_type)
            except httpx.HTTPError as exc:
                raise FetchError(self.entity_type.value, default_message) from exc
            if not result.success:
                raise FetchError(self.entity_type.value, result.message or default_message)
            records = self._parse_list(result.data)

        self._records = records
        self.loaded = True
        for selection in self._selections:
            selection.retain(self.ids)
        alog.detail(f"{len(records)} {self.schema.plural} cached")
        return list(records)

    async def fetch_one(self, record_id: str) -> Record:
        """Load one record for a detail view. The cache is not touched."""
        default_message = f"Failed to load {self.schema.label.lower()}"
        with self._busy():
            try:
                result = await self._api.fetch_one(self.entity_type, record_id)
            except httpx.HTTPError as exc:
                raise FetchError(self.entity_type.value, default_message) from exc
        if not result.success or not isinstance(result.data, dict):
            raise FetchError(self.entity_type.value, result.message or default_message)
        try:
            return Record.from_wire(result.data)
        except ValueError as exc:
            raise FetchError(self.entity_type.value, default_message) from exc

    def _parse_list(self, data: Any) -> list[Record]:
        # Some list routes wrap the array, e.g. {"subscribers": [...]}.
        if isinstance(data, dict):
            data = data.get(self.schema.plural)
        if not isinstance(data, list):
            return []
        try:
            return [Record.from_wire(document) for document in data]
        except (TypeError, ValueError, AttributeError) as exc:
            raise FetchError(
                self.entity_type.value, f"Malformed {self.schema.plural} list from backend"
            ) from exc

    # ── Mutations ───────────────────────────────────────────────────

    async def create(self, payload: dict[str, Any]) -> MutationOutcome:
        with self._busy(), alog.timed_step(ActivityStage.CREATE, f"Creating {self.schema.label.lower()}"):
            result = await self._send(self._api.create_record(self.entity_type, payload))
        outcome = MutationOutcome(record=_echoed_record(result), message=result.message)
        await self._refresh_after_mutation()
        return outcome

    async def update(self, record_id: str, payload: dict[str, Any]) -> MutationOutcome:
        with self._busy(), alog.timed_step(
            ActivityStage.UPDATE, f"Updating {self.schema.label.lower()}", id=record_id
        ):
            result = await self._send(
                self._api.update_record(self.entity_type, record_id, payload)
            )
        outcome = MutationOutcome(record=_echoed_record(result), message=result.message)
        await self._refresh_after_mutation()
        return outcome

    async def delete(self, record_id: str) -> MutationOutcome:
        """Delete one record. Confirmation is the caller's concern."""
        evicted = self.get(record_id)
        with self._busy(), alog.timed_step(
            ActivityStage.DELETE, f"Deleting {self.schema.label.lower()}", id=record_id
        ):
            result = await self._send(
                self._api.delete_record(self.entity_type, record_id),
                fallback=f"Failed to delete {self.schema.label.lower()}",
            )
        self._evict([record_id])
        await self._refresh_after_mutation()
        return MutationOutcome(record=evicted, message=result.message)

    async def delete_selected(self, selection: SelectionSet) -> list[Record]:
        """Bulk-delete every selected id; clears ``selection`` on success.

        Returns the cache entries that were evicted.
        """
        self.require_selection(selection)
        record_ids = selection.ids
        evicted = [record for record in self._records if record.id in selection]
        with self._busy(), alog.timed_step(
            ActivityStage.DELETE, f"Deleting {len(record_ids)} {self.schema.plural}"
        ):
            await self._send(
                self._api.delete_records(self.entity_type, record_ids),
                fallback=f"Failed to delete {self.schema.plural}",
            )
        selection.clear()
        self._evict(record_ids)
        await self._refresh_after_mutation()
        return evicted

    def require_selection(self, selection: SelectionSet) -> None:
        if not selection:
            raise NoSelectionError(
                f"Please select at least one {self.schema.label.lower()} to delete."
            )

    async def _send(self, request, fallback: str = _GENERIC_MUTATION_FAILURE) -> ApiResult:
        try:
            result = await request
        except httpx.HTTPError as exc:
            raise MutationError(self.entity_type.value, fallback) from exc
        if not result.success:
            raise MutationError(self.entity_type.value, result.message or fallback)
        return result

    def _evict(self, record_ids: list[str]) -> None:
        gone = set(record_ids)
        self._records = [record for record in self._records if record.id not in gone]
        for selection in self._selections:
            for record_id in gone:
                selection.discard(record_id)

    async def _refresh_after_mutation(self) -> None:
        self.refresh_error = None
        try:
            await self.refresh()
        except FetchError as exc:
            self.refresh_error = exc
            alog.warning(
                f"Refresh after mutation failed; showing the last known {self.schema.plural}",
                reason=exc.message,
            )


def _echoed_record(result: ApiResult) -> Record | None:
    if isinstance(result.data, dict) and ("_id" in result.data or "id" in result.data):
        return Record.from_wire(result.data)
    return None
