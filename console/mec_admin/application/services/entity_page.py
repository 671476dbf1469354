"""Page-level use cases for one entity screen.

Composes an EntityStore, a FormSession, a SelectionSet and the asset
coordinator. Every public coroutine catches the console's typed errors at
its boundary and returns an ``OperationResult`` that has already been
handed to the notification adapter; nothing propagates to the page.
"""

import logging

from mec_admin.application.interfaces import ConfirmationGate
from mec_admin.application.services.asset_coordinator import AssetLifecycleCoordinator
from mec_admin.application.services.entity_store import EntityStore
from mec_admin.application.services.form_session import FormSession
from mec_admin.application.services.operation_result import (
    NotificationPublisher,
    OperationResult,
)
from mec_admin.application.services.selection_set import SelectionSet
from mec_admin.domain.entities import AssetFile, EntityType, Record, SlotRef
from mec_admin.domain.exceptions import (
    AssetReleaseError,
    FetchError,
    MutationError,
    NoSelectionError,
    SessionStateError,
    UploadError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class EntityPageController:
    """Use cases behind one entity screen (list, form, bulk selection)."""

    def __init__(
        self,
        store: EntityStore,
        coordinator: AssetLifecycleCoordinator,
        publisher: NotificationPublisher,
        confirmation: ConfirmationGate,
        reference_stores: dict[EntityType, EntityStore] | None = None,
    ):
        self.store = store
        self.schema = store.schema
        self.session = FormSession(store.schema)
        self.selection = SelectionSet()
        self._coordinator = coordinator
        self._publisher = publisher
        self._confirmation = confirmation
        self._reference_stores = reference_stores or {}
        store.attach_selection(self.selection)

    @property
    def loading(self) -> bool:
        return self.store.loading or self._coordinator.busy

    # ── List ────────────────────────────────────────────────────────

    async def load(self) -> OperationResult:
        """Refresh the list, plus the lists that reference fields choose from."""
        try:
            records = await self.store.refresh()
        except FetchError as exc:
            return self._publish(OperationResult.failure(exc.message))

        result = OperationResult.success(data=records)
        for entity_type, store in self._reference_stores.items():
            try:
                await store.refresh()
            except FetchError as exc:
                logger.warning("Could not load %s options: %s", entity_type.value, exc.message)
        return self._publish(result)

    def reference_options(self, field_name: str) -> list[Record]:
        """Records a reference field can point to (e.g. a project's client)."""
        target = self.schema.scalar(field_name).reference
        store = self._reference_stores.get(target) if target else None
        return store.records if store else []

    # ── Form ────────────────────────────────────────────────────────

    async def open_create(self) -> OperationResult:
        return await self._open(None)

    async def open_edit(self, record_id: str) -> OperationResult:
        record = self.store.get(record_id)
        if record is None:
            return self._publish(
                OperationResult.failure(f"{self.schema.label} is no longer in the list")
            )
        return await self._open(record)

    async def _open(self, record: Record | None) -> OperationResult:
        result = OperationResult.success(data=self.session)
        if self.session.is_open:
            # Re-opening abandons the current buffer and whatever it uploaded.
            try:
                await self._coordinator.discard(self.session)
            except AssetReleaseError as exc:
                result.warnings.append(exc.message)
        try:
            self.session.open(record)
        except SessionStateError as exc:
            return self._publish(OperationResult.failure(exc.message))
        return self._publish(result)

    async def remove_group_instance(self, group_name: str, index: int) -> OperationResult:
        if self._coordinator.busy:
            return self._publish(
                OperationResult.failure("Please wait for the image upload to finish")
            )
        try:
            removed = await self._coordinator.remove_group_instance(
                self.session, group_name, index
            )
        except (ValidationError, SessionStateError, AssetReleaseError) as exc:
            return self._publish(OperationResult.failure(exc.message))
        return OperationResult.success(data=removed)

    async def upload_asset(self, slot: SlotRef, file: AssetFile) -> OperationResult:
        try:
            reference = await self._coordinator.attach(self.session, slot, file)
        except (UploadError, SessionStateError) as exc:
            return self._publish(OperationResult.failure(exc.message))
        except AssetReleaseError as exc:
            result = OperationResult.success("Image uploaded successfully!")
            result.warnings.append(f"{exc.message} (previous image)")
            return self._publish(result)
        return self._publish(
            OperationResult.success("Image uploaded successfully!", data=reference)
        )

    async def remove_asset(self, slot: SlotRef) -> OperationResult:
        try:
            await self._coordinator.clear(self.session, slot)
        except (SessionStateError, AssetReleaseError) as exc:
            return self._publish(OperationResult.failure(exc.message))
        return self._publish(OperationResult.success("Image deleted successfully"))

    async def submit(self) -> OperationResult:
        """Validate, send, and on success close the form and refresh the list."""
        if self._coordinator.busy:
            return self._publish(
                OperationResult.failure("Please wait for the image upload to finish")
            )
        try:
            payload = self.session.begin_submit()
        except (ValidationError, SessionStateError) as exc:
            return self._publish(OperationResult.failure(exc.message))

        editing = self.session.is_editing
        try:
            if editing:
                outcome = await self.store.update(self.session.record_id, payload)
            else:
                outcome = await self.store.create(payload)
        except MutationError as exc:
            self.session.fail_submit()
            return self._publish(OperationResult.failure(exc.message))

        releasable = self.session.complete_submit()
        verb = "updated" if editing else "added"
        result = OperationResult.success(
            f"{self.schema.label} {verb} successfully!", data=outcome.record
        )
        failed = await self._coordinator.finish_submit(releasable)
        if failed:
            result.warnings.append(
                f"{len(failed)} replaced image(s) could not be removed from storage"
            )
        self._note_refresh_error(result)
        return self._publish(result)

    async def cancel(self) -> OperationResult:
        """Close the form, releasing anything uploaded in it."""
        try:
            await self._coordinator.discard(self.session)
        except AssetReleaseError as exc:
            return self._publish(OperationResult.failure(exc.message))
        return OperationResult.success()

    # ── Delete ──────────────────────────────────────────────────────

    async def delete(self, record_id: str) -> OperationResult:
        # The cached copy is what tells us which assets to release afterwards.
        if self.store.get(record_id) is None:
            return self._publish(
                OperationResult.failure(f"{self.schema.label} is no longer in the list")
            )
        label = self.schema.label.lower()
        if not await self._confirmation.confirm(f"Are you sure you want to delete this {label}?"):
            return OperationResult.failure(None)
        try:
            outcome = await self.store.delete(record_id)
        except MutationError as exc:
            return self._publish(OperationResult.failure(exc.message))

        result = OperationResult.success(f"{self.schema.label} deleted successfully")
        if outcome.record is not None:
            await self._release_deleted([outcome.record], result)
        self._note_refresh_error(result)
        return self._publish(result)

    # ── Bulk selection ──────────────────────────────────────────────

    def toggle_selection(self, record_id: str) -> bool:
        return self.selection.toggle(record_id)

    def set_all_selected(self, checked: bool) -> None:
        """Handler for the "select all" checkbox."""
        self.selection.select_all(self.store.ids if checked else None)

    @property
    def all_selected(self) -> bool:
        return self.selection.is_all_selected(self.store.ids)

    async def bulk_delete(self) -> OperationResult:
        try:
            self.store.require_selection(self.selection)
        except NoSelectionError as exc:
            return self._publish(OperationResult.failure(exc.message))
        if not await self._confirmation.confirm(
            f"Are you sure you want to delete selected {self.schema.plural}?"
        ):
            return OperationResult.failure(None)
        try:
            evicted = await self.store.delete_selected(self.selection)
        except (NoSelectionError, MutationError) as exc:
            return self._publish(OperationResult.failure(exc.message))

        result = OperationResult.success(
            f"{self.schema.plural.capitalize()} deleted successfully", data=evicted
        )
        await self._release_deleted(evicted, result)
        self._note_refresh_error(result)
        return self._publish(result)

    # ── Helpers ─────────────────────────────────────────────────────

    async def _release_deleted(self, records: list[Record], result: OperationResult) -> None:
        # Best effort: a failed release never rolls back the deletion.
        failed: list[str] = []
        for record in records:
            failed.extend(await self._coordinator.release_record_assets(self.schema, record))
        if failed:
            logger.warning("Deleted %s but could not release %s", self.schema.plural, failed)
            result.warnings.append(
                f"{self.schema.label} deleted, but {len(failed)} image(s) could not be removed"
            )

    def _note_refresh_error(self, result: OperationResult) -> None:
        if self.store.refresh_error is not None:
            result.warnings.append(self.store.refresh_error.message)

    def _publish(self, result: OperationResult) -> OperationResult:
        if not result.ok and result.message:
            logger.info("%s page: %s", self.schema.label, result.message)
        return self._publisher.publish(result)

