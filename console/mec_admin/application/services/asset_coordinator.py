"""Uploads and releases media assets bound to form slots."""

import logging

import httpx

from mec_admin.application.interfaces import AdminApi
from mec_admin.application.services.form_session import FormSession
from mec_admin.domain.entities import AssetFile, EntityFormSchema, GroupInstance, Record, SlotRef
from mec_admin.domain.exceptions import AssetReleaseError, UploadError
from mec_admin.infrastructure.logging.colored_logger import ActivityLogger, ActivityStage

logger = logging.getLogger(__name__)
alog = ActivityLogger("AssetLifecycleCoordinator")


class AssetLifecycleCoordinator:
    """Keeps every uploaded asset owned by exactly one slot.

    Replacing the occupant of a slot releases the previous reference
    automatically. References uploaded in the current session are released
    immediately; references that came from the persisted record are queued
    on the session and released once the submit has succeeded.
    """

    def __init__(self, api: AdminApi):
        self._api = api
        self._in_flight = 0

    @property
    def busy(self) -> bool:
        """True while an upload or release is awaiting the backend."""
        return self._in_flight > 0

    # ── Raw operations ──────────────────────────────────────────────

    async def upload(self, file: AssetFile) -> str:
        """Upload one file and return its reference."""
        self._in_flight += 1
        try:
            with alog.timed_step(ActivityStage.UPLOAD, f"Uploading {file.filename}", size_bytes=file.size):
                try:
                    result = await self._api.upload_asset(file)
                except httpx.HTTPError as exc:
                    raise UploadError("Image upload failed!") from exc
                if not result.success or not result.files:
                    raise UploadError(result.message or "Upload failed!")
                return result.files[0].url
        finally:
            self._in_flight -= 1

    async def release(self, reference: str) -> None:
        """Release one reference; raises ``AssetReleaseError`` on failure.

        Callers must treat the slot as empty whether or not this succeeds.
        """
        failed = await self.release_best_effort([reference])
        if failed:
            raise AssetReleaseError(failed)

    async def release_best_effort(self, references: list[str]) -> list[str]:
        """Release several references in one call and return the ones that failed."""
        references = [ref for ref in references if ref]
        if not references:
            return []

        self._in_flight += 1
        try:
            alog.step_start(ActivityStage.RELEASE, f"Releasing {len(references)} asset(s)")
            try:
                result = await self._api.delete_assets(references)
            except httpx.HTTPError as exc:
                alog.step_error(ActivityStage.RELEASE, "Asset release failed", error=exc)
                return references
            if not result.success:
                alog.step_error(
                    ActivityStage.RELEASE,
                    f"Backend refused to release assets: {result.message or 'no message'}",
                )
                return references
            alog.step_complete(ActivityStage.RELEASE, f"Released {len(references)} asset(s)")
            return []
        finally:
            self._in_flight -= 1

    # ── Slot operations ─────────────────────────────────────────────

    async def attach(self, session: FormSession, slot: SlotRef, file: AssetFile) -> str:
        """Upload ``file`` into ``slot``, releasing whatever it displaces.

        If the upload fails the slot keeps its previous reference. If the
        session was closed or re-opened while the upload was in flight, or
        the slot's group lost an instance so the address may point elsewhere,
        the new reference is released instead of assigned.
        """
        session.asset(slot)
        epoch, revision = session.slot_version(slot)
        reference = await self.upload(file)

        if session.epoch != epoch or not session.is_open:
            logger.warning("Form closed during upload of %s; releasing %s", file.filename, reference)
            await self.release_best_effort([reference])
            raise UploadError("The form was closed before the upload finished")
        if session.slot_version(slot) != (epoch, revision):
            logger.warning(
                "%s changed during upload of %s; releasing %s", slot.group, file.filename, reference
            )
            await self.release_best_effort([reference])
            raise UploadError("The block was removed before the upload finished")

        displaced = session.assign_asset(slot, reference)
        if displaced and displaced != reference:
            await self._displace(session, [displaced])
        return reference

    async def clear(self, session: FormSession, slot: SlotRef) -> None:
        """Empty ``slot``. The slot is empty afterwards even if the release fails."""
        displaced = session.clear_asset(slot)
        if displaced:
            await self._displace(session, [displaced])

    async def remove_group_instance(
        self, session: FormSession, group_name: str, index: int
    ) -> GroupInstance:
        """Remove a group instance and release the assets it held."""
        removed = session.remove_group_instance(group_name, index)
        group = session.schema.group(group_name)
        displaced = [removed[name] for name in group.asset_fields if removed.get(name)]
        if displaced:
            await self._displace(session, displaced)
        return removed

    async def discard(self, session: FormSession) -> None:
        """Close ``session`` and release every asset it uploaded and never submitted."""
        orphans = session.session_uploads_in_buffer()
        session.close()
        if orphans:
            failed = await self.release_best_effort(orphans)
            if failed:
                raise AssetReleaseError(failed, "Some uploaded images could not be removed")

    async def finish_submit(self, releasable: list[str]) -> list[str]:
        """Release originals displaced during a session that has now been saved."""
        return await self.release_best_effort(releasable)

    async def release_record_assets(self, schema: EntityFormSchema, record: Record) -> list[str]:
        """Release the assets of a deleted record; returns the references that failed."""
        return await self.release_best_effort(schema.asset_refs(record))

    async def _displace(self, session: FormSession, references: list[str]) -> None:
        immediate = []
        for reference in references:
            if session.owns_upload(reference):
                session.disown(reference)
                immediate.append(reference)
            else:
                session.defer_release(reference)
        if immediate:
            failed = await self.release_best_effort(immediate)
            if failed:
                raise AssetReleaseError(failed)
