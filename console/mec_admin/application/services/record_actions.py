"""Single-record actions outside the form flow: review verification and enquiry reading."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from mec_admin.application.services.entity_store import EntityStore
from mec_admin.application.services.operation_result import (
    NotificationPublisher,
    OperationResult,
)
from mec_admin.domain.entities import EntityType
from mec_admin.domain.exceptions import FetchError, MutationError

logger = logging.getLogger(__name__)


class ReviewModerator:
    """Flips the ``is_verified`` flag of a cached review."""

    def __init__(self, store: EntityStore, publisher: NotificationPublisher):
        if store.entity_type != EntityType.REVIEWS:
            raise ValueError("ReviewModerator needs the reviews store")
        self._store = store
        self._publisher = publisher

    async def toggle_verified(self, review_id: str) -> OperationResult:
        review = self._store.get(review_id)
        if review is None:
            return self._publisher.publish(
                OperationResult.failure("Review is no longer in the list")
            )

        was_verified = bool(review.get("is_verified"))
        try:
            await self._store.update(review_id, {"is_verified": not was_verified})
        except MutationError as exc:
            return self._publisher.publish(OperationResult.failure(exc.message))

        result = OperationResult.success(
            "Marked as Unverified" if was_verified else "Marked as Verified"
        )
        if self._store.refresh_error is not None:
            result.warnings.append(self._store.refresh_error.message)
        return self._publisher.publish(result)


class EnquiryInbox:
    """Opens one enquiry and records the first time it was read."""

    def __init__(
        self,
        store: EntityStore,
        publisher: NotificationPublisher,
        clock: Callable[[], datetime] | None = None,
    ):
        if store.entity_type != EntityType.ENQUIRIES:
            raise ValueError("EnquiryInbox needs the enquiries store")
        self._store = store
        self._publisher = publisher
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def open(self, enquiry_id: str) -> OperationResult:
        """Load the enquiry; mark it opened if this is the first view.

        The returned data is the enquiry as loaded, before the mark. A
        failed mark is reported as a warning, the enquiry is still shown.
        """
        try:
            enquiry = await self._store.fetch_one(enquiry_id)
        except FetchError as exc:
            return self._publisher.publish(OperationResult.failure(exc.message))

        result = OperationResult.success(data=enquiry)
        if not enquiry.get("is_opened"):
            opened_at = self._clock().isoformat()
            try:
                await self._store.update(
                    enquiry_id, {"is_opened": True, "opened_at": opened_at}
                )
            except MutationError as exc:
                logger.warning("Could not mark enquiry %s as opened: %s", enquiry_id, exc.message)
                result.warnings.append(exc.message)
        return self._publisher.publish(result)
