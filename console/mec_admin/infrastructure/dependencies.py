"""Dependency wiring — connects infrastructure adapters to the application layer."""

import httpx

from mec_admin.config import Settings, get_settings
from mec_admin.application.interfaces import AdminApi, ConfirmationGate, Notifier
from mec_admin.application.schemas import FORM_SCHEMAS
from mec_admin.application.services import (
    AssetLifecycleCoordinator,
    DashboardAggregator,
    EnquiryInbox,
    EntityPageController,
    EntityStore,
    NotificationPublisher,
    ReviewModerator,
)
from mec_admin.domain.entities import EntityType
from mec_admin.infrastructure.http import HttpAdminApi


def get_admin_api(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> HttpAdminApi:
    """Provides the HTTP adapter configured from settings."""
    settings = settings or get_settings()
    return HttpAdminApi(
        base_url=settings.api_base_url,
        api_token=settings.api_token,
        upload_field_name=settings.upload_field_name,
        timeout=settings.request_timeout,
        http_client=http_client,
    )


def build_stores(api: AdminApi) -> dict[EntityType, EntityStore]:
    """One store per entity type, each owning its own cached list."""
    return {
        entity_type: EntityStore(api, schema)
        for entity_type, schema in FORM_SCHEMAS.items()
    }


def build_pages(
    api: AdminApi,
    stores: dict[EntityType, EntityStore],
    publisher: NotificationPublisher,
    confirmation: ConfirmationGate,
) -> dict[EntityType, EntityPageController]:
    """One controller per entity screen, with the stores its reference fields use.

    Each page gets its own asset coordinator so an upload on one screen
    never blocks submits on another.
    """
    pages = {}
    for entity_type, store in stores.items():
        reference_stores = {
            field.reference: stores[field.reference]
            for field in store.schema.references
        }
        pages[entity_type] = EntityPageController(
            store=store,
            coordinator=AssetLifecycleCoordinator(api),
            publisher=publisher,
            confirmation=confirmation,
            reference_stores=reference_stores,
        )
    return pages


def build_review_moderator(
    stores: dict[EntityType, EntityStore], publisher: NotificationPublisher
) -> ReviewModerator:
    return ReviewModerator(stores[EntityType.REVIEWS], publisher)


def build_enquiry_inbox(
    stores: dict[EntityType, EntityStore], publisher: NotificationPublisher
) -> EnquiryInbox:
    return EnquiryInbox(stores[EntityType.ENQUIRIES], publisher)


def build_dashboard(api: AdminApi) -> DashboardAggregator:
    return DashboardAggregator(api)


def build_publisher(notifier: Notifier) -> NotificationPublisher:
    return NotificationPublisher(notifier)
