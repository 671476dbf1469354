"""Console composition root."""

import logging
from types import TracebackType

import httpx

from mec_admin.config import Settings, get_settings
from mec_admin.application.interfaces import AdminApi, ConfirmationGate, Notifier
from mec_admin.application.services import (
    DashboardAggregator,
    EnquiryInbox,
    EntityPageController,
    ReviewModerator,
)
from mec_admin.domain.entities import EntityType
from mec_admin.infrastructure.dependencies import (
    build_dashboard,
    build_enquiry_inbox,
    build_pages,
    build_publisher,
    build_review_moderator,
    build_stores,
    get_admin_api,
)
from mec_admin.infrastructure.interaction import LoggingNotifier, StaticConfirmationGate
from mec_admin.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


class AdminConsole:
    """Owns the HTTP client and every page of the console.

    Usage:
        async with AdminConsole() as console:
            await console.page(EntityType.CLIENTS).load()
            state = await console.dashboard.refresh()

    ``api`` may be injected (tests, alternative transports); otherwise an
    ``httpx.AsyncClient`` is opened on enter and closed on exit.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        api: AdminApi | None = None,
        notifier: Notifier | None = None,
        confirmation: ConfirmationGate | None = None,
    ):
        self.settings = settings or get_settings()
        self._injected_api = api
        self._http_client: httpx.AsyncClient | None = None
        self.notifier = notifier or LoggingNotifier()
        self.confirmation = confirmation or StaticConfirmationGate(answer=False)

        self.api: AdminApi | None = None
        self.pages: dict[EntityType, EntityPageController] = {}
        self.dashboard: DashboardAggregator | None = None
        self.reviews: ReviewModerator | None = None
        self.enquiries: EnquiryInbox | None = None

    async def __aenter__(self) -> "AdminConsole":
        setup_logging(self.settings)

        if self._injected_api is not None:
            self.api = self._injected_api
        else:
            self._http_client = httpx.AsyncClient(timeout=self.settings.request_timeout)
            self.api = get_admin_api(self.settings, http_client=self._http_client)

        publisher = build_publisher(self.notifier)
        stores = build_stores(self.api)
        self.pages = build_pages(self.api, stores, publisher, self.confirmation)
        self.reviews = build_review_moderator(stores, publisher)
        self.enquiries = build_enquiry_inbox(stores, publisher)
        self.dashboard = build_dashboard(self.api)

        logger.info(
            "%s v%s started (%s) against %s",
            self.settings.app_title,
            self.settings.app_version,
            self.settings.app_env,
            self.settings.api_base_url,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # Abandoned forms must not leave their uploads behind.
        for page in self.pages.values():
            if page.session.is_open:
                await page.cancel()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        logger.info("%s stopped", self.settings.app_title)

    def page(self, entity_type: EntityType | str) -> EntityPageController:
        return self.pages[EntityType(entity_type)]
