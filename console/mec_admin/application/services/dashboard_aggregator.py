"""Dashboard aggregation — one combined summary turned into display metrics."""

import logging

import httpx

from mec_admin.application.interfaces import AdminApi
from mec_admin.domain.entities import DashboardSnapshot, DashboardState
from mec_admin.infrastructure.logging.colored_logger import ActivityLogger, ActivityStage

logger = logging.getLogger(__name__)
alog = ActivityLogger("DashboardAggregator")

_FAILURE_MESSAGE = "Failed to load dashboard statistics"


class DashboardAggregator:
    """Fetches the dashboard summary as a unit and keeps the last good snapshot.

    A failed fetch never raises: the previous snapshot stays in place and
    the state is flagged ``stale`` with the error message. Before the first
    success the state simply has no snapshot.
    """

    def __init__(self, api: AdminApi):
        self._api = api
        self.state = DashboardState()

    async def refresh(self) -> DashboardState:
        self.state.loading = True
        try:
            snapshot = await self._fetch()
        finally:
            self.state.loading = False

        if snapshot is None:
            self.state.stale = self.state.snapshot is not None
            self.state.error = _FAILURE_MESSAGE
        else:
            self.state.snapshot = snapshot
            self.state.stale = False
            self.state.error = None
        return self.state

    async def snapshot(self) -> DashboardSnapshot | None:
        """Refresh and return the snapshot to display (possibly the previous one)."""
        return (await self.refresh()).snapshot

    async def _fetch(self) -> DashboardSnapshot | None:
        alog.step_start(ActivityStage.DASHBOARD, "Fetching dashboard summary")
        try:
            result = await self._api.fetch_dashboard_summary()
        except httpx.HTTPError as exc:
            alog.step_error(ActivityStage.DASHBOARD, "Dashboard fetch failed", error=exc)
            return None

        if not result.success or result.data is None:
            alog.step_error(
                ActivityStage.DASHBOARD,
                f"Dashboard fetch rejected: {result.message or 'no data'}",
            )
            return None

        snapshot = DashboardSnapshot(counts_by_domain=result.data.model_dump())
        alog.step_complete(ActivityStage.DASHBOARD, "Dashboard summary loaded")
        return snapshot
