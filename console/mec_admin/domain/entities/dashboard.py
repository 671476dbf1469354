"""Domain entities for the dashboard — point-in-time counts and derived metrics."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# Placeholder "last month" offsets. These are not historical data: the
# backend keeps no snapshots, so the chart shows current minus a constant.
# Replace with a real history query once one exists.
LAST_MONTH_PLACEHOLDER_OFFSETS: dict[str, int] = {
    "Subscribers": 5,
    "Clients": 2,
    "Projects": 1,
    "Reviews": 3,
}


@dataclass(frozen=True)
class MetricCard:
    """One summary tile on the dashboard."""

    label: str
    value: int
    route: str


@dataclass(frozen=True)
class MetricComparison:
    """One bar group of the month-over-month chart."""

    name: str
    this_month: int
    last_month: int


@dataclass(frozen=True)
class DashboardSnapshot:
    """Read-only aggregate of counts across entity domains.

    ``counts_by_domain`` maps a domain to either an integer or a nested
    mapping of integers (e.g. ``reviews -> {"total": 12}``).
    """

    counts_by_domain: dict[str, Any]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def count(self, domain: str, key: str | None = None) -> int:
        """Return a count, treating anything missing as zero."""
        value = self.counts_by_domain.get(domain)
        if key is not None:
            value = value.get(key) if isinstance(value, dict) else None
        return value if isinstance(value, int) else 0

    def cards(self) -> list[MetricCard]:
        return [
            MetricCard("Blogs", self.count("blogs"), "/mec-admin/blogs"),
            MetricCard("Banners", self.count("banners"), "/mec-admin/banners"),
            MetricCard("Clients", self.count("clients"), "/mec-admin/clients"),
            MetricCard(
                "Unopened Enquiries",
                self.count("enquiries", "unopened"),
                "/mec-admin/enquiries",
            ),
            MetricCard("Reviews", self.count("reviews", "total"), "/mec-admin/reviews"),
            MetricCard("Subscribers", self.count("subscribers"), "/mec-admin/subscribers"),
            MetricCard("Admins", self.count("admins", "total"), "/mec-admin"),
            MetricCard("Projects", self.count("projects"), "/mec-admin/project"),
            MetricCard("Works", self.count("works"), "/mec-admin/work"),
        ]

    def chart_values(self) -> dict[str, int]:
        return {
            "Subscribers": self.count("subscribers"),
            "Clients": self.count("clients"),
            "Projects": self.count("projects"),
            "Reviews": self.count("reviews", "total"),
        }

    def comparisons(self) -> list[MetricComparison]:
        """Current values against the placeholder "last month" values."""
        return [
            MetricComparison(
                name=name,
                this_month=value,
                last_month=max(0, value - LAST_MONTH_PLACEHOLDER_OFFSETS[name]),
            )
            for name, value in self.chart_values().items()
        ]


@dataclass
class DashboardState:
    """What a dashboard consumer renders.

    ``snapshot`` is the last good snapshot (``None`` until the first
    success). ``stale`` is set when the latest refresh failed and the
    snapshot shown is an older one.
    """

    snapshot: DashboardSnapshot | None = None
    loading: bool = False
    stale: bool = False
    error: str | None = None

    @property
    def has_data(self) -> bool:
        return self.snapshot is not None
