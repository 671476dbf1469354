from .asset_coordinator import AssetLifecycleCoordinator
from .dashboard_aggregator import DashboardAggregator
from .entity_page import EntityPageController
from .entity_store import EntityStore, MutationOutcome
from .form_session import FormSession, SessionMode
from .operation_result import NotificationPublisher, OperationResult
from .record_actions import EnquiryInbox, ReviewModerator
from .selection_set import SelectionSet

__all__ = [
    "AssetLifecycleCoordinator",
    "DashboardAggregator",
    "EntityPageController",
    "EntityStore",
    "MutationOutcome",
    "FormSession",
    "SessionMode",
    "NotificationPublisher",
    "OperationResult",
    "EnquiryInbox",
    "ReviewModerator",
    "SelectionSet",
]
