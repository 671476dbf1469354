from .admin_api import AdminApi
from .confirmation_gate import ConfirmationGate
from .notifier import Notifier

__all__ = [
    "AdminApi",
    "ConfirmationGate",
    "Notifier",
]
