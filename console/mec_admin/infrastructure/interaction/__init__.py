"""Headless adapters for the notifier and confirmation ports."""

from .logging_notifier import LoggingNotifier
from .static_confirmation import StaticConfirmationGate

__all__ = ["LoggingNotifier", "StaticConfirmationGate"]
