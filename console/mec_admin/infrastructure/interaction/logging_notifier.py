"""Notifier adapter that writes toasts to the log."""

import logging

from mec_admin.application.interfaces.notifier import Notifier


class LoggingNotifier(Notifier):
    """Sends every notification to the ``mec_admin.notifications`` logger."""

    def __init__(self, logger_name: str = "mec_admin.notifications"):
        self._logger = logging.getLogger(logger_name)

    def notify_success(self, message: str) -> None:
        self._logger.info("✅ %s", message)

    def notify_failure(self, message: str) -> None:
        self._logger.warning("❌ %s", message)
