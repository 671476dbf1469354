"""Typed outcome of a console operation and the adapter that announces it."""

import logging
from dataclasses import dataclass, field
from typing import Any

from mec_admin.application.interfaces import Notifier

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """What happened, decided by the core; displaying it is someone else's job.

    ``message`` is None for outcomes that need no toast (a plain list
    load, a cancelled confirmation). ``warnings`` are secondary failures
    that did not change the outcome, such as an image that could not be
    removed after its record was deleted.
    """

    ok: bool
    message: str | None = None
    data: Any = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, message: str | None = None, data: Any = None) -> "OperationResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str | None) -> "OperationResult":
        return cls(ok=False, message=message)


class NotificationPublisher:
    """Thin adapter from ``OperationResult`` to the notifier port."""

    def __init__(self, notifier: Notifier):
        self._notifier = notifier

    def publish(self, result: OperationResult) -> OperationResult:
        if result.message:
            if result.ok:
                self._notifier.notify_success(result.message)
            else:
                self._notifier.notify_failure(result.message)
        for warning in result.warnings:
            self._notifier.notify_failure(warning)
        return result
