"""Abstract notification sink — port for user-facing toasts."""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Fire-and-forget user notifications. Return values are never consumed."""

    @abstractmethod
    def notify_success(self, message: str) -> None:
        ...

    @abstractmethod
    def notify_failure(self, message: str) -> None:
        ...
