"""Abstract confirmation gate — consulted before every destructive action."""

from abc import ABC, abstractmethod


class ConfirmationGate(ABC):
    """Port — asks the user to confirm and reports the answer."""

    @abstractmethod
    async def confirm(self, prompt: str) -> bool:
        ...
