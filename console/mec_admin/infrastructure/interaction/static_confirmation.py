"""Confirmation gate with a fixed answer, for scripted and headless use."""

import logging

from mec_admin.application.interfaces.confirmation_gate import ConfirmationGate

logger = logging.getLogger(__name__)


class StaticConfirmationGate(ConfirmationGate):
    """Answers every prompt with ``answer`` and remembers what was asked."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts: list[str] = []

    async def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        logger.debug("Confirmation %r answered %s", prompt, self.answer)
        return self.answer
