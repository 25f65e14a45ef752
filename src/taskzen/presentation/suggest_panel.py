"""State machine behind the "Suggest" button of the task form."""

from __future__ import annotations

import asyncio
from enum import Enum

from taskzen.presentation.notifications import NotificationCenter
from taskzen.suggestions.flows import SEED_REQUIRED, SuggestionFlow, SuggestionMode


class PanelState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    READY = "ready"
    ERROR = "error"


SEED_REQUIRED_TITLES: dict[SuggestionMode, str] = {
    SuggestionMode.TITLE: "Description required",
    SuggestionMode.DESCRIPTION: "Title required",
}


class SuggestionPanel:
    """idle -> requesting -> (ready | error) -> idle

    Only one request per panel may be in flight; while requesting, `busy` is
    true and further requests are ignored.
    """

    def __init__(
        self,
        flow: SuggestionFlow,
        mode: SuggestionMode = SuggestionMode.DESCRIPTION,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self._flow = flow
        self.mode = mode
        self.notifications = notifications or NotificationCenter()
        self.state = PanelState.IDLE
        self.suggestions: list[str] = []
        self.error: str | None = None

    @property
    def busy(self) -> bool:
        return self.state is PanelState.REQUESTING

    async def request(self, seed: str) -> bool:
        if self.busy:
            return False

        if not seed.strip():
            # Fail fast without contacting the model.
            self.error = SEED_REQUIRED[self.mode]
            self.notifications.error(SEED_REQUIRED_TITLES[self.mode], self.error)
            return False

        self.state = PanelState.REQUESTING
        self.suggestions = []
        self.error = None
        try:
            result = await asyncio.to_thread(self._flow.suggest, self.mode, seed)
        except BaseException:
            self.state = PanelState.IDLE
            raise

        if result.ok and result.data:
            self.suggestions = list(result.data)
            self.state = PanelState.READY
            return True

        self.error = result.error
        self.state = PanelState.ERROR
        self.notifications.error("AI Assistant Error", result.error or "")
        return False

    def choose(self, index: int) -> str:
        """Pick a suggestion for the form field and close the panel."""

        if self.state is not PanelState.READY:
            raise RuntimeError("No suggestions to choose from")
        chosen = self.suggestions[index]
        self.reset()
        return chosen

    def reset(self) -> None:
        self.state = PanelState.IDLE
        self.suggestions = []
        self.error = None
