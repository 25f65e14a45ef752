"""Non-blocking user notifications ("toasts")."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Variant = Literal["default", "destructive"]


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str = ""
    variant: Variant = "default"


@dataclass
class NotificationCenter:
    """Collects notifications until the page drains them."""

    items: list[Notification] = field(default_factory=list)

    def push(self, title: str, description: str = "", *, variant: Variant = "default") -> None:
        self.items.append(Notification(title=title, description=description, variant=variant))

    def error(self, title: str, description: str = "") -> None:
        self.push(title, description, variant="destructive")

    def drain(self) -> list[Notification]:
        items, self.items = self.items, []
        return items
