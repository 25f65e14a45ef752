"""Presentation state: the task board, the suggestion panel and notifications."""

from taskzen.presentation.board import OptimisticField, TaskBoard, TaskView, order_tasks
from taskzen.presentation.notifications import Notification, NotificationCenter
from taskzen.presentation.suggest_panel import PanelState, SuggestionPanel

__all__ = [
    "Notification",
    "NotificationCenter",
    "OptimisticField",
    "PanelState",
    "SuggestionPanel",
    "TaskBoard",
    "TaskView",
    "order_tasks",
]
