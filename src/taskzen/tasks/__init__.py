"""Remote task store access."""

from taskzen.tasks.actions import TaskActions, TaskGateway
from taskzen.tasks.cache import TaskListCache
from taskzen.tasks.client import TaskApiClient

__all__ = [
    "TaskActions",
    "TaskApiClient",
    "TaskGateway",
    "TaskListCache",
]
