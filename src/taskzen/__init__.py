"""TaskZen.

A personal task manager that provides:
- a session-scoped client over a remote task storage API
- validated task actions with a read-through list cache
- AI-assisted title and description suggestions
"""

__version__ = "0.1.0"

from taskzen.config import TaskZenSettings

__all__ = ["__version__", "TaskZenSettings"]
