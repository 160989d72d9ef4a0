"""
Fire-and-forget execution of work that must stay off the request path.
"""

from .strategies import BackgroundRunner, TaskSpawnRunner, WorkerPoolRunner
from .factory import BackgroundBackend, BackgroundRunnerFactory

__all__ = [
    "BackgroundRunner",
    "TaskSpawnRunner",
    "WorkerPoolRunner",
    "BackgroundBackend",
    "BackgroundRunnerFactory",
]
