"""
Factory for creating background runners.
"""

import logging
from enum import Enum

from .strategies import BackgroundRunner, TaskSpawnRunner, WorkerPoolRunner
from shortlink_app.config import Settings

logger = logging.getLogger(__name__)


class BackgroundBackend(Enum):
    """Available background runner backends"""
    TASKS = "tasks"
    POOL = "pool"


class BackgroundRunnerFactory:
    """
    Simple factory for creating background runners from settings.
    """

    @classmethod
    def create(cls, backend: BackgroundBackend, settings: Settings) -> BackgroundRunner:
        """
        Create a background runner.

        Args:
            backend: Type of runner (from enum)
            settings: Application settings (pool sizing)

        Returns:
            BackgroundRunner instance
        """
        if backend == BackgroundBackend.TASKS:
            logger.info("Task-per-job background runner initialized")
            return TaskSpawnRunner()

        if backend == BackgroundBackend.POOL:
            logger.info(
                "Worker pool background runner initialized (%d workers, queue size %d)",
                settings.background_workers,
                settings.background_queue_size,
            )
            return WorkerPoolRunner(
                workers=settings.background_workers,
                max_queue_size=settings.background_queue_size,
            )

        raise ValueError(f"Unknown background backend: {backend}")
