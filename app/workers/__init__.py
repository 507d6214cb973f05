"""Background workers - task queue and periodic sweepers."""

from app.workers.queue import TaskQueue
from app.workers.sweeper import PeriodicSweeper

__all__ = ["PeriodicSweeper", "TaskQueue"]
