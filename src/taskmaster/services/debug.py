from __future__ import annotations

import logging
from typing import Any, Dict, List

from taskmaster.domain.task_models import TaskStats
from taskmaster.services.task_store import TaskStore

logger = logging.getLogger("taskmaster.debug")

DEMO_TASKS = (
    "Einkaufen gehen",
    "Email an Chef senden",
    "Projekt-Präsentation vorbereiten",
    "Sport treiben",
)


class DebugConsole:
    """Inspection helpers over a TaskStore, handed out explicitly."""

    def __init__(self, store: TaskStore):
        self.store = store

    def get_tasks(self) -> List[Dict[str, Any]]:
        return [t.to_record() for t in self.store.tasks]

    def get_stats(self) -> TaskStats:
        return self.store.get_stats()

    def clear_all(self, confirm: bool = False) -> bool:
        if not confirm:
            return False
        self.store.clear_all_tasks()
        logger.info("debug.clear_all", extra={"category": "debug", "event": "debug.clear_all"})
        return True

    def add_demo_data(self) -> int:
        added = sum(1 for text in DEMO_TASKS if self.store.add_task(text))
        tasks = self.store.tasks
        if len(tasks) > 1:
            self.store.toggle_task(tasks[1].id)
        logger.info("debug.demo_data", extra={"category": "debug", "event": "debug.demo_data", "count": added})
        return added
