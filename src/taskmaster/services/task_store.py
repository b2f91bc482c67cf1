from __future__ import annotations

import json
import logging
import threading
from typing import List, Optional, Union

from taskmaster.domain.task_models import Task, TaskFilter, TaskStats, new_task_id
from taskmaster.errors import InvalidFilterError, StorageError, TaskRecordError
from taskmaster.infra.storage.base import KeyValueStorage

logger = logging.getLogger("taskmaster.tasks")
storage_logger = logging.getLogger("taskmaster.storage")

DEFAULT_STORAGE_KEY = "tasks"


def parse_filter(value: Union[TaskFilter, str]) -> TaskFilter:
    if isinstance(value, TaskFilter):
        return value
    if isinstance(value, str):
        try:
            return TaskFilter(value.strip().lower())
        except ValueError:
            pass
    raise InvalidFilterError(value)


class TaskStore:
    """
    Owns the task list, the active filter and their persistence.

    Tasks are kept newest first. Every mutation is written straight through
    to the key-value storage under `storage_key`. A failed write keeps the
    in-memory change and flips `has_unsaved_changes` until a later write
    succeeds.

    Calls are serialized: a mutation and its write complete before any other
    call sees the store.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self._lock = threading.RLock()
        self._tasks: List[Task] = []
        self._filter = TaskFilter.all
        self._last_id: Optional[int] = None
        self.has_unsaved_changes = False
        self.last_save_error: Optional[str] = None
        self.load()

    @property
    def tasks(self) -> List[Task]:
        with self._lock:
            return list(self._tasks)

    @property
    def current_filter(self) -> TaskFilter:
        return self._filter

    # ---- persistence ----

    def load(self) -> bool:
        """Replace the in-memory list with the persisted one.

        A missing blob is an empty list. A corrupt blob or a read failure
        resets to empty and returns False; nothing is raised. Either way
        memory no longer holds unsaved changes afterwards.
        """
        with self._lock:
            self.has_unsaved_changes = False
            self.last_save_error = None
            try:
                raw = self.storage.get_item(self.storage_key)
                if raw is None:
                    self._tasks = []
                    return True
                records = json.loads(raw)
                if not isinstance(records, list):
                    raise TaskRecordError(f"expected a JSON array, got {type(records).__name__}")
                self._tasks = [Task.from_record(r) for r in records]
            except (StorageError, ValueError, RecursionError) as e:
                # json.JSONDecodeError and TaskRecordError are ValueErrors;
                # RecursionError comes from absurdly nested JSON
                storage_logger.error(
                    "tasks.load_failed",
                    extra={"category": "storage", "event": "tasks.load_failed", "key": self.storage_key, "error": str(e)},
                )
                self._tasks = []
                return False

            if self._tasks:
                self._last_id = max(t.id for t in self._tasks)
            storage_logger.info(
                "tasks.loaded",
                extra={"category": "storage", "event": "tasks.loaded", "key": self.storage_key, "count": len(self._tasks)},
            )
            return True

    def save(self) -> bool:
        with self._lock:
            payload = json.dumps([t.to_record() for t in self._tasks], ensure_ascii=False)
            try:
                self.storage.set_item(self.storage_key, payload)
            except StorageError as e:
                self.has_unsaved_changes = True
                self.last_save_error = str(e)
                storage_logger.error(
                    "tasks.save_failed",
                    extra={"category": "storage", "event": "tasks.save_failed", "key": self.storage_key, "error": str(e)},
                )
                return False

            self.has_unsaved_changes = False
            self.last_save_error = None
            storage_logger.debug(
                "tasks.saved",
                extra={"category": "storage", "event": "tasks.saved", "key": self.storage_key, "count": len(self._tasks)},
            )
            return True

    # ---- mutations ----

    def add_task(self, text: Optional[str]) -> bool:
        text = (text or "").strip()
        if not text:
            logger.warning("task.add_rejected", extra={"category": "tasks", "event": "task.add_rejected"})
            return False

        with self._lock:
            task_id = new_task_id(self._last_id)
            self._last_id = task_id
            self._tasks.insert(0, Task(id=task_id, text=text))
            self.save()
        logger.info("task.add", extra={"category": "tasks", "event": "task.add", "task_id": task_id, "text": text})
        return True

    def toggle_task(self, task_id: int) -> bool:
        with self._lock:
            task = self.get_task(task_id)
            if task is None:
                logger.warning("task.not_found", extra={"category": "tasks", "event": "task.not_found", "task_id": task_id, "op": "toggle"})
                return False

            task.completed = not task.completed
            self.save()
            completed = task.completed
        logger.info(
            "task.toggle",
            extra={"category": "tasks", "event": "task.toggle", "task_id": task_id, "completed": completed},
        )
        return True

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            for i, task in enumerate(self._tasks):
                if task.id == task_id:
                    del self._tasks[i]
                    break
            else:
                logger.warning("task.not_found", extra={"category": "tasks", "event": "task.not_found", "task_id": task_id, "op": "delete"})
                return False

            self.save()
        logger.info("task.delete", extra={"category": "tasks", "event": "task.delete", "task_id": task_id})
        return True

    def clear_all_tasks(self) -> None:
        with self._lock:
            count = len(self._tasks)
            self._tasks = []
            self.save()
        logger.info("task.clear_all", extra={"category": "tasks", "event": "task.clear_all", "count": count})

    # ---- queries ----

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._lock:
            return next((t for t in self._tasks if t.id == task_id), None)

    def get_filtered_tasks(self) -> List[Task]:
        with self._lock:
            if self._filter is TaskFilter.active:
                return [t for t in self._tasks if not t.completed]
            if self._filter is TaskFilter.completed:
                return [t for t in self._tasks if t.completed]
            return list(self._tasks)

    def set_filter(self, value: Union[TaskFilter, str]) -> TaskFilter:
        with self._lock:
            self._filter = parse_filter(value)
        logger.info("filter.set", extra={"category": "tasks", "event": "filter.set", "filter": self._filter.value})
        return self._filter

    def get_stats(self) -> TaskStats:
        with self._lock:
            completed = sum(1 for t in self._tasks if t.completed)
            return TaskStats(total=len(self._tasks), completed=completed, active=len(self._tasks) - completed)
