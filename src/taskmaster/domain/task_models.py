from __future__ import annotations

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError, field_validator

from taskmaster.errors import TaskRecordError


class TaskFilter(str, Enum):
    all = "all"
    active = "active"
    completed = "completed"


def utc_now() -> datetime:
    return _to_millis(datetime.now(timezone.utc))


def _to_millis(value: datetime) -> datetime:
    # naive timestamps are UTC; stored precision is milliseconds
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"timestamp out of range: {value.isoformat()}") from e
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


class Task(BaseModel):
    id: int
    text: str
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, v: datetime) -> datetime:
        return _to_millis(v)

    def to_record(self) -> dict[str, Any]:
        """Plain mapping for the persisted JSON array."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Task":
        """Inverse of to_record. Raises TaskRecordError on malformed input."""
        if not isinstance(record, Mapping):
            raise TaskRecordError(f"task record must be an object, got {type(record).__name__}")
        try:
            parsed = TaskRecord.model_validate(record)
            return cls(
                id=parsed.id,
                text=parsed.text,
                completed=parsed.completed,
                created_at=parsed.created_at,
            )
        except ValidationError as e:
            raise TaskRecordError(f"invalid task record: {e.error_count()} error(s): {e.errors()[0]['loc']}") from e


class TaskRecord(BaseModel):
    """Wire shape of one persisted task."""

    model_config = ConfigDict(populate_by_name=True)

    id: StrictInt
    text: StrictStr
    completed: StrictBool = False
    created_at: datetime = Field(alias="createdAt")


class TaskStats(BaseModel):
    total: int
    completed: int
    active: int


class TaskCreate(BaseModel):
    text: str


class FilterUpdate(BaseModel):
    filter: str


def new_task_id(last_id: Optional[int] = None, now_ms: Optional[int] = None) -> int:
    """Millisecond timestamp id that never repeats or goes backwards."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    if last_id is not None and now_ms <= last_id:
        return last_id + 1
    return now_ms
