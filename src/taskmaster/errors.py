from __future__ import annotations


class TaskMasterError(Exception):
    """Base class for errors raised by taskmaster."""


class StorageError(TaskMasterError):
    """The key-value storage could not be read or written."""


class StorageQuotaExceeded(StorageError):
    def __init__(self, key: str, size: int, quota: int):
        super().__init__(f"quota exceeded writing {key!r}: {size} > {quota} bytes")
        self.key = key
        self.size = size
        self.quota = quota


class TaskRecordError(TaskMasterError, ValueError):
    """A persisted task record is missing fields or holds invalid values."""


class InvalidFilterError(TaskMasterError, ValueError):
    def __init__(self, value):
        super().__init__(f"unknown filter: {value!r}")
        self.value = value
