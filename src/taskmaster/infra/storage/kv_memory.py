from __future__ import annotations

from typing import Dict, Optional

from taskmaster.errors import StorageQuotaExceeded


class InMemoryKeyValueStorage:
    """
    Dict-backed storage. Lives as long as the process.
    `quota_bytes` caps the encoded size of all values, like a browser quota.
    """
    def __init__(self, quota_bytes: Optional[int] = None):
        self._items: Dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._items.items() if k != key)
            size = others + len(value.encode("utf-8"))
            if size > self.quota_bytes:
                raise StorageQuotaExceeded(key, size, self.quota_bytes)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
