from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Named-blob storage, modelled on the browser's localStorage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...
