"""Settings loaded from TASKMASTER_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKMASTER"
STORAGE_BACKENDS = ("sqlite", "memory")


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in {"1", "true", "yes", "y", "on"}:
        return True
    if raw in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    storage: str = "sqlite"
    db_path: str = "./data/taskmaster.db"
    storage_key: str = "tasks"
    log_level: str = "INFO"
    log_dir: Path = Path("./logs")
    log_to_file: bool = True
    debug_api: bool = False

    def __post_init__(self) -> None:
        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(f"unknown storage backend {self.storage!r}; expected one of {STORAGE_BACKENDS}")

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            storage=_env(_k("STORAGE"), "sqlite").lower(),
            db_path=_env(_k("DB_PATH"), "./data/taskmaster.db"),
            storage_key=_env(_k("STORAGE_KEY"), "tasks"),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
            log_dir=Path(_env(_k("LOG_DIR"), "./logs")).expanduser(),
            log_to_file=_env_bool(_k("LOG_TO_FILE"), True),
            debug_api=_env_bool(_k("DEBUG_API"), False),
        )
