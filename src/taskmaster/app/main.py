import logging
from typing import Optional

from fastapi import FastAPI

from taskmaster.app.middleware.access_log import AccessLogMiddleware
from taskmaster.app.routes import debug, tasks
from taskmaster.config import Settings
from taskmaster.infra.db.sqlite import make_engine, make_sessionmaker, make_sqlite_url
from taskmaster.infra.storage.base import KeyValueStorage
from taskmaster.infra.storage.kv_memory import InMemoryKeyValueStorage
from taskmaster.infra.storage.kv_sqlite import SQLiteKeyValueStorage
from taskmaster.observability.logging import setup_logging
from taskmaster.services.debug import DebugConsole
from taskmaster.services.task_store import TaskStore

logger = logging.getLogger("taskmaster.system")


def make_storage(settings: Settings) -> KeyValueStorage:
    if settings.storage == "memory":
        return InMemoryKeyValueStorage()
    engine = make_engine(make_sqlite_url(settings.db_path))
    return SQLiteKeyValueStorage(engine, make_sessionmaker(engine))


def create_app(settings: Optional[Settings] = None, store: Optional[TaskStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings)
    logger.info("system.start", extra={"category": "system", "event": "system.start", "storage": settings.storage})

    if store is None:
        store = TaskStore(make_storage(settings), settings.storage_key)

    app = FastAPI(title="TaskMaster")
    app.add_middleware(AccessLogMiddleware)
    app.state.settings = settings
    app.state.task_store = store

    # debug routes answer 404 unless a console is installed
    app.state.debug_console = DebugConsole(store) if settings.debug_api else None
    app.include_router(tasks.router)
    app.include_router(debug.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    uvicorn.run("taskmaster.app.main:create_app", factory=True, host="127.0.0.1", port=8000)
