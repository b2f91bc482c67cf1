from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from taskmaster.domain.task_models import TaskStats
from taskmaster.services.debug import DebugConsole

router = APIRouter(prefix="/api/debug", tags=["debug"])


def get_console(request: Request) -> DebugConsole:
    console = getattr(request.app.state, "debug_console", None)
    if console is None:
        raise HTTPException(status_code=404, detail="Debug API disabled")
    return console


@router.get("/tasks")
async def debug_tasks(console: DebugConsole = Depends(get_console)) -> list[dict[str, Any]]:
    return console.get_tasks()


@router.get("/stats", response_model=TaskStats)
async def debug_stats(console: DebugConsole = Depends(get_console)):
    return console.get_stats()


@router.post("/clear")
async def debug_clear(confirm: bool = False, console: DebugConsole = Depends(get_console)):
    return {"cleared": console.clear_all(confirm=confirm)}


@router.post("/demo")
async def debug_demo(console: DebugConsole = Depends(get_console)):
    return {"added": console.add_demo_data()}
