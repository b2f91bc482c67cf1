from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from taskmaster.domain.task_models import FilterUpdate, Task, TaskCreate, TaskFilter, TaskStats
from taskmaster.errors import InvalidFilterError
from taskmaster.services.task_store import TaskStore

router = APIRouter(prefix="/api", tags=["tasks"])


class TaskListResponse(BaseModel):
    filter: TaskFilter
    items: List[Task]
    stats: TaskStats


class MutationResult(BaseModel):
    ok: bool = True
    # False while the last write to storage failed
    saved: bool


class FilterResponse(BaseModel):
    filter: TaskFilter


def get_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def _result(store: TaskStore) -> MutationResult:
    return MutationResult(saved=not store.has_unsaved_changes)


@router.get("/tasks", response_model=TaskListResponse)
async def list_tasks(store: TaskStore = Depends(get_store)):
    return TaskListResponse(filter=store.current_filter, items=store.get_filtered_tasks(), stats=store.get_stats())


@router.post("/tasks", response_model=MutationResult, status_code=201)
async def add_task(payload: TaskCreate, store: TaskStore = Depends(get_store)):
    if not store.add_task(payload.text):
        raise HTTPException(status_code=422, detail="Task text must not be empty")
    return _result(store)


@router.post("/tasks/{task_id}/toggle", response_model=MutationResult)
async def toggle_task(task_id: int, store: TaskStore = Depends(get_store)):
    if not store.toggle_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return _result(store)


@router.delete("/tasks/{task_id}", response_model=MutationResult)
async def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    if not store.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return _result(store)


@router.delete("/tasks", response_model=MutationResult)
async def clear_tasks(store: TaskStore = Depends(get_store)):
    store.clear_all_tasks()
    return _result(store)


@router.put("/filter", response_model=FilterResponse)
async def set_filter(payload: FilterUpdate, store: TaskStore = Depends(get_store)):
    try:
        current = store.set_filter(payload.filter)
    except InvalidFilterError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return FilterResponse(filter=current)


@router.get("/stats", response_model=TaskStats)
async def get_stats(store: TaskStore = Depends(get_store)):
    return store.get_stats()
