import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from taskboard.core import queries
from taskboard.core.exceptions import StoreError
from taskboard.core.store import RowStore
from taskboard.dependencies import get_store
from taskboard.models import (
    ErrorResponse,
    MessageResponse,
    StatusMessageResponse,
    StatusUpdate,
    TaskCreate,
    TaskCreatedResponse,
    TaskListResponse,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

TASK_NOT_FOUND = "Task not found"

NOT_FOUND_RESPONSES = {404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

# Largest value an INTEGER PRIMARY KEY can hold
MAX_TASK_ID = 2**63 - 1


def _parse_task_id(task_id: str) -> int:
    """Task ids are plain decimal integers; anything else cannot match a row"""
    if not (task_id.isascii() and task_id.isdigit()):
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)

    row_id = int(task_id)
    if row_id > MAX_TASK_ID:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return row_id


@router.get("", response_model=TaskListResponse, responses={500: {"model": ErrorResponse}})
async def list_tasks(store: RowStore = Depends(get_store)):
    """
    Get all tasks, newest first
    """
    try:
        rows = await store.fetch_all(queries.SELECT_ALL_TASKS)
    except StoreError as e:
        logger.error(f"Error fetching tasks: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")

    return {"tasks": rows}


@router.get("/{task_id}", response_model=TaskResponse, responses=NOT_FOUND_RESPONSES)
async def get_task(task_id: str, store: RowStore = Depends(get_store)):
    """
    Get a single task
    """
    row_id = _parse_task_id(task_id)

    try:
        row = await store.fetch_one(queries.SELECT_TASK_BY_ID, {"id": row_id})
    except StoreError as e:
        logger.error(f"Error fetching task {row_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch task")

    if row is None:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)

    return {"task": row}


@router.post(
    "",
    status_code=201,
    response_model=TaskCreatedResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_task(payload: Optional[TaskCreate] = None, store: RowStore = Depends(get_store)):
    """
    Create a task with status TODO

    The response echoes the submitted values plus the generated id;
    the stored row is not read back.
    """
    payload = payload or TaskCreate()

    if not payload.has_title():
        raise HTTPException(status_code=400, detail="Title is required")

    try:
        task_id = await store.execute_insert(
            queries.INSERT_TASK,
            {
                "title": payload.title,
                "description": payload.description,
                "priority": payload.priority,
            },
        )
    except StoreError as e:
        logger.error(f"Error creating task: {e}")
        raise HTTPException(status_code=500, detail="Failed to create task")

    logger.info(f"Task created id={task_id}")

    return {
        "task": {
            "id": task_id,
            "title": payload.title,
            "description": payload.description,
            "status": TaskStatus.TODO.value,
            "priority": payload.priority,
        }
    }


@router.put(
    "/{task_id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, **NOT_FOUND_RESPONSES},
)
async def update_task(
    task_id: str,
    payload: Optional[TaskUpdate] = None,
    store: RowStore = Depends(get_store),
):
    """
    Update any subset of title, description, status and priority

    Values are written as given; status is not checked against TaskStatus here.
    """
    fields = payload.supplied_fields() if payload is not None else {}

    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    row_id = _parse_task_id(task_id)
    sql, params = queries.build_update(row_id, fields)

    try:
        changes = await store.execute(sql, params)
    except StoreError as e:
        logger.error(f"Error updating task {row_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update task")

    if changes == 0:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)

    return {"message": "Task updated successfully"}


@router.delete("/{task_id}", response_model=MessageResponse, responses=NOT_FOUND_RESPONSES)
async def delete_task(task_id: str, store: RowStore = Depends(get_store)):
    """
    Delete a task
    """
    row_id = _parse_task_id(task_id)

    try:
        changes = await store.execute(queries.DELETE_TASK, {"id": row_id})
    except StoreError as e:
        logger.error(f"Error deleting task {row_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete task")

    if changes == 0:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)

    logger.info(f"Task deleted id={row_id}")
    return {"message": "Task deleted successfully"}


@router.patch(
    "/{task_id}/status",
    response_model=StatusMessageResponse,
    responses={400: {"model": ErrorResponse}, **NOT_FOUND_RESPONSES},
)
async def update_task_status(
    task_id: str,
    payload: Optional[StatusUpdate] = None,
    store: RowStore = Depends(get_store),
):
    """
    Move a task to TODO, IN_PROGRESS or DONE

    Any status may follow any other.
    """
    status = payload.status if payload is not None else None

    if not TaskStatus.is_valid(status):
        raise HTTPException(
            status_code=400,
            detail="Invalid status. Must be TODO, IN_PROGRESS, or DONE",
        )

    row_id = _parse_task_id(task_id)

    try:
        changes = await store.execute(queries.UPDATE_TASK_STATUS, {"status": status, "id": row_id})
    except StoreError as e:
        logger.error(f"Error updating task status {row_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update task status")

    if changes == 0:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)

    return {"message": "Task status updated successfully", "status": status}
