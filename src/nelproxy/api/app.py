# src/nelproxy/api/app.py

"""
Dispatch API.

HTTP boundary in front of the TaskStore:
- GET    /task       -> all pending tasks (404 when the queue is empty)
- GET    /task/{id}  -> one task
- POST   /task       -> create (500 on malformed body or duplicate)
- DELETE /task/{id}  -> acknowledge / remove

Store errors are translated into status codes here and nowhere else.
"""

from __future__ import annotations

import logging
import re
from http import HTTPStatus

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.ports import TaskRepo
from ..errors import DuplicateTaskError, EmptyQueueError, TaskNotFoundError, TaskValidationError
from ..tasks.task_store import TaskStore
from .schemas import parse_task_payload

logger = logging.getLogger(__name__)

router = APIRouter()


def get_task_store(request: Request) -> TaskRepo:
    return request.app.state.task_store


_TASK_ID_RE = re.compile(r"[0-9]+")


def _parse_task_id(raw: str) -> int:
    # Plain ASCII digits only; int() alone would accept "1_0", "+1" or " 1".
    if not _TASK_ID_RE.fullmatch(raw):
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail="Malformed task ID")
    return int(raw)


async def read_body(request: Request) -> bytes:
    return await request.body()


@router.get("/health")
def health(store: TaskRepo = Depends(get_task_store)) -> dict:
    return {"status": "ok", "pending": store.count_tasks()}


@router.get("/task")
def list_tasks(store: TaskRepo = Depends(get_task_store)) -> list:
    return [t.to_dict() for t in store.list_tasks()]


@router.get("/task/{task_id}")
def get_task(task_id: str, store: TaskRepo = Depends(get_task_store)) -> dict:
    return store.get(_parse_task_id(task_id)).to_dict()


@router.post("/task")
def create_task(body: bytes = Depends(read_body), store: TaskRepo = Depends(get_task_store)) -> dict:
    candidate = parse_task_payload(body)
    task = store.create(candidate)
    return {"detail": "Task has been created", "task": task.to_dict()}


@router.delete("/task/{task_id}")
def delete_task(task_id: str, store: TaskRepo = Depends(get_task_store)) -> dict:
    deleted = store.delete(_parse_task_id(task_id))
    return {"detail": "Task has been deleted", "id": deleted.id}


async def _validation_error_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
    logger.warning("Rejected task payload: %s", exc)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content={"detail": "Cannot create task, wrong JSON format"},
    )


async def _duplicate_handler(request: Request, exc: DuplicateTaskError) -> JSONResponse:
    logger.warning("Rejected duplicate task inventory=%s playbook=%s", exc.inventory, exc.playbook)
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content={"detail": "Duplicated task"},
    )


async def _empty_queue_handler(request: Request, exc: EmptyQueueError) -> JSONResponse:
    return JSONResponse(status_code=HTTPStatus.NOT_FOUND, content={"detail": "Not Found"})


async def _not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    logger.info("Task not found id=%s", exc.task_id)
    return JSONResponse(status_code=HTTPStatus.NOT_FOUND, content={"detail": "No such task ID"})


def create_app(store: TaskRepo | None = None) -> FastAPI:
    """
    Build the dispatch application around a task store.

    The store is owned by the caller (or created here) and lives as long as the app.
    """
    app = FastAPI(title="nelproxy dispatch API", version=__version__)
    app.state.task_store = store if store is not None else TaskStore()

    app.add_exception_handler(TaskValidationError, _validation_error_handler)
    app.add_exception_handler(DuplicateTaskError, _duplicate_handler)
    app.add_exception_handler(EmptyQueueError, _empty_queue_handler)
    app.add_exception_handler(TaskNotFoundError, _not_found_handler)

    app.include_router(router)
    return app
