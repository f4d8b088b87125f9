import logging
from typing import List
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from taskapi.core.database import get_db
from taskapi.core.errors import IdMismatch
from taskapi.schemas.task import (
    CreateTaskRequest,
    DatabaseInfo,
    HealthResponse,
    TaskResponse,
    TaskStatsResponse,
    UpdateTaskRequest,
)
from taskapi.services.task_store import TaskStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    responses={404: {"description": "Not found"}},
)


def get_store(db: AsyncSession = Depends(get_db)) -> TaskStore:
    return TaskStore(db)


@router.get("/health", response_model=HealthResponse)
async def get_health():
    return {"status": "healthy"}


@router.get("/stats", response_model=TaskStatsResponse)
async def get_stats(store: TaskStore = Depends(get_store)):
    return await store.stats()


@router.get("/db-info", response_model=DatabaseInfo)
async def get_database_info(db: AsyncSession = Depends(get_db)):
    # Backend and database name only; the URL carries credentials.
    url = db.bind.url
    return {"backend": url.get_backend_name(), "database": url.database}


@router.get("", response_model=List[TaskResponse])
async def get_tasks(store: TaskStore = Depends(get_store)):
    return await store.list()


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, store: TaskStore = Depends(get_store)):
    return await store.get_by_id(task_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: CreateTaskRequest,
    request: Request,
    response: Response,
    store: TaskStore = Depends(get_store),
):
    task = await store.create(task_in.to_fields())
    response.headers["Location"] = str(request.url_for("get_task", task_id=task.id))
    return task


@router.put("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_task(
    task_id: int,
    task_in: UpdateTaskRequest,
    store: TaskStore = Depends(get_store),
):
    if task_in.id != task_id:
        logger.warning("Rejected update: path id %s, body id %s", task_id, task_in.id)
        raise IdMismatch(task_id, task_in.id)
    await store.update(task_id, task_in.to_fields())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    await store.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
