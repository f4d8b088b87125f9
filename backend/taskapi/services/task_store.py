# taskapi/services/task_store.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskapi.core.database import utcnow
from taskapi.core.errors import FieldError, NotFound, StorageError, ValidationError
from taskapi.models.task import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    TaskPriority,
    TaskStatus,
)

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (TaskStatus.Completed, TaskStatus.Cancelled)


@dataclass(frozen=True)
class TaskFields:
    """The mutable part of a Task, already normalized to store types."""

    title: Optional[str]
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.Pending
    priority: TaskPriority = TaskPriority.Medium
    due_date: Optional[datetime] = None


@dataclass(frozen=True)
class TaskStats:
    total: int
    by_status: Dict[str, int]
    overdue: int


def validate_task_fields(fields: TaskFields) -> List[FieldError]:
    """Return every constraint violation in ``fields`` (empty list when valid)."""
    errors: List[FieldError] = []

    title = (fields.title or "").strip()
    if not title:
        errors.append(FieldError("title", "Title is required"))
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(
            FieldError("title", f"Title cannot be longer than {TITLE_MAX_LENGTH} characters")
        )

    if fields.description is not None and len(fields.description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            FieldError(
                "description",
                f"Description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters",
            )
        )

    if not isinstance(fields.status, TaskStatus):
        errors.append(FieldError("status", "Unknown status"))
    if not isinstance(fields.priority, TaskPriority):
        errors.append(FieldError("priority", "Unknown priority"))

    return errors


def _checked(fields: TaskFields) -> TaskFields:
    errors = validate_task_fields(fields)
    if errors:
        raise ValidationError(errors)
    return TaskFields(
        title=fields.title.strip(),
        description=fields.description,
        status=fields.status,
        priority=fields.priority,
        due_date=fields.due_date,
    )


class TaskStore:
    """
    CRUD persistence for Task records over an AsyncSession.

    One store per request/session. Every method is a single read or a single
    write; backend failures are rolled back and raised as StorageError.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, fields: TaskFields) -> Task:
        fields = _checked(fields)
        task = Task(
            title=fields.title,
            description=fields.description,
            status=fields.status,
            priority=fields.priority,
            due_date=fields.due_date,
            created_at=utcnow(),
            updated_at=None,
        )
        try:
            self.session.add(task)
            await self.session.commit()
            await self.session.refresh(task)
        except SQLAlchemyError as e:
            await self._fail("create", e)
        logger.info("Created task %s (%s)", task.id, task.title)
        return task

    async def get_by_id(self, task_id: int) -> Task:
        try:
            task = await self.session.get(Task, task_id)
        except SQLAlchemyError as e:
            await self._fail("get", e)
        if task is None:
            raise NotFound(task_id)
        return task

    async def list(self) -> List[Task]:
        try:
            result = await self.session.execute(
                select(Task).order_by(Task.created_at.desc(), Task.id.desc())
            )
        except SQLAlchemyError as e:
            await self._fail("list", e)
        return list(result.scalars().all())

    async def update(self, task_id: int, fields: TaskFields) -> Task:
        fields = _checked(fields)
        task = await self.get_by_id(task_id)

        now = utcnow()
        floor = task.updated_at or task.created_at
        if floor is not None and now < floor:
            now = floor

        task.title = fields.title
        task.description = fields.description
        task.status = fields.status
        task.priority = fields.priority
        task.due_date = fields.due_date
        task.updated_at = now
        try:
            await self.session.commit()
            await self.session.refresh(task)
        except SQLAlchemyError as e:
            await self._fail("update", e)
        logger.info("Updated task %s", task_id)
        return task

    async def delete(self, task_id: int) -> None:
        task = await self.get_by_id(task_id)
        try:
            await self.session.delete(task)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._fail("delete", e)
        logger.info("Deleted task %s", task_id)

    async def stats(self, now: Optional[datetime] = None) -> TaskStats:
        """Counts for the dashboard: total, per status, and overdue open tasks."""
        now = now or utcnow()
        try:
            rows = await self.session.execute(
                select(Task.status, func.count(Task.id)).group_by(Task.status)
            )
            by_status = {s.value: 0 for s in TaskStatus}
            for status, count in rows.all():
                by_status[TaskStatus(status).value] = count

            overdue = await self.session.scalar(
                select(func.count(Task.id)).where(
                    Task.due_date.is_not(None),
                    Task.due_date < now,
                    Task.status.not_in(CLOSED_STATUSES),
                )
            )
        except SQLAlchemyError as e:
            await self._fail("stats", e)
        return TaskStats(
            total=sum(by_status.values()),
            by_status=by_status,
            overdue=overdue or 0,
        )

    async def _fail(self, operation: str, exc: SQLAlchemyError):
        logger.error("Task store %s failed: %s", operation, exc)
        await self.session.rollback()
        raise StorageError(operation, exc) from exc
