"""Keeps the derived task columns on projects and tasks current."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.common.enums import TaskStatus
from teamboard.common.logging import get_logger
from teamboard.common.rounding import round_half_up
from teamboard.db.models.project import Project
from teamboard.db.models.task import Task

logger = get_logger("projects.progress")


def is_task_overdue(due_date: date | None, status: str, today: date | None = None) -> bool:
    if due_date is None or status == TaskStatus.DONE.value:
        return False
    return due_date < (today or date.today())


def progress_percent(task_count: int, completed_count: int) -> int:
    if task_count <= 0:
        return 0
    return round_half_up(completed_count / task_count * 100)


async def recalculate_project_progress(db: AsyncSession, project_id: uuid.UUID) -> None:
    result = await db.execute(
        select(
            func.count(Task.id),
            func.count(case((Task.status == TaskStatus.DONE.value, Task.id))),
        ).where(Task.project_id == project_id)
    )
    task_count, completed_count = result.one()
    task_count = task_count or 0
    completed_count = completed_count or 0

    await db.execute(
        update(Project)
        .where(Project.id == project_id)
        .values(
            task_count=task_count,
            completed_task_count=completed_count,
            progress=progress_percent(task_count, completed_count),
        )
    )
    await db.flush()


async def mark_overdue_tasks(db: AsyncSession, today: date | None = None) -> int:
    """Recompute ``is_overdue`` for every task. Returns the number of rows flipped."""
    today = today or date.today()
    overdue_condition = and_(
        Task.due_date.is_not(None),
        Task.due_date < today,
        Task.status != TaskStatus.DONE.value,
    )

    flagged = await db.execute(
        update(Task)
        .where(overdue_condition, Task.is_overdue.is_(False))
        .values(is_overdue=True)
        .execution_options(synchronize_session=False)
    )
    cleared = await db.execute(
        update(Task)
        .where(~overdue_condition, Task.is_overdue.is_(True))
        .values(is_overdue=False)
        .execution_options(synchronize_session=False)
    )
    await db.flush()

    changed = flagged.rowcount + cleared.rowcount
    logger.info("Overdue refresh: %d flagged, %d cleared", flagged.rowcount, cleared.rowcount)
    return changed
