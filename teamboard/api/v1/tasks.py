import uuid
from datetime import date, datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db
from teamboard.api.v1.auth import UserResponse
from teamboard.common.enums import TaskPriority, TaskStatus
from teamboard.common.exceptions import BadRequestError, NotFoundError
from teamboard.common.logging import get_logger
from teamboard.core.projects.progress import is_task_overdue, recalculate_project_progress
from teamboard.db.models.project import Project
from teamboard.db.models.task import Task
from teamboard.db.models.user import User

router = APIRouter(prefix="/tasks", tags=["Tasks"])

logger = get_logger("api.tasks")


# ---------- Schemas ----------


class TaskCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    project_id: uuid.UUID
    description: str | None = None
    assignee_id: uuid.UUID | None = None
    status: TaskStatus = TaskStatus.BACKLOG
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None
    tags: list[str] = []


class TaskUpdateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    assignee_id: uuid.UUID | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    tags: list[str] | None = None


class TaskStatusRequest(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    project_id: uuid.UUID
    assignee_id: uuid.UUID | None
    assignee: UserResponse | None = None
    status: str
    priority: str
    due_date: date | None
    is_overdue: bool
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# Fields that may be explicitly cleared with null
NULLABLE_FIELDS = ("description", "assignee_id", "due_date", "tags")


# ---------- Endpoints ----------


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    project_id: uuid.UUID | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(Task)
    if project_id:
        query = query.where(Task.project_id == project_id)
    query = query.order_by(Task.created_at.desc()).execution_options(populate_existing=True)

    result = await db.execute(query)
    return [_task_response(t) for t in result.scalars().all()]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return _task_response(await _load_task(db, task_id))


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    body: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project_result = await db.execute(select(Project.id).where(Project.id == body.project_id))
    if project_result.first() is None:
        raise NotFoundError("Project", str(body.project_id))
    if body.assignee_id:
        await _ensure_user_exists(db, body.assignee_id)

    task = Task(
        title=body.title,
        description=body.description,
        project_id=body.project_id,
        assignee_id=body.assignee_id,
        status=body.status.value,
        priority=body.priority.value,
        due_date=body.due_date,
        tags=body.tags,
        is_overdue=is_task_overdue(body.due_date, body.status.value),
    )
    db.add(task)
    await db.flush()
    await recalculate_project_progress(db, task.project_id)

    logger.info("Created task %s in project %s", task.id, task.project_id)
    return _task_response(await _load_task(db, task.id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: uuid.UUID,
    body: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updates = body.model_dump(exclude_unset=True)
    updates = {k: v for k, v in updates.items() if v is not None or k in NULLABLE_FIELDS}
    if not updates:
        raise BadRequestError("No fields to update")
    return await _apply_task_updates(db, task_id, updates)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: uuid.UUID,
    body: TaskStatusRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _apply_task_updates(db, task_id, {"status": body.status})


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await _load_task(db, task_id)
    project_id = task.project_id

    await db.delete(task)
    await db.flush()
    await recalculate_project_progress(db, project_id)

    logger.info("Deleted task %s", task_id)
    return Response(status_code=204)


async def _apply_task_updates(db: AsyncSession, task_id: uuid.UUID, updates: dict) -> TaskResponse:
    task = await _load_task(db, task_id)

    if updates.get("assignee_id"):
        await _ensure_user_exists(db, updates["assignee_id"])

    for field, value in updates.items():
        if isinstance(value, (TaskStatus, TaskPriority)):
            value = value.value
        if field == "tags" and value is None:
            value = []
        setattr(task, field, value)

    task.is_overdue = is_task_overdue(task.due_date, task.status)
    await db.flush()
    await recalculate_project_progress(db, task.project_id)

    logger.info("Updated task %s: %s", task_id, ", ".join(sorted(updates)))
    return _task_response(await _load_task(db, task_id))


async def _load_task(db: AsyncSession, task_id: uuid.UUID) -> Task:
    result = await db.execute(
        select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise NotFoundError("Task", str(task_id))
    return task


async def _ensure_user_exists(db: AsyncSession, user_id: uuid.UUID) -> None:
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.first() is None:
        raise NotFoundError("User", str(user_id))


def _task_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        project_id=task.project_id,
        assignee_id=task.assignee_id,
        assignee=UserResponse.model_validate(task.assignee) if task.assignee else None,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        is_overdue=task.is_overdue,
        tags=task.tags or [],
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
