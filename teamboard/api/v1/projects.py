import uuid
from datetime import date, datetime

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db, is_team_member, verify_project_access
from teamboard.common.enums import ProjectStatus
from teamboard.common.exceptions import BadRequestError, NotFoundError, PermissionDeniedError
from teamboard.common.logging import get_logger
from teamboard.db.models.insight import ProjectInsight
from teamboard.db.models.project import Project
from teamboard.db.models.task import Task
from teamboard.db.models.team import Team
from teamboard.db.models.user import User

router = APIRouter(prefix="/projects", tags=["Projects"])

logger = get_logger("api.projects")


# ---------- Schemas ----------


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    team_id: uuid.UUID
    description: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    due_date: date | None = None


class ProjectUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    due_date: date | None = None


class ProjectResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    team_id: uuid.UUID
    status: str
    progress: int
    due_date: date | None
    task_count: int
    completed_task_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ---------- Endpoints ----------


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    team_id: uuid.UUID | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(Project)
    if team_id:
        query = query.where(Project.team_id == team_id)
    query = query.order_by(Project.created_at.desc())

    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    body: ProjectCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    team_result = await db.execute(select(Team.id).where(Team.id == body.team_id))
    if team_result.first() is None:
        raise NotFoundError("Team", str(body.team_id))
    if not await is_team_member(db, body.team_id, current_user.id):
        raise PermissionDeniedError("Not a member of this team")

    project = Project(
        name=body.name,
        description=body.description,
        team_id=body.team_id,
        status=body.status.value,
        due_date=body.due_date,
        progress=0,
        task_count=0,
        completed_task_count=0,
    )
    db.add(project)
    await db.flush()
    await db.refresh(project)

    logger.info("Created project %s in team %s", project.id, project.team_id)
    return project


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await verify_project_access(project_id, current_user, db)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project = await verify_project_access(project_id, current_user, db)

    updates = body.model_dump(exclude_unset=True)
    # A null name or status is not an update
    updates = {k: v for k, v in updates.items() if v is not None or k in ("description", "due_date")}
    if not updates:
        raise BadRequestError("No fields to update")

    for field, value in updates.items():
        if isinstance(value, ProjectStatus):
            value = value.value
        setattr(project, field, value)

    await db.flush()
    await db.refresh(project)

    logger.info("Updated project %s: %s", project.id, ", ".join(sorted(updates)))
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project = await verify_project_access(project_id, current_user, db)

    await db.execute(delete(ProjectInsight).where(ProjectInsight.project_id == project.id))
    await db.execute(delete(Task).where(Task.project_id == project.id))
    await db.delete(project)
    await db.flush()

    logger.info("Deleted project %s", project_id)
    return Response(status_code=204)
