import uuid

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db, verify_project_access
from teamboard.common.enums import InsightSeverity, InsightType
from teamboard.core.insights.schemas import Insight
from teamboard.core.insights.service import InsightService
from teamboard.db.models.user import User

router = APIRouter(prefix="/insights", tags=["Insights"])


# ---------- Schemas ----------


class InsightCreateRequest(BaseModel):
    project_id: uuid.UUID
    type: InsightType
    severity: InsightSeverity
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)


# ---------- Endpoints ----------


@router.get("", response_model=list[Insight])
async def list_insights(
    project_id: uuid.UUID | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await InsightService(db).list_insights(project_id)


@router.post("", response_model=Insight, status_code=201)
async def create_insight(
    body: InsightCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await InsightService(db).create_insight(
        body.project_id, body.type, body.severity, body.title, body.description
    )


@router.post("/generate/{project_id}", response_model=list[Insight])
async def generate_insights(
    project_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await verify_project_access(project_id, current_user, db)
    return await InsightService(db).generate_insights_for_project(project_id)


@router.delete("/{insight_id}", status_code=204)
async def delete_insight(
    insight_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await InsightService(db).delete_insight(insight_id)
    return Response(status_code=204)
