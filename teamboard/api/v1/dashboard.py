import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db, require_team_member
from teamboard.core.dashboard.schemas import DashboardMetrics
from teamboard.core.dashboard.service import DashboardService
from teamboard.core.workload.schemas import UserWorkload
from teamboard.core.workload.service import WorkloadService
from teamboard.db.models.user import User

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/metrics", response_model=DashboardMetrics)
async def get_dashboard_metrics(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService(db).get_dashboard_metrics()


@router.get("/workload/{team_id}", response_model=list[UserWorkload])
async def get_team_workload(
    team_id: uuid.UUID,
    current_user: User = Depends(require_team_member),
    db: AsyncSession = Depends(get_db),
):
    return await WorkloadService(db).get_team_workload(team_id)
