import datetime as dt
import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db
from teamboard.api.v1.auth import UserResponse
from teamboard.common.exceptions import NotFoundError
from teamboard.common.logging import get_logger
from teamboard.db.base import utcnow
from teamboard.db.models.standup import Standup
from teamboard.db.models.team import Team
from teamboard.db.models.user import User

router = APIRouter(prefix="/standups", tags=["Standups"])

logger = get_logger("api.standups")


# ---------- Schemas ----------


class StandupSubmitRequest(BaseModel):
    team_id: uuid.UUID
    date: dt.date
    yesterday: str = Field(min_length=1)
    today: str = Field(min_length=1)
    blockers: str | None = None


class StandupResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    user: UserResponse | None = None
    team_id: uuid.UUID
    date: dt.date
    yesterday: str
    today: str
    blockers: str | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}


# ---------- Endpoints ----------


@router.get("", response_model=list[StandupResponse])
async def list_standups(
    team_id: uuid.UUID,
    date: dt.date | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(Standup).where(Standup.team_id == team_id)
    if date:
        query = query.where(Standup.date == date)
    query = query.order_by(Standup.created_at.desc())

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{standup_id}", response_model=StandupResponse)
async def get_standup(
    standup_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _load_standup(db, standup_id)


@router.post("", response_model=StandupResponse, status_code=201)
async def submit_standup(
    body: StandupSubmitRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    team_result = await db.execute(select(Team.id).where(Team.id == body.team_id))
    if team_result.first() is None:
        raise NotFoundError("Team", str(body.team_id))

    result = await db.execute(
        select(Standup).where(
            Standup.user_id == current_user.id,
            Standup.team_id == body.team_id,
            Standup.date == body.date,
        )
    )
    standup = result.scalar_one_or_none()

    # One standup per user, team and day; resubmitting replaces it
    if standup:
        standup.yesterday = body.yesterday
        standup.today = body.today
        standup.blockers = body.blockers
        standup.created_at = utcnow()
    else:
        standup = Standup(
            user_id=current_user.id,
            team_id=body.team_id,
            date=body.date,
            yesterday=body.yesterday,
            today=body.today,
            blockers=body.blockers,
        )
        db.add(standup)

    await db.flush()
    logger.info("Standup for user %s team %s on %s saved", current_user.id, body.team_id, body.date)
    return await _load_standup(db, standup.id)


async def _load_standup(db: AsyncSession, standup_id: uuid.UUID) -> Standup:
    result = await db.execute(
        select(Standup).where(Standup.id == standup_id).execution_options(populate_existing=True)
    )
    standup = result.scalar_one_or_none()
    if not standup:
        raise NotFoundError("Standup", str(standup_id))
    return standup
