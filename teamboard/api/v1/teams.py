import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db, require_team_member
from teamboard.api.v1.auth import UserResponse
from teamboard.common.enums import UserRole
from teamboard.common.exceptions import ConflictError, NotFoundError
from teamboard.common.logging import get_logger
from teamboard.db.models.team import Team, TeamMember
from teamboard.db.models.user import User

router = APIRouter(prefix="/teams", tags=["Teams"])

logger = get_logger("api.teams")


# ---------- Schemas ----------


class TeamCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None


class AddMemberRequest(BaseModel):
    user_id: uuid.UUID
    role: UserRole = UserRole.MEMBER


class TeamMemberResponse(BaseModel):
    id: uuid.UUID
    team_id: uuid.UUID
    user_id: uuid.UUID
    role: str
    joined_at: datetime
    user: UserResponse | None = None

    model_config = {"from_attributes": True}


class TeamResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    owner_id: uuid.UUID
    members: list[TeamMemberResponse]
    created_at: datetime
    updated_at: datetime


# ---------- Endpoints ----------


@router.get("", response_model=list[TeamResponse])
async def list_teams(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Team)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.user_id == current_user.id)
        .order_by(Team.name)
        .execution_options(populate_existing=True)
    )
    return [_team_response(t) for t in result.scalars().unique().all()]


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    body: TeamCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    team = Team(name=body.name, description=body.description, owner_id=current_user.id)
    db.add(team)
    await db.flush()

    db.add(TeamMember(team_id=team.id, user_id=current_user.id, role=UserRole.OWNER.value))
    await db.flush()

    logger.info("Created team %s owned by %s", team.id, current_user.id)
    return _team_response(await _load_team(db, team.id))


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return _team_response(await _load_team(db, team_id))


@router.get("/{team_id}/members", response_model=list[TeamMemberResponse])
async def list_team_members(
    team_id: uuid.UUID,
    current_user: User = Depends(require_team_member),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(TeamMember)
        .join(User, User.id == TeamMember.user_id)
        .where(TeamMember.team_id == team_id)
        .order_by(User.name)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


@router.post("/{team_id}/members", response_model=TeamMemberResponse, status_code=201)
async def add_team_member(
    team_id: uuid.UUID,
    body: AddMemberRequest,
    current_user: User = Depends(require_team_member),
    db: AsyncSession = Depends(get_db),
):
    user_result = await db.execute(select(User.id).where(User.id == body.user_id))
    if user_result.first() is None:
        raise NotFoundError("User", str(body.user_id))

    existing = await db.execute(
        select(TeamMember.id).where(
            TeamMember.team_id == team_id, TeamMember.user_id == body.user_id
        )
    )
    if existing.first() is not None:
        raise ConflictError("User is already a team member")

    member = TeamMember(team_id=team_id, user_id=body.user_id, role=body.role.value)
    db.add(member)
    await db.flush()
    await db.refresh(member, attribute_names=["joined_at", "user"])

    logger.info("Added user %s to team %s as %s", body.user_id, team_id, body.role.value)
    return member


async def _load_team(db: AsyncSession, team_id: uuid.UUID) -> Team:
    result = await db.execute(
        select(Team).where(Team.id == team_id).execution_options(populate_existing=True)
    )
    team = result.scalar_one_or_none()
    if not team:
        raise NotFoundError("Team", str(team_id))
    return team


def _team_response(team: Team) -> TeamResponse:
    members = sorted(team.members, key=lambda m: m.user.name if m.user else "")
    return TeamResponse(
        id=team.id,
        name=team.name,
        description=team.description,
        owner_id=team.owner_id,
        members=[TeamMemberResponse.model_validate(m) for m in members],
        created_at=team.created_at,
        updated_at=team.updated_at,
    )
