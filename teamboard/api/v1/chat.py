import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db
from teamboard.api.v1.auth import UserResponse
from teamboard.common.enums import ChatChannelType
from teamboard.common.exceptions import NotFoundError
from teamboard.common.logging import get_logger
from teamboard.db.models.chat import ChatChannel, ChatChannelParticipant, ChatMessage
from teamboard.db.models.user import User

router = APIRouter(prefix="/chat", tags=["Chat"])

logger = get_logger("api.chat")


# ---------- Schemas ----------


class ChannelCreateRequest(BaseModel):
    type: ChatChannelType
    participant_ids: list[uuid.UUID] = Field(min_length=1)
    name: str | None = None
    team_id: uuid.UUID | None = None
    project_id: uuid.UUID | None = None


class MessageCreateRequest(BaseModel):
    channel_id: uuid.UUID
    content: str = Field(min_length=1)


class ChannelResponse(BaseModel):
    id: uuid.UUID
    name: str | None
    type: str
    team_id: uuid.UUID | None
    project_id: uuid.UUID | None
    participants: list[UserResponse]
    unread_count: int | None = None
    created_at: datetime


class MessageResponse(BaseModel):
    id: uuid.UUID
    content: str
    sender_id: uuid.UUID
    sender: UserResponse | None = None
    channel_id: uuid.UUID
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# ---------- Endpoints ----------


@router.get("/channels", response_model=list[ChannelResponse])
async def list_channels(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ChatChannel)
        .join(ChatChannelParticipant, ChatChannelParticipant.channel_id == ChatChannel.id)
        .where(ChatChannelParticipant.user_id == current_user.id)
        .order_by(ChatChannel.created_at.desc())
    )
    channels = result.scalars().unique().all()

    responses = []
    for channel in channels:
        unread = await _unread_count(db, channel.id, current_user.id)
        responses.append(_channel_response(channel, unread_count=unread))
    return responses


@router.get("/channels/{channel_id}", response_model=ChannelResponse)
async def get_channel(
    channel_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return _channel_response(await _load_channel(db, channel_id))


@router.post("/channels", response_model=ChannelResponse, status_code=201)
async def create_channel(
    body: ChannelCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    participant_ids = list(dict.fromkeys(body.participant_ids))
    found = await db.execute(select(User.id).where(User.id.in_(participant_ids)))
    missing = set(participant_ids) - set(found.scalars().all())
    if missing:
        raise NotFoundError("User", str(sorted(missing, key=str)[0]))

    channel = ChatChannel(
        name=body.name,
        type=body.type.value,
        team_id=body.team_id,
        project_id=body.project_id,
    )
    db.add(channel)
    await db.flush()

    for user_id in participant_ids:
        db.add(ChatChannelParticipant(channel_id=channel.id, user_id=user_id))
    await db.flush()

    logger.info("Created %s channel %s with %d participant(s)", body.type.value, channel.id, len(participant_ids))
    return _channel_response(await _load_channel(db, channel.id))


@router.get("/channels/{channel_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    channel_id: uuid.UUID,
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.channel_id == channel_id)
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
    )
    # Newest N, returned oldest first
    return list(reversed(result.scalars().all()))


@router.post("/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    body: MessageCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _load_channel(db, body.channel_id)

    message = ChatMessage(
        channel_id=body.channel_id,
        sender_id=current_user.id,
        content=body.content,
        is_read=False,
    )
    db.add(message)
    await db.flush()
    await db.refresh(message, attribute_names=["created_at", "updated_at", "sender"])
    return message


@router.patch("/channels/{channel_id}/read", status_code=204)
async def mark_channel_read(
    channel_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await db.execute(
        update(ChatMessage)
        .where(
            ChatMessage.channel_id == channel_id,
            ChatMessage.sender_id != current_user.id,
            ChatMessage.is_read.is_(False),
        )
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await db.flush()
    return Response(status_code=204)


async def _load_channel(db: AsyncSession, channel_id: uuid.UUID) -> ChatChannel:
    result = await db.execute(
        select(ChatChannel)
        .where(ChatChannel.id == channel_id)
        .execution_options(populate_existing=True)
    )
    channel = result.scalar_one_or_none()
    if not channel:
        raise NotFoundError("Channel", str(channel_id))
    return channel


async def _unread_count(db: AsyncSession, channel_id: uuid.UUID, user_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(ChatMessage.id)).where(
            ChatMessage.channel_id == channel_id,
            ChatMessage.sender_id != user_id,
            ChatMessage.is_read.is_(False),
        )
    )
    return result.scalar() or 0


def _channel_response(channel: ChatChannel, unread_count: int | None = None) -> ChannelResponse:
    return ChannelResponse(
        id=channel.id,
        name=channel.name,
        type=channel.type,
        team_id=channel.team_id,
        project_id=channel.project_id,
        participants=[UserResponse.model_validate(u) for u in channel.participants],
        unread_count=unread_count,
        created_at=channel.created_at,
    )
