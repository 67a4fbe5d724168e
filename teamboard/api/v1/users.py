import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_current_user, get_db
from teamboard.api.v1.auth import UserResponse
from teamboard.common.exceptions import BadRequestError, ConflictError, NotFoundError
from teamboard.db.models.user import User

router = APIRouter(prefix="/users", tags=["Users"])


# ---------- Schemas ----------


class UserUpdateRequest(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    avatar: str | None = None


# ---------- Endpoints ----------


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updates = body.model_dump(exclude_unset=True)
    # Empty name/email are ignored, avatar may be cleared
    updates = {k: v for k, v in updates.items() if k == "avatar" or v}
    if not updates:
        raise BadRequestError("No fields to update")

    if "email" in updates and updates["email"] != current_user.email:
        existing = await db.execute(select(User.id).where(User.email == updates["email"]))
        if existing.first() is not None:
            raise ConflictError("Email already registered")

    for field, value in updates.items():
        setattr(current_user, field, value)

    await db.flush()
    await db.refresh(current_user)
    return current_user


@router.get("", response_model=list[UserResponse])
async def list_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).order_by(User.name))
    return result.scalars().all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", str(user_id))
    return user
