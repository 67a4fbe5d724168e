import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.api.deps import get_db
from teamboard.common.enums import UserRole
from teamboard.common.exceptions import AuthenticationError, ConflictError
from teamboard.common.logging import get_logger
from teamboard.common.security import create_access_token, get_password_hash, verify_password
from teamboard.db.models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = get_logger("api.auth")


# ---------- Schemas ----------


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8, description="At least 8 characters")
    role: UserRole = UserRole.MEMBER


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    avatar: str | None
    role: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


# ---------- Endpoints ----------


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == body.email))
    if result.scalar_one_or_none():
        raise ConflictError("Email already registered")

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=body.role.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("Registered user %s", user.id)
    return AuthResponse(user=UserResponse.model_validate(user), token=_issue_token(user))


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(body.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    return AuthResponse(user=UserResponse.model_validate(user), token=_issue_token(user))


def _issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})
