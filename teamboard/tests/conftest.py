import os
import uuid
from collections.abc import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import JSON, event  # noqa: E402
from sqlalchemy.dialects.postgresql import JSONB  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from teamboard.common.enums import ProjectStatus, UserRole  # noqa: E402
from teamboard.common.security import create_access_token, get_password_hash  # noqa: E402
from teamboard.db.base import Base  # noqa: E402
from teamboard.db.models import *  # noqa: E402,F401,F403 - ensure all models loaded

# In-memory SQLite, one fresh schema per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# Make JSONB render as JSON for SQLite
@event.listens_for(Base.metadata, "before_create")
def _remap_jsonb(target, connection, **kw):
    if connection.dialect.name == "sqlite":
        for table in target.tables.values():
            for column in table.columns:
                if isinstance(column.type, JSONB):
                    column.type = JSON()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session):
    from teamboard.api.deps import get_db
    from teamboard.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db_session, name: str, password: str = "testpass123", role: UserRole = UserRole.MEMBER):
    from teamboard.db.models.user import User

    user = User(
        id=uuid.uuid4(),
        name=name,
        email=f"{name.lower().replace(' ', '_')}_{uuid.uuid4().hex[:8]}@test.com",
        hashed_password=get_password_hash(password),
        role=role.value,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


async def add_member(db_session, team, user, role: UserRole = UserRole.MEMBER):
    from teamboard.db.models.team import TeamMember

    member = TeamMember(team_id=team.id, user_id=user.id, role=role.value)
    db_session.add(member)
    await db_session.flush()
    return member


async def create_task(db_session, project, **fields):
    from teamboard.core.projects.progress import recalculate_project_progress
    from teamboard.db.models.task import Task

    fields.setdefault("title", "Task")
    task = Task(project_id=project.id, **fields)
    db_session.add(task)
    await db_session.flush()
    await recalculate_project_progress(db_session, project.id)
    return task


@pytest.fixture
async def test_user(db_session):
    return await create_user(db_session, "Alice")


@pytest.fixture
async def other_user(db_session):
    return await create_user(db_session, "Bob")


@pytest.fixture
def auth_headers(test_user):
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(other_user):
    token = create_access_token({"sub": str(other_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def team(db_session, test_user):
    from teamboard.db.models.team import Team

    team = Team(name="Platform", description="Core platform team", owner_id=test_user.id)
    db_session.add(team)
    await db_session.flush()
    await add_member(db_session, team, test_user, UserRole.OWNER)
    return team


@pytest.fixture
async def project(db_session, team):
    from teamboard.db.models.project import Project

    project = Project(
        name="Launch",
        team_id=team.id,
        status=ProjectStatus.ACTIVE.value,
        progress=0,
        task_count=0,
        completed_task_count=0,
    )
    db_session.add(project)
    await db_session.flush()
    await db_session.refresh(project)
    return project


@pytest.fixture
def make_user(db_session):
    async def _make(name: str, **kwargs):
        return await create_user(db_session, name, **kwargs)

    return _make


@pytest.fixture
def make_member(db_session):
    async def _make(team, user, role: UserRole = UserRole.MEMBER):
        return await add_member(db_session, team, user, role)

    return _make


@pytest.fixture
def make_task(db_session):
    async def _make(project, **fields):
        return await create_task(db_session, project, **fields)

    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}

    return _headers
