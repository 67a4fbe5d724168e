from fastapi import APIRouter

from teamboard.api.v1.auth import router as auth_router
from teamboard.api.v1.chat import router as chat_router
from teamboard.api.v1.dashboard import router as dashboard_router
from teamboard.api.v1.insights import router as insights_router
from teamboard.api.v1.projects import router as projects_router
from teamboard.api.v1.standups import router as standups_router
from teamboard.api.v1.tasks import router as tasks_router
from teamboard.api.v1.teams import router as teams_router
from teamboard.api.v1.users import router as users_router

v1_router = APIRouter()

v1_router.include_router(auth_router)
v1_router.include_router(users_router)
v1_router.include_router(teams_router)
v1_router.include_router(projects_router)
v1_router.include_router(tasks_router)
v1_router.include_router(chat_router)
v1_router.include_router(standups_router)
v1_router.include_router(insights_router)
v1_router.include_router(dashboard_router)
