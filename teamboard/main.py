from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamboard.api.middleware import RequestLogMiddleware
from teamboard.api.v1.router import v1_router
from teamboard.common.logging import get_logger, setup_logging
from teamboard.config import settings

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting Teamboard API (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="Teamboard API",
    description="Teams, projects, tasks, chat, standups and project insights",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware)

# API routes
app.include_router(v1_router, prefix="/api/v1")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if settings.APP_ENV == "development":
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "teamboard",
        "version": "1.0.0",
        "env": settings.APP_ENV,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
