from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://teamboard:teamboard_dev@db:5432/teamboard"

    # Redis
    REDIS_URL: str = "redis://redis:6379/0"

    # Security
    SECRET_KEY: str = "dev-secret-key-not-for-production-use-only"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 10
    ALLOWED_ORIGINS: str = "*"

    # Workload
    WORKLOAD_MAX_CAPACITY: Annotated[int, Field(gt=0)] = 8
    WORKLOAD_OVERLOAD_THRESHOLD: Annotated[int, Field(ge=0, le=100)] = 80

    # Insights
    INSIGHT_STALE_HOLD_DAYS: int = 5
    INSIGHT_DEDUPE_ENABLED: bool = False

    # Background jobs
    OVERDUE_REFRESH_MINUTES: int = 60

    # App
    APP_ENV: str = "development"
    APP_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
