from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from teamboard.config import settings

app = Celery(
    "teamboard",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_routes={
        "teamboard.tasks.insight_tasks.*": {"queue": "insights"},
    },
    beat_schedule={
        "refresh-overdue-tasks": {
            "task": "teamboard.tasks.insight_tasks.refresh_overdue_tasks",
            "schedule": settings.OVERDUE_REFRESH_MINUTES * 60.0,
        },
    },
)

app.autodiscover_tasks(["teamboard.tasks.insight_tasks"])


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs):
    from teamboard.common.logging import setup_logging

    setup_logging()
