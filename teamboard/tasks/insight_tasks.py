import asyncio
import uuid

from teamboard.common.logging import get_logger
from teamboard.tasks.celery_app import app

logger = get_logger("tasks.insights")


def _run_async(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@app.task(name="teamboard.tasks.insight_tasks.refresh_overdue_tasks")
def refresh_overdue_tasks():
    """Celery Beat task: recompute the overdue flag on every task."""
    logger.info("Refreshing overdue task flags")

    async def _refresh():
        from teamboard.core.projects.progress import mark_overdue_tasks
        from teamboard.db.session import async_session_factory

        async with async_session_factory() as db:
            try:
                changed = await mark_overdue_tasks(db)
                await db.commit()
                return changed
            except Exception as e:
                await db.rollback()
                logger.error("Overdue refresh failed: %s", e)
                raise

    return _run_async(_refresh())


@app.task(name="teamboard.tasks.insight_tasks.generate_project_insights")
def generate_project_insights(project_id: str):
    logger.info("Generating insights for project %s", project_id)

    async def _generate():
        from teamboard.core.insights.service import InsightService
        from teamboard.db.session import async_session_factory

        async with async_session_factory() as db:
            try:
                insights = await InsightService(db).generate_insights_for_project(
                    uuid.UUID(project_id)
                )
                await db.commit()
                return [str(i.id) for i in insights]
            except Exception as e:
                await db.rollback()
                logger.error("Insight generation failed for project %s: %s", project_id, e)
                raise

    return _run_async(_generate())
