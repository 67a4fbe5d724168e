import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.common.enums import InsightSeverity, InsightType
from teamboard.common.exceptions import NotFoundError
from teamboard.common.logging import get_logger
from teamboard.config import settings
from teamboard.core.insights.repository import InsightRepository, map_insight
from teamboard.core.insights.rules import RULES
from teamboard.core.insights.schemas import Insight
from teamboard.db.models.insight import ProjectInsight

logger = get_logger("insights.service")


class InsightService:
    def __init__(self, db: AsyncSession, dedupe: bool | None = None):
        self.db = db
        self.repository = InsightRepository(db)
        self.dedupe = settings.INSIGHT_DEDUPE_ENABLED if dedupe is None else dedupe

    async def generate_insights_for_project(
        self, project_id: uuid.UUID, now: datetime | None = None
    ) -> list[Insight]:
        snapshot = await self.repository.fetch_project_snapshot(project_id)
        if snapshot is None:
            raise NotFoundError("Project", str(project_id))

        overdue_count = await self.repository.count_overdue_tasks(project_id)
        now = now or datetime.now(timezone.utc)

        insights: list[Insight] = []
        for rule in RULES:
            draft = rule(snapshot, overdue_count, now)
            if draft is None:
                continue

            if self.dedupe:
                existing = await self.repository.find_insight(project_id, draft.type, draft.title)
                if existing is not None:
                    insights.append(existing)
                    continue

            insight = await self.repository.insert_insight(
                project_id, draft.type, draft.severity, draft.title, draft.description
            )
            insights.append(insight)

        logger.info(
            "Generated %d insight(s) for project %s (overdue=%d)",
            len(insights),
            project_id,
            overdue_count,
        )
        return insights

    async def list_insights(self, project_id: uuid.UUID | None = None) -> list[Insight]:
        query = select(ProjectInsight)
        if project_id:
            query = query.where(ProjectInsight.project_id == project_id)
        query = query.order_by(ProjectInsight.created_at.desc())

        result = await self.db.execute(query)
        return [map_insight(i) for i in result.scalars().all()]

    async def create_insight(
        self,
        project_id: uuid.UUID,
        type: InsightType,
        severity: InsightSeverity,
        title: str,
        description: str,
    ) -> Insight:
        if await self.repository.fetch_project_snapshot(project_id) is None:
            raise NotFoundError("Project", str(project_id))

        insight = await self.repository.insert_insight(project_id, type, severity, title, description)
        logger.info("Created %s insight '%s' for project %s", type.value, title, project_id)
        return insight

    async def delete_insight(self, insight_id: uuid.UUID) -> None:
        result = await self.db.execute(
            delete(ProjectInsight).where(ProjectInsight.id == insight_id)
        )
        if result.rowcount == 0:
            raise NotFoundError("Insight", str(insight_id))
        logger.info("Deleted insight %s", insight_id)
