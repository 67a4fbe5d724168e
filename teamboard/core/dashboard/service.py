from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.common.rounding import round_half_up
from teamboard.core.dashboard.schemas import DashboardMetrics
from teamboard.core.insights.repository import InsightRepository
from teamboard.core.insights.schemas import DashboardAggregates


def build_dashboard_metrics(aggregates: DashboardAggregates) -> DashboardMetrics:
    return DashboardMetrics(
        total_projects=aggregates.total_projects,
        active_projects=aggregates.active_projects,
        total_tasks=aggregates.total_tasks,
        completed_tasks=aggregates.completed_tasks,
        overdue_tasks=aggregates.overdue_tasks,
        team_members=aggregates.user_count,
        projects_at_risk=aggregates.high_risk_insight_count,
        average_progress=round_half_up(aggregates.average_progress),
    )


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.repository = InsightRepository(db)

    async def get_dashboard_metrics(self) -> DashboardMetrics:
        aggregates = await self.repository.fetch_dashboard_aggregates()
        return build_dashboard_metrics(aggregates)
