import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.common.logging import get_logger
from teamboard.common.rounding import round_half_up
from teamboard.config import settings
from teamboard.core.insights.repository import InsightRepository
from teamboard.core.insights.schemas import MemberTaskCounts
from teamboard.core.workload.schemas import UserWorkload

logger = get_logger("workload.service")


def workload_percentage(total_tasks: int, max_capacity: int) -> int:
    return min(100, round_half_up(total_tasks / max_capacity * 100))


def build_user_workload(
    counts: MemberTaskCounts, max_capacity: int, overload_threshold: int
) -> UserWorkload:
    percentage = workload_percentage(counts.total_tasks, max_capacity)
    return UserWorkload(
        user_id=counts.user.id,
        user=counts.user,
        total_tasks=counts.total_tasks,
        completed_tasks=counts.completed_tasks,
        overdue_tasks=counts.overdue_tasks,
        in_progress_tasks=counts.in_progress_tasks,
        workload_percentage=percentage,
        is_overloaded=percentage > overload_threshold,
    )


class WorkloadService:
    def __init__(
        self,
        db: AsyncSession,
        max_capacity: int | None = None,
        overload_threshold: int | None = None,
    ):
        self.repository = InsightRepository(db)
        self.max_capacity = settings.WORKLOAD_MAX_CAPACITY if max_capacity is None else max_capacity
        self.overload_threshold = (
            settings.WORKLOAD_OVERLOAD_THRESHOLD if overload_threshold is None else overload_threshold
        )
        if self.max_capacity <= 0:
            raise ValueError("max_capacity must be positive")

    async def get_team_workload(self, team_id: uuid.UUID) -> list[UserWorkload]:
        rows = await self.repository.fetch_team_task_counts(team_id)
        workloads = [
            build_user_workload(row, self.max_capacity, self.overload_threshold) for row in rows
        ]
        logger.debug(
            "Team %s workload: %d member(s), %d overloaded",
            team_id,
            len(workloads),
            sum(1 for w in workloads if w.is_overloaded),
        )
        return workloads
