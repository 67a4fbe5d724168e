"""Query layer feeding the insight, workload and dashboard engines.

Every query result is mapped into a typed schema here, so the engines never
see raw rows.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.common.enums import (
    InsightSeverity,
    InsightType,
    ProjectStatus,
    TaskStatus,
)
from teamboard.core.insights.schemas import (
    DashboardAggregates,
    Insight,
    MemberTaskCounts,
    ProjectSnapshot,
    UserSummary,
)
from teamboard.db.models.insight import ProjectInsight
from teamboard.db.models.project import Project
from teamboard.db.models.task import Task
from teamboard.db.models.team import TeamMember
from teamboard.db.models.user import User


class InsightRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_project_snapshot(self, project_id: uuid.UUID) -> ProjectSnapshot | None:
        result = await self.db.execute(
            select(
                Project.id,
                Project.name,
                Project.status,
                Project.progress,
                Project.due_date,
                Project.task_count,
                Project.completed_task_count,
                Project.updated_at,
            ).where(Project.id == project_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return _map_snapshot(row)

    async def count_overdue_tasks(self, project_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(Task.id)).where(
                Task.project_id == project_id, Task.is_overdue.is_(True)
            )
        )
        return result.scalar() or 0

    async def insert_insight(
        self,
        project_id: uuid.UUID,
        type: InsightType,
        severity: InsightSeverity,
        title: str,
        description: str,
    ) -> Insight:
        insight = ProjectInsight(
            project_id=project_id,
            type=type.value,
            severity=severity.value,
            title=title,
            description=description,
        )
        self.db.add(insight)
        await self.db.flush()
        await self.db.refresh(insight)
        return map_insight(insight)

    async def find_insight(
        self, project_id: uuid.UUID, type: InsightType, title: str
    ) -> Insight | None:
        result = await self.db.execute(
            select(ProjectInsight)
            .where(
                ProjectInsight.project_id == project_id,
                ProjectInsight.type == type.value,
                ProjectInsight.title == title,
            )
            .order_by(ProjectInsight.created_at.desc())
            .limit(1)
        )
        insight = result.scalar_one_or_none()
        return map_insight(insight) if insight else None

    async def fetch_team_task_counts(self, team_id: uuid.UUID) -> list[MemberTaskCounts]:
        result = await self.db.execute(
            select(
                User.id,
                User.name,
                User.email,
                User.avatar,
                User.role,
                User.created_at,
                func.count(Task.id).label("total_tasks"),
                func.count(case((Task.status == TaskStatus.DONE.value, Task.id))).label(
                    "completed_tasks"
                ),
                func.count(case((Task.is_overdue.is_(True), Task.id))).label("overdue_tasks"),
                func.count(case((Task.status == TaskStatus.IN_PROGRESS.value, Task.id))).label(
                    "in_progress_tasks"
                ),
            )
            .join(TeamMember, TeamMember.user_id == User.id)
            .outerjoin(Task, Task.assignee_id == User.id)
            .where(TeamMember.team_id == team_id)
            .group_by(User.id, User.name, User.email, User.avatar, User.role, User.created_at)
            .order_by(User.name)
        )
        return [_map_member_counts(row) for row in result.all()]

    async def fetch_dashboard_aggregates(self) -> DashboardAggregates:
        projects = (
            await self.db.execute(
                select(
                    func.count(Project.id),
                    func.count(case((Project.status == ProjectStatus.ACTIVE.value, Project.id))),
                    func.coalesce(func.avg(Project.progress), 0),
                )
            )
        ).one()

        tasks = (
            await self.db.execute(
                select(
                    func.count(Task.id),
                    func.count(case((Task.status == TaskStatus.DONE.value, Task.id))),
                    func.count(case((Task.is_overdue.is_(True), Task.id))),
                )
            )
        ).one()

        user_count = (await self.db.execute(select(func.count(User.id)))).scalar() or 0

        high_risk = (
            await self.db.execute(
                select(func.count(ProjectInsight.id)).where(
                    ProjectInsight.type == InsightType.RISK.value,
                    ProjectInsight.severity == InsightSeverity.HIGH.value,
                )
            )
        ).scalar() or 0

        return DashboardAggregates(
            total_projects=projects[0] or 0,
            active_projects=projects[1] or 0,
            average_progress=float(projects[2] or 0),
            total_tasks=tasks[0] or 0,
            completed_tasks=tasks[1] or 0,
            overdue_tasks=tasks[2] or 0,
            user_count=user_count,
            high_risk_insight_count=high_risk,
        )


# ---------- Row mapping ----------


def map_insight(insight: ProjectInsight) -> Insight:
    return Insight(
        id=insight.id,
        project_id=insight.project_id,
        type=insight.type,
        severity=insight.severity,
        title=insight.title,
        description=insight.description,
        created_at=insight.created_at,
    )


def _map_snapshot(row: Any) -> ProjectSnapshot:
    return ProjectSnapshot(
        id=row.id,
        name=row.name,
        status=row.status,
        progress=row.progress,
        due_date=row.due_date,
        task_count=row.task_count,
        completed_task_count=row.completed_task_count,
        updated_at=row.updated_at,
    )


def _map_member_counts(row: Any) -> MemberTaskCounts:
    return MemberTaskCounts(
        user=UserSummary(
            id=row.id,
            name=row.name,
            email=row.email,
            avatar=row.avatar,
            role=row.role,
            created_at=row.created_at,
        ),
        total_tasks=row.total_tasks,
        completed_tasks=row.completed_tasks,
        overdue_tasks=row.overdue_tasks,
        in_progress_tasks=row.in_progress_tasks,
    )
