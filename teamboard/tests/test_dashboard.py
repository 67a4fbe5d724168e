from datetime import date, timedelta

import pytest

from teamboard.common.enums import InsightSeverity, InsightType, ProjectStatus, TaskStatus
from teamboard.core.dashboard.service import DashboardService, build_dashboard_metrics
from teamboard.core.insights.schemas import DashboardAggregates
from teamboard.db.models.insight import ProjectInsight
from teamboard.db.models.project import Project


def test_build_metrics_rounds_average_half_up():
    metrics = build_dashboard_metrics(
        DashboardAggregates(
            total_projects=2,
            active_projects=1,
            average_progress=42.5,
            total_tasks=0,
            completed_tasks=0,
            overdue_tasks=0,
            user_count=3,
            high_risk_insight_count=0,
        )
    )
    assert metrics.average_progress == 43
    assert metrics.team_members == 3


@pytest.mark.asyncio
async def test_metrics_with_no_projects(db_session, test_user):
    metrics = await DashboardService(db_session).get_dashboard_metrics()
    assert metrics.total_projects == 0
    assert metrics.active_projects == 0
    assert metrics.average_progress == 0
    assert metrics.total_tasks == 0
    assert metrics.team_members == 1


@pytest.mark.asyncio
async def test_metrics_aggregate_counts(db_session, team, project, make_task):
    await make_task(project, status=TaskStatus.DONE.value)
    await make_task(project, status=TaskStatus.TODO.value)
    await make_task(
        project,
        status=TaskStatus.TODO.value,
        due_date=date.today() - timedelta(days=1),
        is_overdue=True,
    )

    db_session.add(
        Project(
            name="Archive",
            team_id=team.id,
            status=ProjectStatus.COMPLETED.value,
            progress=100,
        )
    )
    db_session.add_all(
        [
            ProjectInsight(
                project_id=project.id,
                type=InsightType.RISK.value,
                severity=InsightSeverity.HIGH.value,
                title="Overdue Tasks Detected",
                description="5 tasks are overdue.",
            ),
            ProjectInsight(
                project_id=project.id,
                type=InsightType.RISK.value,
                severity=InsightSeverity.MEDIUM.value,
                title="No Completed Tasks",
                description="none done",
            ),
            ProjectInsight(
                project_id=project.id,
                type=InsightType.HEALTH.value,
                severity=InsightSeverity.HIGH.value,
                title="odd",
                description="not a risk",
            ),
        ]
    )
    await db_session.flush()

    metrics = await DashboardService(db_session).get_dashboard_metrics()
    # Launch is at 33% (1 of 3), Archive at 100%
    assert metrics.total_projects == 2
    assert metrics.active_projects == 1
    assert metrics.average_progress == 67
    assert metrics.total_tasks == 3
    assert metrics.completed_tasks == 1
    assert metrics.overdue_tasks == 1
    assert metrics.projects_at_risk == 1


@pytest.mark.asyncio
async def test_metrics_endpoint(client, auth_headers, project):
    response = await client.get("/api/v1/dashboard/metrics", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_projects"] == 1
    assert data["average_progress"] == 0


@pytest.mark.asyncio
async def test_metrics_endpoint_requires_auth(client):
    response = await client.get("/api/v1/dashboard/metrics")
    assert response.status_code == 401
