import uuid
from datetime import date, datetime

from pydantic import BaseModel

from teamboard.common.enums import InsightSeverity, InsightType, ProjectStatus


class ProjectSnapshot(BaseModel):
    id: uuid.UUID
    name: str
    status: ProjectStatus
    progress: int
    due_date: date | None
    task_count: int
    completed_task_count: int
    updated_at: datetime


class InsightDraft(BaseModel):
    type: InsightType
    severity: InsightSeverity
    title: str
    description: str


class Insight(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    type: InsightType
    severity: InsightSeverity
    title: str
    description: str
    created_at: datetime


class UserSummary(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    avatar: str | None
    role: str
    created_at: datetime


class MemberTaskCounts(BaseModel):
    user: UserSummary
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    in_progress_tasks: int


class DashboardAggregates(BaseModel):
    total_projects: int
    active_projects: int
    average_progress: float
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    user_count: int
    high_risk_insight_count: int
