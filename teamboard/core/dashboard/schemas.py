from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    total_projects: int
    active_projects: int
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    team_members: int
    projects_at_risk: int
    average_progress: int
