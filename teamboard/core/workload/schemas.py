import uuid

from pydantic import BaseModel

from teamboard.core.insights.schemas import UserSummary


class UserWorkload(BaseModel):
    user_id: uuid.UUID
    user: UserSummary
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    in_progress_tasks: int
    workload_percentage: int
    is_overloaded: bool
