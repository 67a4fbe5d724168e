from teamboard.db.models.chat import ChatChannel, ChatChannelParticipant, ChatMessage
from teamboard.db.models.insight import ProjectInsight
from teamboard.db.models.project import Project
from teamboard.db.models.standup import Standup
from teamboard.db.models.task import Task
from teamboard.db.models.team import Team, TeamMember
from teamboard.db.models.user import User

__all__ = [
    "ChatChannel",
    "ChatChannelParticipant",
    "ChatMessage",
    "Project",
    "ProjectInsight",
    "Standup",
    "Task",
    "Team",
    "TeamMember",
    "User",
]
