import uuid

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from teamboard.common.enums import InsightSeverity, InsightType
from teamboard.db.base import BaseModel


class ProjectInsight(BaseModel):
    __tablename__ = "project_insights"
    __table_args__ = (Index("ix_project_insights_type_severity", "type", "severity"),)

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[InsightType] = mapped_column(String(20), nullable=False)
    severity: Mapped[InsightSeverity] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
