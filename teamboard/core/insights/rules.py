"""Heuristics that turn a project snapshot into advisory insights.

Each rule is a pure function returning an ``InsightDraft`` or ``None``. The
service evaluates them in ``RULES`` order and persists whatever fires.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from teamboard.common.enums import InsightSeverity, InsightType, ProjectStatus
from teamboard.config import settings
from teamboard.core.insights.schemas import InsightDraft, ProjectSnapshot

NEAR_COMPLETION_PROGRESS = 80
HIGH_OVERDUE_COUNT = 3


def overdue_tasks_rule(
    snapshot: ProjectSnapshot, overdue_count: int, now: datetime
) -> InsightDraft | None:
    if overdue_count <= 0:
        return None

    noun = "task is" if overdue_count == 1 else "tasks are"
    return InsightDraft(
        type=InsightType.RISK,
        severity=InsightSeverity.HIGH if overdue_count > HIGH_OVERDUE_COUNT else InsightSeverity.MEDIUM,
        title="Overdue Tasks Detected",
        description=f"{overdue_count} {noun} overdue. This may impact project deadlines.",
    )


def near_completion_rule(
    snapshot: ProjectSnapshot, overdue_count: int, now: datetime
) -> InsightDraft | None:
    if snapshot.progress < NEAR_COMPLETION_PROGRESS or snapshot.status != ProjectStatus.ACTIVE:
        return None

    return InsightDraft(
        type=InsightType.HEALTH,
        severity=InsightSeverity.LOW,
        title="Project Nearing Completion",
        description=f"{snapshot.name} is {snapshot.progress}% complete and on track.",
    )


def stale_on_hold_rule(
    snapshot: ProjectSnapshot, overdue_count: int, now: datetime
) -> InsightDraft | None:
    if snapshot.status != ProjectStatus.ON_HOLD:
        return None

    days_on_hold = days_since(snapshot.updated_at, now)
    if days_on_hold <= settings.INSIGHT_STALE_HOLD_DAYS:
        return None

    return InsightDraft(
        type=InsightType.SUGGESTION,
        severity=InsightSeverity.MEDIUM,
        title="Consider Resuming Project",
        description=(
            f"{snapshot.name} has been on hold for {days_on_hold} days. "
            "Consider resuming or archiving."
        ),
    )


def zero_progress_rule(
    snapshot: ProjectSnapshot, overdue_count: int, now: datetime
) -> InsightDraft | None:
    if snapshot.task_count <= 0 or snapshot.completed_task_count != 0:
        return None

    return InsightDraft(
        type=InsightType.RISK,
        severity=InsightSeverity.MEDIUM,
        title="No Completed Tasks",
        description="Project has tasks but none are completed. Team may need support.",
    )


Rule = Callable[[ProjectSnapshot, int, datetime], InsightDraft | None]

RULES: list[Rule] = [
    overdue_tasks_rule,
    near_completion_rule,
    stale_on_hold_rule,
    zero_progress_rule,
]


def days_since(moment: datetime, now: datetime) -> int:
    """Whole days elapsed between ``moment`` and ``now``; naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - moment) // timedelta(days=1)
