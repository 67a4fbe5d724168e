import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from teamboard.config import settings
from teamboard.tasks.celery_app import app
from teamboard.tasks.insight_tasks import generate_project_insights, refresh_overdue_tasks


def _session_factory(session):
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory


def test_overdue_refresh_is_scheduled():
    entry = app.conf.beat_schedule["refresh-overdue-tasks"]
    assert entry["task"] == "teamboard.tasks.insight_tasks.refresh_overdue_tasks"
    assert entry["schedule"] == settings.OVERDUE_REFRESH_MINUTES * 60


def test_refresh_overdue_tasks_commits():
    session = AsyncMock()
    with (
        patch("teamboard.db.session.async_session_factory", _session_factory(session)),
        patch("teamboard.core.projects.progress.mark_overdue_tasks", AsyncMock(return_value=3)),
    ):
        assert refresh_overdue_tasks() == 3

    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()


def test_refresh_overdue_tasks_rolls_back_on_error():
    session = AsyncMock()
    with (
        patch("teamboard.db.session.async_session_factory", _session_factory(session)),
        patch(
            "teamboard.core.projects.progress.mark_overdue_tasks",
            AsyncMock(side_effect=RuntimeError("db down")),
        ),
    ):
        with pytest.raises(RuntimeError):
            refresh_overdue_tasks()

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


def test_generate_project_insights_returns_ids():
    session = AsyncMock()
    insight_id = uuid.uuid4()
    service = MagicMock()
    service.return_value.generate_insights_for_project = AsyncMock(
        return_value=[SimpleNamespace(id=insight_id)]
    )
    project_id = uuid.uuid4()

    with (
        patch("teamboard.db.session.async_session_factory", _session_factory(session)),
        patch("teamboard.core.insights.service.InsightService", service),
    ):
        assert generate_project_insights(str(project_id)) == [str(insight_id)]

    service.return_value.generate_insights_for_project.assert_awaited_once_with(project_id)
    session.commit.assert_awaited_once()
