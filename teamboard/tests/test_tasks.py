from datetime import date, timedelta

import pytest

YESTERDAY = (date.today() - timedelta(days=1)).isoformat()
TOMORROW = (date.today() + timedelta(days=1)).isoformat()


async def _create_task(client, headers, project, **fields):
    payload = {"title": "Write docs", "project_id": str(project.id)}
    payload.update(fields)
    response = await client.post("/api/v1/tasks", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def _get_project(client, headers, project):
    response = await client.get(f"/api/v1/projects/{project.id}", headers=headers)
    return response.json()


@pytest.mark.asyncio
async def test_create_task_defaults(client, auth_headers, project):
    task = await _create_task(client, auth_headers, project)
    assert task["status"] == "backlog"
    assert task["priority"] == "medium"
    assert task["tags"] == []
    assert task["is_overdue"] is False
    assert task["assignee"] is None


@pytest.mark.asyncio
async def test_create_task_with_assignee(client, auth_headers, project, other_user):
    task = await _create_task(
        client, auth_headers, project, assignee_id=str(other_user.id), tags=["api", "docs"]
    )
    assert task["assignee"]["name"] == "Bob"
    assert task["tags"] == ["api", "docs"]


@pytest.mark.asyncio
async def test_create_task_unknown_project(client, auth_headers):
    response = await client.post(
        "/api/v1/tasks",
        headers=auth_headers,
        json={"title": "x", "project_id": "00000000-0000-0000-0000-000000000000"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_task_unknown_assignee(client, auth_headers, project):
    response = await client.post(
        "/api/v1/tasks",
        headers=auth_headers,
        json={
            "title": "x",
            "project_id": str(project.id),
            "assignee_id": "00000000-0000-0000-0000-000000000000",
        },
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_overdue_flag_follows_due_date_and_status(client, auth_headers, project):
    task = await _create_task(client, auth_headers, project, due_date=YESTERDAY, status="todo")
    assert task["is_overdue"] is True

    done = await client.patch(
        f"/api/v1/tasks/{task['id']}/status", headers=auth_headers, json={"status": "done"}
    )
    assert done.json()["is_overdue"] is False

    reopened = await client.put(
        f"/api/v1/tasks/{task['id']}", headers=auth_headers, json={"status": "review"}
    )
    assert reopened.json()["is_overdue"] is True

    moved = await client.put(
        f"/api/v1/tasks/{task['id']}", headers=auth_headers, json={"due_date": TOMORROW}
    )
    assert moved.json()["is_overdue"] is False


@pytest.mark.asyncio
async def test_project_progress_tracks_tasks(client, auth_headers, project):
    first = await _create_task(client, auth_headers, project, status="todo")
    await _create_task(client, auth_headers, project, status="todo")
    await _create_task(client, auth_headers, project, status="done")

    data = await _get_project(client, auth_headers, project)
    assert data["task_count"] == 3
    assert data["completed_task_count"] == 1
    assert data["progress"] == 33

    await client.patch(
        f"/api/v1/tasks/{first['id']}/status", headers=auth_headers, json={"status": "done"}
    )
    data = await _get_project(client, auth_headers, project)
    assert data["progress"] == 67

    await client.delete(f"/api/v1/tasks/{first['id']}", headers=auth_headers)
    data = await _get_project(client, auth_headers, project)
    assert data["task_count"] == 2
    assert data["progress"] == 50


@pytest.mark.asyncio
async def test_update_task_without_fields(client, auth_headers, project):
    task = await _create_task(client, auth_headers, project)
    response = await client.put(f"/api/v1/tasks/{task['id']}", headers=auth_headers, json={})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_clear_assignee(client, auth_headers, project, test_user):
    task = await _create_task(client, auth_headers, project, assignee_id=str(test_user.id))
    response = await client.put(
        f"/api/v1/tasks/{task['id']}", headers=auth_headers, json={"assignee_id": None}
    )
    assert response.status_code == 200
    assert response.json()["assignee_id"] is None


@pytest.mark.asyncio
async def test_list_tasks_by_project(client, auth_headers, project):
    await _create_task(client, auth_headers, project, title="One")
    await _create_task(client, auth_headers, project, title="Two")

    response = await client.get(
        "/api/v1/tasks", headers=auth_headers, params={"project_id": str(project.id)}
    )
    assert response.status_code == 200
    assert sorted(t["title"] for t in response.json()) == ["One", "Two"]


@pytest.mark.asyncio
async def test_invalid_status_rejected(client, auth_headers, project):
    task = await _create_task(client, auth_headers, project)
    response = await client.patch(
        f"/api/v1/tasks/{task['id']}/status", headers=auth_headers, json={"status": "blocked"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_missing_task(client, auth_headers):
    response = await client.delete(
        "/api/v1/tasks/00000000-0000-0000-0000-000000000000", headers=auth_headers
    )
    assert response.status_code == 404
