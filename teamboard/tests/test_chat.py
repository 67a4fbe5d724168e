import pytest


async def _create_channel(client, headers, *users, type="direct"):
    response = await client.post(
        "/api/v1/chat/channels",
        headers=headers,
        json={"type": type, "participant_ids": [str(u.id) for u in users]},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_channel(client, auth_headers, test_user, other_user):
    channel = await _create_channel(client, auth_headers, test_user, other_user, test_user)
    assert channel["type"] == "direct"
    assert sorted(p["name"] for p in channel["participants"]) == ["Alice", "Bob"]


@pytest.mark.asyncio
async def test_create_channel_unknown_participant(client, auth_headers):
    response = await client.post(
        "/api/v1/chat/channels",
        headers=auth_headers,
        json={"type": "team", "participant_ids": ["00000000-0000-0000-0000-000000000000"]},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_channel_requires_participants(client, auth_headers):
    response = await client.post(
        "/api/v1/chat/channels", headers=auth_headers, json={"type": "team", "participant_ids": []}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_messages_and_unread(client, auth_headers, other_headers, test_user, other_user):
    channel = await _create_channel(client, auth_headers, test_user, other_user)

    for text in ("hi", "how are you", "ping"):
        response = await client.post(
            "/api/v1/chat/messages",
            headers=auth_headers,
            json={"channel_id": channel["id"], "content": text},
        )
        assert response.status_code == 201
        assert response.json()["sender"]["name"] == "Alice"

    latest = await client.get(
        f"/api/v1/chat/channels/{channel['id']}/messages",
        headers=other_headers,
        params={"limit": 2},
    )
    assert [m["content"] for m in latest.json()] == ["how are you", "ping"]

    channels = await client.get("/api/v1/chat/channels", headers=other_headers)
    assert channels.json()[0]["unread_count"] == 3

    # The sender has nothing unread
    mine = await client.get("/api/v1/chat/channels", headers=auth_headers)
    assert mine.json()[0]["unread_count"] == 0

    read = await client.patch(f"/api/v1/chat/channels/{channel['id']}/read", headers=other_headers)
    assert read.status_code == 204

    channels = await client.get("/api/v1/chat/channels", headers=other_headers)
    assert channels.json()[0]["unread_count"] == 0


@pytest.mark.asyncio
async def test_message_to_missing_channel(client, auth_headers):
    response = await client.post(
        "/api/v1/chat/messages",
        headers=auth_headers,
        json={"channel_id": "00000000-0000-0000-0000-000000000000", "content": "hello"},
    )
    assert response.status_code == 404
