from datetime import datetime, timedelta

import pytest

from tests.helpers import auth_headers


BASE = datetime(2026, 3, 1, 10, 0, 0)


def _iso(value: datetime) -> str:
    return value.isoformat() + "Z"


async def _schedule(api_client, ws, user=None, **payload):
    payload.setdefault("scheduled_time", _iso(BASE))
    return await api_client.post(
        f"/api/workspaces/{ws.workspace.id}/calls/schedule",
        json=payload,
        headers=auth_headers(user or ws.client),
    )


async def test_schedule_call(api_client, ws, notifier):
    r = await _schedule(api_client, ws, title="Kickoff", description="Scope review", duration=30)
    assert r.status_code == 201
    data = r.json()
    assert data["message"] == "Video call scheduled successfully"
    assert "access_token" not in data

    call = data["call"]
    assert call["status"] == "scheduled"
    assert call["scheduled_time"] == "2026-03-01T10:00:00"
    assert call["duration_minutes"] == 30
    assert call["room_url"].startswith("https://")
    assert "room_data" not in call
    assert [p["role"] for p in call["participants"]] == ["client", "freelancer"]
    assert notifier.of_type("call_scheduled")[0]["user_id"] == ws.freelancer.id


async def test_schedule_requires_auth(api_client, ws):
    r = await api_client.post(
        f"/api/workspaces/{ws.workspace.id}/calls/schedule",
        json={"scheduled_time": _iso(BASE)},
    )
    assert r.status_code == 401


async def test_schedule_validation(api_client, ws):
    r = await _schedule(api_client, ws, duration=0)
    assert r.status_code == 422

    r = await api_client.post(
        f"/api/workspaces/{ws.workspace.id}/calls/schedule", json={}, headers=auth_headers(ws.client)
    )
    assert r.status_code == 422


async def test_schedule_outside_workspace(api_client, ws, provider):
    r = await _schedule(api_client, ws, user=ws.outsider)
    assert r.status_code == 404
    assert r.json()["detail"] == "Workspace not found or access denied"
    assert provider.rooms == {}


async def test_schedule_provider_failure(api_client, ws, provider):
    provider.fail_create = True
    r = await _schedule(api_client, ws)
    assert r.status_code == 502

    r = await api_client.get(f"/api/workspaces/{ws.workspace.id}/calls", headers=auth_headers(ws.client))
    assert r.json()["total_calls"] == 0


async def test_instant_call_and_details(api_client, ws, provider):
    r = await api_client.post(
        f"/api/workspaces/{ws.workspace.id}/calls/instant", headers=auth_headers(ws.freelancer)
    )
    assert r.status_code == 201
    data = r.json()
    assert data["access_token"]
    assert data["call"]["status"] == "in_progress"
    assert data["call"]["is_instant"] is True
    assert data["call"]["started_at"] is not None
    call_id = data["call"]["id"]

    r = await api_client.get(f"/api/calls/{call_id}", headers=auth_headers(ws.client))
    assert r.status_code == 200
    assert r.json()["access_token"]
    assert provider.tokens[-1]["is_owner"] is False

    r = await api_client.get(f"/api/calls/{call_id}", headers=auth_headers(ws.outsider))
    assert r.status_code == 404
    assert r.json()["detail"] == "Call not found or access denied"


async def test_list_calls_pagination_and_filter(api_client, ws):
    ids = []
    for i in range(12):
        r = await _schedule(api_client, ws, scheduled_time=_iso(BASE + timedelta(hours=i)), title=f"Call {i}")
        assert r.status_code == 201
        ids.append(r.json()["call"]["id"])

    headers = auth_headers(ws.freelancer)
    url = f"/api/workspaces/{ws.workspace.id}/calls"

    r = await api_client.get(url, headers=headers)
    page1 = r.json()
    assert page1["total_calls"] == 12
    assert page1["total_pages"] == 2
    assert page1["current_page"] == 1
    assert page1["page_size"] == 10
    # newest scheduled time first
    assert [c["id"] for c in page1["calls"]] == list(reversed(ids))[:10]

    r = await api_client.get(url, params={"page": 2}, headers=headers)
    page2 = r.json()
    assert [c["id"] for c in page2["calls"]] == [ids[1], ids[0]]

    r = await api_client.put(f"/api/calls/{ids[3]}/cancel", headers=auth_headers(ws.client))
    assert r.status_code == 200

    r = await api_client.get(url, params={"status": "cancelled"}, headers=headers)
    assert [c["id"] for c in r.json()["calls"]] == [ids[3]]

    r = await api_client.get(url, params={"status": "all"}, headers=headers)
    assert r.json()["total_calls"] == 12

    r = await api_client.get(url, params={"status": "bogus"}, headers=headers)
    assert r.status_code == 400

    r = await api_client.get(url, params={"page": 0}, headers=headers)
    assert r.status_code == 400

    r = await api_client.get(url, headers=auth_headers(ws.outsider))
    assert r.status_code == 404


async def test_update_call(api_client, ws, notifier):
    call_id = (await _schedule(api_client, ws)).json()["call"]["id"]

    r = await api_client.put(
        f"/api/calls/{call_id}", json={"title": "Hijack"}, headers=auth_headers(ws.freelancer)
    )
    assert r.status_code == 404

    r = await api_client.put(f"/api/calls/{call_id}", json={}, headers=auth_headers(ws.client))
    assert r.status_code == 400

    r = await api_client.put(
        f"/api/calls/{call_id}",
        json={"title": "Design review", "duration": 90},
        headers=auth_headers(ws.client),
    )
    assert r.status_code == 200
    call = r.json()["call"]
    assert call["title"] == "Design review"
    assert call["duration_minutes"] == 90
    assert notifier.of_type("call_updated")[0]["user_id"] == ws.freelancer.id


async def test_cancel_call(api_client, ws, provider):
    call_id = (await _schedule(api_client, ws)).json()["call"]["id"]

    r = await api_client.put(
        f"/api/calls/{call_id}/cancel",
        json={"cancel_reason": "Client unavailable"},
        headers=auth_headers(ws.freelancer),
    )
    assert r.status_code == 200
    call = r.json()["call"]
    assert call["status"] == "cancelled"
    assert call["cancel_reason"] == "Client unavailable"
    assert call["cancelled_by"] == ws.freelancer.id
    assert provider.deleted == [call["room_name"]]

    r = await api_client.put(f"/api/calls/{call_id}/cancel", headers=auth_headers(ws.client))
    assert r.status_code == 409
    assert r.json()["detail"] == "Cannot cancel a call that is cancelled"


async def test_start_join_leave_end(api_client, ws):
    call_id = (await _schedule(api_client, ws)).json()["call"]["id"]
    client_headers = auth_headers(ws.client)
    freelancer_headers = auth_headers(ws.freelancer)

    r = await api_client.post(f"/api/calls/{call_id}/join", headers=client_headers)
    assert r.status_code == 409

    r = await api_client.put(f"/api/calls/{call_id}/start", headers=freelancer_headers)
    assert r.status_code == 200
    assert r.json()["call"]["status"] == "in_progress"

    r = await api_client.post(f"/api/calls/{call_id}/join", headers=client_headers)
    assert r.status_code == 200
    assert r.json()["participant"]["user_id"] == ws.client.id
    assert r.json()["participant"]["joined_at"] is not None

    r = await api_client.post(f"/api/calls/{call_id}/leave", headers=client_headers)
    assert r.status_code == 200
    assert r.json()["participant"]["left_at"] is not None

    r = await api_client.post(f"/api/calls/{call_id}/leave", headers=client_headers)
    assert r.status_code == 400

    r = await api_client.put(
        f"/api/calls/{call_id}/end", json={"notes": "Wrapped up"}, headers=client_headers
    )
    assert r.status_code == 200
    call = r.json()["call"]
    assert call["status"] == "completed"
    assert call["notes"] == "Wrapped up"
    assert call["actual_duration_minutes"] is not None
    assert call["is_past"] is True

    r = await api_client.put(f"/api/calls/{call_id}/end", headers=client_headers)
    assert r.status_code == 409
    assert r.json()["detail"] == "Cannot end a call that is completed"


async def test_my_calls_and_room_participants(api_client, ws, provider):
    call_id = (await _schedule(api_client, ws)).json()["call"]["id"]

    r = await api_client.get("/api/calls/mine", headers=auth_headers(ws.freelancer))
    assert r.status_code == 200
    assert [c["id"] for c in r.json()["calls"]] == [call_id]

    r = await api_client.get("/api/calls/mine", headers=auth_headers(ws.outsider))
    assert r.json()["calls"] == []

    provider.presence = [{"user_id": ws.client.id}]
    r = await api_client.get(f"/api/calls/{call_id}/room-participants", headers=auth_headers(ws.freelancer))
    assert r.status_code == 200
    assert r.json() == {"call_id": call_id, "participants": [{"user_id": ws.client.id}]}


@pytest.mark.parametrize("path", ["upcoming", "history", "active"])
async def test_workspace_collections_require_membership(api_client, ws, path):
    r = await api_client.get(f"/api/workspaces/{ws.workspace.id}/calls/{path}", headers=auth_headers(ws.client))
    assert r.status_code == 200
    assert r.json() == {"calls": []}

    r = await api_client.get(f"/api/workspaces/{ws.workspace.id}/calls/{path}", headers=auth_headers(ws.outsider))
    assert r.status_code == 404


@pytest.mark.parametrize("header", ["Bearer not-a-jwt", "Basic abc", "Bearer"])
async def test_rejects_bad_credentials(api_client, ws, header):
    r = await api_client.get("/api/calls/mine", headers={"Authorization": header})
    assert r.status_code == 401
