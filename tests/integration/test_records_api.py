import pytest

from volunteer_tracker.api import events as events_api
from volunteer_tracker.api import volunteers as volunteers_api


@pytest.fixture
def sync_requests(monkeypatch):
    calls = []
    monkeypatch.setattr(volunteers_api, "request_auto_sync", lambda: calls.append("volunteer"))
    monkeypatch.setattr(events_api, "request_auto_sync", lambda: calls.append("event"))
    return calls


def _create_volunteer(client, **payload):
    payload.setdefault("name", "Alice")
    resp = client.post("/api/volunteers", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _event_payload(volunteer_id, **overrides):
    payload = {
        "volunteerId": volunteer_id,
        "event": "Food Drive",
        "location": "Community Hall",
        "hours": "2:30",
        "date": "2024-03-01",
    }
    payload.update(overrides)
    return payload


def test_create_and_list_volunteers(client, sync_requests):
    _create_volunteer(client, name="  zoe ", email="zoe@example.org")
    alice = _create_volunteer(client, name="Alice", hourGoal="20:00")
    client.post("/api/events", json=_event_payload(alice["id"]))

    resp = client.get("/api/volunteers")
    assert resp.status_code == 200
    body = resp.json()
    assert [v["name"] for v in body] == ["Alice", "zoe"]
    assert body[0]["eventCount"] == 1
    assert body[0]["hourGoal"] == "20:00"
    assert body[1]["eventCount"] == 0
    assert sync_requests == ["volunteer", "volunteer", "event"]


@pytest.mark.parametrize(
    "payload",
    [{"name": "   "}, {"name": "Bo", "email": "not-an-email"}, {"name": "Bo", "hourGoal": "5h"}, {}],
)
def test_create_volunteer_validation(client, payload):
    resp = client.post("/api/volunteers", json=payload)
    assert resp.status_code == 422


def test_volunteer_details_with_stats(client):
    alice = _create_volunteer(client, hourGoal="6:00")
    client.post("/api/events", json=_event_payload(alice["id"], hours="1:45", date="2024-01-05"))
    client.post("/api/events", json=_event_payload(alice["id"], hours="2:30", date="2024-02-05"))

    resp = client.get(f"/api/volunteers/{alice['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["volunteer"]["name"] == "Alice"
    assert [e["date"] for e in body["events"]] == ["2024-02-05", "2024-01-05"]
    assert body["stats"] == {
        "totalEvents": 2,
        "totalHours": "4:15",
        "progressPercentage": 71,
        "hourGoal": "6:00",
    }


def test_volunteer_details_not_found(client):
    resp = client.get("/api/volunteers/9999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Volunteer not found"


def test_update_volunteer_requires_admin(client, admin_headers):
    alice = _create_volunteer(client)

    denied = client.patch(f"/api/volunteers/{alice['id']}", json={"email": "a@example.org"})
    assert denied.status_code == 401
    assert denied.json()["detail"] == "Invalid admin password"

    resp = client.patch(f"/api/volunteers/{alice['id']}", json={"email": "a@example.org"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "a@example.org"
    assert resp.json()["name"] == "Alice"

    missing = client.patch("/api/volunteers/9999", json={"name": "X"}, headers=admin_headers)
    assert missing.status_code == 404


def test_event_lifecycle(client, admin_headers, sync_requests):
    alice = _create_volunteer(client)

    created = client.post("/api/events", json=_event_payload(alice["id"]))
    assert created.status_code == 201
    event = created.json()
    assert event["volunteerId"] == alice["id"]

    updated = client.put(f"/api/events/{event['id']}", json=_event_payload(alice["id"], hours="3:00"))
    assert updated.status_code == 200
    assert updated.json()["hours"] == "3:00"

    assert client.delete(f"/api/events/{event['id']}").status_code == 401
    deleted = client.delete(f"/api/events/{event['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Event deleted successfully"}
    assert client.get("/api/events").json() == []
    assert sync_requests == ["volunteer", "event", "event", "event"]


def test_event_errors(client, admin_headers):
    alice = _create_volunteer(client)

    resp = client.post("/api/events", json=_event_payload(9999))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Volunteer not found"

    resp = client.put("/api/events/9999", json=_event_payload(alice["id"]))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Event not found"

    resp = client.delete("/api/events/9999", headers=admin_headers)
    assert resp.status_code == 404

    for bad in ({"hours": "2:75"}, {"date": "2024-02-30"}, {"event": " "}):
        assert client.post("/api/events", json=_event_payload(alice["id"], **bad)).status_code == 422


def test_events_listed_newest_first(client):
    alice = _create_volunteer(client)
    first = client.post("/api/events", json=_event_payload(alice["id"], date="2024-01-01")).json()
    second = client.post("/api/events", json=_event_payload(alice["id"], date="2024-05-01")).json()
    third = client.post("/api/events", json=_event_payload(alice["id"], date="2024-05-01")).json()

    ids = [e["id"] for e in client.get("/api/events").json()]
    assert ids == [third["id"], second["id"], first["id"]]
