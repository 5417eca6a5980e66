from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from eventhub.models import Event, Feedback, Registration
from tests.test_auth import auth_headers, make_user


def _create_event(client: TestClient, token: str, **overrides):
    payload = {
        "title": "T",
        "description": "An event",
        "date": "2024-07-10",
        "location": "L",
    }
    payload.update(overrides)
    return client.post("/events", json=payload, headers=auth_headers(token))


def test_organizer_creates_event(client: TestClient):
    organizer_id, token = make_user(client, "org1@example.com", role="ORGANIZER")

    resp = _create_event(client, token)
    assert resp.status_code == 201
    event = resp.json()["event"]
    assert event["organizerId"] == organizer_id
    assert event["title"] == "T"
    assert event["location"] == "L"
    assert event["date"].startswith("2024-07-10")


def test_attendee_cannot_update_organizer_event(client: TestClient):
    _, org_token = make_user(client, "org2@example.com", role="ORGANIZER")
    _, attendee_token = make_user(client, "att2@example.com")
    event_id = _create_event(client, org_token).json()["event"]["id"]

    resp = client.put(
        f"/events/{event_id}",
        json={"title": "Hijacked"},
        headers=auth_headers(attendee_token),
    )
    assert resp.status_code == 403


def test_attendee_forbidden_regardless_of_event_existence(client: TestClient):
    _, token = make_user(client, "att3@example.com")
    headers = auth_headers(token)

    assert _create_event(client, token).status_code == 403
    assert client.put("/events/424242", json={"title": "x"}, headers=headers).status_code == 403
    assert client.delete("/events/424242", headers=headers).status_code == 403


def test_attendee_forbidden_before_payload_is_validated(client: TestClient):
    _, token = make_user(client, "att-early@example.com")
    headers = auth_headers(token)

    created = client.post("/events", json={}, headers=headers)
    assert created.status_code == 403
    assert created.json()["status"] == "fail"
    assert client.put("/events/abc", json={}, headers=headers).status_code == 403
    assert client.delete("/events/abc", headers=headers).status_code == 403


def test_admin_cannot_create_events(client: TestClient):
    _, token = make_user(client, "admin-create@example.com", role="ADMIN")
    assert _create_event(client, token).status_code == 403


def test_only_owner_or_admin_may_update(client: TestClient):
    _, owner_token = make_user(client, "owner@example.com", role="ORGANIZER")
    _, other_token = make_user(client, "other@example.com", role="ORGANIZER")
    _, admin_token = make_user(client, "admin-upd@example.com", role="ADMIN")
    event_id = _create_event(client, owner_token).json()["event"]["id"]

    other = client.put(
        f"/events/{event_id}", json={"title": "Nope"}, headers=auth_headers(other_token)
    )
    assert other.status_code == 403
    assert other.json()["message"] == "Forbidden: You do not have permission to update this event"

    admin = client.put(
        f"/events/{event_id}", json={"title": "By admin"}, headers=auth_headers(admin_token)
    )
    assert admin.status_code == 200
    assert admin.json()["message"] == "Event updated successfully"
    assert admin.json()["event"]["title"] == "By admin"


def test_update_is_partial(client: TestClient):
    _, token = make_user(client, "partial@example.com", role="ORGANIZER")
    event_id = _create_event(client, token, category="music").json()["event"]["id"]

    resp = client.put(
        f"/events/{event_id}",
        json={"location": "New place"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 200
    event = resp.json()["event"]
    assert event["location"] == "New place"
    assert event["title"] == "T"
    assert event["category"] == "music"


def test_update_unknown_event_is_not_found(client: TestClient):
    _, token = make_user(client, "org404@example.com", role="ORGANIZER")
    resp = client.put("/events/999999", json={"title": "x"}, headers=auth_headers(token))
    assert resp.status_code == 404
    assert resp.json() == {"status": "fail", "message": "Event not found"}


def test_update_rejects_null_title(client: TestClient):
    _, token = make_user(client, "nulltitle@example.com", role="ORGANIZER")
    event_id = _create_event(client, token).json()["event"]["id"]
    resp = client.put(f"/events/{event_id}", json={"title": None}, headers=auth_headers(token))
    assert resp.status_code == 400


def test_delete_cascades_registrations_and_feedback(client: TestClient, db_session):
    _, org_token = make_user(client, "org-del@example.com", role="ORGANIZER")
    _, att_token = make_user(client, "att-del@example.com")
    event_id = _create_event(client, org_token).json()["event"]["id"]

    client.post(f"/events/{event_id}/register", headers=auth_headers(att_token))
    client.post(
        f"/events/{event_id}/feedback",
        json={"feedback": "great"},
        headers=auth_headers(att_token),
    )

    resp = client.delete(f"/events/{event_id}", headers=auth_headers(org_token))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Event deleted successfully"}

    assert db_session.get(Event, event_id) is None
    for model in (Registration, Feedback):
        count = db_session.scalar(
            select(func.count()).select_from(model).where(model.event_id == event_id)
        )
        assert count == 0


def test_other_organizer_cannot_delete(client: TestClient):
    _, owner_token = make_user(client, "owner-del@example.com", role="ORGANIZER")
    _, other_token = make_user(client, "other-del@example.com", role="ORGANIZER")
    event_id = _create_event(client, owner_token).json()["event"]["id"]

    resp = client.delete(f"/events/{event_id}", headers=auth_headers(other_token))
    assert resp.status_code == 403


def test_list_filters_and_sorting(client: TestClient):
    _, token = make_user(client, "lister@example.com", role="ORGANIZER")
    headers = auth_headers(token)
    _create_event(client, token, title="B", category="music", location="Paris")
    _create_event(client, token, title="A", category="music", location="Berlin")
    _create_event(client, token, title="C", category="sports", location="Paris")

    music = client.get("/events", params={"category": "music"}, headers=headers).json()
    assert {e["title"] for e in music} == {"A", "B"}

    both = client.get(
        "/events", params={"category": "music", "location": "Paris"}, headers=headers
    ).json()
    assert [e["title"] for e in both] == ["B"]

    ignored = client.get("/events", params={"colour": "red"}, headers=headers).json()
    assert len(ignored) == 3

    desc = client.get(
        "/events", params={"sortBy": "title", "sortOrder": "desc"}, headers=headers
    ).json()
    assert [e["title"] for e in desc] == ["C", "B", "A"]

    asc = client.get(
        "/events", params={"sortBy": "title", "sortOrder": "sideways"}, headers=headers
    ).json()
    assert [e["title"] for e in asc] == ["A", "B", "C"]


def test_list_rejects_unknown_sort_field(client: TestClient):
    _, token = make_user(client, "sorter@example.com")
    resp = client.get(
        "/events", params={"sortBy": "password_hash"}, headers=auth_headers(token)
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid sort field"


def test_pagination(client: TestClient):
    _, token = make_user(client, "pager@example.com", role="ORGANIZER")
    headers = auth_headers(token)
    for i in range(12):
        _create_event(client, token, title=f"Event {i}")

    first = client.get("/events/page/1", headers=headers).json()
    second = client.get("/events/page/2", headers=headers).json()
    third = client.get("/events/page/3", headers=headers).json()

    assert len(first) == 10
    assert len(second) == 2
    assert third == []
    ids = [e["id"] for e in first + second]
    assert ids == sorted(ids)


def test_pagination_rejects_bad_page_numbers(client: TestClient):
    _, token = make_user(client, "badpage@example.com")
    headers = auth_headers(token)
    for page in ("0", "-1", "abc", "+2", "1_0", "2abc"):
        resp = client.get(f"/events/page/{page}", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid page number"


def test_unknown_route_and_method(client: TestClient):
    missing = client.get("/nowhere")
    assert missing.status_code == 404
    assert missing.json() == {"status": "fail", "message": "Resource not found."}

    _, token = make_user(client, "patcher@example.com")
    patched = client.patch("/events/1", json={}, headers=auth_headers(token))
    assert patched.status_code == 405
