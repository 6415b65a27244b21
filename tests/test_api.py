from __future__ import annotations

import csv
from io import StringIO

import httpx
import pytest
import pytest_asyncio

from eventpulse.api.app import create_app
from eventpulse.db import get_session
from tests.conftest import create_user


@pytest_asyncio.fixture
async def api(session):
    app = create_app()

    async def override_session():
        yield session

    app.dependency_overrides[get_session] = override_session
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test/api") as client:
        yield client


def as_user(user_id: int) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


async def create_hackathon(api: httpx.AsyncClient, host_id: int, **extra) -> dict:
    fest = await api.post("/events", json={"title": "Tech Fest"}, headers=as_user(host_id))
    assert fest.status_code == 201
    body = {
        "title": "Hackathon",
        "teamSize": 2,
        "customFields": [
            {"label": "College", "type": "text", "required": True},
            {"label": "Name", "type": "text", "required": True, "isIndividual": True},
        ],
        **extra,
    }
    response = await api.post(f"/events/{fest.json()['id']}/sub", json=body, headers=as_user(host_id))
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_event_roundtrip_through_api(api, session):
    host = await create_user(session, "Host")
    event = await create_hackathon(api, host.id)

    response = await api.get(f"/events/{event['id']}")
    assert response.status_code == 200
    assert response.json()["teamSize"] == 2
    assert response.json()["customFields"][1]["isIndividual"] is True

    listed = await api.get("/events")
    assert [e["id"] for e in listed.json()["events"]] == [event["parentEventId"]]

    sub_events = await api.get(f"/events/{event['parentEventId']}/sub-events")
    assert [e["id"] for e in sub_events.json()["subEvents"]] == [event["id"]]

    updated = await api.put(
        f"/events/{event['id']}/custom-fields",
        json={"customFields": [{"label": "Track", "type": "dropdown", "options": "AI, Web"}]},
        headers=as_user(host.id),
    )
    assert updated.status_code == 200
    fields = (await api.get(f"/events/{event['id']}/custom-fields")).json()["customFields"]
    assert fields == [
        {"label": "Track", "type": "dropdown", "required": False, "options": ["AI", "Web"], "isIndividual": False}
    ]


@pytest.mark.asyncio
async def test_missing_event_and_identity(api, session):
    assert (await api.get("/events/404")).status_code == 404
    response = await api.post("/events", json={"title": "No host"})
    assert response.status_code == 403
    assert response.json() == {"error": "Authentication required"}


@pytest.mark.asyncio
async def test_registration_intake(api, session):
    host = await create_user(session, "Host")
    alice = await create_user(session, "Alice")
    event = await create_hackathon(api, host.id)
    body = {
        "eventId": event["id"],
        "userId": alice.id,
        "responses": {"College": "MIT"},
        "participants": [{"Name": "Alice"}, {"Name": "Bob"}],
    }

    response = await api.post("/registration", json=body)
    assert response.status_code == 201
    registration = response.json()["registration"]
    assert [p["details"] for p in registration["participants"]] == [
        {"College": "MIT", "Name": "Alice"},
        {"College": "MIT", "Name": "Bob"},
    ]

    check = await api.get(f"/registration/{event['id']}/check", headers=as_user(alice.id))
    assert check.json() == {"registered": True}

    duplicate = await api.post("/registration", json=body)
    assert duplicate.status_code == 400
    assert "already registered" in duplicate.json()["error"]

    listed = await api.get("/registration", params={"eventId": event["id"]})
    assert len(listed.json()["registrations"]) == 1

    added = await api.post(
        f"/registration/{registration['id']}/participants",
        json={"participants": [{"Name": "Cara"}]},
    )
    assert added.status_code == 201
    assert len(added.json()["participants"]) == 3


@pytest.mark.asyncio
async def test_bad_payloads_are_400(api, session):
    host = await create_user(session, "Host")
    event = await create_hackathon(api, host.id)

    malformed = await api.post("/registration", json={"eventId": "abc"})
    assert malformed.status_code == 400
    assert malformed.json()["error"] == "Invalid request data"

    empty = await api.post("/registration", json={"eventId": event["id"], "responses": None})
    assert empty.status_code == 400
    assert empty.json()["error"] == "Please fill in at least some registration information."


@pytest.mark.asyncio
async def test_paid_event_review_and_export(api, session):
    host = await create_user(session, "Host")
    alice = await create_user(session, "Alice")
    event = await create_hackathon(api, host.id, paymentEnabled=True)
    body = {
        "eventId": event["id"],
        "userId": alice.id,
        "responses": {"College": "MIT", "Whats App Number": "9876543210"},
        "participants": [{"Name": "Alice"}, {"Name": "Bob"}],
    }

    no_proof = await api.post("/registration", json=body)
    assert no_proof.status_code == 400

    queued = await api.post("/waiting-list", json={**body, "paymentProof": "https://files/p.png", "status": "pending"})
    assert queued.status_code == 201
    entry = queued.json()["waitingList"]
    assert entry["status"] == "pending"

    forbidden = await api.get(f"/waiting-list/{event['id']}", headers=as_user(alice.id))
    assert forbidden.status_code == 403
    pending = await api.get(f"/waiting-list/{event['id']}", headers=as_user(host.id))
    assert [e["id"] for e in pending.json()["waitingList"]] == [entry["id"]]

    approved = await api.post(f"/waiting-list/{entry['id']}/approve", headers=as_user(host.id))
    assert approved.status_code == 200
    assert approved.json()["registration"]["paymentProof"] == "https://files/p.png"

    stats = await api.get(f"/waiting-list/{event['id']}/stats", headers=as_user(host.id))
    assert stats.json() == {"pending": 0, "approved": 1, "rejected": 0, "total": 1}

    exported = await api.get(f"/analytics/{event['id']}/export.csv", headers=as_user(host.id))
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("text/csv")
    header, *rows = list(csv.reader(StringIO(exported.text)))
    assert header[:9] == [
        "Team Name",
        "Name",
        "College Name",
        "Degree Name",
        "USN",
        "Email",
        "Gender",
        "Payment Proof",
        "WhatsApp Number",
    ]
    assert sorted(r[1] for r in rows) == ["Alice", "Bob"]
    assert {r[header.index("WhatsApp Number")] for r in rows} == {"9876543210"}

    summary = await api.get(f"/analytics/{event['id']}/participants", headers=as_user(host.id))
    assert summary.json()["report"]["totalRegistrations"] == 1


@pytest.mark.asyncio
async def test_solo_event_with_custom_fields_registers(api, session):
    host = await create_user(session, "Host")
    ann = await create_user(session, "Ann")
    event = await create_hackathon(api, host.id, teamSize=None)
    assert event["teamSize"] is None

    response = await api.post(
        "/registration",
        json={"eventId": event["id"], "userId": ann.id, "responses": {"College": "MIT", "Name": "Ann"}},
    )

    assert response.status_code == 201
    registration = response.json()["registration"]
    assert registration["responses"] == {"College": "MIT", "Name": "Ann"}
    assert registration["participants"] == []


@pytest.mark.asyncio
async def test_approve_entry_without_participants(api, session):
    host = await create_user(session, "Host")
    ann = await create_user(session, "Ann")
    event = await create_hackathon(api, host.id, teamSize=None, paymentEnabled=True)

    queued = await api.post(
        "/waiting-list",
        json={"eventId": event["id"], "userId": ann.id, "responses": {"Name": "Ann"}, "paymentProof": "p.png"},
    )
    approved = await api.post(f"/waiting-list/{queued.json()['waitingList']['id']}/approve", headers=as_user(host.id))

    assert approved.status_code == 200
    assert approved.json()["registration"]["participants"] == []
