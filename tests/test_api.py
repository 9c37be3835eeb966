from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import PASSWORD, make_lead
from database import get_session
from main import app
from models import LeadStatus
from security.token_jwt import create_access_token


@pytest.fixture
def client(db):
    def override_session():
        yield db

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(profile) -> dict:
    token = create_access_token({"sub": profile.email, "user_id": profile.id})
    return {"Authorization": f"Bearer {token}"}


def test_root_is_public(client) -> None:
    response = client.get("/")

    assert response.status_code == 200


def test_inquiry_is_public_and_lands_unassigned(client, admin) -> None:
    response = client.post(
        "/inquiries",
        json={"full_name": "Sara Ali", "email": "SARA@Mail.io", "visa_type": "Tourist", "phone": ""},
    )
    assert response.status_code == 201

    leads = client.get("/leads", headers=auth(admin)).json()
    assert len(leads) == 1
    assert leads[0]["email"] == "sara@mail.io"
    assert leads[0]["status"] == "new"
    assert leads[0]["source"] == "website"
    assert leads[0]["assigned_agent_id"] is None


def test_inquiry_without_email_is_rejected(client) -> None:
    response = client.post("/inquiries", json={"full_name": "No Mail", "email": ""})

    assert response.status_code == 422


def test_signup_login_and_me(client) -> None:
    response = client.post(
        "/signup", json={"full_name": "New Agent", "email": "New@VisaCRM.io", "password": "hunter22"}
    )
    assert response.status_code == 201
    assert response.json()["role"] == "agent"

    response = client.post("/login", json={"email": "new@visacrm.io", "password": "hunter22"})
    assert response.status_code == 202
    token = response.json()["access_token"]

    me = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@visacrm.io"


def test_login_with_wrong_password(client, agent) -> None:
    response = client.post("/login", json={"email": agent.email, "password": "nope-nope"})

    assert response.status_code == 401


def test_fixture_password_logs_in(client, agent) -> None:
    response = client.post("/login", json={"email": agent.email, "password": PASSWORD})

    assert response.status_code == 202


def test_leads_require_auth(client) -> None:
    assert client.get("/leads").status_code == 401


def test_create_lead_via_api(client, admin, agent) -> None:
    response = client.post(
        "/leads",
        json={"full_name": "Jane Doe", "email": "JANE@X.COM", "assigned_agent_id": agent.id},
        headers=auth(admin),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "jane@x.com"
    assert body["priority"] == "medium"
    assert body["assigned_agent_name"] == "Arjun Agent"
    assert body["status"] == "assigned"


def test_delete_lead_requires_admin(client, db, admin, agent) -> None:
    lead = make_lead(db, assigned_agent_id=agent.id)

    denied = client.delete(f"/leads/{lead.id}", headers=auth(agent))
    assert denied.status_code == 403
    assert client.get(f"/leads/{lead.id}", headers=auth(agent)).status_code == 200

    assert client.delete(f"/leads/{lead.id}", headers=auth(admin)).status_code == 204
    assert client.get(f"/leads/{lead.id}", headers=auth(admin)).status_code == 404


def test_illegal_status_change_is_422(client, db, admin) -> None:
    lead = make_lead(db, status=LeadStatus.REJECTED)

    response = client.patch(f"/leads/{lead.id}", json={"status": "new"}, headers=auth(admin))

    assert response.status_code == 422
    assert "cannot change" in response.json()["detail"]


def test_remarks_and_timeline(client, db, agent) -> None:
    lead = make_lead(db, assigned_agent_id=agent.id)

    created = client.post(
        f"/leads/{lead.id}/remarks", json={"text": "Asked about fees", "tag": "call_log"}, headers=auth(agent)
    )
    assert created.status_code == 201
    assert created.json()["author_name"] == "Arjun Agent"

    timeline = client.get(f"/leads/{lead.id}/timeline", headers=auth(agent)).json()
    assert [entry["text"] for entry in timeline] == ["Asked about fees"]


def test_schedule_and_complete_appointment(client, db, agent, consultant, future_slot) -> None:
    day, slot, _ = future_slot
    lead = make_lead(db)

    response = client.post(
        "/appointments",
        json={
            "lead_id": lead.id,
            "consultant_id": consultant.id,
            "scheduled_date": day.isoformat(),
            "scheduled_time": slot.strftime("%H:%M"),
        },
        headers=auth(agent),
    )
    assert response.status_code == 201
    appointment = response.json()
    assert appointment["status"] == "scheduled"
    assert appointment["lead_name"] == "Ravi Kumar"

    denied = client.patch(
        f"/appointments/{appointment['id']}/status", json={"status": "completed"}, headers=auth(agent)
    )
    assert denied.status_code == 403

    done = client.patch(
        f"/appointments/{appointment['id']}/status", json={"status": "completed"}, headers=auth(consultant)
    )
    assert done.status_code == 200
    assert done.json()["status"] == "completed"


def test_appointment_for_missing_lead_is_404(client, admin, consultant, future_slot) -> None:
    day, slot, _ = future_slot

    response = client.post(
        "/appointments",
        json={
            "lead_id": 777,
            "consultant_id": consultant.id,
            "scheduled_date": day.isoformat(),
            "scheduled_time": "09:15",
        },
        headers=auth(admin),
    )

    assert response.status_code == 404


def test_users_listing_rules(client, admin, agent, consultant) -> None:
    assert client.get("/users", headers=auth(agent)).status_code == 403

    consultants = client.get("/users", params={"role": "consultant"}, headers=auth(agent)).json()
    assert [c["full_name"] for c in consultants] == ["Chen Consultant"]

    everyone = client.get("/users", headers=auth(admin)).json()
    assert len(everyone) == 3


def test_password_change_validation(client, agent) -> None:
    mismatch = client.post(
        "/me/password", json={"new_password": "abcdef", "confirm_password": "abcdeg"}, headers=auth(agent)
    )
    assert mismatch.status_code == 422

    too_short = client.post(
        "/me/password", json={"new_password": "abc", "confirm_password": "abc"}, headers=auth(agent)
    )
    assert too_short.status_code == 422


def test_dashboard(client, db, agent) -> None:
    make_lead(db, assigned_agent_id=agent.id)

    response = client.get("/dashboard", headers=auth(agent))

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "agent"
    assert body["stats"]["total_leads"] == 1
    assert body["stats"]["new_leads"] == 1
    assert body["navigation"][0]["title"] == "Dashboard"
