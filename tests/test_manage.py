from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from grouproster.app.core.time import utc_now
from grouproster.app.db.base import Base
from grouproster.app.db.session import SessionLocal, engine
from grouproster.app.main import app
from grouproster.app.models.group_pass import GroupPass
from grouproster.app.models.invite_link import InviteLink


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def booking(client) -> dict:
    return client.post(
        "/api/booking/create",
        json={
            "classDate": "2026-11-02",
            "classTime": "10:00",
            "instructorName": "Kim",
            "leaderName": "Leader Parent",
            "leaderPhone": "010-1234-5678",
            "headcountDeclared": 5,
            "childName": "Leader Kid",
        },
    ).json()


def test_manage_view_lists_roster(client, booking):
    invite = client.post("/api/invite/create", json={"leaderToken": booking["manageToken"]}).json()
    token = invite["inviteUrl"].rsplit("/", 1)[-1]
    client.post(
        "/api/invite/submit",
        json={"token": token, "parentPhone": "010-2222-3333", "students": [{"childName": "Kid A"}, {"childName": "Kid B"}]},
    )
    client.post(
        "/api/invite/submit",
        json={"token": token, "parentPhone": "010-2222-3333", "students": [{"childName": "Kid A"}]},
    )

    resp = client.get(f"/api/manage/{booking['manageToken']}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["groupId"] == booking["groupId"]
    assert data["rosterStatus"] == "collecting"
    assert data["headcountDeclared"] == 5
    assert data["counts"] == {"total": 2, "completed": 2, "pending": 0}
    assert [m["childName"] for m in data["members"]] == ["Leader Kid", "Kid A"]
    assert data["inviteLinks"] == [
        {
            "inviteUrl": invite["inviteUrl"],
            "maxUses": None,
            "usedCount": 2,
            "expiresAt": data["inviteLinks"][0]["expiresAt"],
            "state": "active",
        }
    ]


def test_manage_view_stays_readable_after_lock(client, booking):
    client.post("/api/invite/create", json={"leaderToken": booking["manageToken"]})
    db = SessionLocal()
    db.query(GroupPass).filter(GroupPass.id == booking["groupId"]).update({GroupPass.roster_status: "locked"})
    db.commit()
    db.close()

    data = client.get(f"/api/manage/{booking['manageToken']}").json()
    assert data["rosterStatus"] == "locked"
    assert data["inviteLinks"][0]["state"] == "group_locked"


def test_manage_view_rejects_roster_token(client, booking):
    invite = client.post("/api/invite/create", json={"leaderToken": booking["manageToken"]}).json()

    resp = client.get(f"/api/manage/{invite['inviteUrl'].rsplit('/', 1)[-1]}")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Forbidden: Not a leader token"


def test_manage_view_unknown_token_is_404(client):
    resp = client.get("/api/manage/unknown")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Invalid token"


def test_manage_view_expired_token_is_410(client, booking):
    db = SessionLocal()
    db.query(InviteLink).filter(InviteLink.token == booking["manageToken"]).update(
        {InviteLink.expires_at: utc_now() - timedelta(hours=1)}
    )
    db.commit()
    db.close()

    resp = client.get(f"/api/manage/{booking['manageToken']}")
    assert resp.status_code == 410
    assert resp.json()["detail"] == "Token expired"
