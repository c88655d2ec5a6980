import pytest
from fastapi.testclient import TestClient

from grouproster.app.db.base import Base
from grouproster.app.db.session import SessionLocal, engine
from grouproster.app.main import app
from grouproster.app.models.child import Child
from grouproster.app.models.group_member import GroupMember
from grouproster.app.models.group_pass import GroupPass


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
def member(client) -> dict:
    booking = client.post(
        "/api/booking/create",
        json={
            "classDate": "2026-11-02",
            "classTime": "10:00",
            "instructorName": "Kim",
            "leaderName": "Leader Parent",
            "leaderPhone": "010-1234-5678",
            "headcountDeclared": 4,
        },
    ).json()
    invite = client.post("/api/invite/create", json={"leaderToken": booking["manageToken"]}).json()
    submitted = client.post(
        "/api/invite/submit",
        json={
            "token": invite["inviteUrl"].rsplit("/", 1)[-1],
            "parentName": "Member Parent",
            "parentPhone": "010-2222-3333",
            "noteToInstructor": "Shy at first",
            "students": [{"childName": "Kid A", "childGrade": "3", "priorStudentAttended": True}],
        },
    ).json()
    return {
        "group_id": booking["groupId"],
        "member_id": submitted["groupMemberId"],
        "edit_token": submitted["editToken"],
    }


def load_member(member_id: str) -> tuple[GroupMember, Child]:
    db = SessionLocal()
    row = db.query(GroupMember).filter(GroupMember.id == member_id).one()
    child = db.query(Child).filter(Child.id == row.child_id).one()
    db.close()
    return row, child


def test_partial_update_touches_only_provided_fields(client, member):
    resp = client.patch("/api/member/update", json={"editToken": member["edit_token"], "childGrade": "4"})
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "groupMemberId": member["member_id"],
        "message": "Updated successfully",
    }

    row, child = load_member(member["member_id"])
    assert child.grade == "4"
    assert child.name == "Kid A"
    assert child.prior_student_attended is True
    assert row.parent_name == "Member Parent"
    assert row.parent_phone == "01022223333"
    assert row.note_to_instructor == "Shy at first"


def test_update_member_and_child_fields_together(client, member):
    resp = client.patch(
        "/api/member/update",
        json={
            "editToken": member["edit_token"],
            "childName": "Kid A Renamed",
            "parentPriorAttended": True,
            "parentName": "New Parent",
            "parentPhone": "(010) 9999-8888",
            "noteToInstructor": "Prefers the front row",
        },
    )
    assert resp.status_code == 200

    row, child = load_member(member["member_id"])
    assert child.name == "Kid A Renamed"
    assert child.parent_prior_attended is True
    assert row.parent_name == "New Parent"
    assert row.parent_phone == "01099998888"
    assert row.note_to_instructor == "Prefers the front row"


def test_empty_phone_is_stored_as_null(client, member):
    resp = client.patch("/api/member/update", json={"editToken": member["edit_token"], "parentPhone": ""})
    assert resp.status_code == 200

    row, _ = load_member(member["member_id"])
    assert row.parent_phone is None


def test_invalid_phone_is_400(client, member):
    resp = client.patch("/api/member/update", json={"editToken": member["edit_token"], "parentPhone": "abc"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid input"


@pytest.mark.parametrize(
    "field",
    ["childName", "childGrade", "priorStudentAttended", "parentName", "parentPhone", "noteToInstructor"],
)
def test_explicit_null_is_rejected(client, member, field):
    resp = client.patch("/api/member/update", json={"editToken": member["edit_token"], field: None})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid input"

    row, child = load_member(member["member_id"])
    assert child.name == "Kid A"
    assert child.grade == "3"
    assert child.prior_student_attended is True
    assert row.parent_phone == "01022223333"


def test_unknown_edit_token_is_404(client):
    resp = client.patch("/api/member/update", json={"editToken": "nope", "childGrade": "4"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Invalid edit token"


def test_update_on_locked_roster_is_409_and_writes_nothing(client, member):
    db = SessionLocal()
    db.query(GroupPass).filter(GroupPass.id == member["group_id"]).update({GroupPass.roster_status: "locked"})
    db.commit()
    db.close()

    resp = client.patch(
        "/api/member/update",
        json={"editToken": member["edit_token"], "childName": "Changed", "parentName": "Changed"},
    )
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Roster is locked. Modifications are not allowed."

    row, child = load_member(member["member_id"])
    assert child.name == "Kid A"
    assert row.parent_name == "Member Parent"


def test_lock_between_read_and_write_leaves_child_untouched(client, member, monkeypatch):
    from grouproster.app.services import member_service

    real_update = member_service.update_member_if_unlocked

    def lock_then_update(db, member_id, values):
        db.query(GroupPass).filter(GroupPass.id == member["group_id"]).update(
            {GroupPass.roster_status: "locked"}, synchronize_session=False
        )
        return real_update(db, member_id, values)

    monkeypatch.setattr(member_service, "update_member_if_unlocked", lock_then_update)

    resp = client.patch("/api/member/update", json={"editToken": member["edit_token"], "childName": "Changed"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Roster is locked. Modifications are not allowed."

    _, child = load_member(member["member_id"])
    assert child.name == "Kid A"


def test_get_member_by_edit_token(client, member):
    resp = client.get(f"/api/member/{member['edit_token']}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["groupId"] == member["group_id"]
    assert data["groupMemberId"] == member["member_id"]
    assert data["rosterStatus"] == "collecting"
    assert data["isLocked"] is False
    assert data["member"]["childName"] == "Kid A"
    assert data["member"]["childGrade"] == "3"
    assert data["member"]["priorStudentAttended"] is True
    assert data["member"]["siblingsPriorAttended"] is False
    assert data["member"]["parentPhone"] == "01022223333"
    assert data["member"]["status"] == "completed"


def test_get_member_reports_lock(client, member):
    db = SessionLocal()
    db.query(GroupPass).filter(GroupPass.id == member["group_id"]).update({GroupPass.roster_status: "locked"})
    db.commit()
    db.close()

    data = client.get(f"/api/member/{member['edit_token']}").json()
    assert data["isLocked"] is True
    assert data["rosterStatus"] == "locked"


def test_get_unknown_member_is_404(client):
    resp = client.get("/api/member/unknown-token")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Invalid edit token"
