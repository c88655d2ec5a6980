import pytest
from sqlalchemy.exc import OperationalError

from grouproster.app.core.errors import ApiStatusError
from grouproster.app.db.base import Base
from grouproster.app.db.session import SessionLocal, engine
from grouproster.app.db.transaction import run_serializable, transactional_session
from grouproster.app.models.parent import Parent


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


class FakeSerializationFailure(Exception):
    pgcode = "40001"


def serialization_conflict() -> OperationalError:
    return OperationalError("COMMIT", {}, FakeSerializationFailure("could not serialize access"))


def parent_count() -> int:
    db = SessionLocal()
    try:
        return db.query(Parent).count()
    finally:
        db.close()


def test_run_serializable_commits_result():
    def work(db):
        db.add(Parent(name="Leader", phone="01011112222"))
        db.flush()
        return "done"

    assert run_serializable(SessionLocal, work) == "done"
    assert parent_count() == 1


def test_conflict_is_retried_until_success():
    attempts = []

    def work(db):
        attempts.append(len(attempts))
        db.add(Parent(name=f"Attempt {len(attempts)}", phone=f"0101111222{len(attempts)}"))
        db.flush()
        if len(attempts) < 3:
            raise serialization_conflict()
        return len(attempts)

    assert run_serializable(SessionLocal, work) == 3
    # only the successful attempt's rows survive
    assert parent_count() == 1


def test_retry_exhaustion_surfaces_503_and_leaves_no_rows():
    attempts = []

    def work(db):
        attempts.append(1)
        db.add(Parent(name="Ghost", phone=f"0109999000{len(attempts)}"))
        db.flush()
        raise serialization_conflict()

    with pytest.raises(ApiStatusError) as excinfo:
        run_serializable(SessionLocal, work)

    assert excinfo.value.status_code == 503
    assert excinfo.value.detail == "Temporary concurrency issue. Please retry."
    assert len(attempts) == 3
    assert parent_count() == 0


def test_business_errors_are_not_retried():
    attempts = []

    def work(db):
        attempts.append(1)
        db.add(Parent(name="Leader", phone="01011112222"))
        db.flush()
        raise ApiStatusError(409, "Token already used")

    with pytest.raises(ApiStatusError) as excinfo:
        run_serializable(SessionLocal, work)

    assert excinfo.value.status_code == 409
    assert len(attempts) == 1
    assert parent_count() == 0


def test_unexpected_errors_propagate_after_rollback():
    def work(db):
        db.add(Parent(name="Leader", phone="01011112222"))
        db.flush()
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run_serializable(SessionLocal, work)
    assert parent_count() == 0


def test_transactional_session_rolls_back_on_error():
    with pytest.raises(ValueError):
        with transactional_session(SessionLocal) as db:
            db.add(Parent(name="Leader", phone="01011112222"))
            db.flush()
            raise ValueError("invalid")
    assert parent_count() == 0

    with transactional_session(SessionLocal) as db:
        db.add(Parent(name="Leader", phone="01011112222"))
    assert parent_count() == 1
