"""Engine and session factory for the roster datastore."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from grouproster.app.core.settings import get_settings


def build_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Requests run on the threadpool; a generous busy timeout lets contended writers queue
        connect_args = {"check_same_thread": False, "timeout": 15}
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


settings = get_settings()
engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Dependency handing the workflow services the process-wide session factory."""
    return SessionLocal
