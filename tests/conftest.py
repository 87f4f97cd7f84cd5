"""
Shared fixtures for Chordbook tests.

The database and data directory point at a throwaway location before any
backend module reads its settings.
"""

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="chordbook-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'test.db')}")
os.environ.setdefault("DATA_DIR", os.path.join(_TMP, "data"))

import pytest

AMAZING_GRACE = (
    "G           C      G\n"
    "Amazing grace! how sweet the sound,\n"
    "           G             D7\n"
    "That saved a wretch like me!\n"
    "  G               C      G\n"
    "I once was lost, but now am found,\n"
    "     G      D7      G\n"
    "Was blind, but now I see."
)


@pytest.fixture
def db():
    from database import Base, SessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


class FakeQueue:
    """Records enqueued jobs instead of talking to redis."""

    def __init__(self):
        self.jobs = []

    def enqueue(self, func, *args, **kwargs):
        self.jobs.append((func, args, kwargs))


@pytest.fixture
def queue(monkeypatch):
    import routes.songs

    fake = FakeQueue()
    monkeypatch.setattr(routes.songs, "get_queue", lambda: fake)
    return fake


@pytest.fixture
def client(db, queue):
    from fastapi.testclient import TestClient
    from app import app

    with TestClient(app) as test_client:
        yield test_client
