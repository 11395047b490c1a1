import os
import sys
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_AUTO_CREATE"] = "false"

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ordning_api.db import build_engine, get_db
from ordning_api.main import app
from ordning_api.models import Base
from ordning_api.utils.location import create_location


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def chain(db):
    """
    Build a straight line of locations: chain(3) -> ids ["l0", "l1", "l2"]
    where l0 is the root and each next one is a child of the previous.
    """
    def _build(depth: int, prefix: str = "l") -> list[str]:
        ids: list[str] = []
        parent = None
        for i in range(depth):
            loc_id = f"{prefix}{i}"
            create_location(db, loc_id, f"Level {i}", parent_location_id=parent)
            ids.append(loc_id)
            parent = loc_id
        return ids

    return _build
