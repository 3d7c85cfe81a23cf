import pytest
from fastapi.testclient import TestClient
from main import create_app


@pytest.fixture
def app():
    # Отдельная in-memory БД на каждый тест
    return create_app("sqlite://")


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app, client):
    session = app.state.db.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_post(client):
    def _make(content="hello", **extra):
        resp = client.post("/api/posts", json={"content": content, **extra})
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make
