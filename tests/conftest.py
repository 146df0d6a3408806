import pytest

from db import dispose_db, get_session, init_db
from main import create_app


@pytest.fixture
def db_url(tmp_path):
    """A fresh SQLite file per test."""
    return f"sqlite:///{tmp_path / 'gradedb-test.sqlite'}"


@pytest.fixture
def db(db_url):
    init_db(db_url)
    yield
    dispose_db()


@pytest.fixture
def session(db):
    s = get_session()
    yield s
    s.close()


@pytest.fixture
def app(db_url):
    app = create_app(db_url)
    app.config["TESTING"] = True
    yield app
    dispose_db()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def owner_headers():
    return {"X-User-Id": "owner-a"}
