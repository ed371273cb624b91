import pytest

from db import get_session
from main import create_app
from tests.factories import ClientFactory, ImportBatchFactory


@pytest.fixture
def app(tmp_path):
    """Flask app bound to a fresh SQLite file per test."""
    app = create_app(f"sqlite:///{tmp_path / 'clientdb-test.sqlite'}")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def session(app):
    """Database session; factories write through it."""
    s = get_session()
    ClientFactory._meta.sqlalchemy_session = s
    ImportBatchFactory._meta.sqlalchemy_session = s
    yield s
    s.close()
