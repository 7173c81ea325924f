from __future__ import annotations

import pytest
from sqlalchemy import select

from finance_tracker import create_app, shutdown
from finance_tracker.config import TestConfig
from finance_tracker.models import RefreshToken
from finance_tracker.services import EXTENSION_KEY

PASSWORD = "Passw0rd!"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    shutdown(app)


@pytest.fixture
def services(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def client(app):
    return app.test_client()


def signup(client, username: str = "alice", password: str = PASSWORD):
    return client.post("/signup", json={"username": username, "password": password})


def login(client, username: str = "alice", password: str = PASSWORD):
    return client.post("/login", json={"username": username, "password": password})


@pytest.fixture
def logged_in_client(client):
    assert signup(client).get_json()["status"] == 0
    assert login(client).get_json()["status"] == 0
    return client


def refresh_token_stored(services, token: str) -> bool:
    with services.database.session() as session:
        row = session.execute(
            select(RefreshToken.token).where(RefreshToken.token == token)
        ).first()
        return row is not None
