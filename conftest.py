from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes import build_org


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 0, 0)


@pytest.fixture
def org():
    """In-memory organisation with one employee per role (see tests/fakes.py)."""
    return build_org()


@pytest.fixture
def app(org, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.hrms_system.hrms_system.main import create_app

    return create_app(container=org.container())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Sign ``client`` in as the given fake employee."""

    def _login(employee):
        from tests.fakes import PASSWORD

        resp = client.post("/login", json={"username": employee.username, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login
