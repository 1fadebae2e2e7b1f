"""
HTTP layer tests using FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import CALC
from selfhost_dashboard.config.provider import EnvConfigProvider
from selfhost_dashboard.main import create_app
from selfhost_dashboard.modules.dashboard import DashboardFactory
from selfhost_dashboard.modules.registry import FilesystemAppRegistry


@pytest.fixture
def config_provider(monkeypatch):
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL", "0")
    monkeypatch.delenv("URL_PREFIX", raising=False)
    return EnvConfigProvider()


@pytest.fixture
def client(config_provider):
    dashboard = DashboardFactory.build_for_testing(apps=[CALC])
    with TestClient(create_app(config_provider, dashboard=dashboard)) as client:
        yield client


def _signup(client, username="admin", password="hunter2"):
    response = client.post("/signup", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_bootstrap_status(client):
    assert client.get("/bootstrap").json() == {"needs_signup": True}

    _signup(client)

    assert client.get("/bootstrap").json() == {"needs_signup": False}


def test_signup_sets_cookie_and_returns_token(client):
    response = client.post("/signup", json={"username": "admin", "password": "hunter2"})

    body = response.json()
    assert response.status_code == 200
    assert body["username"] == "admin"
    assert body["token"]
    assert client.cookies.get("auth_token") == body["token"]
    assert "password" not in body


def test_second_signup_forbidden(client):
    _signup(client)

    response = client.post("/signup", json={"username": "other", "password": "pw"})

    assert response.status_code == 403


def test_signup_invalid_username(client):
    response = client.post("/signup", json={"username": "bad name", "password": "pw"})

    assert response.status_code == 400
    assert client.get("/bootstrap").json() == {"needs_signup": True}


def test_overlong_username_is_bad_request(client):
    """Length violations go through the same validation as every other bad name."""
    signup = client.post("/signup", json={"username": "x" * 65, "password": "pw"})
    login = client.post("/login", json={"username": "x" * 65, "password": "pw"})

    assert signup.status_code == 400
    assert login.status_code == 401


def test_login_failures_are_identical(client):
    _signup(client)
    client.cookies.clear()

    wrong_password = client.post("/login", json={"username": "admin", "password": "nope"})
    unknown_user = client.post("/login", json={"username": "ghost", "password": "hunter2"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_list_apps_with_bearer_token(client):
    token = _signup(client)
    client.cookies.clear()

    response = client.get("/apps", headers=_bearer(token))

    assert response.status_code == 200
    assert response.json() == {
        "apps": [
            {
                "id": "calc",
                "display_name": "Calculator",
                "icon_path": "/icons/calc.png",
                "open_url": "/open_app/calc",
            }
        ]
    }


def test_list_apps_with_cookie(client):
    _signup(client)

    response = client.get("/apps")

    assert response.status_code == 200
    assert [app["id"] for app in response.json()["apps"]] == ["calc"]


def test_list_apps_requires_session(client):
    response = client.get("/apps")

    assert response.status_code == 401
    assert response.json() == {"detail": "Not authorized", "retryable": False}


def test_open_app(client):
    token = _signup(client)

    response = client.get("/open_app/calc", headers=_bearer(token))

    assert response.status_code == 200
    assert response.json() == {"id": "calc", "launch_target": "calc.bin"}


def test_open_app_errors(client):
    token = _signup(client)

    assert client.get("/open_app/missing", headers=_bearer(token)).status_code == 404
    assert client.get("/open_app/Bad_Id", headers=_bearer(token)).status_code == 400

    client.cookies.clear()
    assert client.get("/open_app/calc").status_code == 401


def test_logout_revokes_session(client):
    token = _signup(client)

    first = client.post("/logout", headers=_bearer(token))
    second = client.post("/logout", headers=_bearer(token))

    assert first.status_code == second.status_code == 200
    assert client.get("/apps", headers=_bearer(token)).status_code == 401


def test_registry_outage_is_503(config_provider, tmp_path):
    registry = FilesystemAppRegistry(apps_dir=str(tmp_path / "missing"), icons_dir=str(tmp_path))
    dashboard = DashboardFactory.build_for_testing(registry=registry)

    with TestClient(create_app(config_provider, dashboard=dashboard)) as client:
        token = _signup(client)
        response = client.get("/apps", headers=_bearer(token))

    assert response.status_code == 503
    assert response.json()["retryable"] is True


def test_icons_served_from_registry(config_provider, app_tree):
    apps_dir, icons_dir = app_tree
    registry = FilesystemAppRegistry(apps_dir=str(apps_dir), icons_dir=str(icons_dir))
    dashboard = DashboardFactory.build_for_testing(registry=registry)

    with TestClient(create_app(config_provider, dashboard=dashboard)) as client:
        found = client.get("/icons/calc.png")
        missing = client.get("/icons/missing.png")

    assert found.status_code == 200
    assert found.content == b"\x89PNG fake"
    assert missing.status_code == 404


def test_icon_with_nul_byte_is_bad_request(config_provider, app_tree):
    apps_dir, icons_dir = app_tree
    registry = FilesystemAppRegistry(apps_dir=str(apps_dir), icons_dir=str(icons_dir))
    dashboard = DashboardFactory.build_for_testing(registry=registry)

    with TestClient(create_app(config_provider, dashboard=dashboard)) as client:
        response = client.get("/icons/calc%00.png")

    assert response.status_code == 400
    assert response.json()["retryable"] is False


def test_url_prefix(monkeypatch):
    monkeypatch.setenv("URL_PREFIX", "/dashboard/")
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL", "0")
    dashboard = DashboardFactory.build_for_testing(apps=[CALC])

    with TestClient(create_app(EnvConfigProvider(), dashboard=dashboard)) as client:
        token = _signup_at(client, "/dashboard/signup")
        response = client.get("/dashboard/apps", headers=_bearer(token))

    assert response.status_code == 200
    assert response.json()["apps"][0]["open_url"] == "/dashboard/open_app/calc"


def _signup_at(client, path):
    response = client.post(path, json={"username": "admin", "password": "hunter2"})
    assert response.status_code == 200
    return response.json()["token"]


def test_factory_builds_mock_stack_on_startup(config_provider, monkeypatch):
    """Without an injected dashboard the lifespan builds one from the environment."""
    monkeypatch.setenv("DASHBOARD_BACKEND", "mock")
    monkeypatch.setenv("DASHBOARD_BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("DASHBOARD_MOCK_APPS_FILE", raising=False)

    with TestClient(create_app(EnvConfigProvider())) as client:
        token = _signup(client)
        response = client.get("/apps", headers=_bearer(token))

    assert [app["id"] for app in response.json()["apps"]] == ["calc", "notes"]


def test_factory_builds_real_stack_on_startup(monkeypatch, tmp_path, app_tree):
    apps_dir, icons_dir = app_tree
    monkeypatch.setenv("DASHBOARD_BACKEND", "real")
    monkeypatch.setenv("DASHBOARD_DB_PATH", str(tmp_path / "state" / "dashboard.db"))
    monkeypatch.setenv("DASHBOARD_APPS_DIR", str(apps_dir))
    monkeypatch.setenv("DASHBOARD_ICONS_DIR", str(icons_dir))
    monkeypatch.setenv("DASHBOARD_BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL", "0")
    monkeypatch.delenv("URL_PREFIX", raising=False)

    with TestClient(create_app(EnvConfigProvider())) as client:
        token = _signup(client)
        response = client.get("/apps", headers=_bearer(token))

    assert [app["id"] for app in response.json()["apps"]] == ["calc", "notes"]

    # A restarted process still knows the dashboard is bootstrapped
    with TestClient(create_app(EnvConfigProvider())) as client:
        assert client.get("/bootstrap").json() == {"needs_signup": False}
        login = client.post("/login", json={"username": "admin", "password": "hunter2"})

    assert login.status_code == 200


def test_mock_stack_icons_follow_url_prefix(monkeypatch):
    monkeypatch.setenv("DASHBOARD_BACKEND", "mock")
    monkeypatch.setenv("DASHBOARD_BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL", "0")
    monkeypatch.setenv("URL_PREFIX", "/dash")
    monkeypatch.delenv("DASHBOARD_MOCK_APPS_FILE", raising=False)

    with TestClient(create_app(EnvConfigProvider())) as client:
        token = _signup_at(client, "/dash/signup")
        response = client.get("/dash/apps", headers=_bearer(token))

    assert [app["icon_path"] for app in response.json()["apps"]] == [
        "/dash/icons/calc.png",
        "/dash/icons/notes.png",
    ]
