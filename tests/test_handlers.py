import pytest
from flask import Flask, g, request

from shopapi.dbs import Database
from shopapi.user.handlers import register_routes
from shopapi.user.model import User
from shopapi.utils import check_password

EMAIL = "someone@example.com"


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'handlers.db'}")
    db.auto_migrate(User)
    return db


@pytest.fixture
def client(database):
    app = Flask("handlers-test")

    @app.before_request
    def _identify():
        g.user_id = request.headers.get("X-User-Id", "")

    register_routes(app, database)
    return app.test_client()


def _register(client):
    password = "password"
    return client.post(
        "/api/v1/auth/register", json={"email": EMAIL, "password": password}
    )


def test_routes_are_registered(database):
    app = Flask("routes-test")
    register_routes(app, database)
    rules = {rule.rule: rule.methods for rule in app.url_map.iter_rules()}
    assert "POST" in rules["/api/v1/auth/register"]
    assert "GET" in rules["/api/v1/auth/me"]
    assert "PUT" in rules["/api/v1/auth/change-password"]


def test_register_success(client):
    resp = _register(client)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["error"] is None
    assert body["result"]["user"]["email"] == EMAIL
    assert "password" not in body["result"]["user"]


def test_register_invalid_body(client):
    resp = client.post(
        "/api/v1/auth/register", data="not json", content_type="application/json"
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["message"] == "Invalid parameters"


def test_register_invalid_field_type(client):
    resp = client.post("/api/v1/auth/register", json={"email": EMAIL, "password": 1})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["message"] == "Invalid parameters"


def test_register_failed_validation(client):
    password = "password"
    resp = client.post(
        "/api/v1/auth/register", json={"email": "bad", "password": password}
    )
    assert resp.status_code == 500
    assert resp.get_json()["error"]["message"] == "Something went wrong"


def test_register_duplicate(client):
    assert _register(client).status_code == 200
    resp = _register(client)
    assert resp.status_code == 500
    assert resp.get_json()["error"]["message"] == "Something went wrong"


def test_get_me_unauthorized(client):
    resp = client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["error"]["message"] == "Unauthorized"


def test_get_me_success(client):
    user_id = _register(client).get_json()["result"]["user"]["id"]
    resp = client.get("/api/v1/auth/me", headers={"X-User-Id": user_id})
    assert resp.status_code == 200
    assert resp.get_json()["result"]["id"] == user_id
    assert resp.get_json()["result"]["email"] == EMAIL


def test_get_me_unknown_user(client):
    resp = client.get("/api/v1/auth/me", headers={"X-User-Id": "missing"})
    assert resp.status_code == 500
    assert resp.get_json()["error"]["message"] == "Something went wrong"


def test_change_password_success(client, database):
    user_id = _register(client).get_json()["result"]["user"]["id"]
    password = "password"
    new_password = "secret"
    resp = client.put(
        "/api/v1/auth/change-password",
        json={"password": password, "new_password": new_password},
        headers={"X-User-Id": user_id},
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"result": None, "error": None}
    assert check_password(database.find_by_id(User, user_id).password, new_password)


def test_change_password_wrong_current(client):
    user_id = _register(client).get_json()["result"]["user"]["id"]
    password = "placeholder"
    new_password = "secret"
    resp = client.put(
        "/api/v1/auth/change-password",
        json={"password": password, "new_password": new_password},
        headers={"X-User-Id": user_id},
    )
    assert resp.status_code == 500
    assert resp.get_json()["error"]["message"] == "Something went wrong"


def test_change_password_invalid_body(client):
    resp = client.put(
        "/api/v1/auth/change-password",
        data="[",
        content_type="application/json",
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["message"] == "Invalid parameters"