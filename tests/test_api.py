import json

import pytest
from fastapi.testclient import TestClient

from vitae.app import bearer_token, create_app
from vitae.core.config import Config


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "active"


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["endpoints"]["save"] == "/api/save"


def test_data_is_null_before_first_save(client):
    response = client.get("/api/data")
    assert response.status_code == 200
    assert response.json() is None


def test_data_is_null_when_file_is_corrupt(client, data_path):
    data_path.parent.mkdir(parents=True)
    data_path.write_text("not json", encoding="utf-8")

    response = client.get("/api/data")
    assert response.status_code == 200
    assert response.json() is None


def test_auth_issues_token(client, admin_key, clock):
    response = client.post("/api/auth", json={"passkey": admin_key})

    assert response.status_code == 200
    body = response.json()
    assert len(body["token"]) == 64
    assert body["expiresAt"].endswith("Z")


@pytest.mark.parametrize("payload", [{}, {"passkey": ""}, {"passkey": 42}, ["passkey"]])
def test_auth_requires_passkey(client, payload):
    response = client.post("/api/auth", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing passkey"}


def test_auth_rejects_non_json_body(client):
    response = client.post("/api/auth", content=b"passkey=x", headers={"Content-Type": "text/plain"})
    assert response.status_code == 400


@pytest.mark.parametrize(
    "body",
    [b'{"passkey": "wrong"}', b'{"passkey": "\\ud800"}', b'{"passkey": "veritas-test-ke\\udc00"}'],
)
def test_auth_rejects_wrong_passkey(client, body):
    response = client.post("/api/auth", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid passkey"}


def test_auth_unavailable_without_admin_key(data_path, admin_key):
    client = TestClient(create_app(Config(DATA_PATH=str(data_path), ADMIN_KEY="")))

    response = client.post("/api/auth", json={"passkey": admin_key})
    assert response.status_code == 503
    assert response.json() == {"error": "Admin key not configured"}


def test_verify_requires_token(client, admin_headers):
    assert client.get("/api/auth/verify").status_code == 401
    assert client.get("/api/auth/verify", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.get("/api/auth/verify", headers={"Authorization": "Basic abc"}).status_code == 401

    response = client.get("/api/auth/verify", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_x_admin_token_header_is_accepted(client, admin_headers):
    token = admin_headers["Authorization"].split(" ", 1)[1]
    response = client.get("/api/auth/verify", headers={"x-admin-token": token})
    assert response.status_code == 200


def test_token_expires(client, admin_headers, clock):
    clock.advance(60 * 60)
    response = client.get("/api/auth/verify", headers=admin_headers)
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_logout_revokes_token(client, admin_headers):
    assert client.post("/api/auth/logout", headers=admin_headers).json() == {"ok": True}
    assert client.get("/api/auth/verify", headers=admin_headers).status_code == 401


def test_save_requires_token(client, bundle, data_path):
    response = client.post("/api/save", json=bundle)

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert not data_path.exists()


def test_save_with_bad_token_does_not_validate_or_write(client, data_path):
    response = client.post("/api/save", json={"junk": True}, headers={"Authorization": "Bearer bad"})
    assert response.status_code == 401
    assert not data_path.exists()


def test_save_then_data_returns_bundle(client, admin_headers, bundle, data_path):
    response = client.post("/api/save", json=bundle, headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get("/api/data").json() == bundle
    assert json.loads(data_path.read_text(encoding="utf-8")) == bundle


def test_save_rejects_invalid_payload(client, admin_headers, bundle, data_path):
    bundle["homeContent"]["galleryItems"].append({"id": "g9", "title": "missing manifesto"})
    response = client.post("/api/save", json=bundle, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid data", "details": ["Invalid homeContent payload."]}
    assert not data_path.exists()


def test_save_rejects_non_json_body(client, admin_headers):
    headers = dict(admin_headers, **{"Content-Type": "application/json"})
    response = client.post("/api/save", content=b"{oops", headers=headers)

    assert response.status_code == 400
    assert response.json()["details"] == ["Payload must be an object."]


def test_save_reports_write_failure(tmp_path, admin_key, bundle):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    client = TestClient(create_app(Config(DATA_PATH=str(blocker / "db.json"), ADMIN_KEY=admin_key)))
    token = client.post("/api/auth", json={"passkey": admin_key}).json()["token"]

    response = client.post("/api/save", json=bundle, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to save data"}


def test_oversized_body_is_rejected(data_path, admin_key):
    config = Config(DATA_PATH=str(data_path), ADMIN_KEY=admin_key, MAX_BODY_BYTES=64)
    client = TestClient(create_app(config))

    response = client.post("/api/auth", json={"passkey": "x" * 100})
    assert response.status_code == 413


def test_cors_allows_configured_origin(data_path):
    config = Config(DATA_PATH=str(data_path), CORS_ORIGINS_ENV="https://example.org")
    client = TestClient(create_app(config))

    allowed = client.get("/api/data", headers={"Origin": "https://example.org"})
    assert allowed.headers["access-control-allow-origin"] == "https://example.org"
    denied = client.get("/api/data", headers={"Origin": "https://evil.example"})
    assert "access-control-allow-origin" not in denied.headers


def test_admin_scenario(client, admin_key, bundle):
    token = client.post("/api/auth", json={"passkey": admin_key}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    del bundle["albums"][0]["tracks"][1]["audioUrl"]
    rejected = client.post("/api/save", json=bundle, headers=headers)
    assert rejected.status_code == 400
    assert "Invalid albums payload." in rejected.json()["details"]
    assert client.get("/api/data").json() is None

    bundle["albums"][0]["tracks"][1]["audioUrl"] = "/media/audio/children.mp3"
    accepted = client.post("/api/save", json=bundle, headers=headers)
    assert accepted.status_code == 200
    assert accepted.json() == {"success": True}

    assert client.get("/api/data").json() == bundle


class _Request:
    def __init__(self, headers):
        self.headers = headers


@pytest.mark.parametrize(
    "headers,expected",
    [
        ({"authorization": "Bearer abc"}, "abc"),
        ({"authorization": "Bearer "}, None),
        ({"x-admin-token": "xyz"}, "xyz"),
        ({"authorization": "Token abc", "x-admin-token": "xyz"}, "xyz"),
        ({}, None),
    ],
)
def test_bearer_token_extraction(headers, expected):
    assert bearer_token(_Request(headers)) == expected


def test_data_is_null_when_file_is_deeply_nested(client, data_path):
    data_path.parent.mkdir(parents=True)
    data_path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")

    response = client.get("/api/data")
    assert response.status_code == 200
    assert response.json() is None


def test_save_rejects_deeply_nested_body(client, admin_headers, data_path):
    headers = dict(admin_headers, **{"Content-Type": "application/json"})
    response = client.post("/api/save", content=b"[" * 100000 + b"]" * 100000, headers=headers)

    assert response.status_code == 400
    assert response.json()["details"] == ["Payload must be an object."]
    assert not data_path.exists()


def test_lone_surrogates_are_saved_and_served(client, admin_headers, bundle):
    bundle["humanManifesto"] = "half a pair \ud800 here"
    headers = dict(admin_headers, **{"Content-Type": "application/json"})

    response = client.post("/api/save", content=json.dumps(bundle).encode("ascii"), headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    served = client.get("/api/data")
    assert served.status_code == 200
    assert served.json() == bundle
