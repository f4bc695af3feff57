# Tests for api/deps.py: require_nonce dependency.
# Created: 2026-10-18

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from nonceward.api.deps import NONCE_HEADER, require_nonce
from nonceward.service import reset_nonce_service
from nonceward.verifier import VerificationMode, VerificationResult


def _post_action(request: Request) -> str:
    return f"delete-post-{request.path_params['post_id']}"


def _user(request: Request) -> str:
    return request.headers.get("X-User", "")


async def _async_user(request: Request) -> str:
    return request.headers.get("X-User", "")


@pytest.fixture
def test_app(service):
    reset_nonce_service(service)
    app = FastAPI()

    @app.post(
        "/posts/{post_id}/delete",
        dependencies=[Depends(require_nonce(_post_action, identity_getter=_user))],
    )
    async def delete_post(post_id: int):
        return {"deleted": post_id}

    @app.get("/soft")
    async def soft(
        result: VerificationResult = Depends(
            require_nonce("soft-action", mode=VerificationMode.SOFT, identity_getter=_async_user)
        ),
    ):
        return {"result": result.name}

    @app.post("/ajax", dependencies=[Depends(require_nonce("ajax-action", require_async=True))])
    async def ajax():
        return {"ok": True}

    @app.post(
        "/same-origin",
        dependencies=[Depends(require_nonce("origin-action", require_same_origin=True))],
    )
    async def same_origin_endpoint():
        return {"ok": True}

    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


class TestStrict:
    def test_query_argument(self, client, service):
        token = service.generate_token("delete-post-5", "user:42")
        resp = client.post(
            "/posts/5/delete", params={"_nonce": token}, headers={"X-User": "user:42"}
        )
        assert resp.status_code == 200
        assert resp.json() == {"deleted": 5}

    def test_header(self, client, service):
        token = service.generate_token("delete-post-5", "user:42")
        resp = client.post(
            "/posts/5/delete", headers={NONCE_HEADER: token, "X-User": "user:42"}
        )
        assert resp.status_code == 200

    def test_form_field(self, client, service):
        token = service.generate_token("delete-post-5", "user:42")
        resp = client.post(
            "/posts/5/delete", data={"_nonce": token}, headers={"X-User": "user:42"}
        )
        assert resp.status_code == 200

    def test_missing_nonce_is_403(self, client):
        resp = client.post("/posts/5/delete", headers={"X-User": "user:42"})
        assert resp.status_code == 403
        assert "expired or is invalid" in resp.json()["detail"]

    def test_nonce_for_other_post_is_403(self, client, service):
        token = service.generate_token("delete-post-6", "user:42")
        resp = client.post(
            "/posts/5/delete", params={"_nonce": token}, headers={"X-User": "user:42"}
        )
        assert resp.status_code == 403

    def test_nonce_for_other_user_is_403(self, client, service):
        token = service.generate_token("delete-post-5", "user:42")
        resp = client.post(
            "/posts/5/delete", params={"_nonce": token}, headers={"X-User": "user:43"}
        )
        assert resp.status_code == 403


class TestSoft:
    def test_valid(self, client, service):
        token = service.generate_token("soft-action", "u1")
        resp = client.get("/soft", params={"_nonce": token}, headers={"X-User": "u1"})
        assert resp.status_code == 200
        assert resp.json() == {"result": "VALID_CURRENT"}

    def test_invalid_is_reported_not_rejected(self, client):
        resp = client.get("/soft", params={"_nonce": "nope"})
        assert resp.status_code == 200
        assert resp.json() == {"result": "INVALID"}


class TestContextChecks:
    def test_async_flag_required(self, client, service):
        token = service.generate_token("ajax-action")
        resp = client.post("/ajax", params={"_nonce": token})
        assert resp.status_code == 403

        resp = client.post(
            "/ajax",
            params={"_nonce": token},
            headers={"X-Requested-With": "XMLHttpRequest"},
        )
        assert resp.status_code == 200

    def test_same_origin_defaults_to_request_base_url(self, client, service):
        token = service.generate_token("origin-action")
        resp = client.post(
            "/same-origin", params={"_nonce": token}, headers={"Origin": "http://testserver"}
        )
        assert resp.status_code == 200

    def test_cross_origin_rejected(self, client, service):
        token = service.generate_token("origin-action")
        resp = client.post(
            "/same-origin", params={"_nonce": token}, headers={"Origin": "https://evil.test"}
        )
        assert resp.status_code == 403

    def test_allowed_origin_from_settings(self, client, service, monkeypatch):
        monkeypatch.setattr(service.settings, "allowed_origin", "https://app.test")
        token = service.generate_token("origin-action")
        resp = client.post(
            "/same-origin",
            params={"_nonce": token},
            headers={"Referer": "https://app.test/settings"},
        )
        assert resp.status_code == 200
