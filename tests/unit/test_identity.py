"""
Unit tests for request identity dependencies.
"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from petshop.security.identity import (
    get_current_user_id,
    get_session_id,
    require_session,
    require_user,
)


@pytest.fixture
def identity_client():
    app = FastAPI()

    @app.get("/whoami")
    async def whoami(
        user_id=Depends(get_current_user_id),
        session_id=Depends(get_session_id),
    ):
        return {"user_id": user_id, "session_id": session_id}

    @app.get("/session")
    async def session(session_id: str = Depends(require_session)):
        return {"session_id": session_id}

    @app.get("/private")
    async def private(user_id=Depends(require_user)):
        return {"user_id": user_id}

    return TestClient(app)


class TestIdentity:
    """Tests for the identity dependencies."""

    def test_anonymous(self, identity_client):
        body = identity_client.get("/whoami").json()

        assert body == {"user_id": None, "session_id": None}

    def test_user_header(self, identity_client):
        body = identity_client.get("/whoami", headers={"X-User-Id": " user-1 "}).json()

        assert body == {"user_id": "user-1", "session_id": "user:user-1"}

    def test_explicit_session(self, identity_client):
        headers = {"X-User-Id": "user-1", "X-Session-Id": "tab-42"}

        assert identity_client.get("/whoami", headers=headers).json()["session_id"] == "tab-42"

    def test_blank_user_is_anonymous(self, identity_client):
        assert identity_client.get("/whoami", headers={"X-User-Id": "  "}).json()["user_id"] is None

    def test_require_user(self, identity_client):
        response = identity_client.get("/private")

        assert response.status_code == 401
        assert response.json()["detail"] == "Please sign in to continue."
        assert identity_client.get("/private", headers={"X-User-Id": "user-1"}).json() == {"user_id": "user-1"}

    def test_require_session(self, identity_client):
        response = identity_client.get("/session")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing X-Session-Id header."
        assert identity_client.get("/session", headers={"X-Session-Id": "tab-7"}).json() == {"session_id": "tab-7"}
        assert identity_client.get("/session", headers={"X-User-Id": "user-1"}).json() == {"session_id": "user:user-1"}

    def test_blank_session_header_is_ignored(self, identity_client):
        response = identity_client.get("/session", headers={"X-Session-Id": "  "})

        assert response.status_code == 400
