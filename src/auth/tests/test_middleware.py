"""Tests for Supabase token authentication."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from ..deps import get_current_user
from ..middleware import SupabaseAuthMiddleware


def make_app():
    app = FastAPI()
    app.add_middleware(SupabaseAuthMiddleware)

    @app.get("/me")
    def me(user: dict = Depends(get_current_user)):
        return {"sub": user["sub"], "email": user["email"]}

    return app


@patch("src.auth.middleware.get_supabase_client")
def test_valid_token(mock_get_client):
    supabase = MagicMock()
    supabase.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="user-1", email="a@b.c"))
    mock_get_client.return_value = supabase

    response = TestClient(make_app()).get("/me", headers={"Authorization": "Bearer token-123"})

    assert response.json() == {"sub": "user-1", "email": "a@b.c"}
    supabase.auth.get_user.assert_called_once_with("token-123")


@patch("src.auth.middleware.get_supabase_client")
def test_rejected_token(mock_get_client):
    supabase = MagicMock()
    supabase.auth.get_user.side_effect = RuntimeError("invalid JWT")
    mock_get_client.return_value = supabase

    response = TestClient(make_app()).get("/me", headers={"Authorization": "Bearer bad"})

    assert response.status_code == 401


@patch("src.auth.middleware.get_supabase_client")
def test_no_token(mock_get_client):
    response = TestClient(make_app()).get("/me")

    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}
    mock_get_client.assert_not_called()
