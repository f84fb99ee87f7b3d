"""
FastAPI dependencies for authentication.
"""

from typing import Any, Dict

from fastapi import Depends, HTTPException, Request, status
from supabase import Client

from src.services.supabase_client import create_user_client


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency to get the current authenticated user.

    The middleware must run before this dependency is called.

    Returns:
        User dict with ``sub`` (Supabase user id), ``email`` and ``access_token``

    Raises:
        HTTPException: 401 if user is not authenticated

    Example:
        @router.get("/wallets/me")
        async def my_wallets(user: dict = Depends(get_current_user)):
            return {"user_id": user["sub"]}
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def get_user_supabase_client(user: Dict[str, Any] = Depends(get_current_user)) -> Client:
    """Supabase client acting as the current user, for queries behind row-level security."""
    return create_user_client(user["access_token"])
