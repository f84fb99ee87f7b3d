"""
Supabase authentication middleware for FastAPI.

Resolves the Supabase access token sent by the dashboard to a user and
attaches it to the request state.
"""

import asyncio
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.services.supabase_client import get_supabase_client
from src.utils.logger import logger


class SupabaseAuthMiddleware(BaseHTTPMiddleware):
    """
    Passive middleware that authenticates requests using Supabase access tokens.

    This middleware attempts to authenticate all requests but does NOT block
    requests if authentication fails. Instead, it sets request.state.user to
    None for unauthenticated requests and lets route dependencies enforce
    authentication requirements.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.user = None

        access_token = self._extract_token(request)
        if not access_token:
            logger.debug("No token found in request - setting user to None")
            return await call_next(request)

        try:
            client = get_supabase_client()
            response = await asyncio.to_thread(client.auth.get_user, access_token)
            user = response.user if response else None

            if user is None:
                logger.debug("Supabase user not found for token")
            else:
                request.state.user = {
                    "sub": user.id,
                    "email": getattr(user, "email", None),
                    "access_token": access_token,
                }
                logger.info(f"Successfully authenticated user: {user.id}")
        except Exception as e:
            # Don't block request - let route dependencies handle auth enforcement
            logger.warning(f"authMiddleware failure: {str(e)}")

        return await call_next(request)

    def _extract_token(self, request: Request) -> Optional[str]:
        """Access token from the ``Authorization: Bearer`` header."""
        auth_header = request.headers.get("authorization")
        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:].strip() or None
        return None
