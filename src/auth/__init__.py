"""
Supabase authentication module for FastAPI.

Provides middleware and dependencies for authenticating users via Supabase access tokens.
"""

from src.auth.middleware import SupabaseAuthMiddleware
from src.auth.deps import get_current_user, get_user_supabase_client

__all__ = ["SupabaseAuthMiddleware", "get_current_user", "get_user_supabase_client"]
