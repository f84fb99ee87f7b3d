"""
Supabase auth session store.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from supabase import Client

from src.config.settings import STACKS_NETWORK
from src.services.supabase_client import get_supabase_client
from src.stores.base import Store
from src.utils.logger import logger

SESSION_EVENTS = {"SIGNED_IN", "TOKEN_REFRESHED", "SIGNED_OUT"}
# These only carry a session worth keeping when one is present
SESSION_UPDATE_EVENTS = {"PASSWORD_RECOVERY", "USER_UPDATED"}


class SessionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    session: Optional[Any] = None
    access_token: Optional[str] = None
    user_id: Optional[str] = None
    is_loading: bool = True
    error: Optional[str] = None
    network: str = STACKS_NETWORK
    is_initialized: bool = False


def _event_name(event: Any) -> str:
    # supabase-py passes a plain string or a str-valued enum
    return getattr(event, "value", event)


class SessionStore(Store[SessionState]):
    def __init__(self, client: Optional[Client] = None):
        super().__init__(SessionState())
        self._client = client
        self._subscription = None

    @property
    def client(self) -> Client:
        return self._client or get_supabase_client()

    def initialize(self) -> None:
        """Load the current session and follow auth state changes."""
        try:
            self.set_state({"is_loading": True, "error": None})

            session = self.client.auth.get_session()
            self.set_session(session)

            self._subscription = self.client.auth.on_auth_state_change(self._on_auth_state_change)
            self.set_state({"is_loading": False, "is_initialized": True})
        except Exception as e:
            logger.error(f"Session initialization error: {e}")
            self.set_state({"error": str(e), "is_loading": False, "is_initialized": True})

    def _on_auth_state_change(self, event: Any, session: Any) -> None:
        name = _event_name(event)
        logger.info(f"Auth state change: {name}, {'session exists' if session else 'no session'}")

        if name in SESSION_EVENTS:
            self.set_session(session)
        elif name in SESSION_UPDATE_EVENTS and session:
            self.set_session(session)

    def set_session(self, session: Any) -> None:
        user = getattr(session, "user", None) if session else None
        self.set_state({
            "session": session,
            "access_token": getattr(session, "access_token", None) if session else None,
            "user_id": getattr(user, "id", None),
            "error": None,
            "is_loading": False,
        })

    def clear_session(self) -> None:
        try:
            self.client.auth.sign_out()
            self.set_state({"session": None, "access_token": None, "user_id": None, "error": None})
        except Exception as e:
            logger.error(f"Error clearing session: {e}")
            self.set_state({"error": str(e)})

    def refresh_session(self) -> None:
        try:
            response = self.client.auth.refresh_session()
            if response and response.session:
                self.set_session(response.session)
        except Exception as e:
            logger.error(f"Error refreshing session: {e}")
            self.set_state({"error": str(e)})

    def teardown(self) -> None:
        """Stop following auth state changes."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
