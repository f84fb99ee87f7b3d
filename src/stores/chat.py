"""
Chat store: per-thread message history over a websocket to the agent
backend.

The active thread and selected agent are persisted in a key-value storage
under keys scoped by the user's Stacks address, so a returning user lands
back in the thread they left.
"""
import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

import websockets
from websockets.exceptions import ConnectionClosed
from pydantic import BaseModel, Field

from src.config.settings import WEBSOCKET_URL
from src.data_models.schemas import ChatMessage
from src.stores.base import Store
from src.utils.logger import logger

# Token messages still being streamed; later tokens are appended to them
STREAMING_STATUSES = {"processing", "planning"}


class KeyValueStorage:
    """Minimal string key-value storage; the default keeps values in memory."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class ChatState(BaseModel):
    messages: Dict[str, List[ChatMessage]] = Field(default_factory=dict)
    fetched_threads: Set[str] = Field(default_factory=set)
    active_thread_id: Optional[str] = None
    selected_agent_id: Optional[str] = None
    is_connected: bool = False
    is_loading: bool = False
    error: Optional[str] = None
    is_typing: Dict[str, bool] = Field(default_factory=dict)


class ChatStore(Store[ChatState]):
    def __init__(
        self,
        stacks_address: Optional[str] = None,
        storage: Optional[KeyValueStorage] = None,
        websocket_url: str = WEBSOCKET_URL,
        connect_factory: Callable[[str], Awaitable[Any]] = None,
    ):
        self.storage = storage or KeyValueStorage()
        self.active_thread_key = f"{stacks_address}_activeThreadId"
        self.selected_agent_key = f"{stacks_address}_selectedAgentId"
        self.websocket_url = websocket_url
        self._connect = connect_factory or websockets.connect
        self._ws = None
        self._receiver: Optional[asyncio.Task] = None

        super().__init__(ChatState(
            active_thread_id=self.storage.get_item(self.active_thread_key),
            selected_agent_id=self.storage.get_item(self.selected_agent_key),
        ))

    # ==================
    # Connection
    # ==================

    async def connect(self, access_token: str) -> None:
        """Open the websocket unless a connection is already open."""
        if self._ws is not None:
            return

        try:
            self._ws = await self._connect(f"{self.websocket_url}?token={access_token}")
        except Exception as e:
            logger.error(f"Chat connection error: {e}")
            self.set_state({"error": "Failed to connect to WebSocket", "is_connected": False})
            return

        self.set_state({"is_connected": True, "error": None})
        self._receiver = asyncio.create_task(self._receive_loop(self._ws))

        stored_thread_id = self.storage.get_item(self.active_thread_key)
        if stored_thread_id and stored_thread_id not in self.get_state().fetched_threads:
            await self.set_active_thread(stored_thread_id)

    async def _receive_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                self.handle_incoming(raw)
        except ConnectionClosed:
            pass
        except Exception as e:
            logger.error(f"Chat websocket error: {e}")
            self.set_state({"error": "WebSocket connection error"})
            await ws.close()
        finally:
            if self._ws is ws:
                self._ws = None
                self.set_state({"is_connected": False})

    async def disconnect(self) -> None:
        ws, self._ws = self._ws, None
        if ws is None:
            return
        await ws.close()
        if self._receiver is not None:
            self._receiver.cancel()
            self._receiver = None
        self.set_state({"is_connected": False})

    async def _send(self, payload: Dict[str, Any]) -> bool:
        if self._ws is None:
            self.set_state({"error": "WebSocket not connected"})
            return False
        try:
            await self._ws.send(json.dumps(payload))
        except Exception as e:
            logger.error(f"Chat send error: {e}")
            self.set_state({"error": "Failed to send message"})
            return False
        return True

    # ==================
    # Messages
    # ==================

    def handle_incoming(self, raw: str) -> None:
        """Apply one frame received from the backend."""
        try:
            data = json.loads(raw)
            if data.get("role") == "assistant" and data.get("thread_id"):
                self.set_typing(data["thread_id"], False)

            if data.get("type") == "token":
                data["status"] = data.get("status") or "processing"
            elif data.get("type") == "step":
                data["status"] = data.get("status") or "planning"

            message = ChatMessage(**data)
        except Exception as e:
            logger.error(f"Error processing chat message: {e}")
            return

        self.add_message(message)

    def add_message(self, message: ChatMessage) -> None:
        """Append a message; a streamed token extends the token message still in progress."""
        def update(state: ChatState) -> Dict[str, Any]:
            thread_messages = list(state.messages.get(message.thread_id, []))
            last = thread_messages[-1] if thread_messages else None

            if (
                message.type == "token"
                and last is not None
                and last.type == "token"
                and last.status in STREAMING_STATUSES
            ):
                thread_messages[-1] = last.model_copy(update={
                    "content": (last.content or "") + (message.content or ""),
                    "status": message.status,
                })
            else:
                thread_messages.append(message)

            return {"messages": {**state.messages, message.thread_id: thread_messages}}

        self.set_state(update)

    async def send_message(self, thread_id: str, content: str) -> None:
        if self._ws is None:
            self.set_state({"error": "WebSocket not connected"})
            return

        agent_id = self.get_state().selected_agent_id
        self.set_typing(thread_id, True)
        self.add_message(ChatMessage(
            agent_id=agent_id,
            thread_id=thread_id,
            role="user",
            content=content,
            type="message",
            status="sent",
        ))

        sent = await self._send({
            "type": "message",
            "role": "user",
            "status": "sent",
            "content": content,
            "thread_id": thread_id,
            "agent_id": agent_id,
        })
        if not sent:
            self.set_typing(thread_id, False)

    async def clear_messages(self, thread_id: str) -> None:
        """Delete a thread on the backend and forget it locally."""
        if self._ws is not None:
            await self._send({"type": "delete_thread", "thread_id": thread_id})

        self.set_state(lambda state: {
            "messages": {**state.messages, thread_id: []},
            "active_thread_id": None,
            "fetched_threads": state.fetched_threads - {thread_id},
            "is_typing": {**state.is_typing, thread_id: False},
        })
        self.storage.remove_item(self.active_thread_key)

    # ==================
    # Threads
    # ==================

    async def set_active_thread(self, thread_id: str) -> None:
        """Switch threads, requesting the thread's history the first time it is opened."""
        self.set_state({"active_thread_id": thread_id})
        self.storage.set_item(self.active_thread_key, thread_id)

        if thread_id in self.get_state().fetched_threads:
            return
        if await self.get_thread_history():
            self.set_state(lambda state: {"fetched_threads": state.fetched_threads | {thread_id}})

    def clear_active_thread(self) -> None:
        self.set_state({"active_thread_id": None})
        self.storage.remove_item(self.active_thread_key)

    async def get_thread_history(self) -> bool:
        state = self.get_state()
        return await self._send({
            "type": "history",
            "role": "user",
            "status": "sent",
            "thread_id": state.active_thread_id,
            "agent_id": state.selected_agent_id,
        })

    # ==================
    # Agent / status
    # ==================

    def set_selected_agent(self, agent_id: Optional[str]) -> None:
        self.set_state({"selected_agent_id": agent_id})
        if agent_id:
            self.storage.set_item(self.selected_agent_key, agent_id)
        else:
            self.storage.remove_item(self.selected_agent_key)

    def set_typing(self, thread_id: str, is_typing: bool) -> None:
        self.set_state(lambda state: {"is_typing": {**state.is_typing, thread_id: is_typing}})

    def set_loading(self, is_loading: bool) -> None:
        self.set_state({"is_loading": is_loading})

    def set_error(self, error: Optional[str]) -> None:
        self.set_state({"error": error})
