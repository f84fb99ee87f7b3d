"""Tests for the chat store."""
import asyncio
import json

from src.data_models.schemas import ChatMessage

from ..chat import ChatStore, KeyValueStorage


class FakeWebSocket:
    def __init__(self):
        self.sent = []
        self.incoming = asyncio.Queue()
        self.closed = False

    async def send(self, data):
        self.sent.append(json.loads(data))

    async def close(self):
        self.closed = True
        await self.incoming.put(None)

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self.incoming.get()
        if item is None:
            raise StopAsyncIteration
        return item


def make_store(storage=None):
    ws = FakeWebSocket()
    urls = []

    async def connect(url):
        urls.append(url)
        return ws

    store = ChatStore("SP1USER", storage=storage, websocket_url="ws://chat.test/ws", connect_factory=connect)
    return store, ws, urls


class TestChatMessages:
    def test_tokens_extend_streaming_message(self):
        store, _, _ = make_store()
        store.handle_incoming(json.dumps({"thread_id": "t1", "type": "token", "content": "Hel"}))
        store.handle_incoming(json.dumps({"thread_id": "t1", "type": "token", "content": "lo", "status": "end"}))
        store.handle_incoming(json.dumps({"thread_id": "t1", "type": "token", "content": "!"}))

        messages = store.get_state().messages["t1"]
        assert [m.content for m in messages] == ["Hello", "!"]
        assert messages[0].status == "end"

    def test_step_defaults_to_planning(self):
        store, _, _ = make_store()
        store.handle_incoming(json.dumps({"thread_id": "t1", "type": "step", "content": "thinking"}))
        assert store.get_state().messages["t1"][0].status == "planning"

    def test_assistant_reply_stops_typing(self):
        store, _, _ = make_store()
        store.set_typing("t1", True)
        store.handle_incoming(json.dumps({"thread_id": "t1", "role": "assistant", "type": "message", "content": "hi"}))
        assert store.get_state().is_typing["t1"] is False

    def test_invalid_frame_is_ignored(self):
        store, _, _ = make_store()
        store.handle_incoming("not json")
        store.handle_incoming(json.dumps("x"))
        assert store.get_state().messages == {}

    def test_add_message_keeps_other_threads(self):
        store, _, _ = make_store()
        store.add_message(ChatMessage(thread_id="t1", type="message", content="a"))
        store.add_message(ChatMessage(thread_id="t2", type="message", content="b"))
        assert set(store.get_state().messages) == {"t1", "t2"}


class TestChatConnection:
    def test_connect_requests_stored_thread_history_once(self):
        storage = KeyValueStorage()
        storage.set_item("SP1USER_activeThreadId", "t1")
        store, ws, urls = make_store(storage)

        async def run():
            await store.connect("token-123")
            await store.set_active_thread("t1")
            await store.disconnect()

        asyncio.run(run())

        assert urls == ["ws://chat.test/ws?token=token-123"]
        assert [frame["type"] for frame in ws.sent] == ["history"]
        assert ws.sent[0]["thread_id"] == "t1"
        assert "t1" in store.get_state().fetched_threads
        assert store.get_state().is_connected is False

    def test_send_message_without_connection(self):
        store, _, _ = make_store()
        asyncio.run(store.send_message("t1", "hello"))
        assert store.get_state().error == "WebSocket not connected"
        assert "t1" not in store.get_state().messages

    def test_history_not_marked_fetched_when_offline(self):
        store, _, _ = make_store()
        asyncio.run(store.set_active_thread("t1"))
        assert store.get_state().active_thread_id == "t1"
        assert store.get_state().fetched_threads == set()

    def test_send_message_and_receive_reply(self):
        store, ws, _ = make_store()
        store.set_selected_agent("agent-1")

        async def run():
            await store.connect("token")
            await store.send_message("t1", "hello")
            await ws.incoming.put(json.dumps({"thread_id": "t1", "role": "assistant", "type": "message", "content": "hi"}))
            for _ in range(5):
                await asyncio.sleep(0)
            await store.disconnect()

        asyncio.run(run())

        assert ws.sent[-1] == {
            "type": "message",
            "role": "user",
            "status": "sent",
            "content": "hello",
            "thread_id": "t1",
            "agent_id": "agent-1",
        }
        assert [m.content for m in store.get_state().messages["t1"]] == ["hello", "hi"]
        assert store.get_state().is_typing["t1"] is False

    def test_malformed_frames_do_not_stop_the_receiver(self):
        store, ws, _ = make_store()

        async def run():
            await store.connect("token")
            await ws.incoming.put(json.dumps({"thread_id": "t1", "content": 5}))
            await ws.incoming.put(json.dumps(["not", "an", "object"]))
            await ws.incoming.put(json.dumps({"thread_id": "t1", "role": "assistant", "type": "message", "content": "hi"}))
            for _ in range(5):
                await asyncio.sleep(0)
            connected = store.get_state().is_connected
            await store.disconnect()
            return connected

        assert asyncio.run(run()) is True
        assert [m.content for m in store.get_state().messages["t1"]] == ["hi"]
        assert store.get_state().error is None

    def test_clear_messages_deletes_thread(self):
        store, ws, _ = make_store()

        async def run():
            await store.connect("token")
            await store.set_active_thread("t1")
            await store.clear_messages("t1")
            await store.disconnect()

        asyncio.run(run())

        assert ws.sent[-1] == {"type": "delete_thread", "thread_id": "t1"}
        state = store.get_state()
        assert state.active_thread_id is None
        assert "t1" not in state.fetched_threads
        assert store.storage.get_item("SP1USER_activeThreadId") is None

    def test_receive_error_closes_socket(self):
        class BrokenWebSocket(FakeWebSocket):
            async def __anext__(self):
                raise RuntimeError("stream reset")

        ws = BrokenWebSocket()

        async def connect(url):
            return ws

        store = ChatStore("SP1USER", connect_factory=connect)

        async def run():
            await store.connect("token")
            for _ in range(5):
                await asyncio.sleep(0)

        asyncio.run(run())
        assert ws.closed is True
        assert store.get_state().error == "WebSocket connection error"
        assert store.get_state().is_connected is False

    def test_connection_failure(self):
        async def refuse(url):
            raise OSError("refused")

        store = ChatStore("SP1USER", connect_factory=refuse)
        asyncio.run(store.connect("token"))
        assert store.get_state().error == "Failed to connect to WebSocket"
        assert store.get_state().is_connected is False


def test_selected_agent_is_persisted():
    storage = KeyValueStorage()
    store, _, _ = make_store(storage)
    store.set_selected_agent("agent-1")

    restored, _, _ = make_store(storage)
    assert restored.get_state().selected_agent_id == "agent-1"

    restored.set_selected_agent(None)
    assert storage.get_item("SP1USER_selectedAgentId") is None
