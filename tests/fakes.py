# =============================================================================
# tests/fakes.py - In-Memory Supabase Stand-ins
# =============================================================================
# Fakes for the async Supabase client used by the client-core tests:
# auth calls, chainable table queries and realtime channels.
# =============================================================================

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock


class FakeQuery:
    """
    Chainable stand-in for a PostgREST query builder.

    Every builder call is recorded in `calls`; execute() returns `data`
    or raises `error`.
    """

    def __init__(self, data=None, error=None, count=None):
        self.data = data
        self.error = error
        self.count = count
        self.calls = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._record("limit", *args, **kwargs)

    def single(self, *args, **kwargs):
        return self._record("single", *args, **kwargs)

    async def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data, count=self.count)


class FakeChannel:
    """
    Stand-in for a realtime channel; deliver() plays an INSERT event.

    With a `gate` (asyncio.Event), subscribe() waits for it, holding the
    handshake open.
    """

    def __init__(self, topic, gate=None):
        self.topic = topic
        self.gate = gate
        self.bindings = []
        self.subscribed = False

    def on_postgres_changes(self, event, callback, table="*", schema="public", filter=None):
        self.bindings.append({
            "event": event,
            "table": table,
            "schema": schema,
            "filter": filter,
            "callback": callback,
        })
        return self

    async def subscribe(self, *args, **kwargs):
        if self.gate is not None:
            await self.gate.wait()
        self.subscribed = True
        return self

    def deliver(self, record):
        payload = {"data": {"type": "INSERT", "table": "notifications", "record": record}, "ids": []}
        for binding in self.bindings:
            binding["callback"](payload)


def make_auth_session(user_id="user-1", email="buyer@example.com"):
    """Object shaped like a gotrue Session."""
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))


def open_channels(client):
    """Channels created on the fake client and not yet removed."""
    removed = [c.args[0] for c in client.remove_channel.await_args_list]
    return [channel for channel in client.channels if channel not in removed]


def make_async_client(tables=None, session=None, subscribe_gate=None):
    """
    Build a fake AsyncClient.

    Args:
        tables: {table_name: FakeQuery}; unknown tables return empty results
        session: What auth.get_session() returns
        subscribe_gate: asyncio.Event every channel's subscribe() waits on
    """
    tables = tables if tables is not None else {}
    client = MagicMock()
    client.tables = tables
    client.table.side_effect = lambda name: tables.setdefault(name, FakeQuery(data=[]))

    client.auth = MagicMock()
    client.auth.get_session = AsyncMock(return_value=session)
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_up = AsyncMock()
    client.auth.sign_out = AsyncMock()
    client.auth.reset_password_for_email = AsyncMock()
    client.auth.update_user = AsyncMock()
    client.auth.on_auth_state_change = MagicMock(return_value=MagicMock())

    client.channels = []

    def _channel(topic):
        channel = FakeChannel(topic, gate=subscribe_gate)
        client.channels.append(channel)
        return channel

    client.channel.side_effect = _channel
    client.remove_channel = AsyncMock()
    return client

