from datetime import datetime, timedelta, timezone

from chatx_core.domain.models import Message
from chatx_core.infrastructure.storage.memory_store import InMemoryConversationStore


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kw):
        self.now += timedelta(**kw)


def test_get_or_create_new_is_empty():
    clock = FakeClock()
    store = InMemoryConversationStore(clock=clock)
    conv = store.get_or_create("com.example.app")
    assert conv.messages == []
    assert conv.last_active_at == clock.now
    assert "com.example.app" in store


def test_append_updates_last_active():
    clock = FakeClock()
    store = InMemoryConversationStore(clock=clock)
    store.get_or_create("app")
    clock.advance(minutes=5)
    store.append("app", Message(role="user", content="hi"))
    assert store.get("app").last_active_at == clock.now
    assert store.messages("app") == [Message(role="user", content="hi")]


def test_rollback_and_clear():
    store = InMemoryConversationStore(clock=FakeClock())
    store.append("app", Message(role="user", content="a"))
    store.append("app", Message(role="user", content="b"))
    assert store.rollback_last("app") == Message(role="user", content="b")
    assert [m.content for m in store.messages("app")] == ["a"]
    store.clear("app")
    assert store.messages("app") == []
    assert store.rollback_last("app") is None
    assert store.rollback_last("missing") is None


def test_messages_returns_snapshot():
    store = InMemoryConversationStore(clock=FakeClock())
    store.append("app", Message(role="user", content="a"))
    snapshot = store.messages("app")
    snapshot.append(Message(role="user", content="b"))
    assert len(store.messages("app")) == 1


def test_sweep_staleness_boundary():
    clock = FakeClock()
    store = InMemoryConversationStore(clock=clock)
    t0 = clock.now
    store.append("old", Message(role="user", content="x"))
    clock.now = t0 + timedelta(milliseconds=2)
    store.append("fresh", Message(role="user", content="y"))

    # old: now - last = 20min + 1ms; fresh: now - last = 20min - 1ms
    now = t0 + timedelta(minutes=20, milliseconds=1)
    removed = store.sweep_stale(now)
    assert removed == ["old"]
    assert "old" not in store
    assert "fresh" in store


def test_sweep_is_idempotent():
    clock = FakeClock()
    store = InMemoryConversationStore(clock=clock)
    store.get_or_create("a")
    store.get_or_create("b")
    clock.advance(minutes=30)
    store.get_or_create("c")
    assert sorted(store.sweep_stale()) == ["a", "b"]
    assert store.sweep_stale() == []
    assert len(store) == 1


def test_custom_ttl():
    clock = FakeClock()
    store = InMemoryConversationStore(ttl=timedelta(minutes=1), clock=clock)
    store.get_or_create("a")
    clock.advance(minutes=1)
    assert store.sweep_stale() == ["a"]
