"""Tests for the per-chat conversation store."""

from datetime import UTC, datetime, timedelta

import pytest

from logic.chat import get_tool_definitions
from logic.sessions import ConversationStore


class ManualClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(manual_clock: ManualClock) -> ConversationStore:
    return ConversationStore(
        system_prompt="You manage inventory.",
        tools=get_tool_definitions(),
        clock=manual_clock,
    )


def test_get_or_create_returns_same_conversation(store: ConversationStore):
    first = store.get_or_create("42")
    second = store.get_or_create("42")

    assert first is second
    assert len(store) == 1


def test_conversations_are_independent_per_chat(store: ConversationStore):
    alice = store.get_or_create("1")
    bob = store.get_or_create("2")

    alice.messages.append({"role": "user", "content": "hello"})

    assert alice is not bob
    assert bob.message_count == 0
    assert alice.message_count == 1


def test_new_conversation_is_preregistered(store: ConversationStore):
    conversation = store.get_or_create("42")

    assert conversation.messages == [
        {"role": "system", "content": "You manage inventory."}
    ]
    assert conversation.tools == get_tool_definitions()


def test_get_does_not_create(store: ConversationStore):
    assert store.get("missing") is None
    assert len(store) == 0


def test_reset_drops_conversation(store: ConversationStore):
    original = store.get_or_create("42")

    assert store.reset("42") is True
    assert store.reset("42") is False
    assert store.get_or_create("42") is not original


def test_list_active_oldest_first(store: ConversationStore, manual_clock: ManualClock):
    store.get_or_create("b")
    manual_clock.advance(5)
    store.get_or_create("a")

    assert [c.chat_id for c in store.list_active()] == ["b", "a"]


def test_conversations_never_expire_without_ttl(
    store: ConversationStore, manual_clock: ManualClock
):
    original = store.get_or_create("42")
    manual_clock.advance(365 * 24 * 3600)

    assert store.get_or_create("42") is original


def test_idle_conversations_expire_with_ttl(manual_clock: ManualClock):
    store = ConversationStore(
        system_prompt="p", tools=[], idle_ttl_seconds=60, clock=manual_clock
    )
    original = store.get_or_create("42")
    store.get_or_create("7")

    manual_clock.advance(30)
    assert store.get_or_create("42") is original

    manual_clock.advance(61)
    assert store.get("7") is None
    assert store.get_or_create("42") is not original


def test_activity_updates_last_active(store: ConversationStore, manual_clock: ManualClock):
    conversation = store.get_or_create("42")
    manual_clock.advance(10)
    store.get_or_create("42")

    assert conversation.last_active_at - conversation.created_at == timedelta(seconds=10)
