import pytest

from tonify.schemas import Message
from tonify.store import InMemoryMessageStore


def test_subscribers_receive_full_snapshots():
    store = InMemoryMessageStore()
    chat_id = store.create_chat("Team", ["a", "b", "c"], is_group=True)
    snapshots = []
    store.subscribe_to_messages(chat_id, snapshots.append)

    k1 = store.send_message(chat_id, text="hi", user_id="a")
    k2 = store.send_message(chat_id, text="hello", user_id="b")

    assert [len(s) for s in snapshots] == [0, 1, 2]
    assert [m.id for m in snapshots[-1]] == [k1, k2]
    latest = snapshots[-1][1]
    assert (latest.text, latest.userId, latest.chatId) == ("hello", "b", chat_id)
    assert latest.timestamp is not None


def test_unsubscribe_stops_delivery():
    store = InMemoryMessageStore()
    chat_id = store.create_chat("Pair", ["a", "b"], is_group=False)
    snapshots = []
    unsubscribe = store.subscribe_to_messages(chat_id, snapshots.append)
    unsubscribe()
    store.send_message(chat_id, text="anyone?", user_id="a")
    assert len(snapshots) == 1


def test_failing_subscriber_does_not_block_others():
    store = InMemoryMessageStore()
    chat_id = store.create_chat("Pair", ["a", "b"], is_group=False)
    seen = []

    def broken(_messages):
        if _messages:
            raise RuntimeError("render failed")

    store.subscribe_to_messages(chat_id, broken)
    store.subscribe_to_messages(chat_id, seen.append)
    store.send_message(chat_id, text="still works", user_id="a")
    assert [m.text for m in seen[-1]] == ["still works"]


def test_send_to_unknown_chat_raises():
    with pytest.raises(KeyError):
        InMemoryMessageStore().send_message("nope", text="hi", user_id="a")


def test_user_chats_and_chat_subscription():
    store = InMemoryMessageStore()
    updates = []
    store.subscribe_to_chats("a", updates.append)
    ab = store.create_chat("A & B", ["a", "b"], is_group=False)
    store.create_chat("B & C", ["b", "c"], is_group=False)
    store.send_message(ab, text="ping", user_id="b")

    chats = store.get_user_chats("a")
    assert [c.id for c in chats] == [ab]
    assert chats[0].lastMessage == "ping"
    assert updates[0] == []
    assert updates[-1][0].lastMessage == "ping"


def test_sender_tone_is_persisted_and_confidence_clamped():
    store = InMemoryMessageStore()
    chat_id = store.create_chat("Pair", ["a", "b"], is_group=False)
    store.send_message(chat_id, text="GREAT NEWS!!!", user_id="a", tone="Very Excited", confidence=140)
    store.send_message(chat_id, text="ok", user_id="b")

    loud, plain = store.messages(chat_id)
    assert (loud.tone, loud.confidence) == ("Very Excited", 100)
    assert (plain.tone, plain.confidence) == (None, None)


def test_message_confidence_is_rounded_into_range():
    assert Message(text="x", userId="a", chatId="c", confidence=-3).confidence == 0
    assert Message(text="x", userId="a", chatId="c", confidence=71.6).confidence == 72
