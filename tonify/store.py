"""Message store boundary.

The realtime database is an external collaborator; the UI only needs
``create_chat``, ``send_message`` and the two subscriptions. Subscribers are
pushed the *full* current list on every change, never a delta, and may see
messages they have already seen.

``InMemoryMessageStore`` implements the same contract for local/mock data
and tests. Layout mirrors ``chats/{chatId}/messages/{messageId}``.
"""
from __future__ import annotations

import time
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from .logger import get_logger
from .schemas import Chat, Message

logger = get_logger("store")

Unsubscribe = Callable[[], None]
MessagesCallback = Callable[[List[Message]], None]
ChatsCallback = Callable[[List[Chat]], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


class MessageStore(ABC):
    @abstractmethod
    def create_chat(self, name: str, participants: List[str], is_group: bool) -> str:
        ...

    @abstractmethod
    def get_user_chats(self, user_id: str) -> List[Chat]:
        ...

    @abstractmethod
    def subscribe_to_chats(self, user_id: str, callback: ChatsCallback) -> Unsubscribe:
        ...

    @abstractmethod
    def send_message(
        self,
        chat_id: str,
        text: str,
        user_id: str,
        tone: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> str:
        """Persist a message, optionally with the sender's tone label, and return its key."""

    @abstractmethod
    def subscribe_to_messages(self, chat_id: str, callback: MessagesCallback) -> Unsubscribe:
        ...


class InMemoryMessageStore(MessageStore):
    def __init__(self) -> None:
        self._chats: Dict[str, Chat] = {}
        self._messages: Dict[str, Dict[str, Message]] = {}
        self._message_subs: Dict[str, List[MessagesCallback]] = {}
        self._chat_subs: List[tuple] = []  # (user_id, callback)

    # ---------------- chats ----------------
    def create_chat(self, name: str, participants: List[str], is_group: bool) -> str:
        chat_id = uuid.uuid4().hex
        self._chats[chat_id] = Chat(
            id=chat_id,
            name=name,
            isGroup=is_group,
            participants=list(participants),
            createdAt=_now_ms(),
        )
        self._notify_chats()
        return chat_id

    def get_user_chats(self, user_id: str) -> List[Chat]:
        return [c.model_copy() for c in self._chats.values() if user_id in c.participants]

    def subscribe_to_chats(self, user_id: str, callback: ChatsCallback) -> Unsubscribe:
        entry = (user_id, callback)
        self._chat_subs.append(entry)
        callback(self.get_user_chats(user_id))

        def unsubscribe() -> None:
            if entry in self._chat_subs:
                self._chat_subs.remove(entry)

        return unsubscribe

    # ---------------- messages ----------------
    def send_message(
        self,
        chat_id: str,
        text: str,
        user_id: str,
        tone: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> str:
        if chat_id not in self._chats:
            raise KeyError(f"unknown chat: {chat_id}")
        key = uuid.uuid4().hex
        msg = Message(
            id=key,
            text=text,
            userId=user_id,
            chatId=chat_id,
            timestamp=_now_ms(),
            tone=tone,
            confidence=confidence,
        )
        self._messages.setdefault(chat_id, {})[key] = msg

        chat = self._chats[chat_id]
        self._chats[chat_id] = chat.model_copy(update={"lastMessage": text, "lastMessageTime": msg.timestamp})

        self._notify_messages(chat_id)
        self._notify_chats()
        return key

    def messages(self, chat_id: str) -> List[Message]:
        return [m.model_copy() for m in self._messages.get(chat_id, {}).values()]

    def subscribe_to_messages(self, chat_id: str, callback: MessagesCallback) -> Unsubscribe:
        subs = self._message_subs.setdefault(chat_id, [])
        subs.append(callback)
        callback(self.messages(chat_id))

        def unsubscribe() -> None:
            if callback in subs:
                subs.remove(callback)

        return unsubscribe

    def notify(self, chat_id: str) -> None:
        """Re-deliver the current snapshot to every subscriber of ``chat_id``."""
        self._notify_messages(chat_id)

    def _notify_messages(self, chat_id: str) -> None:
        snapshot = self.messages(chat_id)
        for callback in list(self._message_subs.get(chat_id, [])):
            try:
                callback(list(snapshot))
            except Exception:
                logger.exception("message subscriber for chat %s failed", chat_id)

    def _notify_chats(self) -> None:
        for user_id, callback in list(self._chat_subs):
            try:
                callback(self.get_user_chats(user_id))
            except Exception:
                logger.exception("chat subscriber for user %s failed", user_id)
