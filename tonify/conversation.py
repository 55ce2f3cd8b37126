"""Conversation view model: message list, tone annotation, and sending.

Store snapshots are applied as "latest state": each delivery rebuilds the
list, carrying over any tone already known for a message id. Messages
written by other users that have no tone yet are classified once; an id
stays in the in-flight set until its classification finishes, whatever the
outcome, so repeated deliveries never start a second call for it.

Must be used from a running asyncio event loop.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, List, Optional, Set

from .logger import get_logger
from .schemas import Message, ToneResult
from .store import MessageStore, Unsubscribe

logger = get_logger("conversation")

Classifier = Callable[[str], Awaitable[Optional[ToneResult]]]


@dataclass(frozen=True)
class ToneBadge:
    label: str
    type: str
    explanation: str
    confidence: Optional[int] = None
    pending: bool = False

    @classmethod
    def from_result(cls, result: ToneResult) -> "ToneBadge":
        return cls(
            label=result.label,
            type=result.type,
            explanation=result.explanation,
            confidence=result.confidence,
        )


ANALYZING = ToneBadge(
    label="Analyzing…",
    type="uncertain",
    explanation="Analyzing tone...",
    confidence=None,
    pending=True,
)


@dataclass(frozen=True)
class ChatMessage:
    id: str
    text: str
    sender: str  # "me" | "them"
    user_id: str
    timestamp: Optional[int] = None
    tone: Optional[ToneBadge] = None


def message_key(m: Message) -> str:
    """Stable id, or a timestamp+author composite when the store gave none."""
    return m.id or f"{m.timestamp or ''}-{m.userId or ''}"


class ConversationView:
    def __init__(
        self,
        store: MessageStore,
        chat_id: str,
        user_id: str,
        classify: Classifier,
        on_preview_update: Optional[Callable[[str, str, Optional[int]], None]] = None,
    ) -> None:
        self.store = store
        self.chat_id = chat_id
        self.user_id = user_id
        self.classify = classify
        self.on_preview_update = on_preview_update

        self.messages: List[ChatMessage] = []
        self.input_text = ""
        self.in_flight: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._unsubscribe: Optional[Unsubscribe] = None

    # ---------------- lifecycle ----------------
    def open(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe_to_messages(self.chat_id, self._on_snapshot)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def settle(self) -> None:
        """Wait for all outstanding classifications."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ---------------- snapshots ----------------
    def _on_snapshot(self, snapshot: List[Message]) -> None:
        known: Dict[str, ChatMessage] = {m.id: m for m in self.messages}
        rebuilt: List[ChatMessage] = []
        for m in snapshot:
            key = message_key(m)
            existing = known.get(key)
            rebuilt.append(
                ChatMessage(
                    id=key,
                    text=m.text,
                    sender="me" if m.userId == self.user_id else "them",
                    user_id=m.userId,
                    timestamp=m.timestamp,
                    tone=existing.tone if existing else None,
                )
            )
        self.messages = rebuilt

        if snapshot and self.on_preview_update:
            latest = snapshot[-1]
            self.on_preview_update(self.chat_id, latest.text, latest.timestamp)

        self._classify_missing()

    def _classify_missing(self) -> None:
        todo = [
            m for m in self.messages
            if m.sender == "them" and m.text and m.tone is None and m.id not in self.in_flight
        ]
        if not todo:
            return
        loop = asyncio.get_running_loop()
        for msg in todo:
            self.in_flight.add(msg.id)
            self._set_tone(msg.id, ANALYZING)
            task = loop.create_task(self._classify_one(msg.id, msg.text))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _classify_one(self, message_id: str, text: str) -> None:
        try:
            result = await self.classify(text)
            if result is None:
                self._clear_placeholder(message_id)
                return
            self._set_tone(message_id, ToneBadge.from_result(result))
        except Exception as e:
            # Tone is best-effort: drop the placeholder, never show an error state
            logger.warning("tone classification failed for %s: %s", message_id, e)
            self._clear_placeholder(message_id)
        finally:
            self.in_flight.discard(message_id)

    def _set_tone(self, message_id: str, tone: Optional[ToneBadge]) -> None:
        self.messages = [replace(m, tone=tone) if m.id == message_id else m for m in self.messages]

    def _clear_placeholder(self, message_id: str) -> None:
        self.messages = [
            replace(m, tone=None) if m.id == message_id and m.tone is not None and m.tone.pending else m
            for m in self.messages
        ]

    # ---------------- sending ----------------
    def send(self) -> Optional[str]:
        """Send the input text; it is cleared only if the store accepted it."""
        text = self.input_text
        if not text.strip():
            return None
        try:
            key = self.store.send_message(self.chat_id, text=text, user_id=self.user_id)
        except Exception:
            logger.exception("failed to send message to chat %s", self.chat_id)
            return None
        self.input_text = ""
        return key
