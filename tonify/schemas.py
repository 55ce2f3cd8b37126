import math
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


ToneType = Literal["positive", "neutral", "negative", "uncertain"]
TONE_TYPES = ("positive", "neutral", "negative", "uncertain")


# Request fields are optional so that a missing field is reported as a
# 400 by the relay itself rather than as a framework validation error.
class ClassifyRequest(BaseModel):
    message: Optional[str] = None


class RewriteRequest(BaseModel):
    message: Optional[str] = None
    targetTone: Optional[str] = None  # e.g. "Polished, formal, and respectful"


class ToneResult(BaseModel):
    label: str
    type: ToneType
    explanation: str
    confidence: int = Field(ge=0, le=100)
    suggestions: List[str] = Field(default_factory=list, max_length=3)


class RewriteResult(BaseModel):
    suggestions: List[str] = Field(min_length=1, max_length=3)


class ErrorResponse(BaseModel):
    error: str


class Message(BaseModel):
    """A chat message as persisted under ``chats/{chatId}/messages/{id}``."""
    id: Optional[str] = None
    text: str
    userId: str
    chatId: str
    timestamp: Optional[int] = None  # epoch millis, assigned by the store
    tone: Optional[str] = None
    confidence: Optional[int] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v):
            return max(0, min(100, int(round(v))))
        return v


class Chat(BaseModel):
    id: str
    name: str
    isGroup: bool = False
    participants: List[str] = Field(default_factory=list)
    createdAt: int
    lastMessage: Optional[str] = None
    lastMessageTime: Optional[int] = None
