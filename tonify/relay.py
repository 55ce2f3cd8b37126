# tonify/relay.py
from __future__ import annotations

"""
Tone relay: turns a chat message into one chat-completions call and
normalizes the model's JSON into the fixed ToneResult / RewriteResult shapes.

Every call is a fresh judgment. There is no retry, cache or session state.
"""

import json
import math
from typing import Any, Dict, List, Optional

from .errors import BadRequest, EmptyResultError, UpstreamError
from .logger import get_logger
from .prompts import (
    CLASSIFY_SYSTEM_PROMPT,
    REWRITE_SYSTEM_PROMPT,
    classify_user_prompt,
    rewrite_user_prompt,
)
from .providers import BaseChatProvider
from .schemas import TONE_TYPES, RewriteResult, ToneResult

logger = get_logger("relay")

DEFAULT_LABEL = "Neutral"
DEFAULT_TYPE = "neutral"
DEFAULT_EXPLANATION = "Message has a generally neutral tone."
DEFAULT_CONFIDENCE = 76
MAX_SUGGESTIONS = 3


def _require_text(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _clean_suggestions(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    out = [s.strip() for s in raw if isinstance(s, str) and s.strip()]
    return out[:MAX_SUGGESTIONS]


def _clamp_confidence(raw: Any) -> int:
    # bool is an int subclass; "true" is not a confidence
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw):
        return DEFAULT_CONFIDENCE
    return max(0, min(100, int(round(raw))))


def _text_or(raw: Any, default: str) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return default


def normalize_tone(data: Dict[str, Any]) -> ToneResult:
    """Fill in defaults for anything the model left out or got wrong."""
    tone_type = data.get("type")
    if tone_type is None:
        tone_type = DEFAULT_TYPE
    elif not isinstance(tone_type, str) or tone_type.strip().lower() not in TONE_TYPES:
        tone_type = "uncertain"
    else:
        tone_type = tone_type.strip().lower()

    return ToneResult(
        label=_text_or(data.get("label"), DEFAULT_LABEL),
        type=tone_type,
        explanation=_text_or(data.get("explanation"), DEFAULT_EXPLANATION),
        confidence=_clamp_confidence(data.get("confidence", DEFAULT_CONFIDENCE)),
        suggestions=_clean_suggestions(data.get("suggestions")),
    )


class ToneRelay:
    """Classify and rewrite messages through a single chat provider."""

    def __init__(self, provider: BaseChatProvider, model: str, temperature: float = 0.3) -> None:
        self.provider = provider
        self.model = model
        self.temperature = temperature

    def _complete_json(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
        }
        content = self.provider.chat(payload)
        try:
            data = json.loads(content or "{}")
        except json.JSONDecodeError as e:
            raise UpstreamError("model returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamError("model returned a JSON value that is not an object")
        return data

    def classify_tone(self, message: Optional[str]) -> ToneResult:
        if not _require_text(message):
            raise BadRequest("message is required")
        data = self._complete_json(CLASSIFY_SYSTEM_PROMPT, classify_user_prompt(message))
        result = normalize_tone(data)
        logger.debug("classified %d chars as %s (%s)", len(message), result.label, result.type)
        return result

    def rewrite_tone(self, message: Optional[str], target_tone: Optional[str]) -> RewriteResult:
        if not (_require_text(message) and _require_text(target_tone)):
            raise BadRequest("message and targetTone are required")
        data = self._complete_json(REWRITE_SYSTEM_PROMPT, rewrite_user_prompt(message, target_tone))
        suggestions = _clean_suggestions(data.get("suggestions"))
        if not suggestions:
            raise EmptyResultError("No suggestions returned from model")
        return RewriteResult(suggestions=suggestions)
