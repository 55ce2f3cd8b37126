"""Live tone preview while typing.

Edits restart a single debounce timer; when it fires, a tone estimate is
requested. Requests are never cancelled once issued, so completions can
arrive in any order. Each request takes a number from a monotonic counter
and its result is applied only if no newer request has been issued since:
for any sequence of edits, only the most recent live request may change the
displayed tone.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Set

from .client import ToneClient
from .errors import BadRequest, NetworkError, ToneError
from .heuristics import analyze_tone
from .logger import get_logger
from .presets import TonePreset, target_tone_for
from .schemas import ToneResult
from .settings import client_settings

logger = get_logger("live")

Estimator = Callable[[str], Awaitable[Optional[ToneResult]]]


class LatestRequestGate:
    """Monotonic request counter with a single current generation."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, seq: int) -> bool:
        return seq == self._latest

    def invalidate(self) -> None:
        """Supersede every outstanding request without issuing a new one."""
        self._latest += 1


class Debouncer:
    """Run ``action`` once, ``delay_s`` after the last ``trigger()``."""

    def __init__(self, delay_s: float, action: Callable[[], Awaitable[None]]) -> None:
        self.delay_s = delay_s
        self.action = action
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_s, self._fire)

    def cancel(self) -> None:
        # Only the timer is cancelled; an action already started runs to completion
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        task = asyncio.get_running_loop().create_task(self.action())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait(self) -> None:
        """Wait until no timer is armed and every started action has finished."""
        while self._handle is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(self.delay_s / 4)


class LivePreview:
    """Debounced, ordered tone estimate for one input field."""

    def __init__(
        self,
        estimate: Estimator,
        debounce_ms: Optional[int] = None,
        on_change: Optional[Callable[[Optional[ToneResult]], None]] = None,
    ) -> None:
        self.estimate = estimate
        self.on_change = on_change
        self.text = ""
        self.current: Optional[ToneResult] = None
        self.gate = LatestRequestGate()
        delay_ms = client_settings.LIVE_PREVIEW_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self.debouncer = Debouncer(delay_ms / 1000.0, self.refresh)

    def _show(self, result: Optional[ToneResult]) -> None:
        self.current = result
        if self.on_change:
            self.on_change(result)

    def set_text(self, text: str) -> None:
        self.text = text
        if not text.strip():
            self.debouncer.cancel()
            self.gate.invalidate()
            self._show(None)
            return
        self.debouncer.trigger()

    async def refresh(self) -> None:
        seq = self.gate.issue()
        text = self.text
        try:
            result = await self.estimate(text)
        except ToneError as e:
            # Tone is advisory: a failed estimate just clears the indicator
            logger.info("live preview unavailable: %s", e)
            result = None
        except Exception as e:
            logger.warning("live preview estimate failed: %s", e)
            result = None
        if not self.gate.is_current(seq):
            logger.debug("dropping stale preview #%d (latest is #%d)", seq, self.gate.latest)
            return
        self._show(result)

    async def settle(self) -> None:
        await self.debouncer.wait()


def heuristic_estimator(preset_id: str = "friendly-clear", preset: Optional[TonePreset] = None) -> Estimator:
    async def estimate(text: str) -> Optional[ToneResult]:
        analysis = analyze_tone(text, preset_id, preset)
        return analysis.to_result() if analysis else None

    return estimate


def relay_estimator(
    client: ToneClient, preset_id: str = "friendly-clear", preset: Optional[TonePreset] = None
) -> Estimator:
    """Ask the relay; fall back to the local heuristic when it cannot be reached."""
    fallback = heuristic_estimator(preset_id, preset)

    async def estimate(text: str) -> Optional[ToneResult]:
        try:
            return await client.aclassify_tone(text)
        except NetworkError:
            return await fallback(text)

    return estimate


@dataclass(frozen=True)
class ToneCheck:
    result: ToneResult
    alternative: Optional[str] = None
    local: bool = False
    rewrite_error: Optional[str] = None


def check_tone(
    client: ToneClient,
    text: str,
    preset_id: str = "friendly-clear",
    preset: Optional[TonePreset] = None,
) -> ToneCheck:
    """Classify through the relay, then ask for one rewrite in the preset's tone.

    An unreachable relay falls back to the local heuristic for both parts.
    Other classification failures propagate. A failed rewrite keeps the
    classification and leaves ``alternative`` empty.
    """
    if not text.strip():
        raise BadRequest("message is required")
    try:
        result = client.classify_tone(text)
    except NetworkError:
        analysis = analyze_tone(text, preset_id, preset)
        return ToneCheck(analysis.to_result(), analysis.alternative_text, local=True)

    try:
        rewrite = client.rewrite_tone(text, target_tone_for(preset_id, preset))
    except ToneError as e:
        logger.info("no suggested version: %s", e)
        return ToneCheck(result, rewrite_error=e.message)
    return ToneCheck(result, rewrite.suggestions[0])
