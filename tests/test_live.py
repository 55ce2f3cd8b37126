import asyncio
from unittest.mock import MagicMock

import pytest

from tonify.errors import EmptyResultError, NetworkError, UpstreamError
from tonify.live import (
    Debouncer,
    LatestRequestGate,
    LivePreview,
    check_tone,
    heuristic_estimator,
    relay_estimator,
)
from tonify.presets import find_preset
from tonify.schemas import RewriteResult, ToneResult


def _tone(label: str) -> ToneResult:
    return ToneResult(label=label, type="neutral", explanation=f"result for {label}", confidence=60)


def test_gate_only_latest_is_current():
    gate = LatestRequestGate()
    first = gate.issue()
    second = gate.issue()
    assert not gate.is_current(first)
    assert gate.is_current(second)
    gate.invalidate()
    assert not gate.is_current(second)


def test_out_of_order_completions_keep_latest_request():
    """t3's answer arrives first, then t2, then t1: only t3 may be shown."""

    async def scenario():
        release = {t: asyncio.Event() for t in ("t1", "t2", "t3")}

        async def estimate(text):
            await release[text].wait()
            return _tone(text)

        shown = []
        preview = LivePreview(estimate, debounce_ms=0, on_change=shown.append)
        tasks = []
        for text in ("t1", "t2", "t3"):
            preview.text = text
            tasks.append(asyncio.create_task(preview.refresh()))
            await asyncio.sleep(0)

        for text, task in zip(("t3", "t2", "t1"), reversed(tasks)):
            release[text].set()
            await task

        return preview, shown

    preview, shown = asyncio.run(scenario())
    assert preview.current.label == "t3"
    assert [r.label for r in shown] == ["t3"]


def test_in_order_completions_show_each_then_settle_on_latest():
    async def scenario():
        preview = LivePreview(heuristic_estimator(), debounce_ms=0)
        preview.text = "ok"
        await preview.refresh()
        first = preview.current
        preview.text = "THIS IS NOT OK"
        await preview.refresh()
        return first, preview.current

    first, last = asyncio.run(scenario())
    assert first.label == "Dry/Terse"
    assert last.label == "Intense/Shouting"


def test_debounce_coalesces_rapid_edits():
    async def scenario():
        seen = []

        async def estimate(text):
            seen.append(text)
            return _tone(text)

        preview = LivePreview(estimate, debounce_ms=20)
        for text in ("h", "he", "hey", "hey there"):
            preview.set_text(text)
        await preview.settle()
        return seen, preview.current

    seen, current = asyncio.run(scenario())
    assert seen == ["hey there"]
    assert current.label == "hey there"


def test_clearing_text_drops_in_flight_result():
    async def scenario():
        release = asyncio.Event()

        async def estimate(text):
            await release.wait()
            return _tone(text)

        preview = LivePreview(estimate, debounce_ms=0)
        preview.text = "draft"
        task = asyncio.create_task(preview.refresh())
        await asyncio.sleep(0)
        preview.set_text("   ")
        release.set()
        await task
        return preview.current

    assert asyncio.run(scenario()) is None


def test_failed_estimate_clears_indicator():
    async def scenario():
        async def estimate(text):
            raise UpstreamError("relay timed out")

        preview = LivePreview(estimate, debounce_ms=0)
        preview.current = _tone("stale")
        preview.text = "hello"
        await preview.refresh()
        return preview.current

    assert asyncio.run(scenario()) is None


def test_unexpected_estimator_error_clears_indicator_after_debounce():
    async def scenario():
        async def estimate(text):
            raise RuntimeError("boom")

        shown = []
        preview = LivePreview(estimate, debounce_ms=0, on_change=shown.append)
        preview.current = _tone("stale")
        preview.set_text("hello")
        await preview.settle()
        return preview.current, shown

    current, shown = asyncio.run(scenario())
    assert current is None
    assert shown == [None]


def test_debouncer_cancel_prevents_action():
    async def scenario():
        calls = []

        async def action():
            calls.append(1)

        d = Debouncer(0.01, action)
        d.trigger()
        d.cancel()
        await asyncio.sleep(0.03)
        return calls

    assert asyncio.run(scenario()) == []


def test_relay_estimator_falls_back_to_heuristic_when_relay_unreachable():
    client = MagicMock()

    async def unreachable(text):
        raise NetworkError("connection refused")

    client.aclassify_tone = unreachable
    estimate = relay_estimator(client, "casual")
    result = asyncio.run(estimate("ok"))
    assert result.label == "Brief & Casual"


def test_relay_estimator_uses_relay_result():
    client = MagicMock()

    async def classify(text):
        return _tone("from relay")

    client.aclassify_tone = classify
    assert asyncio.run(relay_estimator(client)("ok")).label == "from relay"


def test_check_tone_keeps_classification_when_rewrite_fails():
    client = MagicMock()
    client.classify_tone.return_value = _tone("Calm")
    client.rewrite_tone.side_effect = EmptyResultError("No suggestions returned from model")

    check = check_tone(client, "see you soon", "professional", find_preset("professional"))
    assert check.result.label == "Calm"
    assert check.alternative is None
    assert check.rewrite_error == "No suggestions returned from model"
    assert not check.local
    assert client.rewrite_tone.call_args.args == ("see you soon", "Polished, formal, and respectful")


def test_check_tone_returns_first_suggestion():
    client = MagicMock()
    client.classify_tone.return_value = _tone("Calm")
    client.rewrite_tone.return_value = RewriteResult(suggestions=["See you soon!", "Catch you later"])
    check = check_tone(client, "see you soon")
    assert check.alternative == "See you soon!"
    assert check.rewrite_error is None


def test_check_tone_falls_back_locally_when_relay_unreachable():
    client = MagicMock()
    client.classify_tone.side_effect = NetworkError("connection refused")
    check = check_tone(client, "THIS IS NOT OK")
    assert check.local
    assert check.result.label == "Intense/Shouting"
    client.rewrite_tone.assert_not_called()


def test_check_tone_propagates_relay_failure():
    client = MagicMock()
    client.classify_tone.side_effect = UpstreamError("Tone classification failed")
    with pytest.raises(UpstreamError):
        check_tone(client, "hello there")
