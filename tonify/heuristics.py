"""Rule-based tone estimates that work without the relay.

Used for the live preview while typing, as the offline fallback, and on the
self-demo screen. No network calls; the result depends only on the text and
the active preset.
"""
from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .presets import TonePreset
from .schemas import ToneResult

_ALL_CAPS = re.compile(r"[A-Z]{3,}")
_ENERGETIC_EMOJI = ("😊", "🎉", "✨", "👍")

EXCITED_MIN_EXCLAMATIONS = 3
DRY_MAX_LENGTH = 10


@dataclass
class ToneAnalysis:
    original_text: str
    label: str
    type: str
    explanation: str
    confidence: int
    suggestions: List[str] = field(default_factory=list)
    alternative_text: Optional[str] = None
    emoji_suggestions: List[str] = field(default_factory=list)

    def to_result(self) -> ToneResult:
        return ToneResult(
            label=self.label,
            type=self.type,
            explanation=self.explanation,
            confidence=self.confidence,
            suggestions=self.suggestions[:3],
        )


@dataclass(frozen=True)
class _Features:
    text: str
    exclamations: int
    all_caps: bool
    dry: bool


def _features(text: str) -> _Features:
    stripped = text.strip()
    return _Features(
        text=text,
        exclamations=text.count("!"),
        all_caps=bool(_ALL_CAPS.search(text)),
        dry=len(stripped) < DRY_MAX_LENGTH and not stripped.endswith(("!", "?", ".")),
    )


def _style_family(preset_id: str, preset: Optional[TonePreset]) -> str:
    """Map a preset (built-in or custom) onto one of the four built-in styles."""
    target = ""
    if preset and preset.guidelines:
        target = preset.guidelines.target_tone.lower()

    if preset_id == "professional" or "professional" in target or "formal" in target:
        return "professional"
    if preset_id == "enthusiastic" or "enthusiastic" in target or "energetic" in target:
        return "enthusiastic"
    if preset_id == "casual" or "casual" in target or "relaxed" in target:
        return "casual"
    if preset_id == "friendly-clear" or "friendly" in target or "warm" in target:
        return "friendly-clear"
    return ""


def _style_suggestions(f: _Features, style: str, tone_type: str) -> List[str]:
    out: List[str] = []
    text = f.text
    if style == "professional":
        if f.exclamations > 1:
            out.append("Reduce exclamation marks for a more professional tone")
        if f.all_caps:
            out.append("Avoid all caps in professional communication")
        if f.dry and tone_type == "negative":
            out.append("Consider adding more context to be clearer")
        if not re.search(r"[.!?]$", text):
            out.append("End with proper punctuation")
    elif style == "enthusiastic":
        if f.exclamations == 0:
            out.append("Add an exclamation mark to show enthusiasm!")
        if not any(e in text for e in _ENERGETIC_EMOJI):
            out.append("Consider adding an energetic emoji")
        if text.endswith("."):
            out.append("Replace period with exclamation mark for more energy")
    elif style == "casual":
        if len(text) > 50:
            out.append("Consider keeping it shorter and more casual")
        if f.exclamations > 2:
            out.append("This might be a bit much even for casual chat")
    elif style == "friendly-clear":
        if f.dry:
            out.append("Add some warmth with an emoji or friendly phrase")
        if f.exclamations > 2:
            out.append("Tone down the intensity slightly")
    return out


def _very_excited(f: _Features, preset_id: str, style: str) -> ToneAnalysis:
    enthusiastic = preset_id == "enthusiastic"
    if style == "professional":
        explanation = "Multiple exclamation marks are not appropriate for professional communication."
        alternative: Optional[str] = re.sub(r"!+", ".", f.text)
    elif enthusiastic:
        explanation = "High energy matches your enthusiastic preset! This conveys excitement well."
        alternative = None
    else:
        explanation = (
            "Multiple exclamation marks convey high energy and excitement, "
            "which might be overwhelming to some recipients."
        )
        alternative = re.sub(r"!{3,}", "!", f.text)

    suggestions = _style_suggestions(f, style, "uncertain") or (
        ["Your enthusiasm shines through!", "This fits your energetic style well"]
        if enthusiastic
        else ["Your message has high energy", "Consider reducing exclamation marks if you want a calmer tone"]
    )
    return ToneAnalysis(
        original_text=f.text,
        label="Very Excited",
        type="positive" if enthusiastic else "uncertain",
        explanation=explanation,
        confidence=78,
        suggestions=suggestions,
        alternative_text=alternative,
        emoji_suggestions=[] if style == "professional" else ["😊", "🎉", "✨"],
    )


def _shouting(f: _Features, preset_id: str, style: str) -> ToneAnalysis:
    if style == "professional":
        explanation = "All caps is unprofessional and can be perceived as aggressive."
    else:
        explanation = "All caps can be perceived as shouting or aggressive, even if that's not your intent."
    lowered = f.text.lower()
    return ToneAnalysis(
        original_text=f.text,
        label="Intense/Shouting",
        type="negative",
        explanation=explanation,
        confidence=88,
        suggestions=_style_suggestions(f, style, "negative") or [
            "ALL CAPS may come across as shouting",
            f"For {preset_id} style: Use normal capitalization",
        ],
        alternative_text=lowered[:1].upper() + lowered[1:],
    )


def _dry(f: _Features, preset_id: str, style: str) -> ToneAnalysis:
    casual = preset_id == "casual"
    if casual:
        explanation = "Short and to the point - fits a casual style, though could use punctuation."
    elif style == "professional":
        explanation = "Very brief messages may seem dismissive in professional contexts."
    else:
        explanation = "Short messages without punctuation can seem dismissive or uninterested."

    endings = {"friendly-clear": " 😊", "enthusiastic": "!", "professional": ". Thank you."}
    alternative = None if casual else f.text + endings.get(preset_id, ".")

    return ToneAnalysis(
        original_text=f.text,
        label="Brief & Casual" if casual else "Dry/Terse",
        type="neutral",
        explanation=explanation,
        confidence=72,
        suggestions=_style_suggestions(f, style, "neutral") or [
            "Fits your casual style!" if casual else "This might seem a bit dry",
            "Add more context for clarity"
            if style == "professional"
            else "Consider adding more context or a friendly emoji",
        ],
        alternative_text=alternative,
        emoji_suggestions=[] if style == "professional" else ["😊", "👍", "🙂"],
    )


def _neutral(f: _Features, preset_id: str, style: str, has_guidelines: bool) -> ToneAnalysis:
    explanation = "Your message has a balanced, conversational tone that should be well-received."
    if has_guidelines:
        if style == "professional":
            explanation = "Your message maintains an appropriate professional tone."
        elif style == "enthusiastic" and not f.exclamations:
            explanation = "Your message is clear, but could be more energetic for your enthusiastic style."
        elif style == "casual" and len(f.text) > 40:
            explanation = "Your message is clear, though slightly long for casual chat."

    return ToneAnalysis(
        original_text=f.text,
        label="Neutral",
        type="neutral",
        explanation=explanation,
        confidence=76,
        suggestions=_style_suggestions(f, style, "neutral") or [
            f"Your message tone fits the {preset_id} style well"
        ],
        emoji_suggestions=[] if style == "professional" else ["😊", "👍", "🙂"],
    )


def analyze_tone(
    text: str, preset_id: str = "friendly-clear", preset: Optional[TonePreset] = None
) -> Optional[ToneAnalysis]:
    """Estimate tone from surface features.

    Rules are tried in order and the first match wins:

    1. three or more ``!``            -> "Very Excited" (78)
    2. a run of 3+ capital letters    -> "Intense/Shouting" (88)
    3. under 10 chars, no end mark    -> "Dry/Terse" / "Brief & Casual" (72)
    4. anything else                  -> "Neutral" (76)

    Returns None for blank text.
    """
    if not text or not text.strip():
        return None

    f = _features(text)
    style = _style_family(preset_id, preset)

    if f.exclamations >= EXCITED_MIN_EXCLAMATIONS:
        return _very_excited(f, preset_id, style)
    if f.all_caps:
        return _shouting(f, preset_id, style)
    if f.dry:
        return _dry(f, preset_id, style)
    return _neutral(f, preset_id, style, has_guidelines=bool(preset and preset.guidelines))


# ---------------------------------------------------------------------
# Self-demo screen: keyword classifier and its sample messages
# ---------------------------------------------------------------------
DEMO_MESSAGES: List[Tuple[str, str]] = [
    ("I can't believe you forgot again! This is so frustrating.", "Upset/Angry"),
    ("Oh wow, I had no idea! That's incredible!", "Surprised"),
    ("I'm really sorry about that. I should have been more careful.", "Apologetic"),
    ("Hey, how's it going? Just checking in.", "Friendly/Casual"),
    ("Per your request, I have completed the report.", "Professional/Neutral"),
    ("This is amazing! I love it so much! 🎉", "Enthusiastic"),
    ("I don't know... I'm not really sure about this.", "Uncertain"),
    ("Thanks for understanding. I really appreciate it.", "Grateful"),
    ("Whatever. I don't really care.", "Dismissive"),
    ("Could you please help me with this when you get a chance?", "Polite/Requesting"),
]

# (needles, requires "!", label, type, confidence); first match wins
_KEYWORD_RULES: List[Tuple[Tuple[str, ...], bool, str, str, int]] = [
    (("sorry", "apologize"), False, "Apologetic", "negative", 87),
    (("wow", "amazing"), True, "Surprised/Enthusiastic", "positive", 92),
    (("can't believe", "frustrat"), False, "Upset", "negative", 89),
    (("thank", "appreciate"), False, "Grateful", "positive", 85),
    (("not sure", "don't know"), False, "Uncertain", "uncertain", 78),
    (("please", "could you"), False, "Polite", "positive", 83),
]


def classify_keywords(text: str) -> ToneResult:
    lowered = text.lower()
    for needles, needs_bang, label, tone_type, confidence in _KEYWORD_RULES:
        if needs_bang and "!" not in text:
            continue
        if any(n in lowered for n in needles):
            return ToneResult(
                label=label,
                type=tone_type,
                explanation=f"Matched a {label.lower()} keyword.",
                confidence=confidence,
            )
    return ToneResult(label="Neutral", type="neutral", explanation="No strong tone keywords found.", confidence=75)


@dataclass
class DemoCheck:
    text: str
    result: ToneResult
    latency_ms: float

    @property
    def meets_requirement(self) -> bool:
        """Confident (>70) and fast (<1s) enough for the demo's acceptance bar."""
        return self.result.confidence > 70 and self.latency_ms < 1000


def run_demo_check(text: str, classify: Callable[[str], ToneResult] = classify_keywords) -> DemoCheck:
    start = time.perf_counter()
    result = classify(text)
    return DemoCheck(text=text, result=result, latency_ms=(time.perf_counter() - start) * 1000)
