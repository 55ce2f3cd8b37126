"""Named communication styles that bias the heuristic and the rewrite prompt."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class StyleGuidelines:
    target_tone: str
    usage_context: str = ""
    encourages: List[str] = field(default_factory=list)
    avoids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TonePreset:
    id: str
    name: str
    description: str = ""
    examples: List[str] = field(default_factory=list)
    guidelines: Optional[StyleGuidelines] = None


DEFAULT_PRESETS: List[TonePreset] = [
    TonePreset(
        id="friendly-clear",
        name="Friendly & Clear",
        description="Warm and approachable while maintaining clarity. Good for most conversations.",
        examples=[
            "Uses moderate enthusiasm",
            "Includes context and explanations",
            "Balances warmth with clarity",
        ],
        guidelines=StyleGuidelines(
            target_tone="Warm, clear, and approachable",
            usage_context="General conversations with friends, family, and acquaintances",
            encourages=["Clear explanations", "Moderate enthusiasm", "Contextual information", "Friendly emojis"],
            avoids=["Excessive formality", "Being too brief", "Overly intense emotions"],
        ),
    ),
    TonePreset(
        id="professional",
        name="Professional",
        description="Polished and respectful tone suitable for work and formal contexts.",
        examples=[
            "Formal language and structure",
            "Measured and respectful",
            "Minimizes casual expressions",
        ],
        guidelines=StyleGuidelines(
            target_tone="Polished, formal, and respectful",
            usage_context="Work colleagues, supervisors, professional contacts",
            encourages=["Complete sentences", "Formal language", "Respectful phrasing", "Clear structure"],
            avoids=["Casual language", "Slang", "Excessive emojis", "All caps"],
        ),
    ),
    TonePreset(
        id="casual",
        name="Casual & Relaxed",
        description="Laid-back and easygoing for close friends and informal chats.",
        examples=[
            "More informal language",
            "Shorter, conversational messages",
            "Comfortable with slang/emojis",
        ],
        guidelines=StyleGuidelines(
            target_tone="Relaxed, informal, and conversational",
            usage_context="Close friends, family, casual group chats",
            encourages=["Brief messages", "Casual language", "Emojis", "Conversational tone"],
            avoids=["Over-explaining", "Formal language", "Being too serious"],
        ),
    ),
    TonePreset(
        id="enthusiastic",
        name="Enthusiastic",
        description="High energy and excitement. Shows genuine interest and positivity.",
        examples=[
            "More exclamation marks",
            "Expressive and energetic",
            "Shows excitement clearly",
        ],
        guidelines=StyleGuidelines(
            target_tone="Energetic, positive, and expressive",
            usage_context="Celebrations, good news, showing excitement",
            encourages=["Exclamation marks", "Positive language", "Energetic emojis", "Expressive words"],
            avoids=["Being understated", "Minimal punctuation", "Neutral tone"],
        ),
    ),
]

DEFAULT_PRESET_ID = "friendly-clear"

# Quick adjustments offered on the compose screen, as rewrite instructions
QUICK_ADJUSTMENTS: Dict[str, str] = {
    "calmer": "calm, de-escalating, non-confrontational",
    "warmer": "warm, friendly, supportive",
    "shorter": "short, concise, to-the-point but polite",
    "emoji": "similar meaning but a bit more playful with light emoji",
    "formal": "formal, professional, respectful",
    "energetic": "more energetic and enthusiastic",
}


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def create_custom_preset(
    name: str,
    target_tone: str = "",
    usage_context: str = "",
    encourages: str = "",
    avoids: str = "",
    description: str = "",
) -> TonePreset:
    """Build a user-defined preset from comma-separated form fields."""
    name = name.strip()
    if not name:
        raise ValueError("preset name is required")
    encourage_list = _split_csv(encourages)
    avoid_list = _split_csv(avoids)
    return TonePreset(
        id=f"custom-{int(time.time() * 1000)}",
        name=name,
        description=description.strip() or "Custom tone preset",
        examples=encourage_list[:3] or ["Custom tone guidance"],
        guidelines=StyleGuidelines(
            target_tone=target_tone.strip() or "Custom tone style",
            usage_context=usage_context.strip() or "Custom usage context",
            encourages=encourage_list or ["User-defined characteristics"],
            avoids=avoid_list or ["User-defined characteristics to avoid"],
        ),
    )


def find_preset(preset_id: Optional[str], presets: Optional[List[TonePreset]] = None) -> Optional[TonePreset]:
    for preset in presets if presets is not None else DEFAULT_PRESETS:
        if preset.id == preset_id:
            return preset
    return None


def target_tone_for(preset_id: Optional[str], preset: Optional[TonePreset] = None) -> str:
    """The style string sent to the rewrite endpoint for the active preset."""
    if preset and preset.guidelines and preset.guidelines.target_tone:
        return preset.guidelines.target_tone
    if preset and preset.name:
        return preset.name
    return preset_id or "friendly"


def adjustment_target(adjustment: str, preset_id: Optional[str], preset: Optional[TonePreset] = None) -> str:
    """Combine the preset style with a quick adjustment, e.g. ``"Professional – calm, ..."``."""
    try:
        tone = QUICK_ADJUSTMENTS[adjustment]
    except KeyError:
        raise ValueError(f"unknown adjustment: {adjustment!r}") from None
    return f"{target_tone_for(preset_id, preset)} – {tone}"
