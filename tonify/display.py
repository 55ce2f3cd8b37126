"""Display preferences for tone indicators.

These are plain configuration objects handed to whatever renders tones
(the Streamlit demo, a conversation view); nothing here is global.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Literal

SuggestionTrigger = Literal["always", "negative", "uncertain", "never"]
ColorblindMode = Literal["none", "protanopia", "deuteranopia", "tritanopia"]


@dataclass(frozen=True)
class ToneSettings:
    show_tones_on_all: bool = True
    auto_check_enabled: bool = False
    compact_mode: bool = False
    disable_suggestions: bool = False
    suggestion_trigger: SuggestionTrigger = "always"

    def update(self, **changes) -> "ToneSettings":
        return replace(self, **changes)

    def should_offer_suggestions(self, tone_type: str) -> bool:
        """Whether suggested replies are shown under a message of this tone."""
        if self.disable_suggestions or self.suggestion_trigger == "never":
            return False
        if self.suggestion_trigger == "negative":
            return tone_type == "negative"
        if self.suggestion_trigger == "uncertain":
            return tone_type in ("negative", "uncertain")
        return True


# Standard palette: green=positive, yellow=neutral, red=negative
_STANDARD: Dict[str, str] = {
    "positive": "#22C55E",
    "neutral": "#EAB308",
    "negative": "#EF4444",
    "uncertain": "#F59E0B",
}

_COLORBLIND: Dict[str, Dict[str, str]] = {
    "protanopia": {
        "positive": "#3B82F6",
        "neutral": "#F59E0B",
        "negative": "#EA580C",
        "uncertain": "#A855F7",
    },
    "deuteranopia": {
        "positive": "#3B82F6",
        "neutral": "#F59E0B",
        "negative": "#EA580C",
        "uncertain": "#A855F7",
    },
    "tritanopia": {
        "positive": "#06B6D4",
        "neutral": "#EC4899",
        "negative": "#E11D48",
        "uncertain": "#A855F7",
    },
}


@dataclass(frozen=True)
class AccessibilitySettings:
    high_contrast: bool = False
    colorblind_mode: ColorblindMode = "none"
    read_aloud_enabled: bool = False

    def update(self, **changes) -> "AccessibilitySettings":
        return replace(self, **changes)

    def tone_color(self, tone_type: str) -> str:
        palette = _COLORBLIND.get(self.colorblind_mode, _STANDARD)
        return palette.get(tone_type, _STANDARD["neutral"])

    def confidence_bar_color(self, confidence: int) -> str:
        if self.colorblind_mode == "none":
            if confidence > 70:
                return "#22C55E"
            if confidence > 40:
                return "#F59E0B"
            return "#EF4444"

        tritanopia = self.colorblind_mode == "tritanopia"
        if confidence > 70:
            return "#06B6D4" if tritanopia else "#3B82F6"
        if confidence > 40:
            return "#F59E0B"
        return "#F43F5E" if tritanopia else "#EA580C"

    def border_width(self) -> int:
        return 4 if self.high_contrast else 2
