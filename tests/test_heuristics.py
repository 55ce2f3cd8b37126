import pytest

from tonify.heuristics import DEMO_MESSAGES, analyze_tone, classify_keywords, run_demo_check
from tonify.presets import create_custom_preset, find_preset


def test_three_exclamations_is_very_excited():
    result = analyze_tone("I'll be there later!!!", "friendly-clear")
    assert result.label == "Very Excited"
    assert result.type == "uncertain"
    assert result.confidence == 78


def test_very_excited_is_positive_for_enthusiastic_preset():
    result = analyze_tone("I'll be there later!!!", "enthusiastic")
    assert result.label == "Very Excited"
    assert result.type == "positive"
    assert result.confidence == 78
    assert result.alternative_text is None


def test_all_caps_is_shouting():
    result = analyze_tone("THIS IS NOT OK")
    assert (result.label, result.type, result.confidence) == ("Intense/Shouting", "negative", 88)
    assert result.alternative_text == "This is not ok"


def test_exclamations_win_over_caps():
    assert analyze_tone("STOP!!!").label == "Very Excited"


def test_short_unpunctuated_is_dry():
    result = analyze_tone("ok", "friendly-clear")
    assert (result.label, result.type, result.confidence) == ("Dry/Terse", "neutral", 72)
    assert result.alternative_text == "ok 😊"


def test_short_unpunctuated_is_brief_under_casual_preset():
    result = analyze_tone("ok", "casual")
    assert (result.label, result.type, result.confidence) == ("Brief & Casual", "neutral", 72)


def test_short_with_terminal_punctuation_is_neutral():
    result = analyze_tone("ok.")
    assert (result.label, result.type, result.confidence) == ("Neutral", "neutral", 76)


def test_everything_else_is_neutral():
    result = analyze_tone("Sorry I missed your call earlier, was in a meeting")
    assert (result.label, result.type, result.confidence) == ("Neutral", "neutral", 76)


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_blank_text_has_no_analysis(text):
    assert analyze_tone(text) is None


def test_professional_preset_suggestions():
    preset = find_preset("professional")
    result = analyze_tone("Thanks SO MUCH for the help", "professional", preset)
    assert result.label == "Intense/Shouting"
    assert "Avoid all caps in professional communication" in result.suggestions
    assert "End with proper punctuation" in result.suggestions
    assert result.explanation.startswith("All caps is unprofessional")


def test_custom_preset_maps_onto_builtin_style():
    preset = create_custom_preset("Work chat", target_tone="Formal and precise")
    result = analyze_tone("see you at the meeting", preset.id, preset)
    assert result.explanation == "Your message maintains an appropriate professional tone."
    assert result.emoji_suggestions == []


def test_to_result_caps_suggestions_at_three():
    analysis = analyze_tone("hi")
    analysis.suggestions = ["a", "b", "c", "d"]
    assert analysis.to_result().suggestions == ["a", "b", "c"]


def test_keyword_demo_classifier():
    assert classify_keywords("I'm really sorry about that.").label == "Apologetic"
    assert classify_keywords("Oh wow, I had no idea! That's incredible!").label == "Surprised/Enthusiastic"
    assert classify_keywords("Oh wow, I had no idea").label == "Neutral"
    assert classify_keywords("Could you please help me?").type == "positive"


def test_demo_messages_meet_requirement():
    assert len(DEMO_MESSAGES) >= 10
    for text, _expected in DEMO_MESSAGES:
        check = run_demo_check(text)
        assert check.meets_requirement, text
