# ui/streamlit_app.py
import asyncio
import time

import streamlit as st

from tonify.client import ToneClient
from tonify.conversation import ConversationView
from tonify.display import AccessibilitySettings, ToneSettings
from tonify.errors import ToneError
from tonify.heuristics import DEMO_MESSAGES, analyze_tone, run_demo_check
from tonify.live import check_tone, relay_estimator
from tonify.presets import (
    DEFAULT_PRESETS,
    QUICK_ADJUSTMENTS,
    adjustment_target,
    create_custom_preset,
    find_preset,
)
from tonify.logger import setup_logger
from tonify.settings import client_settings
from tonify.store import InMemoryMessageStore

st.set_page_config(page_title="Tonify", page_icon="💬", layout="centered")
setup_logger(client_settings.LOG_LEVEL)

if "presets" not in st.session_state:
    st.session_state["presets"] = list(DEFAULT_PRESETS)

client = ToneClient()

# --- Sidebar: backend + settings ---
st.title("💬 Tonify")
with st.sidebar:
    st.markdown("**Relay:** " + client.base_url)
    if client.health():
        st.success("Relay: healthy")
    else:
        st.warning("Relay not reachable: using local tone estimates")

    presets = st.session_state["presets"]
    preset_id = st.selectbox(
        "Style preset",
        [p.id for p in presets],
        format_func=lambda pid: find_preset(pid, presets).name,
    )
    preset = find_preset(preset_id, presets)
    if preset and preset.guidelines:
        st.caption(f"Target tone: {preset.guidelines.target_tone}")

    with st.expander("Add custom preset"):
        new_name = st.text_input("Name")
        new_target = st.text_input("Target tone")
        new_enc = st.text_input("Encourages (comma separated)")
        new_avoid = st.text_input("Avoids (comma separated)")
        if st.button("Save preset"):
            try:
                presets.append(create_custom_preset(new_name, new_target, encourages=new_enc, avoids=new_avoid))
                st.rerun()
            except ValueError as e:
                st.error(str(e))

    tone_settings = ToneSettings(
        auto_check_enabled=st.toggle("Live tone preview", value=True),
        suggestion_trigger=st.selectbox("Show suggestions", ["always", "negative", "uncertain", "never"]),
    )
    access = AccessibilitySettings(
        colorblind_mode=st.selectbox("Colorblind mode", ["none", "protanopia", "deuteranopia", "tritanopia"]),
        high_contrast=st.toggle("High contrast", value=False),
    )


def tone_pill(label, tone_type, confidence=None):
    color = access.tone_color(tone_type)
    border = access.border_width()
    conf = f" · {confidence}%" if confidence is not None else ""
    st.markdown(
        f"<span style='border:{border}px solid {color};border-radius:12px;padding:2px 10px'>"
        f"{label}{conf}</span>",
        unsafe_allow_html=True,
    )


tabs = st.tabs(["✍️ Compose", "💬 Conversation", "🧪 Self-demo"])

# --- Compose tab ---
with tabs[0]:
    text = st.text_area("Message", height=120, key="compose_text",
                        placeholder="e.g., I'll be there later!!!")

    if tone_settings.auto_check_enabled and text.strip():
        preview = analyze_tone(text, preset_id, preset)
        st.caption("Live preview")
        tone_pill(preview.label, preview.type, preview.confidence)

    if st.button("Check tone", type="primary", disabled=not text.strip()):
        with st.spinner("Analyzing..."):
            try:
                check = check_tone(client, text, preset_id, preset)
                st.session_state["analysis"] = (check.result, check.alternative)
                if check.local:
                    st.info("Relay unreachable, showing a local estimate.")
                elif check.rewrite_error:
                    st.caption(f"No suggested version: {check.rewrite_error}")
            except ToneError as e:
                st.session_state["analysis"] = None
                st.error(f"Tone unavailable: {e}")

    analysis = st.session_state.get("analysis")
    if analysis:
        tone, alternative = analysis
        tone_pill(tone.label, tone.type, tone.confidence)
        st.write(tone.explanation)
        if tone.suggestions and tone_settings.should_offer_suggestions(tone.type):
            for s in tone.suggestions:
                st.markdown(f"- {s}")
        elif not tone.suggestions:
            st.caption("No suggestions")
        if alternative:
            st.text_area("Suggested version", value=alternative, height=100)

    st.markdown("**Quick adjustments**")
    cols = st.columns(len(QUICK_ADJUSTMENTS))
    for col, adjustment in zip(cols, QUICK_ADJUSTMENTS):
        if col.button(adjustment, disabled=not text.strip()):
            try:
                result = client.rewrite_tone(text, adjustment_target(adjustment, preset_id, preset))
                st.text_area("Rewritten", value=result.suggestions[0], height=100)
            except ToneError as e:
                st.error(f"Rewrite unavailable: {e}")

# --- Conversation tab (local store, two simulated users) ---
with tabs[1]:
    if "store" not in st.session_state:
        store = InMemoryMessageStore()
        chat_id = store.create_chat("Alex & Sam", ["alex", "sam"], is_group=False)
        estimate = relay_estimator(client, preset_id, preset)
        views = {uid: ConversationView(store, chat_id, uid, estimate) for uid in ("alex", "sam")}

        async def _open():
            for v in views.values():
                v.open()

        asyncio.run(_open())
        st.session_state["store"] = store
        st.session_state["views"] = views

    views = st.session_state["views"]
    me = st.radio("Viewing as", list(views), horizontal=True)
    view = views[me]

    for m in view.messages:
        who = "You" if m.sender == "me" else m.user_id
        st.markdown(f"**{who}:** {m.text}")
        if m.tone and m.sender == "them" and tone_settings.show_tones_on_all:
            tone_pill(m.tone.label, m.tone.type, m.tone.confidence)

    outgoing = st.text_input("Message", key=f"chat_input_{me}")
    if st.button("Send"):
        async def _send():
            view.input_text = outgoing
            view.send()
            for v in views.values():
                await v.settle()

        asyncio.run(_send())
        st.rerun()

# --- Self-demo tab ---
with tabs[2]:
    st.subheader("Tone classification (keyword demo)")
    for idx, (sample, expected) in enumerate(DEMO_MESSAGES):
        if st.button(sample, key=f"demo_{idx}"):
            check = run_demo_check(sample)
            st.session_state["demo_check"] = (check, expected)

    demo = st.session_state.get("demo_check")
    if demo:
        check, expected = demo
        st.write(f"Expected: {expected} · Detected: **{check.result.label}**")
        st.caption(f"Confidence: {check.result.confidence}% · Latency: {check.latency_ms:.1f} ms")
        if check.meets_requirement:
            st.success("Meets requirement (>70% confidence, <1s)")
        else:
            st.error("Does not meet requirement")

    st.subheader("Relay round trip")
    relay_text = st.text_input("Message to classify via the relay", value="Thanks SO MUCH for the help")
    if st.button("Classify via relay"):
        t0 = time.time()
        try:
            result = client.classify_tone(relay_text)
            tone_pill(result.label, result.type, result.confidence)
            st.caption(f"Latency: {(time.time() - t0) * 1000:.0f} ms")
        except ToneError as e:
            st.error(f"Tone unavailable: {e}")

st.markdown("---")
st.caption("Live preview reruns the local heuristic on every edit. "
           "Check tone and rewrites go through the relay.")
