# frontend/app.py
import logging
from datetime import datetime

import streamlit as st

from frontend import api_client
from frontend.markdown_renderer import render_markdown
from frontend.settings_store import SettingsStore, UserSettings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MODES = {
    "A": "Mode A: Co-Reviewer",
    "B": "Mode B: Interactive Assistant",
}
ERROR_REPLY = "Sorry, I encountered an error processing your request. Please try again."
INITIAL_ERROR_REPLY = (
    "Sorry, I encountered an error generating the initial summary. Please try again."
)
PROJECTS_TTL_SECONDS = 60

st.set_page_config(page_title="Code Review AI Assistant", layout="wide")

store = SettingsStore()
state = st.session_state

if "settings" not in state:
    state.settings = store.load()
for key, default in (
    ("mode", "A"),
    ("mode_choice", "A"),
    ("messages", []),
    ("session_id", None),
    ("pending", None),  # None | "initial" | "reply"
    ("mode_switch_target", None),
):
    if key not in state:
        state[key] = default


def _now() -> str:
    return datetime.now().astimezone().isoformat()


def _reset_conversation():
    state.messages = []
    state.session_id = None
    state.pending = None


@st.cache_data(ttl=PROJECTS_TTL_SECONDS, show_spinner=False)
def load_projects():
    return api_client.list_projects()


def _save_settings():
    state.settings = UserSettings(
        api_key=(state.get("settings_api_key") or "").strip(),
        selected_project=(state.get("settings_project") or "").strip(),
        participant_id=(state.get("settings_participant") or "").strip(),
    )
    store.save(state.settings)


def _clear_settings():
    store.clear()
    state.settings = UserSettings()


# --------- Dialogs ----------
@st.dialog("Settings")
def settings_dialog():
    current: UserSettings = state.settings
    st.text_input(
        "OpenAI API Key",
        value=current.api_key,
        type="password",
        placeholder="sk-...",
        key="settings_api_key",
    )
    st.caption("Your API key is stored locally and only forwarded to the assistant proxy.")

    projects = load_projects()
    if projects:
        ids = [""] + [p["id"] for p in projects]
        names = {p["id"]: p["name"] for p in projects}
        st.selectbox(
            "Project",
            ids,
            index=ids.index(current.selected_project) if current.selected_project in ids else 0,
            format_func=lambda pid: names.get(pid, "— none —"),
            key="settings_project",
        )
    else:
        st.text_input(
            "Project / pull request",
            value=current.selected_project,
            placeholder="owner/repo#123",
            key="settings_project",
        )
    st.text_input(
        "Participant ID", value=current.participant_id, key="settings_participant"
    )

    clear, cancel, save = st.columns(3)
    if clear.button(
        "Clear settings",
        key="settings_clear",
        on_click=_clear_settings,
        use_container_width=True,
    ):
        st.rerun()
    if cancel.button("Cancel", key="settings_cancel", use_container_width=True):
        st.rerun()
    if save.button(
        "Save",
        type="primary",
        key="settings_save",
        on_click=_save_settings,
        use_container_width=True,
    ):
        st.rerun()


def _on_mode_change():
    choice = state.mode_choice
    if choice == state.mode:
        return
    if state.messages:
        # radio stays on the current mode until the switch is confirmed
        state.mode_switch_target = choice
        state.mode_choice = state.mode
    else:
        state.mode = choice
        _reset_conversation()


def _confirm_mode_switch(target: str):
    state.mode = target
    state.mode_choice = target
    _reset_conversation()


@st.dialog("Switch mode?")
def confirm_dialog(title: str, message: str, target: str):
    st.markdown(f"**{title}**")
    st.write(message)
    cancel, confirm = st.columns(2)
    if cancel.button("Cancel", key="cancel_switch", use_container_width=True):
        st.rerun()
    if confirm.button(
        "Confirm",
        type="primary",
        key="confirm_switch",
        on_click=_confirm_mode_switch,
        args=(target,),
        use_container_width=True,
    ):
        st.rerun()


# --------- Header ----------
title_col, settings_col = st.columns([6, 1])
title_col.title("Code Review AI Assistant")
if settings_col.button("Settings", key="open_settings"):
    settings_dialog()
elif "settings_prompted" not in state:
    state.settings_prompted = True
    if state.settings.needs_setup():
        settings_dialog()

# --------- Mode selector ----------
st.radio(
    "Mode",
    list(MODES),
    key="mode_choice",
    format_func=MODES.get,
    horizontal=True,
    label_visibility="collapsed",
    on_change=_on_mode_change,
    disabled=state.pending is not None,
)
if state.mode_switch_target:
    # one-shot: dismissing the dialog leaves the current mode in place
    target = state.mode_switch_target
    state.mode_switch_target = None
    confirm_dialog(
        "Start a new conversation?",
        f"Switching to {MODES[target]} clears the current conversation.",
        target,
    )

# --------- Conversation ----------
messages = state.messages

if not messages and state.mode == "A":
    if state.pending == "initial":
        st.info("Generating code review summary...")
    elif st.button("Generate Initial Code Review", type="primary", key="generate_review"):
        state.pending = "initial"
        st.rerun()

if not messages and state.mode == "B":
    st.markdown("Ask me anything about your code!")

for message in messages:
    with st.chat_message(message["role"]):
        if message["role"] == "assistant":
            st.markdown("**Assistant**")
            render_markdown(message["content"])
            if message.get("sources"):
                with st.expander(f"Sources ({len(message['sources'])})"):
                    for src in message["sources"]:
                        st.markdown(f"**{src.get('filename') or 'source'}**")
                        if src.get("text_preview"):
                            st.caption(src["text_preview"])
        else:
            st.text(message["content"])
        st.caption(api_client.format_time(message["timestamp"]))

prompt = st.chat_input("Type your message...", disabled=state.pending is not None)
if prompt and prompt.strip():
    messages.append({"role": "user", "content": prompt, "timestamp": _now()})
    state.pending = "reply"
    st.rerun()

# --------- Backend call ----------
if state.pending:
    initial = state.pending == "initial"
    spinner = "Generating code review summary..." if initial else "Assistant is typing..."
    with st.spinner(spinner):
        try:
            reply = api_client.send_chat(
                mode=state.mode,
                messages=[] if initial else messages,
                settings=state.settings,
                session_id=state.session_id,
                query=None if initial else messages[-1]["content"],
            )
            state.session_id = reply.session_id or state.session_id
            messages.append(
                {
                    "role": "assistant",
                    "content": reply.content,
                    "timestamp": reply.timestamp,
                    "sources": reply.sources,
                }
            )
        except api_client.ApiError as e:
            logger.error("Error sending message: %s", e)
            messages.append(
                {
                    "role": "assistant",
                    "content": INITIAL_ERROR_REPLY if initial else ERROR_REPLY,
                    "timestamp": _now(),
                }
            )
        finally:
            state.pending = None
    st.rerun()
