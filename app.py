"""
Streamlit Application for Watch Chat.

A compact chat interface for Gemini. Replies are parsed into segments
and rendered per kind: labelled code blocks, centered block math and
inline math rewritten to Unicode.

Run with: streamlit run app.py
"""

import sys
from pathlib import Path
from typing import Optional, Sequence

import streamlit as st

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from src.utils.config import get_config
from src.utils.logger import get_logger
from src.chat.models import AVAILABLE_MODELS, Conversation, MessageRole, format_relative_time
from src.chat.persistence import create_persistence_from_config
from src.chat.session import ChatSession, create_session_from_config
from src.generation.llm_client import create_client_from_config
from src.parsing.content_parser import get_parser
from src.parsing.models import ContentSegment, SegmentKind
from src.parsing.text_format import escape_for_markdown


# Page configuration
st.set_page_config(
    page_title="Watch Chat",
    page_icon="⌚",
    layout="centered",
    initial_sidebar_state="expanded"
)


CUSTOM_CSS = """
<style>
    /* Math segments */
    .block-math {
        font-family: Georgia, serif;
        font-style: italic;
        text-align: center;
        background-color: rgba(127, 127, 127, 0.1);
        border-radius: 0.25rem;
        padding: 0.25rem;
        margin: 0.25rem 0;
    }

    .inline-math {
        font-family: Georgia, serif;
        font-style: italic;
        background-color: rgba(127, 127, 127, 0.06);
        border-radius: 0.15rem;
        padding: 0 0.15rem;
    }

    /* Code language label */
    .code-language {
        font-family: monospace;
        font-size: 0.7rem;
        font-weight: bold;
        opacity: 0.6;
        margin-bottom: -0.75rem;
    }
</style>
"""


def initialize_session_state() -> None:
    """Initialize Streamlit session state variables."""
    if "config" not in st.session_state:
        st.session_state.config = get_config()

    if "persistence" not in st.session_state:
        st.session_state.persistence = create_persistence_from_config(st.session_state.config)

    if "settings" not in st.session_state:
        st.session_state.settings = st.session_state.persistence.load_settings()

    if "chat_session" not in st.session_state:
        st.session_state.chat_session = None

    if "pending_prompt" not in st.session_state:
        st.session_state.pending_prompt = None

    if "pending_edit" not in st.session_state:
        st.session_state.pending_edit = None


def load_session(conversation: Optional[Conversation] = None) -> Optional[ChatSession]:
    """
    Build a chat session from the current settings.

    Returns:
        ChatSession, or None when the API key is missing.
    """
    logger = get_logger("app")
    config = st.session_state.config
    settings = st.session_state.settings

    if not config.google_api_key:
        return None

    try:
        client = create_client_from_config(config, settings)
    except ValueError as e:
        logger.error(f"Failed to create Gemini client: {e}")
        return None

    session = create_session_from_config(
        config,
        client=client,
        parser=get_parser(),
        persistence=st.session_state.persistence,
        conversation=conversation
    )
    session.suggestions_enabled = config.suggestions_enabled and settings.suggestions_enabled
    return session


def render_segments(segments: Sequence[ContentSegment]) -> None:
    """
    Render parsed segments into the current Streamlit container.

    Text and inline math are buffered into one Markdown block so they
    flow together; code and block math flush the buffer first. All
    content is escaped, so model output never turns into live HTML or
    Streamlit math.
    """
    buffer: list[str] = []

    def flush() -> None:
        if buffer:
            st.markdown("".join(buffer), unsafe_allow_html=True)
            buffer.clear()

    for segment in segments:
        if segment.kind == SegmentKind.TEXT:
            buffer.append(escape_for_markdown(segment.content))
        elif segment.kind == SegmentKind.INLINE_MATH:
            buffer.append(f'<span class="inline-math">{escape_for_markdown(segment.content)}</span>')
        elif segment.kind == SegmentKind.BLOCK_MATH:
            flush()
            st.markdown(
                f'<div class="block-math">{escape_for_markdown(segment.content)}</div>',
                unsafe_allow_html=True
            )
        else:
            flush()
            if segment.language:
                st.markdown(
                    f'<div class="code-language">{escape_for_markdown(segment.language.upper())}</div>',
                    unsafe_allow_html=True
                )
            st.code(segment.content, language=segment.language)

    flush()


def render_sidebar() -> None:
    """Render conversation list and settings."""
    persistence = st.session_state.persistence
    settings = st.session_state.settings

    with st.sidebar:
        st.header("💬 Chats")

        if st.button("➕ New chat", use_container_width=True):
            st.session_state.chat_session = load_session()
            st.rerun()

        for conversation in persistence.load_conversations():
            col_open, col_delete = st.columns([5, 1])
            label = f"{conversation.title}  ·  {format_relative_time(conversation.updated_at)}"
            if col_open.button(label, key=f"open-{conversation.id}", use_container_width=True):
                st.session_state.chat_session = load_session(conversation)
                st.rerun()
            if col_delete.button("🗑", key=f"delete-{conversation.id}"):
                persistence.delete_conversation(conversation.id)
                current = st.session_state.chat_session
                if current and current.conversation.id == conversation.id:
                    st.session_state.chat_session = load_session()
                st.rerun()

        st.divider()
        st.header("⚙️ Settings")

        model_name = st.selectbox(
            "Model",
            AVAILABLE_MODELS,
            index=AVAILABLE_MODELS.index(settings.model_name)
            if settings.model_name in AVAILABLE_MODELS else 0,
            format_func=lambda m: m.replace("gemini-", "")
        )
        suggestions_enabled = st.toggle("Suggestions", value=settings.suggestions_enabled)

        if model_name != settings.model_name or suggestions_enabled != settings.suggestions_enabled:
            settings.model_name = model_name
            settings.suggestions_enabled = suggestions_enabled
            persistence.save_settings(settings)
            current = st.session_state.chat_session
            st.session_state.chat_session = load_session(current.conversation if current else None)

        if st.button("🧹 Delete all chats", use_container_width=True):
            persistence.delete_all_conversations()
            st.session_state.chat_session = load_session()
            st.rerun()


def render_history(session: ChatSession) -> None:
    """Render every message of the current conversation."""
    last_user_id = next(
        (m.id for m in reversed(session.messages) if m.role == MessageRole.USER),
        None
    )

    for message in session.messages:
        role = "user" if message.role == MessageRole.USER else "assistant"
        with st.chat_message(role):
            if message.role == MessageRole.USER:
                st.markdown(escape_for_markdown(message.text))
                if message.id == last_user_id:
                    render_edit_box(message)
            else:
                render_segments(session.segments_for(message))


def render_edit_box(message) -> None:
    """Offer to rewrite the last user message and regenerate the reply."""
    with st.expander("✏️ Edit"):
        new_text = st.text_area("Message", value=message.text, key=f"edit-{message.id}")
        if st.button("Resend", key=f"resend-{message.id}"):
            st.session_state.pending_edit = (message.id, new_text)
            st.rerun()


def apply_pending_edit(session: ChatSession) -> None:
    """Run an edit requested on the previous script run."""
    message_id, new_text = st.session_state.pending_edit
    st.session_state.pending_edit = None

    try:
        with st.spinner("Regenerating..."):
            session.edit_message(message_id, new_text)
    except ValueError as e:
        get_logger("app").warning(f"Edit rejected: {e}")
        st.error(str(e))
        return

    if session.error_message:
        st.error(session.error_message)


def render_suggestions(session: ChatSession) -> None:
    """Show quick-reply buttons for the last answer."""
    if not session.suggestions or session.is_loading:
        return

    columns = st.columns(len(session.suggestions))
    for column, suggestion in zip(columns, session.suggestions):
        if column.button(suggestion, key=f"suggest-{suggestion}"):
            st.session_state.pending_prompt = suggestion
            st.rerun()


def stream_reply(session: ChatSession, prompt: str) -> None:
    """Send a prompt and render the reply as it streams."""
    with st.chat_message("user"):
        st.markdown(escape_for_markdown(prompt))

    with st.chat_message("assistant"):
        placeholder = st.empty()

        def on_update(message, segments) -> None:
            with placeholder.container():
                render_segments(segments)

        session.send_message(prompt, on_update=on_update)

        if session.error_message:
            st.error(session.error_message)


def main() -> None:
    """Main application entry point."""
    st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

    initialize_session_state()

    st.title("⌚ Watch Chat")

    render_sidebar()

    if st.session_state.chat_session is None:
        st.session_state.chat_session = load_session()
    session = st.session_state.chat_session

    if session is None:
        st.warning(
            "Please configure your Google API key in the `.env` file to start chatting."
        )
        st.code("GOOGLE_API_KEY=your_key_here", language="bash")
        return

    if st.session_state.pending_edit:
        apply_pending_edit(session)

    render_history(session)

    prompt = st.chat_input("Ask Gemini...")
    if not prompt and st.session_state.pending_prompt:
        prompt = st.session_state.pending_prompt
        st.session_state.pending_prompt = None

    if prompt:
        stream_reply(session, prompt)

    render_suggestions(session)


if __name__ == "__main__":
    main()
