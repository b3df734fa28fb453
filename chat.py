#!/usr/bin/env python3
"""
Terminal chat for Watch Chat.

Streams Gemini replies into the terminal and then shows them the way
the watch renders them: code blocks labelled and indented, block math
centered, LaTeX rewritten into Unicode.

Usage:
    python chat.py                          # Start a new conversation
    python chat.py --conversation <id>      # Continue a saved conversation
    python chat.py --list                   # List saved conversations

In-chat commands:
    /new     start a new conversation
    /quit    exit
    /edit    rewrite your last message and regenerate the reply
    1-3      send the numbered quick reply
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add project root to path for imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from src.utils.config import get_config
from src.utils.logger import setup_logger, get_logger
from src.chat.models import Message, MessageRole, format_relative_time
from src.chat.persistence import create_persistence_from_config
from src.chat.session import create_session_from_config
from src.generation.llm_client import create_client_from_config
from src.parsing.content_parser import create_parser_from_config
from src.parsing.models import ContentSegment, SegmentKind


RENDER_WIDTH = 60
CODE_INDENT = "    "
EDIT_COMMAND = "/edit"


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.
    
    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Chat with Gemini from the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python chat.py                       # New conversation
  python chat.py --model gemini-2.5-pro
  python chat.py --list                # Show saved conversations
        """
    )
    
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Gemini model to use (default: from settings)"
    )
    
    parser.add_argument(
        "--conversation",
        type=str,
        default=None,
        help="Id of a saved conversation to continue"
    )
    
    parser.add_argument(
        "--list",
        action="store_true",
        help="List saved conversations and exit"
    )
    
    parser.add_argument(
        "--no-stream-render",
        action="store_true",
        help="Do not echo raw chunks while the reply streams"
    )
    
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )
    
    return parser.parse_args(argv)


def render_segments(segments: Sequence[ContentSegment], width: int = RENDER_WIDTH) -> str:
    """
    Lay out parsed segments as terminal text.
    
    Text and inline math flow together; code and block math start on
    their own lines.
    
    Args:
        segments: Parsed message segments.
        width: Column width used to center block math.
    
    Returns:
        Rendered string.
    """
    out: list[str] = []
    
    def break_line() -> None:
        if out and not out[-1].endswith("\n"):
            out.append("\n")
    
    for segment in segments:
        if segment.kind == SegmentKind.CODE:
            break_line()
            if segment.language:
                out.append(f"{CODE_INDENT}[{segment.language.upper()}]\n")
            for line in segment.content.strip("\n").split("\n"):
                out.append(f"{CODE_INDENT}{line}\n")
        elif segment.kind == SegmentKind.BLOCK_MATH:
            break_line()
            out.append(segment.content.center(width).rstrip() + "\n")
        elif segment.kind == SegmentKind.INLINE_MATH:
            out.append(segment.content)
        else:
            text = segment.content
            # Block segments already ended the line
            if out and out[-1].endswith("\n") and text.startswith("\n"):
                text = text[1:]
            out.append(text)
    
    return "".join(out).rstrip()


def list_conversations(persistence) -> None:
    """Print saved conversations, newest first."""
    conversations = persistence.load_conversations()
    if not conversations:
        print("No saved conversations.")
        return
    
    for conversation in conversations:
        print(
            f"{conversation.id}  {format_relative_time(conversation.updated_at):>9}  "
            f"{conversation.title}"
        )


class TerminalPrinter:
    """Echoes the newly arrived part of a streaming reply."""
    
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.printed = 0
    
    def __call__(self, message, segments) -> None:
        if not self.enabled:
            return
        delta = message.text[self.printed:]
        if delta:
            sys.stdout.write(delta)
            sys.stdout.flush()
            self.printed = len(message.text)


def last_user_message(session) -> Optional[Message]:
    """Most recent user message of the session, or None."""
    for message in reversed(session.messages):
        if message.role == MessageRole.USER:
            return message
    return None


def run_chat(session, echo: bool = True) -> None:
    """Read-eval loop until /quit or end of input."""
    logger = get_logger("chat")
    print(f"Chatting in '{session.conversation.title}'. Type /quit to exit.\n")
    
    while True:
        try:
            user_input = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        
        if not user_input:
            continue
        if user_input == "/quit":
            break
        if user_input == "/new":
            session.reset()
            print("Started a new conversation.\n")
            continue
        
        edit_target = None
        if user_input.split(maxsplit=1)[0] == EDIT_COMMAND:
            edit_target = last_user_message(session)
            user_input = user_input[len(EDIT_COMMAND):].strip()
            if edit_target is None or not user_input:
                print(f"Usage: {EDIT_COMMAND} <new text> (after sending a message)\n")
                continue
        elif user_input.isdigit() and 1 <= int(user_input) <= len(session.suggestions):
            user_input = session.suggestions[int(user_input) - 1]
            print(f"you> {user_input}")
        
        printer = TerminalPrinter(enabled=echo)
        print("gemini> ", end="", flush=True)
        if edit_target is not None:
            reply = session.edit_message(edit_target.id, user_input, on_update=printer)
        else:
            reply = session.send_message(user_input, on_update=printer)
        print()
        
        if session.error_message:
            print(f"  ! {session.error_message}")
            logger.debug("Reply ended with an error")
        
        if reply is not None:
            segments = session.segments_for(reply)
            needs_layout = any(s.kind != SegmentKind.TEXT for s in segments)
            if needs_layout or not echo:
                print("-" * RENDER_WIDTH)
                print(render_segments(segments))
        
        if session.suggestions:
            hints = "  ".join(f"[{i}] {s}" for i, s in enumerate(session.suggestions, 1))
            print(f"\n{hints}")
        print()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the terminal chat."""
    args = parse_arguments(argv)
    config = get_config()
    
    log_level = "DEBUG" if args.verbose else config.log_level
    setup_logger(log_level)
    logger = get_logger("chat")
    
    persistence = create_persistence_from_config(config)
    
    if args.list:
        list_conversations(persistence)
        return 0
    
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1
    
    settings = persistence.load_settings()
    if args.model:
        settings.model_name = args.model
    
    conversation = None
    if args.conversation:
        conversation = persistence.load_conversation(args.conversation)
        if conversation is None:
            logger.error(f"Conversation not found: {args.conversation}")
            return 1
    
    client = create_client_from_config(config, settings)
    parser = create_parser_from_config(config)
    session = create_session_from_config(
        config,
        client=client,
        parser=parser,
        persistence=persistence,
        conversation=conversation
    )
    session.suggestions_enabled = session.suggestions_enabled and settings.suggestions_enabled
    
    run_chat(session, echo=not args.no_stream_render)
    return 0


if __name__ == "__main__":
    sys.exit(main())
