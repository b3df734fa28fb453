"""
Chat session orchestration.

Owns one conversation at a time: appends user messages, streams the
model reply into a growing message, pushes throttled render updates
to the caller and derives quick-reply suggestions from the answer.
"""

import time
from typing import Callable, Optional, Sequence

from src.chat.models import Conversation, Message, MessageRole
from src.generation.llm_client import GenerationError
from src.generation.prompts import (
    SUGGESTION_CODE,
    SUGGESTION_EXAMPLE,
    SUGGESTION_MATH,
    SUGGESTION_MORE,
    SUGGESTION_SUMMARY,
)
from src.parsing.models import ContentSegment, SegmentKind
from src.utils.logger import LoggerMixin


MAX_SUGGESTIONS = 3
LONG_ANSWER_CHARS = 600

UpdateCallback = Callable[[Message, Sequence[ContentSegment]], None]


def suggest_replies(segments: Sequence[ContentSegment]) -> list[str]:
    """
    Pick quick replies for an answer from what it contains.
    
    Args:
        segments: Parsed segments of the model's answer.
    
    Returns:
        Up to three suggestion strings, most specific first.
    """
    if not segments:
        return []
    
    suggestions: list[str] = []
    kinds = {segment.kind for segment in segments}
    text_length = sum(len(s.content) for s in segments if s.kind == SegmentKind.TEXT)
    
    if SegmentKind.CODE in kinds:
        suggestions.append(SUGGESTION_CODE)
    if any(segment.is_math for segment in segments):
        suggestions.append(SUGGESTION_MATH)
    if text_length > LONG_ANSWER_CHARS:
        suggestions.append(SUGGESTION_SUMMARY)
    
    suggestions.extend([SUGGESTION_MORE, SUGGESTION_EXAMPLE])
    return suggestions[:MAX_SUGGESTIONS]


class UpdateThrottle:
    """Lets at most one update through per interval."""
    
    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.interval = interval
        self._clock = clock
        self._last: Optional[float] = None
    
    def ready(self) -> bool:
        now = self._clock()
        if self._last is not None and now - self._last < self.interval:
            return False
        self._last = now
        return True


class ChatSession(LoggerMixin):
    """
    Drives one conversation against a streaming Gemini client.
    
    The session is synchronous: send_message() returns once the reply
    has finished streaming. Render updates reach the caller through
    on_update(message, segments), throttled to update_interval seconds,
    with one final unthrottled update when the stream ends.
    
    Attributes:
        conversation: Conversation being driven.
        is_loading: True while a reply is streaming.
        error_message: Last error shown to the user, or None.
        suggestions: Quick replies for the last answer.
    
    Example:
        >>> session = ChatSession(client, ContentParser())
        >>> session.send_message("What is $e^{i\\pi}$?", on_update=render)
    """
    
    def __init__(
        self,
        client,
        parser,
        conversation: Optional[Conversation] = None,
        persistence=None,
        update_interval: float = 0.1,
        suggestions_enabled: bool = True,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Initialize the session.
        
        Args:
            client: Object with stream(messages) -> Iterator[str].
            parser: ContentParser used for render updates and suggestions.
            conversation: Conversation to continue. A new one if omitted.
            persistence: Optional PersistenceManager; the conversation is
                saved after every turn when given.
            update_interval: Minimum seconds between streamed updates.
            suggestions_enabled: Whether to compute quick replies.
            clock: Monotonic time source for throttling.
        """
        self.client = client
        self.parser = parser
        self.conversation = conversation or Conversation()
        self.persistence = persistence
        self.update_interval = update_interval
        self.suggestions_enabled = suggestions_enabled
        self._clock = clock
        
        self.is_loading = False
        self.error_message: Optional[str] = None
        self.suggestions: list[str] = []
    
    @property
    def messages(self) -> list[Message]:
        return self.conversation.messages
    
    def segments_for(self, message: Message) -> tuple[ContentSegment, ...]:
        """Parsed segments for a message, served from the parser cache."""
        return self.parser.parse(message.text)
    
    def reset(self) -> None:
        """Start a fresh, empty conversation."""
        self.conversation = Conversation()
        self.is_loading = False
        self.error_message = None
        self.suggestions = []
        self.logger.info("Started new conversation")
    
    def send_message(
        self,
        text: str,
        on_update: Optional[UpdateCallback] = None
    ) -> Optional[Message]:
        """
        Append a user message and stream the model's reply.
        
        Args:
            text: User input. Blank input is ignored.
            on_update: Optional render callback.
        
        Returns:
            The model reply message, or None if nothing was sent or the
            request failed before any text arrived.
        """
        if not text or not text.strip():
            return None
        
        self.conversation.messages.append(Message(role=MessageRole.USER, text=text))
        if len(self.conversation.messages) == 1:
            self.conversation.auto_title()
        
        return self._stream_reply(on_update)
    
    def edit_message(
        self,
        message_id: str,
        new_text: str,
        on_update: Optional[UpdateCallback] = None
    ) -> Optional[Message]:
        """
        Replace a user message and regenerate everything after it.
        
        Args:
            message_id: Id of the user message to edit.
            new_text: Replacement text. Blank text is ignored.
            on_update: Optional render callback.
        
        Returns:
            The regenerated model reply, or None.
        
        Raises:
            ValueError: If the id is unknown or not a user message.
        """
        if not new_text or not new_text.strip():
            return None
        
        index = self.conversation.index_of(message_id)
        if index is None:
            raise ValueError(f"Unknown message id: {message_id}")
        
        message = self.conversation.messages[index]
        if message.role != MessageRole.USER:
            raise ValueError("Only user messages can be edited")
        
        message.text = new_text
        dropped = len(self.conversation.messages) - index - 1
        del self.conversation.messages[index + 1:]
        if index == 0:
            self.conversation.auto_title()
        
        self.logger.debug(f"Edited message {message_id}, dropped {dropped} later messages")
        return self._stream_reply(on_update)
    
    def _stream_reply(self, on_update: Optional[UpdateCallback]) -> Optional[Message]:
        history = list(self.conversation.messages)
        reply = Message(role=MessageRole.MODEL, text="")
        self.conversation.messages.append(reply)
        
        self.is_loading = True
        self.error_message = None
        self.suggestions = []
        throttle = UpdateThrottle(self.update_interval, clock=self._clock)
        
        try:
            for chunk in self.client.stream(history):
                reply.text += chunk
                if on_update and throttle.ready():
                    on_update(reply, self.parser.parse(reply.text))
        except GenerationError as e:
            self.error_message = f"Error: {e}"
            self.logger.error(f"Reply failed: {e}")
        finally:
            self.is_loading = False
        
        if not reply.text:
            self.conversation.messages.remove(reply)
            reply = None
        
        self.conversation.touch()
        if self.persistence is not None:
            self.persistence.save_conversation(self.conversation)
        
        if reply is None:
            return None
        
        segments = self.parser.parse(reply.text)
        if on_update:
            on_update(reply, segments)
        
        if self.suggestions_enabled and self.error_message is None:
            self.suggestions = suggest_replies(segments)
        
        return reply


def create_session_from_config(config, client, parser, persistence=None, conversation=None) -> ChatSession:
    """
    Create a ChatSession from application config.
    
    Args:
        config: Config object with stream_update_interval and suggestions_enabled.
        client: Streaming Gemini client.
        parser: ContentParser instance.
        persistence: Optional PersistenceManager.
        conversation: Optional conversation to continue.
    
    Returns:
        Configured ChatSession instance.
    """
    return ChatSession(
        client=client,
        parser=parser,
        conversation=conversation,
        persistence=persistence,
        update_interval=config.stream_update_interval,
        suggestions_enabled=config.suggestions_enabled
    )
