"""
Data models for conversations and app settings.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from src.generation.prompts import SYSTEM_PROMPT


TITLE_MAX_LENGTH = 40
DEFAULT_TITLE = "New Chat"

AVAILABLE_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.5-pro",
]



class MessageRole(Enum):
    """Author of a chat message, named as the Gemini API names them."""
    USER = "user"
    MODEL = "model"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now()


@dataclass
class Message:
    """
    A single chat message.
    
    Attributes:
        role: Who wrote the message.
        text: Raw message text (Markdown/LaTeX, unparsed).
        id: Unique identifier.
    """
    role: MessageRole
    text: str
    id: str = field(default_factory=_new_id)
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"id": self.id, "role": self.role.value, "text": self.text}
    
    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        return cls(
            role=MessageRole(data["role"]),
            text=data.get("text", ""),
            id=data.get("id") or _new_id(),
        )


@dataclass
class ConversationMetadata:
    """Lightweight listing entry for a conversation."""
    id: str
    title: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Conversation:
    """
    An ordered list of messages with a title and timestamps.
    
    Attributes:
        title: Display title, derived from the first user message.
        messages: Messages in chat order.
        id: Unique identifier, also the storage file name.
        created_at: Creation time.
        updated_at: Last modification time.
    """
    title: str = DEFAULT_TITLE
    messages: list[Message] = field(default_factory=list)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    
    def auto_title(self) -> None:
        """Set the title from the first user message, truncated with an ellipsis."""
        first = next((m for m in self.messages if m.role == MessageRole.USER), None)
        if first is None:
            return
        
        raw = first.text[:TITLE_MAX_LENGTH]
        self.title = f"{raw}…" if len(raw) < len(first.text) else raw
    
    def touch(self) -> None:
        """Mark the conversation as modified now."""
        self.updated_at = _now()
    
    def index_of(self, message_id: str) -> Optional[int]:
        """Position of a message by id, or None."""
        for i, message in enumerate(self.messages):
            if message.id == message_id:
                return i
        return None
    
    def metadata(self) -> ConversationMetadata:
        return ConversationMetadata(
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "messages": [m.to_dict() for m in self.messages],
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "Conversation":
        """
        Build a conversation from its stored dictionary.
        
        Raises:
            KeyError: If the id is missing.
            ValueError: If a timestamp or role is malformed.
        """
        created_at = datetime.fromisoformat(data["created_at"]) if data.get("created_at") else _now()
        updated_at = datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else created_at
        return cls(
            id=data["id"],
            title=data.get("title", DEFAULT_TITLE),
            created_at=created_at,
            updated_at=updated_at,
            messages=[Message.from_dict(m) for m in data.get("messages", [])],
        )


@dataclass
class AppSettings:
    """
    User-adjustable settings.
    
    Attributes:
        model_name: Gemini model used for replies.
        temperature: Sampling temperature.
        suggestions_enabled: Offer quick replies after each answer.
        system_prompt: System instruction sent with every request.
    """
    model_name: str = AVAILABLE_MODELS[0]
    temperature: float = 0.7
    suggestions_enabled: bool = True
    system_prompt: str = SYSTEM_PROMPT
    
    @classmethod
    def default(cls) -> "AppSettings":
        return cls()
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "model_name": self.model_name,
            "temperature": self.temperature,
            "suggestions_enabled": self.suggestions_enabled,
            "system_prompt": self.system_prompt,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Build settings, filling keys missing from older files with defaults."""
        defaults = cls()
        return cls(
            model_name=data.get("model_name", defaults.model_name),
            temperature=float(data.get("temperature", defaults.temperature)),
            suggestions_enabled=bool(data.get("suggestions_enabled", defaults.suggestions_enabled)),
            system_prompt=data.get("system_prompt", defaults.system_prompt),
        )


def format_relative_time(moment: datetime, now: Optional[datetime] = None) -> str:
    """
    Short relative label for a timestamp, e.g. "5m ago" or "Mar 3".
    
    Args:
        moment: Time to describe.
        now: Reference time. Defaults to the current time.
    
    Returns:
        Human readable label.
    """
    now = now or _now()
    seconds = (now - moment).total_seconds()
    
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 604800:
        return f"{int(seconds // 86400)}d ago"
    return f"{moment.strftime('%b')} {moment.day}"
