"""Chat module for conversations, persistence and session orchestration."""

from .models import AppSettings, Conversation, Message, MessageRole
from .persistence import PersistenceManager
from .session import ChatSession

__all__ = [
    "AppSettings",
    "Conversation",
    "Message",
    "MessageRole",
    "PersistenceManager",
    "ChatSession",
]
