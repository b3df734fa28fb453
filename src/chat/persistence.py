"""
File-based persistence for conversations and settings.

Each conversation lives in its own JSON file named after its id, so
saving one chat never rewrites the others. Settings live in a single
JSON file next to the conversations directory.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from src.chat.models import AppSettings, Conversation
from src.utils.logger import LoggerMixin


# Pre-split storage: every conversation in one JSON list
LEGACY_CONVERSATIONS_FILE = "conversations.json"


class PersistenceManager(LoggerMixin):
    """
    Load and store conversations and settings as JSON files.
    
    Unreadable files are skipped with a warning rather than failing the
    whole listing; writes go through a temp file and an atomic replace.
    
    Attributes:
        conversations_dir: Directory with one <id>.json per conversation.
        settings_file: Path of the settings JSON file.
    
    Example:
        >>> store = PersistenceManager("data/conversations", "data/settings.json")
        >>> store.save_conversation(Conversation())
        >>> len(store.load_conversations())
        1
    """
    
    def __init__(
        self,
        conversations_dir: Union[str, Path],
        settings_file: Union[str, Path]
    ) -> None:
        self.conversations_dir = Path(conversations_dir)
        self.settings_file = Path(settings_file)
        self.conversations_dir.mkdir(parents=True, exist_ok=True)
    
    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------
    
    def load_conversations(self) -> list[Conversation]:
        """
        Load every stored conversation.
        
        Returns:
            Conversations sorted by last update, newest first.
        """
        conversations: list[Conversation] = []
        
        for path in self.conversations_dir.glob("*.json"):
            conversation = self._read_conversation(path)
            if conversation is not None:
                conversations.append(conversation)
        
        conversations.sort(key=lambda c: c.updated_at, reverse=True)
        self.logger.debug(f"Loaded {len(conversations)} conversations")
        return conversations
    
    def load_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Load a single conversation by id, or None if absent or unreadable."""
        path = self._file_path(conversation_id)
        if not path.exists():
            return None
        return self._read_conversation(path)
    
    def save_conversation(self, conversation: Conversation) -> None:
        """Write a conversation to its own file."""
        self._write_json(self._file_path(conversation.id), conversation.to_dict())
    
    def delete_conversation(self, conversation_id: str) -> None:
        """Remove a conversation file; missing files are ignored."""
        path = self._file_path(conversation_id)
        if path.exists():
            path.unlink()
            self.logger.info(f"Deleted conversation {conversation_id}")
    
    def delete_all_conversations(self) -> int:
        """
        Remove every stored conversation.
        
        Returns:
            Number of files removed.
        """
        removed = 0
        for path in self.conversations_dir.glob("*.json"):
            path.unlink()
            removed += 1
        self.logger.info(f"Deleted {removed} conversations")
        return removed
    
    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    
    def load_settings(self) -> AppSettings:
        """Load settings, falling back to defaults if missing or corrupt."""
        if not self.settings_file.exists():
            return AppSettings.default()
        
        try:
            data = json.loads(self.settings_file.read_text(encoding="utf-8"))
            return AppSettings.from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            self.logger.warning(f"Could not read settings, using defaults: {e}")
            return AppSettings.default()
    
    def save_settings(self, settings: AppSettings) -> None:
        self._write_json(self.settings_file, settings.to_dict())
    
    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------
    
    def migrate_legacy(self, legacy_file: Union[str, Path]) -> int:
        """
        Split a legacy single-file conversation list into per-file storage.
        
        The legacy file holds a JSON list of conversations. It is removed
        after a successful migration, so running this twice is harmless.
        
        Args:
            legacy_file: Path of the old conversations JSON list.
        
        Returns:
            Number of conversations migrated.
        """
        legacy_path = Path(legacy_file)
        if not legacy_path.exists():
            return 0
        
        try:
            items = json.loads(legacy_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self.logger.warning(f"Legacy file {legacy_path} unreadable, skipping migration: {e}")
            return 0
        
        migrated = 0
        for item in items if isinstance(items, list) else []:
            try:
                conversation = Conversation.from_dict(item)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                self.logger.warning(f"Skipping malformed legacy conversation: {e}")
                continue
            self.save_conversation(conversation)
            migrated += 1
        
        legacy_path.unlink()
        self.logger.info(f"Migrated {migrated} legacy conversations from {legacy_path}")
        return migrated
    
    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    
    def _file_path(self, conversation_id: str) -> Path:
        return self.conversations_dir / f"{conversation_id}.json"
    
    def _read_conversation(self, path: Path) -> Optional[Conversation]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Conversation.from_dict(data)
        except (OSError, KeyError, ValueError, TypeError, AttributeError) as e:
            self.logger.warning(f"Skipping unreadable conversation file {path.name}: {e}")
            return None
    
    def _write_json(self, path: Path, data: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


def create_persistence_from_config(config) -> PersistenceManager:
    """
    Create a PersistenceManager from application config.
    
    Conversations left in the legacy single-file format under
    data_dir are migrated on the way.
    
    Args:
        config: Config object with storage paths.
    
    Returns:
        Configured PersistenceManager instance.
    """
    persistence = PersistenceManager(
        conversations_dir=config.conversations_dir,
        settings_file=config.settings_file
    )
    persistence.migrate_legacy(Path(config.data_dir) / LEGACY_CONVERSATIONS_FILE)
    return persistence
