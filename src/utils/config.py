"""
Configuration module for loading environment variables.

This module provides a centralized configuration class that loads
and validates all environment variables required by the application.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from src.generation.prompts import SYSTEM_PROMPT


class Config:
    """
    Configuration class for managing application settings.
    
    Loads environment variables from .env file and provides
    typed access to all configuration values.
    
    Attributes:
        google_api_key: Google Gemini API key.
        llm_model: Default Gemini model name.
        llm_temperature: LLM temperature setting.
        llm_max_tokens: Maximum tokens for LLM response.
        system_prompt: System instruction sent with every request.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        data_dir: Root directory for stored chats and settings.
        conversations_dir: Directory holding one JSON file per conversation.
        settings_file: Path of the settings JSON file.
        parse_cache_limit: Entries kept by the content parser cache.
        stream_update_interval: Minimum seconds between streamed UI updates.
        suggestions_enabled: Whether quick-reply suggestions are offered.
    
    Example:
        >>> config = Config()
        >>> print(config.llm_model)
        gemini-2.5-flash
    """
    
    def __init__(self, env_file: Optional[str] = None) -> None:
        """
        Initialize configuration by loading environment variables.
        
        Args:
            env_file: Optional path to .env file. If not provided,
                     searches for .env in project root.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            # Try to find .env in current directory or parent directories
            current_dir = Path.cwd()
            env_path = current_dir / ".env"
            if env_path.exists():
                load_dotenv(env_path)
            else:
                for parent in current_dir.parents:
                    env_path = parent / ".env"
                    if env_path.exists():
                        load_dotenv(env_path)
                        break
                else:
                    load_dotenv()
        
        # API Keys
        self.google_api_key: str = os.getenv("GOOGLE_API_KEY", "")
        
        # LLM settings
        self.llm_model: str = os.getenv("LLM_MODEL", "gemini-2.5-flash")
        self.llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
        self.llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "1024"))
        self.system_prompt: str = os.getenv("SYSTEM_PROMPT", SYSTEM_PROMPT)
        
        # Logging
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        
        # Paths
        self.data_dir: str = os.getenv("DATA_DIR", "./data")
        self.conversations_dir: str = os.getenv(
            "CONVERSATIONS_DIR",
            str(Path(self.data_dir) / "conversations")
        )
        self.settings_file: str = os.getenv(
            "SETTINGS_FILE",
            str(Path(self.data_dir) / "settings.json")
        )
        
        # Rendering
        self.parse_cache_limit: int = int(os.getenv("PARSE_CACHE_LIMIT", "100"))
        self.stream_update_interval: float = float(
            os.getenv("STREAM_UPDATE_INTERVAL", "0.1")
        )
        self.suggestions_enabled: bool = os.getenv("SUGGESTIONS_ENABLED", "true").lower() == "true"
    
    def validate(self) -> list[str]:
        """
        Validate that all required configuration values are set.
        
        Returns:
            List of validation error messages. Empty list if valid.
        """
        errors: list[str] = []
        
        if not self.google_api_key:
            errors.append("GOOGLE_API_KEY is not set in environment variables")
        
        if self.llm_temperature < 0 or self.llm_temperature > 2:
            errors.append(
                f"LLM_TEMPERATURE must be between 0 and 2, got: {self.llm_temperature}"
            )
        
        if self.llm_max_tokens < 1:
            errors.append(
                f"LLM_MAX_TOKENS must be positive, got: {self.llm_max_tokens}"
            )
        
        if self.parse_cache_limit < 1:
            errors.append(
                f"PARSE_CACHE_LIMIT must be at least 1, got: {self.parse_cache_limit}"
            )
        
        if self.stream_update_interval < 0:
            errors.append(
                f"STREAM_UPDATE_INTERVAL cannot be negative, got: {self.stream_update_interval}"
            )
        
        return errors
    
    def __repr__(self) -> str:
        """Return string representation of config (hiding sensitive values)."""
        return (
            f"Config("
            f"api_key={'*' * 8 if self.google_api_key else 'NOT SET'}, "
            f"llm_model='{self.llm_model}', "
            f"conversations_dir='{self.conversations_dir}', "
            f"parse_cache_limit={self.parse_cache_limit})"
        )


# Global config instance (lazy loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get global configuration instance.
    
    Returns:
        Config instance loaded from environment.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
