"""
Logging module for application-wide logging configuration.

Provides dual output logging to both console and file, with
configurable log levels and formatted output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


# Log format constants
LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "watch_chat"

# Default log directory
DEFAULT_LOG_DIR = Path("logs")
DEFAULT_LOG_FILE = "app.log"

_initialized: bool = False


def setup_logger(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: str = DEFAULT_LOG_FILE
) -> logging.Logger:
    """
    Set up the root logger with console and file handlers.
    
    Configures logging to output INFO+ to console and DEBUG+ to file.
    Creates log directory if it doesn't exist.
    
    Args:
        log_level: Minimum log level for console output (DEBUG, INFO, WARNING, ERROR).
        log_dir: Directory for log files. Defaults to ./logs.
        log_file: Name of the log file. Defaults to app.log.
    
    Returns:
        Configured root logger instance.
    
    Example:
        >>> logger = setup_logger("DEBUG")
        >>> logger.info("Chat started")
    """
    global _initialized
    
    if _initialized:
        return logging.getLogger(ROOT_LOGGER_NAME)
    
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR
    
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    
    log_path = log_dir / log_file
    
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all levels
    
    # Prevent duplicate handlers
    if root_logger.handlers:
        root_logger.handlers.clear()
    
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    
    # Console handler (INFO+ by default, configurable)
    console_handler = logging.StreamHandler(sys.stdout)
    console_level = getattr(logging, log_level.upper(), logging.INFO)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    
    # File handler (DEBUG+ always)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    
    root_logger.info(f"Logger initialized - Console: {log_level}, File: DEBUG")
    root_logger.debug(f"Log file: {log_path.absolute()}")
    
    _initialized = True
    
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger that inherits from the root logger.
    
    Creates a child logger of the root 'watch_chat' logger,
    which inherits all handlers and configuration.
    
    Args:
        name: Name for the logger (typically __name__).
    
    Returns:
        Logger instance with the given name.
    
    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Streaming started")
    """
    if not _initialized:
        setup_logger()
    
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class LoggerMixin:
    """
    Mixin class to provide logging capability to any class.
    
    Adds a 'logger' property that returns a logger named after the class.
    
    Example:
        >>> class ChatSession(LoggerMixin):
        ...     def reset(self):
        ...         self.logger.info("Conversation reset")
    """
    
    @property
    def logger(self) -> logging.Logger:
        """Get logger named after this class."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


def log_processing_stats(
    logger: logging.Logger,
    operation: str,
    items_processed: int,
    duration_seconds: float,
    extra_info: Optional[dict] = None
) -> None:
    """
    Log standardized processing statistics.
    
    Args:
        logger: Logger instance to use.
        operation: Name of the operation performed.
        items_processed: Number of items processed.
        duration_seconds: Time taken in seconds.
        extra_info: Additional information to log.
    
    Example:
        >>> log_processing_stats(logger, "Reply stream", 42, 3.1)
    """
    rate = items_processed / duration_seconds if duration_seconds > 0 else 0
    
    message = (
        f"{operation} completed: "
        f"{items_processed} items in {duration_seconds:.2f}s "
        f"({rate:.2f} items/sec)"
    )
    
    if extra_info:
        extra_str = ", ".join(f"{k}={v}" for k, v in extra_info.items())
        message += f" [{extra_str}]"
    
    logger.info(message)
