"""
Centralized logging configuration for sessionkit.

Provides:
- Console logging with colored, prefixed output by component area
- File logging with timestamps for post-mortem analysis
- Logger factory for the different components
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# ANSI color codes for console output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"


# Area-specific colors and prefixes
AREA_CONFIG = {
    "main": {"color": Colors.BRIGHT_CYAN, "prefix": "SESSIONKIT.main"},
    "session.client": {"color": Colors.BRIGHT_GREEN, "prefix": "SESSIONKIT.session.client"},
    "session.store": {"color": Colors.BRIGHT_MAGENTA, "prefix": "SESSIONKIT.session.store"},
    "persistence": {"color": Colors.BLUE, "prefix": "SESSIONKIT.persistence"},
}

# Default for unknown areas
DEFAULT_AREA_CONFIG = {"color": Colors.WHITE, "prefix": "SESSIONKIT"}


class ColoredConsoleFormatter(logging.Formatter):
    """Custom formatter that adds colors and area prefixes to console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.RESET,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(self, area: str = "main"):
        super().__init__()
        config = AREA_CONFIG.get(area, DEFAULT_AREA_CONFIG)
        self.area_color = config["color"]
        self.area_prefix = config["prefix"]

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        # Format: [SESSIONKIT.area] HH:MM:SS LEVEL: message
        prefix = f"{self.area_color}[{self.area_prefix}]{Colors.RESET}"
        time_str = f"{Colors.DIM}{timestamp}{Colors.RESET}"
        level_str = f"{level_color}{record.levelname:<8}{Colors.RESET}"

        message = f"{prefix} {time_str} {level_str} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


class FileFormatter(logging.Formatter):
    """Formatter for file output with full timestamps and structured format."""

    def __init__(self, area: str = "main"):
        super().__init__()
        config = AREA_CONFIG.get(area, DEFAULT_AREA_CONFIG)
        self.area_prefix = config["prefix"]

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        extra = ""
        if hasattr(record, "operation"):
            extra += f" operation={record.operation}"
        if hasattr(record, "user_id"):
            extra += f" user_id={record.user_id}"

        # Format: TIMESTAMP [AREA] LEVEL: message (extra)
        message = f"{timestamp} [{self.area_prefix}] {record.levelname}: {record.getMessage()}{extra}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


_log_dir: Optional[Path] = None
_log_path: Optional[Path] = None
_console_level: int = logging.INFO
_configured: dict[str, logging.Logger] = {}


def _configure(logger: logging.Logger, area: str) -> None:
    """(Re)attach the console and, if enabled, the file handler to a logger."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)

    # stdout belongs to the CLI's JSON output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level)
    console_handler.setFormatter(ColoredConsoleFormatter(area))
    logger.addHandler(console_handler)

    if _log_path:
        file_handler = logging.FileHandler(_log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter(area))
        logger.addHandler(file_handler)

    # Don't propagate to root to avoid duplicate logs
    logger.propagate = False


def setup_logging(
    log_dir: Optional[str] = None,
    console_level: int = logging.INFO,
) -> Optional[Path]:
    """
    Initialize the logging system.

    Loggers handed out by get_logger() before this call are reconfigured,
    so modules can keep creating their loggers at import time.

    Args:
        log_dir: Directory for log files. File logging stays off when omitted.
        console_level: Minimum level for console output

    Returns:
        Path to the log directory, or None when logging to console only
    """
    global _log_dir, _log_path, _console_level

    _console_level = console_level

    if log_dir:
        _log_dir = Path(log_dir)
        _log_dir.mkdir(parents=True, exist_ok=True)

        log_filename = datetime.now().strftime("sessionkit_%Y%m%d_%H%M%S.log")
        _log_path = _log_dir / log_filename

        latest_link = _log_dir / "latest.log"
        try:
            if latest_link.is_symlink() or latest_link.exists():
                latest_link.unlink()
            latest_link.symlink_to(log_filename)
        except OSError:
            pass  # Symlinks may not work on all systems

    for area, logger in _configured.items():
        _configure(logger, area)

    if _log_path:
        get_logger("main").info(f"Logging initialized. Log file: {_log_path}")

    return _log_dir


def get_logger(area: str = "main") -> logging.Logger:
    """
    Get a logger for a specific component area.

    Args:
        area: The component area (e.g., "session.client", "session.store")

    Returns:
        Configured logger instance

    Example:
        logger = get_logger("session.store")
        logger.info("Session restored")
        # Output: [SESSIONKIT.session.store] 14:32:15 INFO     Session restored
    """
    logger = logging.getLogger(f"sessionkit.{area}")

    if area not in _configured:
        _configure(logger, area)
        _configured[area] = logger

    return logger


def get_log_dir() -> Optional[Path]:
    """Get the current log directory path."""
    return _log_dir
