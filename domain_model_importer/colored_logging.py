"""
Colored logging formatter for the domain model importer.

Console output of the import wizard uses different colors per level and
highlights progress, success and section messages.
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """
    Logging formatter that adds ANSI color codes to log messages.

    ERROR/CRITICAL are always red and WARNING always yellow; INFO and DEBUG
    messages are colored by the marker the ``log_*`` helpers prepend.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }

    SPECIAL_COLORS = {
        'success': '\033[92m',
        'progress': '\033[94m',
        'highlight': '\033[96m',
    }

    MARKERS = {
        'success': '✓ ',
        'progress': '→ ',
        'highlight': '• ',
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Initialize the colored formatter.

        Args:
            fmt: Log format string (uses default if None)
            use_colors: Whether to use colors; ignored when stderr is not a TTY
        """
        if fmt is None:
            fmt = "%(levelname)s: %(message)s"
        super().__init__(fmt)

        self.use_colors = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message

        if record.levelname in ('ERROR', 'CRITICAL', 'WARNING'):
            return f"{self.COLORS[record.levelname]}{formatted_message}{self.RESET}"

        kind = self.message_kind(record.getMessage())
        if kind == 'success':
            return f"{self.SPECIAL_COLORS['success']}{self.BOLD}{formatted_message}{self.RESET}"
        if kind in ('progress', 'highlight'):
            return f"{self.SPECIAL_COLORS[kind]}{formatted_message}{self.RESET}"
        if kind == 'section':
            return f"{self.BOLD}{self.SPECIAL_COLORS['highlight']}{formatted_message}{self.RESET}"
        if record.levelname == 'DEBUG':
            return f"{self.COLORS['DEBUG']}{formatted_message}{self.RESET}"
        return formatted_message

    @classmethod
    def message_kind(cls, message: str) -> Optional[str]:
        """Classify a message by the marker written by the log helpers."""
        for kind, marker in cls.MARKERS.items():
            if message.startswith(marker):
                return kind
        if message.strip().startswith('=') and len(message.strip()) > 20:
            return 'section'
        return None


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True) -> None:
    """
    Set up colored logging on the root logger.

    Args:
        level: Logging level (default: INFO)
        use_colors: Whether to use colors (default: True)
    """
    formatter = ColoredFormatter(use_colors=use_colors)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)


def log_success(logger: logging.Logger, message: str) -> None:
    """Log a success message with special formatting."""
    logger.info(f"{ColoredFormatter.MARKERS['success']}{message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    """Log a progress message with special formatting."""
    logger.info(f"{ColoredFormatter.MARKERS['progress']}{message}")


def log_highlight(logger: logging.Logger, message: str) -> None:
    """Log a highlighted message with special formatting."""
    logger.info(f"{ColoredFormatter.MARKERS['highlight']}{message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Log a section header."""
    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {section_name.upper()}")
    logger.info(separator)
