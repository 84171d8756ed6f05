"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""

import logging


class LogLevel:
    """Log level constants, aligned with the standard `logging` levels.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return logging.getLevelName(level)

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns INFO if invalid."""
        return cls._from_string.get(level_str.lower(), cls.INFO)


# Streaming configuration
RENDER_INTERVAL = 0.05  # Seconds between re-renders of a streaming message

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in input history

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Notifications
NOTIFY_TIMEOUT = 3
ERROR_NOTIFY_TIMEOUT = 5
