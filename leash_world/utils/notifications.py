"""User-facing notification buffer."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Tuple
import logging

logger = logging.getLogger(__name__)

# Keep the last 100 messages for the CLI to show
_HISTORY_LEN = 100

_LEVELS = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class Notifications:
    """Collect info/warn/error messages meant for the person at the keyboard."""

    def __init__(self, maxlen: int = _HISTORY_LEN) -> None:
        self._messages: Deque[Tuple[str, str]] = deque(maxlen=maxlen)

    def _push(self, level: str, message: str) -> None:
        logger.log(_LEVELS[level], message)
        self._messages.append((level, message))

    def info(self, message: str) -> None:
        self._push("info", message)

    def warn(self, message: str) -> None:
        self._push("warn", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    def drain(self) -> List[Tuple[str, str]]:
        """Return and clear the buffered ``(level, message)`` pairs."""

        messages = list(self._messages)
        self._messages.clear()
        return messages

    def __len__(self) -> int:
        return len(self._messages)


# Shared buffer used when callers do not supply their own.
notifications = Notifications()


__all__ = ["Notifications", "notifications"]
