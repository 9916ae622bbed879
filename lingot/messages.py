"""Thread-safe queue of user-facing messages (errors, warnings, notices)."""

from __future__ import annotations

import sys
import threading
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Deque, Optional

DEFAULT_CAPACITY = 4


class MessageType(IntEnum):
    """Severity of a queued message."""

    ERROR = 0
    WARNING = 1
    INFO = 2


@dataclass(frozen=True)
class Message:
    """A message waiting to be shown to the user."""

    text: str
    message_type: MessageType
    error_code: int = 0


class MessageQueue:
    """Bounded FIFO of messages that drops duplicates and overflow.

    Errors and warnings are echoed to standard error when they are queued.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: Deque[Message] = deque()
        self._lock = threading.Lock()

    def add(self, text: str, message_type: MessageType, error_code: int = 0) -> bool:
        """Queue a message; return False if it was dropped."""
        message_type = MessageType(message_type)
        with self._lock:
            if len(self._items) >= self.capacity:
                print("warning: the messages queue is full!", file=sys.stderr)
                return False
            if any(item.text == text for item in self._items):
                print(f"warning: duplicated message: {text}", file=sys.stderr)
                return False
            self._items.append(Message(text, message_type, error_code))
        if message_type is not MessageType.INFO:
            label = "error" if message_type is MessageType.ERROR else "warning"
            print(f"{label}: {text}", file=sys.stderr)
        return True

    def add_error(self, text: str) -> bool:
        return self.add(text, MessageType.ERROR, 0)

    def add_error_with_code(self, text: str, error_code: int) -> bool:
        return self.add(text, MessageType.ERROR, error_code)

    def add_warning(self, text: str) -> bool:
        return self.add(text, MessageType.WARNING, 0)

    def add_info(self, text: str) -> bool:
        return self.add(text, MessageType.INFO, 0)

    def get(self) -> Optional[Message]:
        """Remove and return the oldest message, or None if the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)