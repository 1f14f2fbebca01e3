"""In-memory message boxes."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional

from sheetbox.models.message import Message

LOG = logging.getLogger(__name__)


class MessageBox:
    """Ordered, id-addressable message store safe for concurrent readers.

    Every read and write happens under one lock and stores whole message
    references, so a reader sees either the old or the new message.
    """

    def __init__(self, messages: Optional[Iterable[Message]] = None) -> None:
        self._lock = threading.RLock()
        self._messages: Dict[str, Message] = {}
        for message in messages or ():
            self.put(message)

    def put(self, message: Message) -> Message:
        """Add a message, replacing any message stored under the same id."""
        with self._lock:
            self._messages[message.id] = message
        LOG.debug("%s stored message %s", type(self).__name__, message.id)
        return message

    def peek(self, message_id: Optional[str] = None) -> Optional[Message]:
        """Return the message with ``message_id`` or the top message when omitted."""
        with self._lock:
            if message_id is None or message_id == "":
                return next(iter(self._messages.values()), None)
            return self._messages.get(str(message_id))

    def remove(self, message_id: str) -> Optional[Message]:
        with self._lock:
            return self._messages.pop(str(message_id), None)

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    @property
    def messages(self) -> List[Message]:
        with self._lock:
            return list(self._messages.values())

    def __contains__(self, message_id: object) -> bool:
        with self._lock:
            return str(message_id) in self._messages

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)


class Inbox(MessageBox):
    """Per-sheet message queue."""


class Outbox(MessageBox):
    """Machine-wide message store addressed only by id."""

    def peek(self, message_id: Optional[str] = None) -> Optional[Message]:
        if message_id is None or message_id == "":
            return None
        return super().peek(message_id)
