"""Sheet and machine object graph."""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from sheetbox import constants
from sheetbox.clients.boxes import Inbox, Outbox
from sheetbox.models.message import Message

LOG = logging.getLogger(__name__)


class Sheet:
    """A stream sheet owning one inbox and the message it currently processes."""

    def __init__(self, name: str, inbox: Optional[Inbox] = None) -> None:
        self.name = name
        self.inbox = inbox if inbox is not None else Inbox()
        self.machine: Optional["Machine"] = None
        self.current_message: Optional[Message] = None
        # keyed by id() so that processed state follows the object, not its message id
        self._processed: Dict[int, Message] = {}

    def attach_message(self, message: Optional[Message]) -> None:
        """Make ``message`` the message this sheet is processing."""
        self.current_message = message

    def mark_processed(self, message: Optional[Message] = None) -> None:
        target = message or self.current_message
        if target is not None:
            self._processed[id(target)] = target

    def is_message_processed(self, message: Optional[Message]) -> bool:
        return message is not None and self._processed.get(id(message)) is message

    def get_message(self, message_id: Optional[str] = None) -> Optional[Message]:
        """Return the current message when no id is given, else the inbox message."""
        if message_id is None or message_id == "":
            return self.current_message
        return self.inbox.peek(message_id)

    def __repr__(self) -> str:
        return f"Sheet(name={self.name!r}, inbox={len(self.inbox)})"


class Machine:
    """Owns the outbox and the named sheets."""

    def __init__(self, locale: Optional[str] = None, outbox: Optional[Outbox] = None) -> None:
        self.locale = locale or constants.DEFAULT_LOCALE
        self.outbox = outbox if outbox is not None else Outbox()
        self._lock = threading.RLock()
        self._sheets: Dict[str, Sheet] = {}

    def add_sheet(self, sheet: Sheet) -> Sheet:
        with self._lock:
            if sheet.name in self._sheets:
                raise ValueError(f"Sheet '{sheet.name}' already exists.")
            sheet.machine = self
            self._sheets[sheet.name] = sheet
        return sheet

    def get_stream_sheet_by_name(self, name: Optional[str]) -> Optional[Sheet]:
        if not name:
            return None
        with self._lock:
            return self._sheets.get(str(name))

    @property
    def sheets(self) -> List[Sheet]:
        with self._lock:
            return list(self._sheets.values())
