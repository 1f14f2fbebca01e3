"""Lookup of inbox and outbox messages by path."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from sheetbox.clients.boxes import Inbox, Outbox
from sheetbox.clients.machine import Machine, Sheet
from sheetbox.models.message import Message

LOG = logging.getLogger(__name__)


class BoxLocator:
    """Finds the box and message a reference addresses.

    Missing sheets and messages are reported as ``None``; turning them into
    error codes is left to the resolver.
    """

    def __init__(self, machine: Machine) -> None:
        self.machine = machine

    def get_stream_sheet_by_name(self, name: Optional[str], sheet: Optional[Sheet]) -> Optional[Sheet]:
        """Return the named sheet, or ``sheet`` itself when no name is given."""
        if name:
            return self.machine.get_stream_sheet_by_name(name)
        return sheet

    def get_inbox(self, sheet: Optional[Sheet], sheet_name: Optional[str] = None) -> Optional[Inbox]:
        target = self.get_stream_sheet_by_name(sheet_name, sheet)
        return target.inbox if target else None

    def get_outbox(self) -> Outbox:
        return self.machine.outbox

    def locate_inbox_message(
        self,
        sheet: Optional[Sheet],
        sheet_name: Optional[str] = None,
        message_id: Optional[str] = None,
    ) -> Optional[Message]:
        """Return the addressed inbox message, or the sheet's current one when no id is given."""
        target = self.get_stream_sheet_by_name(sheet_name, sheet)
        if target is None:
            LOG.debug("No sheet named %r for inbox lookup", sheet_name)
            return None
        # the current message need not be the top of the inbox
        return target.get_message(message_id)

    def locate_outbox_message(self, message_id: Optional[str]) -> Optional[Message]:
        return self.machine.outbox.peek(message_id)

    def locate_ambiguous(self, path: Sequence[Any]) -> Optional[Message]:
        """Resolve a raw path that may address either box.

        A single segment is tried as an outbox id first. Otherwise, or when the
        outbox has no such id, the path is read as ``[sheetName, messageId]``.
        Inbox and outbox ids are not guaranteed to be disjoint, so a colliding
        id always resolves to the outbox message.
        """
        message = None
        if len(path) == 1:
            message = self.locate_outbox_message(path[0])
        if message is not None:
            return message
        sheet_name = path[0] if len(path) > 0 else None
        message_id = path[1] if len(path) > 1 else None
        if not sheet_name:
            return None
        return self.locate_inbox_message(None, sheet_name, message_id)
