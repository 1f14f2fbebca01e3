"""Value extraction from message sections."""

from __future__ import annotations

import copy
from typing import Any, Optional, Sequence

from sheetbox import constants
from sheetbox.clients.machine import Sheet
from sheetbox.models.message import Message, ResolvedValue


def _detach(value: Any) -> Any:
    """Copy containers so callers cannot reach into a stored message."""
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


class ValueExtractor:
    """Reads data and metadata values, hiding values of processed inbox messages."""

    def extract_data(self, message: Message, sub_path: Sequence[Any]) -> Any:
        return _detach(message.get_data_at(list(sub_path)))

    def extract_metadata(self, message: Message, sub_path: Sequence[Any]) -> Any:
        return _detach(message.get_metadata_at(list(sub_path)))

    def is_suppressed(self, sheet: Optional[Sheet], message: Message) -> bool:
        """Processed messages are consumed and must not leak their values."""
        return sheet is not None and sheet.is_message_processed(message)

    @staticmethod
    def effective_key(sub_path: Sequence[Any], metadata: bool = False) -> str:
        last = sub_path[-1] if sub_path else None
        if last is None or last == "":
            return constants.METADATA_KEY if metadata else constants.DATA_KEY
        return str(last)

    def extract(
        self,
        owner: Optional[Sheet],
        message: Optional[Message],
        sub_path: Sequence[Any],
        *,
        metadata: bool = False,
        inbox: bool = True,
    ) -> ResolvedValue:
        """Extract a labelled value; ``owner`` is the sheet whose inbox holds ``message``."""
        key = self.effective_key(sub_path, metadata)
        if message is None:
            return ResolvedValue(key=key)
        if inbox and self.is_suppressed(owner, message):
            return ResolvedValue(key=key, is_processed=True)
        if metadata:
            value = self.extract_metadata(message, sub_path)
        else:
            value = self.extract_data(message, sub_path)
        return ResolvedValue(key=key, value=value)
