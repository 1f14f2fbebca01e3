"""Shared enums for sheetbox models."""

from __future__ import annotations

from enum import Enum
from typing import Any


class TermKind(str, Enum):
    PLAIN_VALUE = "PLAIN_VALUE"
    INBOX_CURRENT = "INBOX_CURRENT"
    INBOX_DATA = "INBOX_DATA"
    INBOX_METADATA = "INBOX_METADATA"
    OUTBOX_CURRENT = "OUTBOX_CURRENT"
    OUTBOX_DATA = "OUTBOX_DATA"

    @property
    def is_box_reference(self) -> bool:
        return self is not TermKind.PLAIN_VALUE


class ErrorCode(str, Enum):
    """Error codes surfaced as cell values."""

    NO_MESSAGE = "#NO_MSG"
    NO_MESSAGE_DATA = "#NO_MSG_DATA"
    VALUE = "#VALUE!"

    @classmethod
    def is_error(cls, value: Any) -> bool:
        """Return True for error members and for their raw string codes."""
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in cls._value2member_map_

    @classmethod
    def coerce(cls, value: Any) -> "ErrorCode":
        return value if isinstance(value, cls) else cls(value)
