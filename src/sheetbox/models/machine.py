"""Machine snapshot and summary models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from sheetbox import constants
from sheetbox.models.message import Message


class SheetSnapshot(BaseModel):
    """Serialized sheet state used to seed a machine."""

    name: str
    inbox: List[Message] = Field(default_factory=list)
    current_message_id: Optional[str] = None
    processed_message_ids: List[str] = Field(default_factory=list)


class MachineSnapshot(BaseModel):
    locale: str = constants.DEFAULT_LOCALE
    outbox: List[Message] = Field(default_factory=list)
    sheets: List[SheetSnapshot] = Field(default_factory=list)


class SheetSummary(BaseModel):
    name: str
    inbox_size: int
    current_message_id: Optional[str] = None


class MachineSummary(BaseModel):
    """Read-only overview of a loaded machine."""

    locale: str
    outbox_size: int
    sheets: List[SheetSummary]
