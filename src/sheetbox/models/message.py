"""Message models."""

from __future__ import annotations

import copy
import uuid
from typing import Any, Dict, Optional, Sequence

from pydantic import BaseModel, Field

from sheetbox.utils import jsonpath


def generate_message_id() -> str:
    """Return a random message identifier."""
    return uuid.uuid4().hex


class Message(BaseModel):
    """Envelope stored in an inbox or the outbox.

    Messages are immutable by convention. Anything handed to another context
    must go through :meth:`clone`, because sheets recognise the message they
    already processed by identity.
    """

    id: str = Field(default_factory=generate_message_id)
    data: Dict[Any, Any] = Field(default_factory=dict)
    metadata: Dict[Any, Any] = Field(default_factory=dict)

    def clone(self) -> "Message":
        """Return an owned deep copy that keeps the identifier."""
        return Message(
            id=self.id,
            data=copy.deepcopy(self.data),
            metadata=copy.deepcopy(self.metadata),
        )

    def get_data_at(self, path: Optional[Sequence[Any]] = None) -> Any:
        return jsonpath.query(path or [], self.data)

    def get_metadata_at(self, path: Optional[Sequence[Any]] = None) -> Any:
        return jsonpath.query(path or [], self.metadata)


class MessageView(BaseModel):
    """Structural view of a message exposing both sections."""

    data: Dict[Any, Any]
    metadata: Dict[Any, Any]

    @classmethod
    def of(cls, message: Message) -> "MessageView":
        return cls(data=copy.deepcopy(message.data), metadata=copy.deepcopy(message.metadata))


class ResolvedValue(BaseModel):
    """Value read from a message together with its display key."""

    key: Optional[str] = None
    value: Any = None
    is_processed: bool = False


class MessageCreateRequest(BaseModel):
    value: Any = None
