"""Resolution of box reference terms against live machine state."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sheetbox import constants
from sheetbox.clients.boxes import MessageBox
from sheetbox.clients.machine import Machine, Sheet
from sheetbox.models.enums import ErrorCode, TermKind
from sheetbox.models.message import Message, MessageView, ResolvedValue
from sheetbox.models.term import ReferenceTerm
from sheetbox.services.box_locator import BoxLocator
from sheetbox.services.value_extractor import ValueExtractor
from sheetbox.utils import jsonpath, terms

LOG = logging.getLogger(__name__)

Resolution = Union[Any, MessageView, ErrorCode]


class EvaluationContext:
    """The sheet evaluating a formula, and through it, its machine."""

    def __init__(self, sheet: Sheet) -> None:
        self.sheet = sheet

    @property
    def machine(self) -> Optional[Machine]:
        return self.sheet.machine


def _segment(path: Sequence[Any], index: int) -> Optional[str]:
    if len(path) <= index:
        return None
    value = path[index]
    return None if value is None or value == "" else str(value)


class ReferenceResolver:
    """Turns classified reference terms into values, messages or error codes.

    The resolver only reads boxes. It keeps no state between calls, so the
    result depends solely on the term and the box contents at call time.
    """

    def __init__(
        self,
        machine: Machine,
        locator: Optional[BoxLocator] = None,
        extractor: Optional[ValueExtractor] = None,
    ) -> None:
        self.machine = machine
        self.locator = locator or BoxLocator(machine)
        self.extractor = extractor or ValueExtractor()

    def resolve(
        self,
        term: ReferenceTerm,
        context: EvaluationContext,
        require_message_data: bool = True,
    ) -> Resolution:
        """Resolve ``term`` for the sheet in ``context``."""
        kind = term.kind
        if kind is TermKind.PLAIN_VALUE:
            return term.value

        path = term.path
        if kind is TermKind.INBOX_CURRENT:
            message = self.locator.locate_inbox_message(context.sheet, _segment(path, 0), _segment(path, 1))
            result = MessageView.of(message) if message else ErrorCode.NO_MESSAGE
        elif kind is TermKind.OUTBOX_CURRENT:
            message = self.locator.locate_outbox_message(_segment(path, 0))
            result = self.extractor.extract_data(message, []) if message else ErrorCode.NO_MESSAGE
        elif kind is TermKind.OUTBOX_DATA:
            message = self.locator.locate_outbox_message(_segment(path, 0))
            result = self.extractor.extract_data(message, path[1:]) if message else ErrorCode.NO_MESSAGE
        elif kind in (TermKind.INBOX_DATA, TermKind.INBOX_METADATA):
            owner, message = self._inbox_message(context.sheet, path)
            if message is None:
                result = ErrorCode.NO_MESSAGE
            else:
                result = self.extractor.extract(
                    owner,
                    message,
                    path[2:],
                    metadata=kind is TermKind.INBOX_METADATA,
                ).value
        else:  # pragma: no cover - TermKind is closed
            raise AssertionError(f"Unhandled term kind {kind!r}")

        if result is ErrorCode.NO_MESSAGE:
            LOG.debug("No message for %s reference %s on sheet %s", kind.value, jsonpath.to_path(path), context.sheet.name)
        if require_message_data and result is None:
            return ErrorCode.NO_MESSAGE_DATA
        return result

    def resolve_or_value(
        self,
        term: ReferenceTerm,
        context: EvaluationContext,
        require_message_data: bool = True,
    ) -> Resolution:
        """Resolve box references; any other term yields its literal value."""
        if terms.is_box_term(term):
            return self.resolve(term, context, require_message_data)
        return term.value

    def read_message_value(self, term: ReferenceTerm, context: EvaluationContext) -> ResolvedValue:
        """Read a labelled value for data and metadata references."""
        path = term.path
        if not terms.is_data_term(term):
            return ResolvedValue(key=self.extractor.effective_key(path), value=ErrorCode.VALUE)
        if term.kind is TermKind.OUTBOX_DATA:
            message = self.locator.locate_outbox_message(_segment(path, 0))
            return self.extractor.extract(None, message, path[1:], inbox=False)
        owner, message = self._inbox_message(context.sheet, path)
        return self.extractor.extract(
            owner,
            message,
            path[2:],
            metadata=term.kind is TermKind.INBOX_METADATA,
        )

    def create_message_from_term(self, term: ReferenceTerm) -> Union[Message, ErrorCode, None]:
        """Build a message for a new context from a box reference or a plain value.

        Box messages are always cloned: sheets detect their already processed
        message by identity, so handing out the stored object would make it
        look processed elsewhere.
        """
        # lists and dicts are values; only box terms and path strings address a box
        path = term.path if terms.is_box_term(term) or isinstance(term.value, str) else []
        if path:
            message = self.locator.locate_ambiguous(path)
            return message.clone() if message else None
        return self.create_message_from_value(term.value)

    @staticmethod
    def create_message_from_value(value: Any) -> Union[Message, ErrorCode, None]:
        if value is None:
            return None
        if ErrorCode.is_error(value):
            return ErrorCode.coerce(value)
        if isinstance(value, dict):
            return Message(data=dict(value))
        if isinstance(value, (list, tuple)):
            return Message(data={str(index): item for index, item in enumerate(value)})
        return Message(data={"value": value})

    def get_locale(self, context: Optional[EvaluationContext] = None) -> str:
        machine = context.machine if context is not None else self.machine
        locale = machine.locale if machine is not None else None
        return locale or constants.DEFAULT_LOCALE

    @staticmethod
    def get_messages_from_box(box: MessageBox, include_metadata: bool = False) -> List[Dict[str, Any]]:
        """Return the data section of every message, optionally merged with metadata."""
        payloads = []
        for message in box.messages:
            payload = dict(message.data)
            if include_metadata:
                payload.update(message.metadata)
            payloads.append(payload)
        return payloads

    def _inbox_message(self, sheet: Sheet, path: Sequence[Any]) -> Tuple[Optional[Sheet], Optional[Message]]:
        sheet_name = _segment(path, 0)
        owner = self.locator.get_stream_sheet_by_name(sheet_name, sheet)
        if owner is None:
            return None, None
        return owner, self.locator.locate_inbox_message(owner, None, _segment(path, 1))
