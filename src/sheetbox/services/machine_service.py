"""Machine loading and read-only views."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from sheetbox import constants
from sheetbox.clients.boxes import Inbox, Outbox
from sheetbox.clients.machine import Machine, Sheet
from sheetbox.models.enums import ErrorCode
from sheetbox.models.machine import MachineSnapshot, MachineSummary, SheetSummary
from sheetbox.models.message import Message, ResolvedValue
from sheetbox.models.term import ReferenceTerm
from sheetbox.services.reference_resolver import EvaluationContext, ReferenceResolver

LOG = logging.getLogger(__name__)


class MachineSnapshotError(RuntimeError):
    """Raised when a machine snapshot cannot be loaded."""


class UnknownSheetError(RuntimeError):
    """Raised when a request names a sheet the machine does not have."""


def build_machine(snapshot: MachineSnapshot) -> Machine:
    """Materialize a machine with its sheets, inboxes and outbox."""
    machine = Machine(locale=snapshot.locale, outbox=Outbox(snapshot.outbox))
    for sheet_snapshot in snapshot.sheets:
        sheet = Sheet(sheet_snapshot.name, Inbox(sheet_snapshot.inbox))
        try:
            machine.add_sheet(sheet)
        except ValueError as exc:
            raise MachineSnapshotError(str(exc)) from exc

        if sheet_snapshot.current_message_id:
            current = sheet.inbox.peek(sheet_snapshot.current_message_id)
            if current is None:
                raise MachineSnapshotError(
                    f"Current message '{sheet_snapshot.current_message_id}' is not in the inbox of '{sheet.name}'."
                )
            sheet.attach_message(current)
        for message_id in sheet_snapshot.processed_message_ids:
            processed = sheet.inbox.peek(message_id)
            if processed is None:
                LOG.warning("Processed message %s not found in inbox of %s", message_id, sheet.name)
                continue
            sheet.mark_processed(processed)
    return machine


def load_snapshot(path: Union[str, Path]) -> MachineSnapshot:
    snapshot_path = Path(path)
    try:
        raw = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise MachineSnapshotError(f"Machine file '{snapshot_path}' not found.") from exc
    except json.JSONDecodeError as exc:
        raise MachineSnapshotError(f"Machine file '{snapshot_path}' is not valid JSON: {exc}") from exc
    try:
        return MachineSnapshot.model_validate(raw)
    except ValidationError as exc:
        raise MachineSnapshotError(f"Machine file '{snapshot_path}' is invalid: {exc}") from exc


class MachineService:
    """Holds one machine and answers read-only queries against it."""

    def __init__(self, machine: Optional[Machine] = None) -> None:
        self.machine = machine or Machine()
        self.resolver = ReferenceResolver(self.machine)

    @classmethod
    def from_file(cls, path: Union[str, Path, None] = None) -> "MachineService":
        snapshot_path = Path(path) if path else constants.MACHINE_FILE
        if path is None and not snapshot_path.exists():
            LOG.info("No machine file at %s, starting with an empty machine", snapshot_path)
            return cls()
        machine = build_machine(load_snapshot(snapshot_path))
        LOG.info("Loaded machine from %s with %d sheet(s)", snapshot_path, len(machine.sheets))
        return cls(machine)

    def summary(self) -> MachineSummary:
        return MachineSummary(
            locale=self.resolver.get_locale(),
            outbox_size=len(self.machine.outbox),
            sheets=[
                SheetSummary(
                    name=sheet.name,
                    inbox_size=len(sheet.inbox),
                    current_message_id=sheet.current_message.id if sheet.current_message else None,
                )
                for sheet in self.machine.sheets
            ],
        )

    def get_sheet(self, name: str) -> Sheet:
        sheet = self.machine.get_stream_sheet_by_name(name)
        if sheet is None:
            raise UnknownSheetError(f"Sheet '{name}' not found.")
        return sheet

    def context(self, sheet_name: str) -> EvaluationContext:
        return EvaluationContext(self.get_sheet(sheet_name))

    def list_inbox(self, sheet_name: str, include_metadata: bool = False) -> List[Dict[str, Any]]:
        return self.resolver.get_messages_from_box(self.get_sheet(sheet_name).inbox, include_metadata)

    def list_outbox(self, include_metadata: bool = False) -> List[Dict[str, Any]]:
        return self.resolver.get_messages_from_box(self.machine.outbox, include_metadata)

    def resolve(self, sheet_name: str, term: ReferenceTerm, require_message_data: bool = True) -> Any:
        return self.resolver.resolve_or_value(term, self.context(sheet_name), require_message_data)

    def read(self, sheet_name: str, term: ReferenceTerm) -> ResolvedValue:
        return self.resolver.read_message_value(term, self.context(sheet_name))

    def compose(self, value: Any) -> Union[Message, ErrorCode, None]:
        """Build a new message from a box path or a literal value."""
        return self.resolver.create_message_from_term(ReferenceTerm.literal(value))
