"""Classification of formula terms into box-reference kinds."""

from __future__ import annotations

from typing import Dict, Optional

from sheetbox.models.enums import TermKind

FUNCTION_KINDS: Dict[str, TermKind] = {
    "INBOX": TermKind.INBOX_CURRENT,
    "INBOXDATA": TermKind.INBOX_DATA,
    "INBOXMETADATA": TermKind.INBOX_METADATA,
    "OUTBOX": TermKind.OUTBOX_CURRENT,
    "OUTBOXDATA": TermKind.OUTBOX_DATA,
}


def classify(function_name: Optional[str]) -> TermKind:
    """Return the term kind for a formula function name."""
    if not function_name:
        return TermKind.PLAIN_VALUE
    return FUNCTION_KINDS.get(function_name.strip().upper(), TermKind.PLAIN_VALUE)


def is_box_term(term) -> bool:
    return term is not None and term.kind.is_box_reference


def is_data_term(term) -> bool:
    """Data/metadata references carry an extraction sub-path after their address."""
    return term is not None and term.kind in (
        TermKind.INBOX_DATA,
        TermKind.INBOX_METADATA,
        TermKind.OUTBOX_DATA,
    )
