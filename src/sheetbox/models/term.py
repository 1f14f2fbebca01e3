"""Reference term models."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from sheetbox.models.enums import TermKind
from sheetbox.utils import jsonpath, terms


class ReferenceTerm(BaseModel):
    """A formula term already classified by the term parser."""

    value: Any = None
    kind: TermKind = TermKind.PLAIN_VALUE

    @classmethod
    def from_function(cls, function_name: str, *args: Any) -> "ReferenceTerm":
        """Build a term for a box function call such as ``INBOXDATA("S1", "", "x")``."""
        kind = terms.classify(function_name)
        if not kind.is_box_reference:
            return cls(value=args[0] if args else None, kind=kind)
        # segments stay a list so brackets inside an argument survive
        return cls(value=list(args), kind=kind)

    @classmethod
    def literal(cls, value: Any) -> "ReferenceTerm":
        return cls(value=value, kind=TermKind.PLAIN_VALUE)

    @property
    def path(self) -> List[Any]:
        return jsonpath.parse(self.value)


class ResolveRequest(BaseModel):
    """Reference resolution request evaluated on behalf of a sheet."""

    sheet: str
    function: Optional[str] = None
    args: List[Any] = Field(default_factory=list)
    term: Optional[ReferenceTerm] = None
    require_message_data: bool = True

    def to_term(self) -> ReferenceTerm:
        if self.term is not None:
            return self.term
        return ReferenceTerm.from_function(self.function or "", *self.args)


class ResolveResponse(BaseModel):
    kind: TermKind
    value: Any = None
    error: Optional[str] = None
