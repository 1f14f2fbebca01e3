from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from fastapi import Depends, FastAPI, HTTPException, status
from pydantic import BaseModel

from sheetbox.models.enums import ErrorCode
from sheetbox.models.machine import MachineSummary
from sheetbox.models.message import Message, MessageCreateRequest, ResolvedValue
from sheetbox.models.term import ResolveRequest, ResolveResponse
from sheetbox.services.machine_service import MachineService, UnknownSheetError
from sheetbox.utils.logging import setup_logging
from sheetbox.utils.pathing import ensure_runtime_directories


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    ensure_runtime_directories()
    app.state.machine_service = MachineService.from_file()
    yield


app = FastAPI(title="sheetbox API", version="0.1.0", lifespan=lifespan)


def _require_service(name: str):
    service = getattr(app.state, name, None)
    if service is None:
        raise RuntimeError(f"Service '{name}' not initialised.")
    return service


def get_machine_service() -> MachineService:
    return _require_service("machine_service")


def _payload(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


@app.get("/health")
async def health() -> dict[str, str]:
    """Lightweight health probe."""
    return {"status": "ok"}


@app.get("/machine", response_model=MachineSummary)
async def get_machine(
    machines: MachineService = Depends(get_machine_service),
) -> MachineSummary:
    return machines.summary()


@app.get("/sheets/{sheet_name}/inbox")
async def list_inbox(
    sheet_name: str,
    include_metadata: bool = False,
    machines: MachineService = Depends(get_machine_service),
) -> List[Dict[str, Any]]:
    try:
        return machines.list_inbox(sheet_name, include_metadata=include_metadata)
    except UnknownSheetError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.get("/outbox")
async def list_outbox(
    include_metadata: bool = False,
    machines: MachineService = Depends(get_machine_service),
) -> List[Dict[str, Any]]:
    return machines.list_outbox(include_metadata=include_metadata)


@app.post("/resolve", response_model=ResolveResponse)
async def resolve_reference(
    payload: ResolveRequest,
    machines: MachineService = Depends(get_machine_service),
) -> ResolveResponse:
    term = payload.to_term()
    try:
        result = machines.resolve(payload.sheet, term, payload.require_message_data)
    except UnknownSheetError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if ErrorCode.is_error(result):
        return ResolveResponse(kind=term.kind, error=ErrorCode.coerce(result).value)
    return ResolveResponse(kind=term.kind, value=_payload(result))


@app.post("/read", response_model=ResolvedValue)
async def read_reference(
    payload: ResolveRequest,
    machines: MachineService = Depends(get_machine_service),
) -> ResolvedValue:
    try:
        return machines.read(payload.sheet, payload.to_term())
    except UnknownSheetError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/messages", response_model=Message, status_code=status.HTTP_201_CREATED)
async def compose_message(
    payload: MessageCreateRequest,
    machines: MachineService = Depends(get_machine_service),
) -> Message:
    message = machines.compose(payload.value)
    if message is None:
        raise HTTPException(status_code=404, detail="No message for the given value.")
    if isinstance(message, ErrorCode):
        raise HTTPException(status_code=422, detail=message.value)
    return message
