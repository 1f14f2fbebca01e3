from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

from sheetbox import constants
from sheetbox.api import main as api_main
from sheetbox.clients.boxes import Inbox
from sheetbox.clients.machine import Machine, Sheet
from sheetbox.models.message import Message
from sheetbox.services.machine_service import MachineService
from sheetbox.services.reference_resolver import EvaluationContext, ReferenceResolver


@pytest.fixture(autouse=True)
def temp_runtime_dirs(tmp_path, monkeypatch):
    """Redirect runtime directories into a temp location."""
    home = tmp_path / "runtime" / "home"
    mapping = {
        "HOME_DIR": home,
        "LOG_DIR": home / "logs",
        "MACHINES_DIR": home / "machines",
        "MACHINE_FILE": home / "machines" / "machine.json",
    }

    for name, path in mapping.items():
        monkeypatch.setattr(constants, name, path)
    yield


@pytest.fixture
def current_message() -> Message:
    return Message(id="m1", data={"x": 5, "customer": {"name": "Ada"}}, metadata={"ts": 100})


@pytest.fixture
def machine(current_message) -> Machine:
    """Two sheets and an outbox; Sheet1 is processing m1, Sheet2 has no current message."""
    machine = Machine(locale="de")
    sheet1 = machine.add_sheet(
        Sheet(
            "Sheet1",
            Inbox(
                [
                    Message(id="m0", data={"x": 1}, metadata={"ts": 50}),
                    current_message,
                ]
            ),
        )
    )
    sheet1.attach_message(current_message)
    machine.add_sheet(Sheet("Sheet2", Inbox([Message(id="m2", data={"items": [10, 20]})])))
    machine.outbox.put(Message(id="o1", data={"total": 42, "lines": [{"sku": "A"}]}, metadata={"source": "Sheet1"}))
    return machine


@pytest.fixture
def sheet1(machine) -> Sheet:
    return machine.get_stream_sheet_by_name("Sheet1")


@pytest.fixture
def sheet2(machine) -> Sheet:
    return machine.get_stream_sheet_by_name("Sheet2")


@pytest.fixture
def resolver(machine) -> ReferenceResolver:
    return ReferenceResolver(machine)


@pytest.fixture
def context(sheet1) -> EvaluationContext:
    return EvaluationContext(sheet1)


@pytest.fixture
def machine_service(machine) -> MachineService:
    return MachineService(machine)


@pytest.fixture
def api_client(machine_service):
    app = api_main.app

    original_state = getattr(app.state, "machine_service", None)
    app.state.machine_service = machine_service

    original_overrides = app.dependency_overrides.copy()
    original_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def noop_lifespan(_app):
        yield

    app.router.lifespan_context = noop_lifespan
    app.dependency_overrides[api_main.get_machine_service] = lambda: machine_service

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = original_overrides
    app.router.lifespan_context = original_lifespan

    if original_state is None:
        try:
            delattr(app.state, "machine_service")
        except AttributeError:
            pass
    else:
        app.state.machine_service = original_state
