import threading

import pytest

from sheetbox.clients.boxes import Inbox, MessageBox, Outbox
from sheetbox.clients.machine import Machine, Sheet
from sheetbox.models.message import Message


def test_message_box_peek_by_id_and_top():
    first = Message(id="a", data={"n": 1})
    second = Message(id="b", data={"n": 2})
    box = MessageBox([first, second])

    assert box.peek() is first
    assert box.peek("b") is second
    assert box.peek("missing") is None
    assert len(box) == 2
    assert "a" in box

    assert box.remove("a") is first
    assert box.peek() is second
    box.clear()
    assert box.peek() is None
    assert box.messages == []


def test_put_replaces_message_with_same_id():
    box = Inbox([Message(id="a", data={"n": 1})])
    replacement = Message(id="a", data={"n": 2})

    box.put(replacement)

    assert len(box) == 1
    assert box.peek("a") is replacement


def test_outbox_requires_an_id():
    outbox = Outbox([Message(id="o1")])

    assert outbox.peek() is None
    assert outbox.peek("") is None
    assert outbox.peek("o1").id == "o1"


def test_concurrent_readers_see_whole_messages():
    outbox = Outbox([Message(id="o1", data={"version": 0, "check": 0})])
    seen = []
    stop = threading.Event()

    def writer():
        for version in range(1, 500):
            outbox.put(Message(id="o1", data={"version": version, "check": version}))
        stop.set()

    def reader():
        while not stop.is_set():
            message = outbox.peek("o1")
            seen.append((message.data["version"], message.data["check"]))

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(version == check for version, check in seen)
    assert outbox.peek("o1").data["version"] == 499


def test_sheet_current_message_and_processing():
    current = Message(id="m1", data={"x": 5})
    older = Message(id="m0", data={"x": 1})
    sheet = Sheet("Sheet1", Inbox([older, current]))

    assert sheet.get_message() is None

    sheet.attach_message(current)
    assert sheet.get_message() is current
    assert sheet.get_message("m0") is older
    assert sheet.inbox.peek() is older

    assert not sheet.is_message_processed(current)
    sheet.mark_processed()
    assert sheet.is_message_processed(current)
    assert not sheet.is_message_processed(current.clone())
    assert not sheet.is_message_processed(None)


def test_sheet_keeps_empty_inbox_it_was_given():
    inbox = Inbox()
    sheet = Sheet("Sheet1", inbox)

    assert sheet.inbox is inbox


def test_machine_sheet_registry():
    machine = Machine()
    sheet = machine.add_sheet(Sheet("Sheet1"))

    assert machine.locale == "en"
    assert sheet.machine is machine
    assert machine.get_stream_sheet_by_name("Sheet1") is sheet
    assert machine.get_stream_sheet_by_name("Other") is None
    assert machine.get_stream_sheet_by_name("") is None
    assert machine.sheets == [sheet]

    with pytest.raises(ValueError):
        machine.add_sheet(Sheet("Sheet1"))


def test_machine_keeps_empty_outbox_it_was_given():
    outbox = Outbox()
    machine = Machine(locale="fr", outbox=outbox)

    assert machine.outbox is outbox
    assert machine.locale == "fr"
