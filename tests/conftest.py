"""Shared fixtures: a scripted in-memory bus transport."""

from __future__ import annotations

import pytest

from thunderborg_mcp.controller import Controller
from thunderborg_mcp.protocol.commands import MAX_FRAME_LEN, THUNDERBORG_ID, Command


def response(command: int, *payload: int) -> bytes:
    """A full-length response frame, zero-padded."""
    body = bytes([int(command), *payload])
    return body + b"\x00" * (MAX_FRAME_LEN - len(body))


class FakeTransport:
    """Records writes and replays queued read results.

    Queued items are either response bytes or an exception to raise.
    """

    def __init__(self, reads=None):
        self.reads = list(reads or [])
        self.writes: list[bytes] = []
        self.read_count = 0
        self.write_error: Exception | None = None
        self.closed = False

    def queue(self, *items) -> None:
        self.reads.extend(items)

    def write(self, data: bytes) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(bytes(data))

    def read(self, length: int) -> bytes:
        self.read_count += 1
        item = self.reads.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    def writes_of(self, command: Command) -> list[bytes]:
        return [w for w in self.writes if w[0] == command]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def controller(transport):
    """A controller that has passed the handshake; writes are cleared."""
    transport.queue(response(Command.GET_ID, THUNDERBORG_ID))
    ctrl = Controller.open(transport=transport)
    transport.writes.clear()
    transport.read_count = 0
    yield ctrl
    ctrl.close()
