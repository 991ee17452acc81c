"""Tests for the MCP tool layer."""

from __future__ import annotations

import importlib
import sys
from unittest.mock import MagicMock, patch

import pytest

from conftest import FakeTransport, response
from thunderborg_mcp.controller import Controller
from thunderborg_mcp.errors import UnexpectedDevice
from thunderborg_mcp.protocol.commands import THUNDERBORG_ID, Command


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        sys.modules.pop("thunderborg_mcp.server", None)
        return importlib.import_module("thunderborg_mcp.server")


@pytest.fixture
def server(monkeypatch):
    module = _get_server_module()
    for name in ("THUNDERBORG_I2C_BUS", "THUNDERBORG_ADDRESS", "THUNDERBORG_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)
    yield module
    module.disconnect()
    sys.modules.pop("thunderborg_mcp.server", None)


@pytest.fixture
def connected(server):
    transport = FakeTransport([response(Command.GET_ID, THUNDERBORG_ID)])
    server._controller = Controller.open(transport=transport)
    transport.writes.clear()
    return server, transport


def test_tools_require_connection(server):
    with pytest.raises(RuntimeError):
        server.set_motors(0.5)


def test_connect(server):
    transport = FakeTransport([response(Command.GET_ID, THUNDERBORG_ID)])
    real_open = Controller.open

    def _open(bus, address, **kwargs):
        assert (bus, address) == (1, 0x15)
        return real_open(transport=transport, **kwargs)

    with patch.object(server.Controller, "open", side_effect=_open):
        result = server.connect()
    assert result == {"connected": True, "bus": 1, "address": "0x15"}
    assert server.connect()["message"] == "Already connected"


def test_connect_failure(server):
    with patch.object(server.Controller, "open", side_effect=UnexpectedDevice(0x42, 0x15)):
        result = server.connect(bus=1)
    assert result["connected"] is False
    assert "0x42" in result["error"]
    assert server._controller is None


def test_set_motors(connected):
    server, transport = connected
    assert server.set_motors(2.0) == {"success": True, "power": 1.0}
    assert transport.writes == [b"\x11\xff"]


def test_set_motor(connected):
    server, transport = connected
    assert server.set_motor("B", -0.5)["success"]
    assert transport.writes == [b"\x0c\x7f"]
    assert "error" in server.set_motor("c", 0.5)


def test_set_led_validation(connected):
    server, transport = connected
    assert "error" in server.set_led(300, 0, 0)
    assert transport.writes == []
    assert server.set_led(1, 2, 3)["success"]
    assert transport.writes == [b"\x01\x01\x02\x03"]


def test_get_status(connected):
    server, transport = connected
    transport.queue(
        response(Command.GET_DRIVE_FAULT_A, 0),
        response(Command.GET_DRIVE_FAULT_B, 1),
        response(Command.GET_BATTERY_VOLTAGE, 0x03, 0xFF),
    )
    assert server.get_status() == {
        "fault_a": False,
        "fault_b": True,
        "battery_voltage": 36.3,
    }


def test_get_status_error(connected):
    """Protocol failures come back as an error entry."""
    server, transport = connected
    transport.queue(*[response(0x00)] * 3)
    assert "GetDriveFaultFlagA" in server.get_status()["error"]


def test_get_motors_and_led(connected):
    server, transport = connected
    transport.queue(
        response(Command.GET_MOTOR_A, 1, 255),
        response(Command.GET_MOTOR_B, 0, 0),
        response(Command.GET_LED, 0, 255, 0),
    )
    motors = server.get_motors()
    assert motors["a"]["direction"] == "forward"
    assert motors["b"]["direction"] == "off"
    assert server.get_led() == {"red": 0, "green": 255, "blue": 0}


def test_stop_and_disconnect(connected):
    server, transport = connected
    assert server.stop() == {"success": True}
    assert server.disconnect() == {"disconnected": True}
    assert transport.writes == [b"\x0e\x00", b"\x0e\x00"]
    assert transport.closed
    assert server._controller is None


def test_connect_bad_environment(server, monkeypatch):
    """Malformed settings come back as an error entry."""
    monkeypatch.setenv("THUNDERBORG_ATTEMPTS", "zero")
    result = server.connect()
    assert result["connected"] is False
    assert "error" in result
    assert server._controller is None
