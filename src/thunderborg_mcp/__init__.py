"""Driver and MCP server for the ThunderBorg I2C motor controller."""

from .controller import Controller
from .errors import (
    BusIOError,
    ControllerClosed,
    EchoMismatch,
    InitError,
    ProtocolError,
    ThunderBorgError,
    TransportUnavailable,
    UnexpectedDevice,
)

__version__ = "0.1.0"
