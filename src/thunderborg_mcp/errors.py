"""Exceptions raised by the ThunderBorg driver."""

from __future__ import annotations

from .protocol.commands import Command, display_name


class ThunderBorgError(Exception):
    """Base class for all driver errors."""


class InitError(ThunderBorgError):
    """The controller could not be initialised."""


class TransportUnavailable(InitError, ConnectionError):
    """The I2C bus could not be opened."""


class UnexpectedDevice(InitError):
    """The handshake returned an identifier other than the ThunderBorg's."""

    def __init__(self, found_id: int, expected_id: int) -> None:
        self.found_id = found_id
        self.expected_id = expected_id
        super().__init__(
            f"Found chip with id 0x{found_id:02x}, expected 0x{expected_id:02x}"
        )


class BusIOError(ThunderBorgError, OSError):
    """A single read or write on the bus failed."""


class ProtocolError(ThunderBorgError):
    """The board answered with something other than the expected frame."""


class EchoMismatch(ProtocolError):
    """No response echoed the command's opcode within the attempt budget."""

    def __init__(self, command: Command, attempts: int) -> None:
        self.command = command
        self.attempts = attempts
        super().__init__(
            f"Error while running command {display_name(command)}: "
            f"no matching response after {attempts} attempts"
        )


class ControllerClosed(ThunderBorgError):
    """An operation was attempted on a closed controller."""
