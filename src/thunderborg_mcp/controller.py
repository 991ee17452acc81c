"""Protocol controller for the ThunderBorg motor board.

The controller owns the bus transport for its whole lifetime. It offers two
primitive exchanges:

- :meth:`Controller.write_command` writes an opcode plus payload and expects
  no answer.
- :meth:`Controller.exchange` writes a bare opcode and reads one fixed-size
  response, retrying while the echo byte does not match.

Every typed operation is built on one of these. Closing the controller
always tries to switch the motors off first.

Usage::

    with Controller.open() as controller:
        controller.set_motors(0.5)
        print(controller.get_battery_voltage())
"""

from __future__ import annotations

import logging
import weakref
from typing import Protocol

from .errors import BusIOError, ControllerClosed, EchoMismatch, UnexpectedDevice
from .models.motor import MotorState, clamp_motor_power, motor_power_to_byte
from .models.status import BoardStatus, LedColour
from .protocol.commands import (
    COMMAND_NUM_ATTEMPTS,
    DEFAULT_ADDRESS,
    DEFAULT_I2C_BUS,
    MAX_FRAME_LEN,
    THUNDERBORG_ID,
    Command,
    display_name,
)
from .protocol.framing import ResponseFrame, build_frame, parse_frame
from .protocol.parser import (
    parse_battery_voltage,
    parse_board_id,
    parse_drive_fault,
    parse_led,
    parse_motor_state,
)
from .transport.i2c_connection import I2CConnection


class Transport(Protocol):
    """The byte-level bus surface the controller needs."""

    def write(self, data: bytes) -> None: ...

    def read(self, length: int) -> bytes: ...

    def close(self) -> None: ...


def _teardown(transport: Transport, log: logging.Logger) -> None:
    """Switch everything off and release the bus. Never raises."""
    log.info("Destroying a ThunderBorg controller. Ensuring motors are stopped...")
    try:
        transport.write(build_frame(Command.ALL_OFF, b"\x00"))
    except Exception as e:
        log.error("Could not stop motors when closing the controller: %s", e)
        log.error("Motors may still be running!")
    try:
        transport.close()
    except Exception as e:
        log.warning("Error closing transport: %s", e)


class Controller:
    """A ThunderBorg session.

    Create one with :meth:`open`. An instance built directly stays
    uninitialised: only the primitives work and typed operations raise
    :class:`ControllerClosed` until the handshake has succeeded.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        max_attempts: int = COMMAND_NUM_ATTEMPTS,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self._transport = transport
        self._max_attempts = max_attempts
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._finalizer: weakref.finalize | None = None
        self._closed = False

    @classmethod
    def open(
        cls,
        bus: int = DEFAULT_I2C_BUS,
        address: int = DEFAULT_ADDRESS,
        *,
        transport: Transport | None = None,
        max_attempts: int = COMMAND_NUM_ATTEMPTS,
        logger: logging.Logger | None = None,
    ) -> Controller:
        """Open the bus and verify that a ThunderBorg answers.

        Args:
            bus: I2C bus number (``/dev/i2c-<bus>``).
            address: 7-bit slave address of the board.
            transport: Already-open transport to use instead of opening
                ``bus``/``address``. Ownership passes to the controller.
            max_attempts: Read attempts per query before giving up.
            logger: Diagnostic sink; defaults to this module's logger.

        Raises:
            TransportUnavailable: If the bus cannot be opened.
            UnexpectedDevice: If the board id is not the ThunderBorg's.
            EchoMismatch: If the board never answers the handshake.
            BusIOError: If the handshake write or read fails.
        """
        log = logger if logger is not None else logging.getLogger(__name__)
        if transport is None:
            log.info("Pinging ThunderBorg at i2c bus %d address 0x%02x", bus, address)
            connection = I2CConnection(bus=bus, address=address)
            connection.open()
            transport = connection

        controller = cls(transport, max_attempts=max_attempts, logger=logger)
        try:
            board_id = controller._read_board_id()
            if board_id != THUNDERBORG_ID:
                raise UnexpectedDevice(board_id, THUNDERBORG_ID)
        except BaseException:
            # Motors were never commanded; release the bus without AllOff.
            controller._closed = True
            transport.close()
            raise

        log.info("ThunderBorg chip found.")
        controller._finalizer = weakref.finalize(controller, _teardown, transport, log)
        return controller

    @property
    def ready(self) -> bool:
        """True from a successful handshake until :meth:`close`."""
        return self._finalizer is not None and self._finalizer.alive

    # ─── PRIMITIVES ──────────────────────────────────────────────────

    def write_command(self, command: Command, data: bytes = b"") -> None:
        """Write ``command`` followed by ``data`` as one frame.

        Raises:
            ValueError: If the frame would exceed the bus frame size.
            ControllerClosed: If the controller has been closed.
            BusIOError: If the write fails.
        """
        self._require_open()
        frame = build_frame(command, data)
        self._log.debug("Writing command %s %s to bus", display_name(command), list(frame[1:]))
        self._write(frame)

    def exchange(self, command: Command) -> ResponseFrame:
        """Write ``command`` and read back its response frame.

        A response whose first byte is not the command's opcode is
        discarded and the write/read cycle is repeated, up to
        ``max_attempts`` cycles in total.

        Raises:
            EchoMismatch: If no response echoed the opcode.
            ControllerClosed: If the controller has been closed.
            BusIOError: If any write or read fails. Not retried.
        """
        self._require_open()
        frame = build_frame(command)
        for _ in range(self._max_attempts):
            self._log.debug("Writing command %s to i2c bus", display_name(command))
            self._write(frame)
            response = parse_frame(self._read(MAX_FRAME_LEN))
            self._log.debug("Read bytes from i2c bus: %s", list(response.to_bytes()))
            if response.echoes(command):
                return response
            self._log.info("Retrying (read 0x%02x)", response.command)

        self._log.error("Failed to run command %s", display_name(command))
        raise EchoMismatch(command, self._max_attempts)

    # ─── TYPED OPERATIONS ────────────────────────────────────────────

    def set_led(self, red: int, green: int, blue: int) -> None:
        """Set the LED colour; each channel is 0-255."""
        self._require_ready()
        self.write_command(Command.SET_LED, bytes([red, green, blue]))

    def get_led(self) -> LedColour:
        self._require_ready()
        return parse_led(self.exchange(Command.GET_LED))

    def set_motors(self, power: float) -> None:
        """Drive both motors at ``power`` in [-1.0, 1.0]."""
        self._motor_command(Command.SET_MOTORS_FORWARD, Command.SET_MOTORS_REVERSE, power)

    def set_motor_a(self, power: float) -> None:
        self._motor_command(Command.SET_MOTOR_A_FORWARD, Command.SET_MOTOR_A_REVERSE, power)

    def set_motor_b(self, power: float) -> None:
        self._motor_command(Command.SET_MOTOR_B_FORWARD, Command.SET_MOTOR_B_REVERSE, power)

    def get_motor_a(self) -> MotorState:
        self._require_ready()
        return parse_motor_state(self.exchange(Command.GET_MOTOR_A))

    def get_motor_b(self) -> MotorState:
        self._require_ready()
        return parse_motor_state(self.exchange(Command.GET_MOTOR_B))

    def get_drive_fault_a(self) -> bool:
        """Drive fault flag for motor A (short-circuit, under-voltage)."""
        self._require_ready()
        return parse_drive_fault(self.exchange(Command.GET_DRIVE_FAULT_A))

    def get_drive_fault_b(self) -> bool:
        """Drive fault flag for motor B (short-circuit, under-voltage)."""
        self._require_ready()
        return parse_drive_fault(self.exchange(Command.GET_DRIVE_FAULT_B))

    def get_battery_voltage(self) -> float:
        self._require_ready()
        return parse_battery_voltage(self.exchange(Command.GET_BATTERY_VOLTAGE))

    def get_board_id(self) -> int:
        self._require_ready()
        return self._read_board_id()

    def get_status(self) -> BoardStatus:
        """Read both fault flags and the battery voltage."""
        return BoardStatus(
            fault_a=self.get_drive_fault_a(),
            fault_b=self.get_drive_fault_b(),
            battery_voltage=self.get_battery_voltage(),
        )

    def stop(self) -> None:
        """Switch everything off."""
        self._require_ready()
        self.write_command(Command.ALL_OFF, b"\x00")

    # ─── LIFECYCLE ───────────────────────────────────────────────────

    def close(self) -> None:
        """Stop the motors (best effort) and release the bus.

        Safe to call more than once; only the first call does anything.
        """
        self._closed = True
        if self._finalizer is not None:
            self._finalizer()

    def __enter__(self) -> Controller:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ─── INTERNALS ───────────────────────────────────────────────────

    def _motor_command(self, forward: Command, reverse: Command, power: float) -> None:
        self._require_ready()
        power = clamp_motor_power(power)
        command = reverse if power < 0.0 else forward
        self.write_command(command, bytes([motor_power_to_byte(power)]))

    def _require_ready(self) -> None:
        if not self.ready:
            raise ControllerClosed("Controller is not open")

    def _require_open(self) -> None:
        if self._closed:
            raise ControllerClosed("Controller is closed")

    def _read_board_id(self) -> int:
        return parse_board_id(self.exchange(Command.GET_ID))

    def _write(self, frame: bytes) -> None:
        try:
            self._transport.write(frame)
        except BusIOError:
            raise
        except OSError as e:
            raise BusIOError(f"Bus write failed: {e}") from e

    def _read(self, length: int) -> bytes:
        try:
            data = self._transport.read(length)
        except BusIOError:
            raise
        except OSError as e:
            raise BusIOError(f"Bus read failed: {e}") from e
        if len(data) != length:
            raise BusIOError(f"Short read: expected {length} bytes, got {len(data)}")
        return data
