"""Raw I2C connection to the ThunderBorg.

Uses ``smbus2`` combined read/write messages so that frames are sent and
received as-is, without SMBus register semantics.
"""

from __future__ import annotations

import logging

from smbus2 import SMBus, i2c_msg

from ..errors import BusIOError, TransportUnavailable
from ..protocol.commands import DEFAULT_ADDRESS, DEFAULT_I2C_BUS

logger = logging.getLogger(__name__)


class I2CConnection:
    """Owns one open I2C bus handle bound to one slave address.

    Usage::

        conn = I2CConnection(bus=1, address=0x15)
        conn.open()
        conn.write(b"\\x99")
        response = conn.read(6)
        conn.close()
    """

    def __init__(self, bus: int = DEFAULT_I2C_BUS, address: int = DEFAULT_ADDRESS) -> None:
        self._bus_number = bus
        self._address = address
        self._bus: SMBus | None = None

    @property
    def connected(self) -> bool:
        return self._bus is not None

    @property
    def address(self) -> int:
        return self._address

    @property
    def path(self) -> str:
        return f"/dev/i2c-{self._bus_number}"

    def open(self) -> None:
        """Open the I2C bus device.

        Raises:
            TransportUnavailable: If the bus device cannot be opened.
        """
        if self.connected:
            return
        try:
            self._bus = SMBus(self._bus_number)
        except OSError as e:
            raise TransportUnavailable(
                f"Could not open I2C bus {self.path}. "
                f"Ensure I2C is enabled and you have permissions. "
                f"Last error: {e}"
            ) from e
        logger.debug("Opened %s for address 0x%02x", self.path, self._address)

    def close(self) -> None:
        """Close the bus handle."""
        if self._bus is None:
            return
        try:
            self._bus.close()
        except OSError as e:
            logger.warning("Error closing I2C bus: %s", e)
        finally:
            self._bus = None
            logger.debug("Closed %s", self.path)

    def write(self, data: bytes) -> None:
        """Write one frame to the slave.

        Raises:
            ConnectionError: If not connected.
            BusIOError: If the write fails.
        """
        bus = self._require_bus()
        msg = i2c_msg.write(self._address, data)
        try:
            bus.i2c_rdwr(msg)
        except OSError as e:
            raise BusIOError(f"I2C write to 0x{self._address:02x} failed: {e}") from e

    def read(self, length: int) -> bytes:
        """Read exactly ``length`` bytes from the slave.

        Raises:
            ConnectionError: If not connected.
            BusIOError: If the read fails.
        """
        bus = self._require_bus()
        msg = i2c_msg.read(self._address, length)
        try:
            bus.i2c_rdwr(msg)
        except OSError as e:
            raise BusIOError(f"I2C read from 0x{self._address:02x} failed: {e}") from e
        return bytes(msg)

    def _require_bus(self) -> SMBus:
        if self._bus is None:
            raise ConnectionError("Not connected to I2C bus")
        return self._bus

    def __enter__(self) -> I2CConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
