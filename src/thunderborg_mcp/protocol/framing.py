"""Request and response frames on the I2C bus.

Request layout::

    +---------+------------------+
    | Opcode  |     Payload      |
    | 1 byte  |   0-5 bytes      |
    +---------+------------------+

Responses are always ``MAX_FRAME_LEN`` bytes. Byte 0 echoes the opcode of
the request that produced them; the rest is command-specific payload.
"""

from __future__ import annotations

from dataclasses import dataclass

from .commands import MAX_FRAME_LEN, Command, opcode

PAYLOAD_LEN = MAX_FRAME_LEN - 1


@dataclass(frozen=True)
class ResponseFrame:
    """A fixed-length response read back from the board."""

    command: int
    payload: bytes

    def __post_init__(self) -> None:
        if len(self.payload) != PAYLOAD_LEN:
            raise ValueError(
                f"Response payload must be {PAYLOAD_LEN} bytes, "
                f"got {len(self.payload)}"
            )

    def echoes(self, command: Command) -> bool:
        """True if this frame is the answer to ``command``."""
        return self.command == opcode(command)

    def to_bytes(self) -> bytes:
        return bytes([self.command]) + self.payload

    def __repr__(self) -> str:
        return (
            f"ResponseFrame(command=0x{self.command:02X}, "
            f"payload={self.payload.hex(' ')})"
        )


def build_frame(command: Command, data: bytes = b"") -> bytes:
    """Build a request frame: opcode followed by ``data``.

    Raises:
        ValueError: If the frame would exceed ``MAX_FRAME_LEN`` bytes.
    """
    data = bytes(data)
    if 1 + len(data) > MAX_FRAME_LEN:
        raise ValueError(
            f"Frame for {command.name} must be at most {MAX_FRAME_LEN} bytes, "
            f"got {1 + len(data)}"
        )
    return bytes([opcode(command)]) + data


def parse_frame(data: bytes) -> ResponseFrame:
    """Split a raw response buffer into echo byte and payload.

    Raises:
        ValueError: If ``data`` is not exactly ``MAX_FRAME_LEN`` bytes.
    """
    if len(data) != MAX_FRAME_LEN:
        raise ValueError(
            f"Response must be {MAX_FRAME_LEN} bytes, got {len(data)}"
        )
    return ResponseFrame(command=data[0], payload=bytes(data[1:]))
