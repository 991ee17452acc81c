"""Runtime settings read from the environment, and logging setup.

Environment variables:

- ``THUNDERBORG_I2C_BUS``: I2C bus number (default 1, i.e. ``/dev/i2c-1``)
- ``THUNDERBORG_ADDRESS``: 7-bit slave address, decimal or ``0x`` hex
  (default 0x15)
- ``THUNDERBORG_ATTEMPTS``: read attempts per query (default 3)
- ``THUNDERBORG_LOG``: log level name (default ``INFO``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .protocol.commands import COMMAND_NUM_ATTEMPTS, DEFAULT_ADDRESS, DEFAULT_I2C_BUS

LOG_FORMAT = "[%(levelname)s]: %(message)s"


def parse_int(value: str) -> int:
    """Parse a decimal or ``0x``-prefixed integer."""
    return int(value, 0)


@dataclass
class Settings:
    """Connection and logging settings."""

    bus: int = DEFAULT_I2C_BUS
    address: int = DEFAULT_ADDRESS
    max_attempts: int = COMMAND_NUM_ATTEMPTS
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.bus < 0:
            raise ValueError(f"I2C bus must be non-negative, got {self.bus}")
        if not 0x03 <= self.address <= 0x77:
            raise ValueError(f"I2C address must be 0x03-0x77, got 0x{self.address:02x}")
        if self.max_attempts < 1:
            raise ValueError(f"Attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Raises:
            ValueError: If a variable is set to a malformed value.
        """
        env = os.environ if environ is None else environ
        return cls(
            bus=parse_int(env.get("THUNDERBORG_I2C_BUS", str(DEFAULT_I2C_BUS))),
            address=parse_int(env.get("THUNDERBORG_ADDRESS", str(DEFAULT_ADDRESS))),
            max_attempts=parse_int(
                env.get("THUNDERBORG_ATTEMPTS", str(COMMAND_NUM_ATTEMPTS))
            ),
            log_level=env.get("THUNDERBORG_LOG", "INFO"),
        )


def resolve_log_level(name: str) -> int:
    """Map a level name to a ``logging`` constant, defaulting to INFO."""
    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level: str = "INFO") -> None:
    """Configure process-wide logging. Only entry points call this."""
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT)
