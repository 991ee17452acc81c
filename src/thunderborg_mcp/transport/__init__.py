"""Bus transports."""

from .i2c_connection import I2CConnection
