"""Data models for motor power, LED colour, and board status."""

from .motor import MotorState, clamp_motor_power, motor_power_to_byte
from .status import BoardStatus, LedColour
