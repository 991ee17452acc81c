"""Response payload decoding for board queries."""

from __future__ import annotations

from ..models.motor import MotorState
from ..models.status import LedColour
from .commands import (
    ANALOG_MAX,
    VALUE_OFF,
    VOLTAGE_PIN_CORRECTION,
    VOLTAGE_PIN_MAX,
)
from .framing import ResponseFrame


def parse_board_id(frame: ResponseFrame) -> int:
    """Board identifier byte from a GetId response."""
    return frame.payload[0]


def parse_drive_fault(frame: ResponseFrame) -> bool:
    """True if a GetDriveFaultFlagA/B response reports a fault."""
    return frame.payload[0] != VALUE_OFF


def parse_battery_voltage(frame: ResponseFrame) -> float:
    """Battery voltage from a GetBatteryVoltage response.

    The payload carries a big-endian 10-bit ADC reading in its first two
    bytes, scaled against the monitoring pin's full-scale voltage.
    """
    raw = (frame.payload[0] << 8) | frame.payload[1]
    return raw / ANALOG_MAX * VOLTAGE_PIN_MAX + VOLTAGE_PIN_CORRECTION


def parse_led(frame: ResponseFrame) -> LedColour:
    red, green, blue = frame.payload[:3]
    return LedColour(red=red, green=green, blue=blue)


def parse_motor_state(frame: ResponseFrame) -> MotorState:
    """Direction and PWM from a GetMotorA/B response."""
    return MotorState(direction=frame.payload[0], pwm=frame.payload[1])
