"""Command opcodes and protocol constants for the ThunderBorg board.

Each command is identified by a single-byte opcode. The board echoes the
opcode back in byte 0 of every response frame.
"""

from __future__ import annotations

from enum import IntEnum


class Command(IntEnum):
    """Command opcodes."""

    SET_LED = 0x01
    GET_LED = 0x02
    SET_MOTOR_A_FORWARD = 0x08
    SET_MOTOR_A_REVERSE = 0x09
    GET_MOTOR_A = 0x0A
    SET_MOTOR_B_FORWARD = 0x0B
    SET_MOTOR_B_REVERSE = 0x0C
    GET_MOTOR_B = 0x0D
    ALL_OFF = 0x0E
    GET_DRIVE_FAULT_A = 0x0F
    GET_DRIVE_FAULT_B = 0x10
    SET_MOTORS_FORWARD = 0x11
    SET_MOTORS_REVERSE = 0x12
    GET_BATTERY_VOLTAGE = 0x15
    GET_ID = 0x99


# Human-readable names used in log lines and error messages
_DISPLAY_NAMES: dict[Command, str] = {
    Command.SET_LED: "SetLed",
    Command.GET_LED: "GetLed",
    Command.SET_MOTOR_A_FORWARD: "SetMotorAForward",
    Command.SET_MOTOR_A_REVERSE: "SetMotorAReverse",
    Command.GET_MOTOR_A: "GetMotorA",
    Command.SET_MOTOR_B_FORWARD: "SetMotorBForward",
    Command.SET_MOTOR_B_REVERSE: "SetMotorBReverse",
    Command.GET_MOTOR_B: "GetMotorB",
    Command.ALL_OFF: "AllOff",
    Command.GET_DRIVE_FAULT_A: "GetDriveFaultFlagA",
    Command.GET_DRIVE_FAULT_B: "GetDriveFaultFlagB",
    Command.SET_MOTORS_FORWARD: "SetMotorsForward",
    Command.SET_MOTORS_REVERSE: "SetMotorsReverse",
    Command.GET_BATTERY_VOLTAGE: "GetBatteryVoltage",
    Command.GET_ID: "GetId",
}

# Bus-level constants
MAX_FRAME_LEN = 6
DEFAULT_I2C_BUS = 1
DEFAULT_ADDRESS = 0x15
COMMAND_NUM_ATTEMPTS = 3

THUNDERBORG_ID = 0x15

# Payload sentinels
VALUE_ON = 1
VALUE_OFF = 0
VALUE_FORWARD = 1
VALUE_REVERSE = 2

# Battery monitoring calibration
ANALOG_MAX = 0x3FF
VOLTAGE_PIN_MAX = 36.3
VOLTAGE_PIN_CORRECTION = 0.0


def opcode(command: Command) -> int:
    """Return the wire opcode for a command."""
    return int(command)


def display_name(command: Command) -> str:
    """Format a command for diagnostics, e.g. ``GetId (0x99)``."""
    return f"{_DISPLAY_NAMES[command]} (0x{opcode(command):02x})"
