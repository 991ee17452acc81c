"""MCP server entry point for the ThunderBorg motor controller.

Exposes motor, LED, and telemetry tools via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import Settings, configure_logging
from .controller import Controller
from .errors import ThunderBorgError
from .models.motor import clamp_motor_power

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "thunderborg",
    instructions="MCP server for the ThunderBorg I2C motor controller board",
)

# Global controller state
_controller: Controller | None = None

MOTORS = ("a", "b")


def _get_controller() -> Controller:
    """Get the active controller, raising if not connected."""
    if _controller is None or not _controller.ready:
        raise RuntimeError(
            "Not connected to board. Use the 'connect' tool first."
        )
    return _controller


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(bus: int | None = None, address: int | None = None) -> dict[str, Any]:
    """Open the I2C bus and handshake with the ThunderBorg.

    Args:
        bus: I2C bus number (default from THUNDERBORG_I2C_BUS, else 1).
        address: 7-bit board address (default from THUNDERBORG_ADDRESS, else 0x15).
    """
    global _controller
    if _controller is not None and _controller.ready:
        return {"connected": True, "message": "Already connected"}

    try:
        settings = Settings.from_env()
        bus = settings.bus if bus is None else bus
        address = settings.address if address is None else address
        _controller = Controller.open(bus, address, max_attempts=settings.max_attempts)
    except (ThunderBorgError, ValueError) as e:
        _controller = None
        return {"connected": False, "error": str(e)}

    return {"connected": True, "bus": bus, "address": f"0x{address:02x}"}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Stop the motors and close the I2C bus."""
    global _controller
    if _controller is None:
        return {"disconnected": True}
    _controller.close()
    _controller = None
    return {"disconnected": True}


# ─── MOTOR TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def set_motors(power: float) -> dict[str, Any]:
    """Drive both motors.

    Args:
        power: -1.0 (full reverse) to 1.0 (full forward). Out-of-range
            values are clamped.
    """
    controller = _get_controller()
    try:
        controller.set_motors(power)
    except ThunderBorgError as e:
        return {"error": str(e)}
    return {"success": True, "power": clamp_motor_power(power)}


@mcp.tool()
def set_motor(motor: str, power: float) -> dict[str, Any]:
    """Drive a single motor.

    Args:
        motor: "a" or "b".
        power: -1.0 (full reverse) to 1.0 (full forward).
    """
    motor = motor.lower()
    if motor not in MOTORS:
        return {"error": f"Unknown motor: {motor}. Valid: a, b"}

    controller = _get_controller()
    setter = controller.set_motor_a if motor == "a" else controller.set_motor_b
    try:
        setter(power)
    except ThunderBorgError as e:
        return {"error": str(e)}
    return {"success": True, "motor": motor, "power": clamp_motor_power(power)}


@mcp.tool()
def get_motors() -> dict[str, Any]:
    """Read the direction and PWM rate of both motors."""
    controller = _get_controller()
    try:
        return {
            "a": controller.get_motor_a().to_dict(),
            "b": controller.get_motor_b().to_dict(),
        }
    except ThunderBorgError as e:
        return {"error": str(e)}


@mcp.tool()
def stop() -> dict[str, Any]:
    """Switch all motors off immediately."""
    controller = _get_controller()
    try:
        controller.stop()
    except ThunderBorgError as e:
        return {"error": str(e)}
    return {"success": True}


# ─── LED / STATUS TOOLS ──────────────────────────────────────────────

@mcp.tool()
def set_led(red: int, green: int, blue: int) -> dict[str, Any]:
    """Set the on-board LED colour.

    Args:
        red: 0-255.
        green: 0-255.
        blue: 0-255.
    """
    for name, value in (("red", red), ("green", green), ("blue", blue)):
        if not 0 <= value <= 255:
            return {"error": f"{name} must be 0-255, got {value}"}

    controller = _get_controller()
    try:
        controller.set_led(red, green, blue)
    except ThunderBorgError as e:
        return {"error": str(e)}
    return {"success": True, "red": red, "green": green, "blue": blue}


@mcp.tool()
def get_led() -> dict[str, Any]:
    """Read the current LED colour."""
    controller = _get_controller()
    try:
        return controller.get_led().to_dict()
    except ThunderBorgError as e:
        return {"error": str(e)}


@mcp.tool()
def get_status() -> dict[str, Any]:
    """Read the drive fault flags and the battery voltage."""
    controller = _get_controller()
    try:
        return controller.get_status().to_dict()
    except ThunderBorgError as e:
        return {"error": str(e)}


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    configure_logging(Settings.from_env().log_level)
    try:
        mcp.run(transport="stdio")
    finally:
        disconnect()


if __name__ == "__main__":
    main()
