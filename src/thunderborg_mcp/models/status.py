"""LED colour and board telemetry snapshot."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LedColour:
    """RGB colour of the on-board LED."""

    red: int
    green: int
    blue: int

    def to_dict(self) -> dict:
        return {"red": self.red, "green": self.green, "blue": self.blue}


@dataclass
class BoardStatus:
    """Fault flags and battery voltage read in one pass."""

    fault_a: bool
    fault_b: bool
    battery_voltage: float

    def to_dict(self) -> dict:
        return {
            "fault_a": self.fault_a,
            "fault_b": self.fault_b,
            "battery_voltage": round(self.battery_voltage, 2),
        }

    def __str__(self) -> str:
        return (
            f"A fault: {self.fault_a} | B fault: {self.fault_b} | "
            f"Battery voltage: {self.battery_voltage:.2f}V"
        )
