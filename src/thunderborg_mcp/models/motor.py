"""Motor power conversion and the decoded motor state."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..protocol.commands import VALUE_FORWARD, VALUE_REVERSE

PWM_MAX = 255


def clamp_motor_power(power: float) -> float:
    """Clamp a power value into [-1.0, 1.0]. NaN means stopped."""
    if math.isnan(power):
        return 0.0
    if power > 1.0:
        return 1.0
    if power < -1.0:
        return -1.0
    return power


def motor_power_to_byte(power: float) -> int:
    """Convert a clamped power value to an unsigned PWM magnitude.

    The sign is dropped; direction is carried by the command choice.
    The board firmware expects truncation, not rounding.
    """
    if not -1.0 <= power <= 1.0:
        raise ValueError(f"Motor power must be within [-1.0, 1.0], got {power}")
    return int(abs(power) * PWM_MAX)


@dataclass
class MotorState:
    """Direction and PWM rate reported by GetMotorA / GetMotorB."""

    direction: int
    pwm: int

    @property
    def forward(self) -> bool:
        return self.direction == VALUE_FORWARD

    @property
    def reverse(self) -> bool:
        return self.direction == VALUE_REVERSE

    @property
    def power(self) -> float:
        """Signed power in [-1.0, 1.0]; 0.0 when the motor is off."""
        if self.forward:
            return self.pwm / PWM_MAX
        if self.reverse:
            return -self.pwm / PWM_MAX
        return 0.0

    def to_dict(self) -> dict:
        if self.forward:
            direction = "forward"
        elif self.reverse:
            direction = "reverse"
        else:
            direction = "off"
        return {
            "direction": direction,
            "pwm": self.pwm,
            "power": round(self.power, 3),
        }
