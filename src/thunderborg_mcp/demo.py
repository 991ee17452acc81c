"""Motor dance demo.

Drives both motors forward then in reverse, ramping through a slow speed
on each edge, and logs fault flags and battery voltage between runs.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Callable

from .config import Settings, configure_logging, parse_int
from .controller import Controller
from .errors import ThunderBorgError

logger = logging.getLogger(__name__)

SLOW_POWER = 0.1
FAST_POWER = 0.8

# (power, seconds to hold it) for one direction of travel
RUN_STEPS = [
    (SLOW_POWER, 0.1),
    (FAST_POWER, 1.8),
    (SLOW_POWER, 0.1),
    (0.0, 0.0),
]
FORWARD_REST = 5.0
REVERSE_REST = 3.0


def _run_direction(
    controller: Controller,
    sign: float,
    rest: float,
    sleep: Callable[[float], None],
    log_first: bool,
) -> None:
    for i, (power, hold) in enumerate(RUN_STEPS):
        controller.set_motors(sign * power)
        if hold:
            sleep(hold)
        if log_first and i == 0:
            logger.info("%s", controller.get_status())
    sleep(rest)


def run(
    controller: Controller,
    iterations: int = 2,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Run the dance ``iterations`` times, then stop the motors."""
    for _ in range(iterations):
        _run_direction(controller, 1.0, FORWARD_REST, sleep, log_first=True)
        _run_direction(controller, -1.0, REVERSE_REST, sleep, log_first=False)
        logger.info("%s", controller.get_status())
    controller.stop()


def parse_args(argv: list[str] | None = None, settings: Settings | None = None) -> argparse.Namespace:
    settings = settings or Settings()
    parser = argparse.ArgumentParser(description="Run the ThunderBorg motor dance demo")
    parser.add_argument("--bus", type=int, default=settings.bus, help="I2C bus number (e.g. 1)")
    parser.add_argument(
        "--address",
        type=parse_int,
        default=settings.address,
        help="7-bit board address, decimal or 0x-hex (default 0x15)",
    )
    parser.add_argument("--iterations", type=int, default=2, help="Number of dance repetitions")
    parser.add_argument("--fast", action="store_true", help="Divide all delays by 100")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Invalid environment settings: {e}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)
    args = parse_args(argv, settings)

    def sleep(seconds: float) -> None:
        time.sleep(seconds / 100 if args.fast else seconds)

    try:
        with Controller.open(
            args.bus, args.address, max_attempts=settings.max_attempts
        ) as controller:
            run(controller, iterations=args.iterations, sleep=sleep)
    except ThunderBorgError as e:
        logger.error("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
