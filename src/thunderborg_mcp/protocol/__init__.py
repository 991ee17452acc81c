"""Protocol layer: command catalog, frame types, and response decoding."""

from .commands import Command, display_name, opcode
from .framing import ResponseFrame, build_frame, parse_frame
