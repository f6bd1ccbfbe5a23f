"""Protocol layer: report framing, command builders, and reply parsing."""

from .framing import Message, build_message, parse_message
from .commands import Command, KeyboardValue, LightingValue, build_command
