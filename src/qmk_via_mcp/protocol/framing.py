"""Message builder and parser for 32-byte VIA raw HID reports.

Report layout::

    +---------+--------------------------------------------+
    | Command |               Payload / reply              |
    | 1 byte  |    31 bytes, command specific, zero padded |
    +---------+--------------------------------------------+

Buffer transfers (macro and keymap buffers) use a 4-byte header::

    +---------+-------------+------------+--------+------------------+
    | Command | Offset high | Offset low |  Size  |  Data (<= 28 B)  |
    +---------+-------------+------------+--------+------------------+

The firmware echoes the command byte in its reply, or answers 0xFF when it
does not handle the command.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import BadMessageSizeError

MESSAGE_SIZE = 32
MAX_PAYLOAD = MESSAGE_SIZE - 1
BUFFER_HEADER_SIZE = 4
MAX_BUFFER_CHUNK = MESSAGE_SIZE - BUFFER_HEADER_SIZE  # 28
UNHANDLED = 0xFF


@dataclass
class Message:
    """A parsed VIA report."""

    command: int
    payload: bytes

    def to_bytes(self) -> bytes:
        return build_message(self.command, self.payload)

    @classmethod
    def from_bytes(cls, data: bytes) -> Message:
        return parse_message(data)

    def __repr__(self) -> str:
        payload = self.payload.rstrip(b"\x00")
        return (
            f"Message(command=0x{self.command:02X}, "
            f"payload={payload.hex(' ') if payload else '(empty)'})"
        )


def build_message(command: int, payload: bytes = b"") -> bytes:
    """Build a 32-byte report.

    Args:
        command: Single-byte VIA command ID.
        payload: Command-specific bytes, at most 31.

    Returns:
        A 32-byte ``bytes`` object ready to hand to the transport.
    """
    if not 0 <= command <= 0xFF:
        raise ValueError(f"Command must be 0-255, got {command}")
    if len(payload) > MAX_PAYLOAD:
        raise ValueError(
            f"Payload must be at most {MAX_PAYLOAD} bytes, got {len(payload)}"
        )
    return bytes([command]) + payload + b"\x00" * (MAX_PAYLOAD - len(payload))


def parse_message(data: bytes) -> Message:
    """Split a 32-byte report into its command and payload.

    Raises:
        BadMessageSizeError: If ``data`` is not exactly one report long.
    """
    if len(data) != MESSAGE_SIZE:
        raise BadMessageSizeError(
            f"VIA report must be {MESSAGE_SIZE} bytes, got {len(data)}"
        )
    return Message(command=data[0], payload=bytes(data[1:]))

