"""Reply decoding for VIA reports.

Offsets below are into ``Message.payload``, i.e. one less than the byte
position within the 32-byte report.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models.keycodes import keycode_from_bytes
from .framing import Message


@dataclass
class RgblightHueSaturation:
    """Raw hue/saturation bytes from an RGBLIGHT_COLOR reply."""

    hue: int
    saturation: int


def parse_protocol_version(message: Message) -> int:
    """Protocol version, big-endian in report bytes 1-2."""
    return int.from_bytes(message.payload[0:2], "big")


def parse_keyboard_value_u32(message: Message) -> int:
    """32-bit keyboard value (uptime, layout options), report bytes 2-5."""
    return int.from_bytes(message.payload[1:5], "big")


def parse_keyboard_value_raw(message: Message) -> bytes:
    """Everything after the echoed value ID (report bytes 2-31)."""
    return message.payload[1:]


def parse_keycode(message: Message) -> int:
    """Keycode from a DYNAMIC_KEYMAP_GET_KEYCODE reply, report bytes 4-5."""
    return keycode_from_bytes(message.payload[3], message.payload[4])


def parse_lighting_byte(message: Message) -> int:
    """Single lighting value byte, report byte 2."""
    return message.payload[1]


def parse_rgblight_color(message: Message) -> RgblightHueSaturation:
    """Hue and saturation bytes, report bytes 2-3."""
    return RgblightHueSaturation(
        hue=message.payload[1], saturation=message.payload[2]
    )


def parse_count(message: Message) -> int:
    """Single-byte count (macros, layers), report byte 1."""
    return message.payload[0]


def parse_buffer_size(message: Message) -> int:
    """Big-endian 16-bit buffer size, report bytes 1-2."""
    return int.from_bytes(message.payload[0:2], "big")


def parse_buffer_chunk(message: Message, size: int) -> bytes:
    """Chunk data following the 4-byte buffer header."""
    return message.payload[3 : 3 + size]
