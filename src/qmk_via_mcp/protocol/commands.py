"""Command identifiers and frame builders for the VIA protocol.

Each command is identified by a single-byte ID in byte 0 of the report. The
keyboard-value and lighting-value commands take a second byte selecting the
value they read or write.
"""

from __future__ import annotations

from enum import IntEnum

from ..exceptions import BadBufferSizeError
from ..models.keycodes import keycode_to_bytes
from .framing import MAX_BUFFER_CHUNK, MAX_PAYLOAD, build_message

# Changed only when command IDs change, so hosts can detect compatible firmware.
VIA_PROTOCOL_VERSION = 0x0009


class Command(IntEnum):
    """VIA command identifiers."""

    GET_PROTOCOL_VERSION = 0x01
    GET_KEYBOARD_VALUE = 0x02
    SET_KEYBOARD_VALUE = 0x03
    DYNAMIC_KEYMAP_GET_KEYCODE = 0x04
    DYNAMIC_KEYMAP_SET_KEYCODE = 0x05
    DYNAMIC_KEYMAP_RESET = 0x06
    LIGHTING_SET_VALUE = 0x07
    LIGHTING_GET_VALUE = 0x08
    LIGHTING_SAVE = 0x09
    EEPROM_RESET = 0x0A
    BOOTLOADER_JUMP = 0x0B
    DYNAMIC_KEYMAP_MACRO_GET_COUNT = 0x0C
    DYNAMIC_KEYMAP_MACRO_GET_BUFFER_SIZE = 0x0D
    DYNAMIC_KEYMAP_MACRO_GET_BUFFER = 0x0E
    DYNAMIC_KEYMAP_MACRO_SET_BUFFER = 0x0F
    DYNAMIC_KEYMAP_MACRO_RESET = 0x10
    DYNAMIC_KEYMAP_GET_LAYER_COUNT = 0x11
    DYNAMIC_KEYMAP_GET_BUFFER = 0x12
    DYNAMIC_KEYMAP_SET_BUFFER = 0x13
    UNHANDLED = 0xFF


class KeyboardValue(IntEnum):
    """Value IDs for GET_KEYBOARD_VALUE / SET_KEYBOARD_VALUE."""

    UPTIME = 0x01
    LAYOUT_OPTIONS = 0x02
    SWITCH_MATRIX_STATE = 0x03


class LightingValue(IntEnum):
    """Value IDs for LIGHTING_GET_VALUE / LIGHTING_SET_VALUE."""

    BACKLIGHT_BRIGHTNESS = 0x09
    BACKLIGHT_EFFECT = 0x0A
    RGBLIGHT_BRIGHTNESS = 0x80
    RGBLIGHT_EFFECT = 0x81
    RGBLIGHT_EFFECT_SPEED = 0x82
    RGBLIGHT_COLOR = 0x83


def _check_byte(label: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{label} must be 0-255, got {value}")


def _check_chunk_size(size: int) -> None:
    if size <= 0 or size > MAX_BUFFER_CHUNK:
        raise BadBufferSizeError(
            f"Buffer chunk size must be 1-{MAX_BUFFER_CHUNK}, got {size}"
        )


def build_command(command: Command, payload: bytes = b"") -> bytes:
    """Build a single 32-byte report for a command."""
    return build_message(command.value, payload)


def build_get_protocol_version() -> bytes:
    """Build a protocol version query."""
    return build_command(Command.GET_PROTOCOL_VERSION)


def build_get_keyboard_value(value_id: int) -> bytes:
    """Build a keyboard value query.

    Args:
        value_id: A ``KeyboardValue`` or a keyboard-specific ID (0-255).
    """
    _check_byte("Value ID", value_id)
    return build_command(Command.GET_KEYBOARD_VALUE, bytes([value_id]))


def build_set_keyboard_value(value_id: int, data: bytes = b"") -> bytes:
    """Build a keyboard value write.

    Args:
        value_id: A ``KeyboardValue`` or a keyboard-specific ID (0-255).
        data: Value bytes, at most 30.
    """
    _check_byte("Value ID", value_id)
    if len(data) > MAX_PAYLOAD - 1:
        raise ValueError(
            f"Keyboard value data must be at most {MAX_PAYLOAD - 1} bytes, "
            f"got {len(data)}"
        )
    return build_command(Command.SET_KEYBOARD_VALUE, bytes([value_id]) + data)


def build_get_keycode(layer: int, row: int, column: int) -> bytes:
    """Build a dynamic keymap keycode query for one matrix position."""
    for label, value in (("Layer", layer), ("Row", row), ("Column", column)):
        _check_byte(label, value)
    return build_command(
        Command.DYNAMIC_KEYMAP_GET_KEYCODE, bytes([layer, row, column])
    )


def build_set_keycode(layer: int, row: int, column: int, keycode: int) -> bytes:
    """Build a dynamic keymap keycode write for one matrix position.

    The keycode is sent big-endian after the position bytes.
    """
    for label, value in (("Layer", layer), ("Row", row), ("Column", column)):
        _check_byte(label, value)
    return build_command(
        Command.DYNAMIC_KEYMAP_SET_KEYCODE,
        bytes([layer, row, column]) + keycode_to_bytes(keycode),
    )


def build_reset_keymap() -> bytes:
    """Build a dynamic keymap reset (restores the firmware default keymap)."""
    return build_command(Command.DYNAMIC_KEYMAP_RESET)


def build_get_lighting_value(value_id: int) -> bytes:
    """Build a lighting value query."""
    _check_byte("Lighting value ID", value_id)
    return build_command(Command.LIGHTING_GET_VALUE, bytes([value_id]))


def build_set_lighting_value(value_id: int, *values: int) -> bytes:
    """Build a lighting value write.

    Args:
        value_id: A ``LightingValue``.
        values: Raw value bytes (one for brightness/effect/speed, hue and
            saturation for color).
    """
    _check_byte("Lighting value ID", value_id)
    for value in values:
        _check_byte("Lighting value", value)
    return build_command(Command.LIGHTING_SET_VALUE, bytes([value_id, *values]))


def build_save_lighting() -> bytes:
    """Build a lighting save (persists backlight and rgblight to EEPROM)."""
    return build_command(Command.LIGHTING_SAVE)


def build_reset_eeprom() -> bytes:
    """Build an EEPROM reset."""
    return build_command(Command.EEPROM_RESET)


def build_bootloader_jump() -> bytes:
    """Build a jump-to-bootloader request."""
    return build_command(Command.BOOTLOADER_JUMP)


def build_get_macro_count() -> bytes:
    """Build a macro count query."""
    return build_command(Command.DYNAMIC_KEYMAP_MACRO_GET_COUNT)


def build_get_macro_buffer_size() -> bytes:
    """Build a macro buffer size query."""
    return build_command(Command.DYNAMIC_KEYMAP_MACRO_GET_BUFFER_SIZE)


def build_reset_macros() -> bytes:
    """Build a macro buffer reset."""
    return build_command(Command.DYNAMIC_KEYMAP_MACRO_RESET)


def build_get_layer_count() -> bytes:
    """Build a dynamic keymap layer count query."""
    return build_command(Command.DYNAMIC_KEYMAP_GET_LAYER_COUNT)


def _build_buffer_read(command: Command, offset: int, size: int) -> bytes:
    _check_chunk_size(size)
    if not 0 <= offset <= 0xFFFF:
        raise ValueError(f"Buffer offset must be 0-65535, got {offset}")
    return build_command(command, bytes([(offset >> 8) & 0xFF, offset & 0xFF, size]))


def _build_buffer_write(
    command: Command, offset: int, size: int, data: bytes
) -> bytes:
    _check_chunk_size(size)
    if not 0 <= offset <= 0xFFFF:
        raise ValueError(f"Buffer offset must be 0-65535, got {offset}")
    size = min(size, len(data))
    header = bytes([(offset >> 8) & 0xFF, offset & 0xFF, size])
    return build_command(command, header + bytes(data[:size]))


def build_get_macro_buffer(offset: int, size: int) -> bytes:
    """Build a macro buffer chunk read.

    Args:
        offset: Byte offset into the macro buffer.
        size: Number of bytes to read, 1-28.
    """
    return _build_buffer_read(Command.DYNAMIC_KEYMAP_MACRO_GET_BUFFER, offset, size)


def build_set_macro_buffer(offset: int, size: int, data: bytes) -> bytes:
    """Build a macro buffer chunk write.

    ``size`` is shortened to ``len(data)`` when fewer bytes are supplied.
    """
    return _build_buffer_write(
        Command.DYNAMIC_KEYMAP_MACRO_SET_BUFFER, offset, size, data
    )


def build_get_keymap_buffer(offset: int, size: int) -> bytes:
    """Build a dynamic keymap buffer chunk read (keycodes, big-endian pairs)."""
    return _build_buffer_read(Command.DYNAMIC_KEYMAP_GET_BUFFER, offset, size)


def build_set_keymap_buffer(offset: int, size: int, data: bytes) -> bytes:
    """Build a dynamic keymap buffer chunk write."""
    return _build_buffer_write(Command.DYNAMIC_KEYMAP_SET_BUFFER, offset, size, data)
