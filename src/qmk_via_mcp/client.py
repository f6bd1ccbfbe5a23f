"""VIA protocol client for QMK keyboards.

``KeyboardClient`` turns each VIA operation into one request/reply exchange
over an open keyboard handle, decoding replies into plain Python values.
``connect`` finds a VIA keyboard, opens it and checks its protocol version.
"""

from __future__ import annotations

import logging
from typing import Callable

from .exceptions import NoMatchingDeviceError, VersionMismatchError
from .macros import MacroStore
from .models.color import Color
from .models.effects import BacklightEffect, RgblightEffect
from .protocol import commands as cmd
from .protocol import parser
from .protocol.commands import KeyboardValue, LightingValue, VIA_PROTOCOL_VERSION
from .protocol.framing import MAX_BUFFER_CHUNK, Message, parse_message
from .transport.exchange import DEFAULT_ATTEMPTS, KeyboardHandle, MessageTransport
from .transport.hid_connection import KeyboardInfo, list_keyboards
from .utils.scaling import (
    hue_from_byte,
    hue_to_byte,
    percentage_from_byte,
    percentage_to_byte,
)

logger = logging.getLogger(__name__)

OPEN_ATTEMPTS = 20


class KeyboardClient:
    """Typed VIA operations over one open keyboard handle.

    Usage::

        client = connect()
        client.get_protocol_version()
        client.set_rgblight_color(parse_color("teal"))
        client.macros.set(0, b"hello")
        client.close()

    Percentages (brightness, saturation, speed) are 0-100 and hue is 0-360;
    the client converts to and from wire bytes.
    """

    def __init__(
        self,
        handle: KeyboardHandle,
        info: KeyboardInfo | None = None,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self.handle = handle
        self.info = info
        self.transport = MessageTransport(handle, attempts=attempts)
        self.macros = MacroStore(self)

    def __enter__(self) -> KeyboardClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying handle, if it can be closed."""
        close = getattr(self.handle, "close", None)
        if close is not None:
            close()

    def _send(self, frame: bytes) -> Message:
        logger.debug("-> %r", parse_message(frame))
        reply = parse_message(self.transport.exchange(frame))
        logger.debug("<- %r", reply)
        return reply

    # ─── Protocol / keyboard values ──────────────────────────────────

    def get_protocol_version(self) -> int:
        return parser.parse_protocol_version(
            self._send(cmd.build_get_protocol_version())
        )

    def get_uptime(self) -> int:
        """Milliseconds since the keyboard booted."""
        return parser.parse_keyboard_value_u32(
            self._send(cmd.build_get_keyboard_value(KeyboardValue.UPTIME))
        )

    def get_layout_options(self) -> int:
        return parser.parse_keyboard_value_u32(
            self._send(cmd.build_get_keyboard_value(KeyboardValue.LAYOUT_OPTIONS))
        )

    def set_layout_options(self, options: int) -> None:
        if not 0 <= options <= 0xFFFFFFFF:
            raise ValueError(f"Layout options must fit in 32 bits, got {options}")
        self._send(cmd.build_set_keyboard_value(
            KeyboardValue.LAYOUT_OPTIONS, options.to_bytes(4, "big")
        ))

    def get_switch_matrix_state(self) -> bytes:
        """Raw switch matrix bitmap (report bytes 2-31)."""
        return parser.parse_keyboard_value_raw(
            self._send(cmd.build_get_keyboard_value(KeyboardValue.SWITCH_MATRIX_STATE))
        )

    def get_raw_keyboard_value(self, value_id: int) -> bytes:
        """Reply bytes for a keyboard-specific value ID."""
        return parser.parse_keyboard_value_raw(
            self._send(cmd.build_get_keyboard_value(value_id))
        )

    def set_raw_keyboard_value(self, value_id: int, data: bytes) -> None:
        self._send(cmd.build_set_keyboard_value(value_id, data))

    # ─── Dynamic keymap ──────────────────────────────────────────────

    def get_keycode(self, layer: int, row: int, column: int) -> int:
        return parser.parse_keycode(
            self._send(cmd.build_get_keycode(layer, row, column))
        )

    def set_keycode(self, layer: int, row: int, column: int, keycode: int) -> None:
        self._send(cmd.build_set_keycode(layer, row, column, keycode))

    def reset_keymap(self) -> None:
        """Restore the firmware's default keymap on every layer."""
        self._send(cmd.build_reset_keymap())

    def get_layer_count(self) -> int:
        return parser.parse_count(self._send(cmd.build_get_layer_count()))

    def get_keymap_buffer(self, offset: int, size: int) -> bytes:
        """Read up to 28 bytes of the raw keymap buffer.

        Raises:
            BadBufferSizeError: If ``size`` is 0 or more than 28.
        """
        return parser.parse_buffer_chunk(
            self._send(cmd.build_get_keymap_buffer(offset, size)), size
        )

    def set_keymap_buffer(self, offset: int, size: int, data: bytes) -> None:
        """Write up to 28 bytes of the raw keymap buffer.

        Raises:
            BadBufferSizeError: If ``size`` is 0 or more than 28.
        """
        self._send(cmd.build_set_keymap_buffer(offset, size, data))

    def get_keymap(self, rows: int, columns: int) -> list[list[list[int]]]:
        """Dump every layer of the keymap through the keymap buffer.

        The buffer holds big-endian keycodes laid out layer by layer, row by
        row. The matrix size is not reported by the protocol, so the caller
        supplies it.

        Returns:
            ``keymap[layer][row][column]`` keycodes.
        """
        if rows <= 0 or columns <= 0:
            raise ValueError("Rows and columns must be positive")
        layers = self.get_layer_count()
        total = layers * rows * columns * 2

        data = bytearray()
        for offset in range(0, total, MAX_BUFFER_CHUNK):
            size = min(MAX_BUFFER_CHUNK, total - offset)
            data += self.get_keymap_buffer(offset, size)

        keycodes = [
            int.from_bytes(data[i:i + 2], "big") for i in range(0, total, 2)
        ]
        return [
            [
                keycodes[(layer * rows + row) * columns:(layer * rows + row + 1) * columns]
                for row in range(rows)
            ]
            for layer in range(layers)
        ]

    # ─── Backlight ───────────────────────────────────────────────────

    def _get_lighting_byte(self, value_id: LightingValue) -> int:
        return parser.parse_lighting_byte(
            self._send(cmd.build_get_lighting_value(value_id))
        )

    def get_backlight_brightness(self) -> int:
        return percentage_from_byte(
            self._get_lighting_byte(LightingValue.BACKLIGHT_BRIGHTNESS)
        )

    def set_backlight_brightness(self, brightness: int) -> None:
        self._send(cmd.build_set_lighting_value(
            LightingValue.BACKLIGHT_BRIGHTNESS, percentage_to_byte(brightness)
        ))

    def get_backlight_effect(self) -> BacklightEffect:
        return BacklightEffect.from_byte(
            self._get_lighting_byte(LightingValue.BACKLIGHT_EFFECT)
        )

    def set_backlight_effect(self, effect: BacklightEffect) -> None:
        self._send(cmd.build_set_lighting_value(
            LightingValue.BACKLIGHT_EFFECT, effect.to_byte()
        ))

    # ─── RGB light ───────────────────────────────────────────────────

    def get_rgblight_brightness(self) -> int:
        return percentage_from_byte(
            self._get_lighting_byte(LightingValue.RGBLIGHT_BRIGHTNESS)
        )

    def set_rgblight_brightness(self, brightness: int) -> None:
        self._send(cmd.build_set_lighting_value(
            LightingValue.RGBLIGHT_BRIGHTNESS, percentage_to_byte(brightness)
        ))

    def get_rgblight_effect(self) -> RgblightEffect:
        return RgblightEffect.from_byte(
            self._get_lighting_byte(LightingValue.RGBLIGHT_EFFECT)
        )

    def set_rgblight_effect(self, effect: RgblightEffect) -> None:
        """Select an RGB animation.

        The frame is sent twice: firmware in the all-off mode treats the
        first write as "turn on" and falls back to solid color.
        """
        frame = cmd.build_set_lighting_value(
            LightingValue.RGBLIGHT_EFFECT, effect.to_byte()
        )
        self._send(frame)
        self._send(frame)

    def get_rgblight_effect_speed(self) -> int:
        return percentage_from_byte(
            self._get_lighting_byte(LightingValue.RGBLIGHT_EFFECT_SPEED)
        )

    def set_rgblight_effect_speed(self, speed: int) -> None:
        self._send(cmd.build_set_lighting_value(
            LightingValue.RGBLIGHT_EFFECT_SPEED, percentage_to_byte(speed)
        ))

    def get_rgblight_color(self) -> Color:
        """Current color; brightness comes from a second query."""
        hs = parser.parse_rgblight_color(
            self._send(cmd.build_get_lighting_value(LightingValue.RGBLIGHT_COLOR))
        )
        return Color(
            hue=hue_from_byte(hs.hue),
            saturation=percentage_from_byte(hs.saturation),
            brightness=self.get_rgblight_brightness(),
        )

    def set_rgblight_color(self, color: Color, set_brightness: bool = True) -> None:
        """Set hue and saturation, then brightness unless told not to."""
        self._send(cmd.build_set_lighting_value(
            LightingValue.RGBLIGHT_COLOR,
            hue_to_byte(color.hue),
            percentage_to_byte(color.saturation),
        ))
        if set_brightness:
            self.set_rgblight_brightness(color.brightness)

    def save_lighting(self) -> None:
        """Persist the current backlight and RGB settings to EEPROM."""
        self._send(cmd.build_save_lighting())

    # ─── EEPROM / bootloader ─────────────────────────────────────────

    def reset_eeprom(self) -> None:
        self._send(cmd.build_reset_eeprom())

    def jump_to_bootloader(self) -> None:
        """Reboot into the bootloader; the keyboard drops off the bus."""
        self.transport.handle.write(cmd.build_bootloader_jump())
        logger.info("Requested bootloader jump")

    # ─── Macros ──────────────────────────────────────────────────────

    def get_macro_count(self) -> int:
        return parser.parse_count(self._send(cmd.build_get_macro_count()))

    def get_macro_buffer_size(self) -> int:
        return parser.parse_buffer_size(self._send(cmd.build_get_macro_buffer_size()))

    def get_macro_buffer(self, offset: int, size: int) -> bytes:
        """Read up to 28 bytes of the raw macro buffer.

        Raises:
            BadBufferSizeError: If ``size`` is 0 or more than 28.
        """
        return parser.parse_buffer_chunk(
            self._send(cmd.build_get_macro_buffer(offset, size)), size
        )

    def set_macro_buffer(self, offset: int, size: int, data: bytes) -> None:
        """Write up to 28 bytes of the raw macro buffer.

        Raises:
            BadBufferSizeError: If ``size`` is 0 or more than 28.
        """
        self._send(cmd.build_set_macro_buffer(offset, size, data))

    def reset_macros(self) -> None:
        """Clear every macro."""
        self.macros.invalidate()
        self._send(cmd.build_reset_macros())

    def get_macro(self, index: int) -> bytes:
        return self.macros.get(index)

    def set_macro(self, index: int, data: bytes) -> None:
        self.macros.set(index, data)

    def get_macros(self) -> list[bytes]:
        return self.macros.get_all()


def _matches(
    info: KeyboardInfo,
    vendor_id: int | None,
    product_id: int | None,
    serial: str | None,
) -> bool:
    if vendor_id is not None and info.vendor_id != vendor_id:
        return False
    if product_id is not None and info.product_id != product_id:
        return False
    if serial and info.serial_number != serial:
        return False
    return True


def connect(
    vendor_id: int | None = None,
    product_id: int | None = None,
    serial: str | None = None,
    *,
    open_attempts: int = OPEN_ATTEMPTS,
    attempts: int = DEFAULT_ATTEMPTS,
    discover: Callable[[], list[KeyboardInfo]] = list_keyboards,
) -> KeyboardClient:
    """Connect to the first matching VIA keyboard.

    Args:
        vendor_id: USB vendor ID to match, or ``None`` for any.
        product_id: USB product ID to match, or ``None`` for any.
        serial: Serial number to match, or ``None``/empty for any.
        open_attempts: How many times to try opening each candidate.
        attempts: Transport attempt budget for the returned client.
        discover: Discovery function, ``list_keyboards`` by default.

    Returns:
        A client whose keyboard speaks VIA protocol 0x0009.

    Raises:
        NoMatchingDeviceError: If discovery finds no matching keyboard.
        VersionMismatchError: If the keyboard speaks another protocol version.
        OSError: The last open failure, if no candidate could be opened.
    """
    if open_attempts < 1:
        raise ValueError(f"open_attempts must be at least 1, got {open_attempts}")

    candidates = [
        info for info in discover()
        if _matches(info, vendor_id, product_id, serial)
    ]
    if not candidates:
        raise NoMatchingDeviceError("no matching VIA keyboard found")

    last_error: OSError | None = None
    for info in candidates:
        for attempt in range(1, open_attempts + 1):
            try:
                handle = info.open()
            except OSError as e:
                logger.debug(
                    "Open attempt %d for %s failed: %s", attempt, info.product, e
                )
                last_error = e
                continue

            client = KeyboardClient(handle, info=info, attempts=attempts)
            try:
                version = client.get_protocol_version()
            except Exception:
                client.close()
                raise
            if version != VIA_PROTOCOL_VERSION:
                client.close()
                raise VersionMismatchError(version, VIA_PROTOCOL_VERSION)

            logger.info(
                "Connected to %s %s (VIA protocol 0x%04X)",
                info.manufacturer, info.product, version,
            )
            return client

    raise last_error
