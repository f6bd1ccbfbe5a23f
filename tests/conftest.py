"""Shared fixtures: an in-memory keyboard that answers like VIA firmware."""

from __future__ import annotations

import pytest

from qmk_via_mcp.client import KeyboardClient

REPORT_SIZE = 32


class FakeKeyboard:
    """Simulates the raw HID side of a VIA keyboard.

    Like the firmware, it answers in place: the reply is the request report
    with the requested values filled in, or 0xFF in byte 0 for commands it
    does not handle.
    """

    def __init__(
        self,
        version: int = 0x0009,
        layers: int = 4,
        rows: int = 2,
        columns: int = 3,
        macro_count: int = 16,
        macro_buffer_size: int = 64,
    ) -> None:
        self.version = version
        self.layers = layers
        self.rows = rows
        self.columns = columns
        self.macro_count = macro_count
        self.macro_buffer = bytearray(macro_buffer_size)
        self.default_keymap = bytearray(layers * rows * columns * 2)
        for i in range(layers * rows * columns):
            self.default_keymap[i * 2 + 1] = 0x04 + i % 26  # KC_A..KC_Z
        self.keymap = bytearray(self.default_keymap)
        self.uptime = 123456
        self.layout_options = 0
        self.switch_matrix = bytes(range(1, 31))
        self.raw_values: dict[int, bytes] = {0x42: b"\xDE\xAD\xBE\xEF"}
        self.lighting: dict[int, bytes] = {
            0x09: b"\x80",
            0x0A: b"\x01",
            0x80: b"\xFF",
            0x81: b"\x01",
            0x82: b"\x00",
            0x83: b"\x00\x00",
        }
        self.saved = False
        self.eeprom_reset = False
        self.bootloader = False
        self.closed = False
        self.writes: list[bytes] = []
        self._reply: bytes | None = None

    # KeyboardHandle primitives

    def write(self, data: bytes) -> int:
        data = bytes(data)
        self.writes.append(data)
        self._reply = self._answer(bytearray(data))
        return len(data)

    def read(self, size: int) -> bytes:
        reply, self._reply = self._reply, None
        return reply or b""

    def close(self) -> None:
        self.closed = True

    # Firmware behaviour

    @property
    def commands(self) -> list[int]:
        return [frame[0] for frame in self.writes]

    def _answer(self, msg: bytearray) -> bytes:
        command = msg[0]
        if command == 0x01:
            msg[1:3] = self.version.to_bytes(2, "big")
        elif command == 0x02:
            self._get_keyboard_value(msg)
        elif command == 0x03:
            self._set_keyboard_value(msg)
        elif command == 0x04:
            offset = self._keymap_offset(msg[1], msg[2], msg[3])
            msg[4:6] = self.keymap[offset:offset + 2]
        elif command == 0x05:
            offset = self._keymap_offset(msg[1], msg[2], msg[3])
            self.keymap[offset:offset + 2] = msg[4:6]
        elif command == 0x06:
            self.keymap = bytearray(self.default_keymap)
        elif command == 0x07:
            value_id = msg[1]
            width = len(self.lighting.get(value_id, b"\x00"))
            self.lighting[value_id] = bytes(msg[2:2 + width])
        elif command == 0x08:
            value = self.lighting.get(msg[1], b"\x00")
            msg[2:2 + len(value)] = value
        elif command == 0x09:
            self.saved = True
        elif command == 0x0A:
            self.eeprom_reset = True
        elif command == 0x0B:
            self.bootloader = True
        elif command == 0x0C:
            msg[1] = self.macro_count
        elif command == 0x0D:
            msg[1:3] = len(self.macro_buffer).to_bytes(2, "big")
        elif command == 0x0E:
            self._read_buffer(self.macro_buffer, msg)
        elif command == 0x0F:
            self._write_buffer(self.macro_buffer, msg)
        elif command == 0x10:
            self.macro_buffer[:] = bytes(len(self.macro_buffer))
        elif command == 0x11:
            msg[1] = self.layers
        elif command == 0x12:
            self._read_buffer(self.keymap, msg)
        elif command == 0x13:
            self._write_buffer(self.keymap, msg)
        else:
            msg[0] = 0xFF
        return bytes(msg)

    def _get_keyboard_value(self, msg: bytearray) -> None:
        value_id = msg[1]
        if value_id == 0x01:
            msg[2:6] = self.uptime.to_bytes(4, "big")
        elif value_id == 0x02:
            msg[2:6] = self.layout_options.to_bytes(4, "big")
        elif value_id == 0x03:
            msg[2:32] = self.switch_matrix
        elif value_id in self.raw_values:
            value = self.raw_values[value_id]
            msg[2:2 + len(value)] = value
        else:
            msg[0] = 0xFF

    def _set_keyboard_value(self, msg: bytearray) -> None:
        value_id = msg[1]
        if value_id == 0x02:
            self.layout_options = int.from_bytes(msg[2:6], "big")
        elif value_id in self.raw_values:
            self.raw_values[value_id] = bytes(msg[2:32])
        else:
            msg[0] = 0xFF

    def _keymap_offset(self, layer: int, row: int, column: int) -> int:
        return ((layer * self.rows + row) * self.columns + column) * 2

    @staticmethod
    def _read_buffer(buffer: bytearray, msg: bytearray) -> None:
        offset = int.from_bytes(msg[1:3], "big")
        size = msg[3]
        chunk = buffer[offset:offset + size]
        msg[4:32] = bytes(28)
        msg[4:4 + len(chunk)] = chunk

    @staticmethod
    def _write_buffer(buffer: bytearray, msg: bytearray) -> None:
        offset = int.from_bytes(msg[1:3], "big")
        size = msg[3]
        for i in range(size):
            if offset + i < len(buffer):
                buffer[offset + i] = msg[4 + i]


@pytest.fixture
def keyboard() -> FakeKeyboard:
    return FakeKeyboard()


@pytest.fixture
def client(keyboard: FakeKeyboard) -> KeyboardClient:
    return KeyboardClient(keyboard)
