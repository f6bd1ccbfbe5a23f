"""Tests for keycode names, aliases and byte conversion."""

import pytest

from qmk_via_mcp.exceptions import UnknownKeycodeError
from qmk_via_mcp.models.keycodes import (
    FN_MO13,
    KC_NO,
    KC_TRANSPARENT,
    KEYCODE_NAMES,
    MACRO00,
    USER00,
    all_keycodes,
    keycode_from_bytes,
    keycode_name,
    keycode_to_bytes,
    parse_keycode,
)


def test_bytes_round_trip():
    assert keycode_from_bytes(0x5F, 0x12) == 0x5F12
    assert keycode_to_bytes(0x5F12) == b"\x5f\x12"
    assert keycode_from_bytes(*keycode_to_bytes(0x00E1)) == 0x00E1


def test_to_bytes_range():
    with pytest.raises(ValueError):
        keycode_to_bytes(0x10000)


@pytest.mark.parametrize("code,name", [
    (0x0000, "KC_NO"),
    (0x0001, "KC_TRANSPARENT"),
    (0x0004, "KC_A"),
    (0x001D, "KC_Z"),
    (0x001E, "KC_1"),
    (0x0027, "KC_0"),
    (0x0028, "KC_ENTER"),
    (0x0039, "KC_CAPS_LOCK"),
    (0x0068, "KC_F13"),
    (0x00A4, "KC_EXSEL"),
    (0x00A5, "KC_SYSTEM_POWER"),
    (0x00BE, "KC_BRIGHTNESS_DOWN"),
    (0x00C0, "KC_FN0"),
    (0x00DF, "KC_FN31"),
    (0x00E0, "KC_LEFT_CTRL"),
    (0x00E7, "KC_RIGHT_GUI"),
    (0x00F0, "KC_MS_UP"),
    (0x00F8, "KC_MS_BTN5"),
    (0x00FF, "KC_MS_ACCEL2"),
    (0x5F10, "FN_MO13"),
    (0x5F11, "FN_MO23"),
    (0x5F12, "MACRO00"),
    (0x5F21, "MACRO15"),
    (0x5F80, "USER00"),
    (0x5F8F, "USER15"),
])
def test_keycode_name(code, name):
    assert keycode_name(code) == name


def test_unknown_code_has_generic_name():
    assert keycode_name(0x7E00) == "UNKNOWN"
    assert keycode_name(0x5F22) == "UNKNOWN"


@pytest.mark.parametrize("text,code", [
    ("KC_A", 0x04),
    ("a", 0x04),
    ("{KC_A}", 0x04),
    ("TRNS", KC_TRANSPARENT),
    ("KC_TRANSPARENT", KC_TRANSPARENT),
    ("ROLL_OVER", KC_TRANSPARENT),
    ("KC_NO", KC_NO),
    ("ESC", 0x29),
    ("KC_ENT", 0x28),
    ("BSPC", 0x2A),
    ("KC_BSPACE", 0x2A),
    ("LCTL", 0xE0),
    ("LCTRL", 0xE0),
    ("ALGR", 0xE6),
    ("P1", 0x59),
    ("KC_KP_1", 0x59),
    ("MUTE", 0xA8),
    ("_MUTE", 0x7F),
    ("BRMU", 0x48),
    ("BRMD", 0x47),
    ("BTN1", 0xF4),
    ("BTN8", 0xF8),
    ("KC_MS_BTN6", 0xF8),
    ("ACL0", 0xFD),
    ("LANG1", 0x90),
    ("HAEN", 0x90),
    ("RO", 0x87),
    ("fn_mo13", FN_MO13),
    ("MACRO03", MACRO00 + 3),
    ("USER15", USER00 + 15),
])
def test_parse_keycode(text, code):
    assert parse_keycode(text) == code


@pytest.mark.parametrize("text", ["KC_NOT_A_KEY", "", "KC_", "MACRO16", "kc_a"])
def test_parse_unknown(text):
    with pytest.raises(UnknownKeycodeError) as exc_info:
        parse_keycode(text)
    assert exc_info.value.keycode == KC_NO


def test_unknown_keycode_is_value_error():
    with pytest.raises(ValueError):
        parse_keycode("KC_NOT_A_KEY")


def test_every_canonical_name_parses_back():
    for name, code in all_keycodes():
        assert parse_keycode(name) == code
        assert keycode_name(code) == name


def test_names_are_unique():
    names = [name for name, _ in all_keycodes()]
    assert len(names) == len(set(names))
    assert len(KEYCODE_NAMES) == len(names)
