"""QMK keycodes as used by the VIA keymap commands.

A keycode is a plain 16-bit int, sent big-endian. ``keycode_name`` gives the
canonical ``KC_*`` name of a code; ``parse_keycode`` accepts canonical names,
their short QMK aliases and the legacy names from older QMK releases.
"""

from __future__ import annotations

from ..exceptions import UnknownKeycodeError

KC_NO = 0x0000
KC_TRANSPARENT = 0x0001
KC_TRNS = KC_TRANSPARENT
KC_ROLL_OVER = 0x0001

FN_MO13 = 0x5F10
FN_MO23 = 0x5F11
MACRO00 = 0x5F12
USER00 = 0x5F80

UNKNOWN_NAME = "UNKNOWN"


def _block(start: int, names: list[str]) -> list[tuple[str, int]]:
    return [(name, start + i) for i, name in enumerate(names)]


# Keyboard/Keypad page (0x07). Index 1 is ROLL_OVER, which shares its code
# with KC_TRANSPARENT and is left out of the canonical names.
_BASIC = [
    "KC_NO", None, "KC_POST_FAIL", "KC_UNDEFINED",
    *(f"KC_{c}" for c in "ABCDEFGHIJKLMNOPQRSTUVWXYZ"),
    *(f"KC_{d}" for d in "1234567890"),
    "KC_ENTER", "KC_ESCAPE", "KC_BACKSPACE", "KC_TAB", "KC_SPACE",
    "KC_MINUS", "KC_EQUAL", "KC_LEFT_BRACKET", "KC_RIGHT_BRACKET",
    "KC_BACKSLASH", "KC_NONUS_HASH", "KC_SEMICOLON", "KC_QUOTE", "KC_GRAVE",
    "KC_COMMA", "KC_DOT", "KC_SLASH", "KC_CAPS_LOCK",
    *(f"KC_F{n}" for n in range(1, 13)),
    "KC_PRINT_SCREEN", "KC_SCROLL_LOCK", "KC_PAUSE", "KC_INSERT", "KC_HOME",
    "KC_PAGE_UP", "KC_DELETE", "KC_END", "KC_PAGE_DOWN", "KC_RIGHT",
    "KC_LEFT", "KC_DOWN", "KC_UP", "KC_NUM_LOCK",
    "KC_KP_SLASH", "KC_KP_ASTERISK", "KC_KP_MINUS", "KC_KP_PLUS",
    "KC_KP_ENTER",
    *(f"KC_KP_{d}" for d in "1234567890"),
    "KC_KP_DOT", "KC_NONUS_BACKSLASH", "KC_APPLICATION", "KC_KB_POWER",
    "KC_KP_EQUAL",
    *(f"KC_F{n}" for n in range(13, 25)),
    "KC_EXECUTE", "KC_HELP", "KC_MENU", "KC_SELECT", "KC_STOP", "KC_AGAIN",
    "KC_UNDO", "KC_CUT", "KC_COPY", "KC_PASTE", "KC_FIND", "KC_KB_MUTE",
    "KC_KB_VOLUME_UP", "KC_KB_VOLUME_DOWN", "KC_LOCKING_CAPS_LOCK",
    "KC_LOCKING_NUM_LOCK", "KC_LOCKING_SCROLL_LOCK", "KC_KP_COMMA",
    "KC_KP_EQUAL_AS400",
    *(f"KC_INTERNATIONAL_{n}" for n in range(1, 10)),
    *(f"KC_LANGUAGE_{n}" for n in range(1, 10)),
    "KC_ALTERNATE_ERASE", "KC_SYSTEM_REQUEST", "KC_CANCEL", "KC_CLEAR",
    "KC_PRIOR", "KC_RETURN", "KC_SEPARATOR", "KC_OUT", "KC_OPER",
    "KC_CLEAR_AGAIN", "KC_CRSEL", "KC_EXSEL",
]

# Generic Desktop and Consumer pages
_MEDIA = [
    "KC_SYSTEM_POWER", "KC_SYSTEM_SLEEP", "KC_SYSTEM_WAKE",
    "KC_AUDIO_MUTE", "KC_AUDIO_VOL_UP", "KC_AUDIO_VOL_DOWN",
    "KC_MEDIA_NEXT_TRACK", "KC_MEDIA_PREV_TRACK", "KC_MEDIA_STOP",
    "KC_MEDIA_PLAY_PAUSE", "KC_MEDIA_SELECT", "KC_MEDIA_EJECT", "KC_MAIL",
    "KC_CALCULATOR", "KC_MY_COMPUTER", "KC_WWW_SEARCH", "KC_WWW_HOME",
    "KC_WWW_BACK", "KC_WWW_FORWARD", "KC_WWW_STOP", "KC_WWW_REFRESH",
    "KC_WWW_FAVORITES", "KC_MEDIA_FAST_FORWARD", "KC_MEDIA_REWIND",
    "KC_BRIGHTNESS_UP", "KC_BRIGHTNESS_DOWN",
]

_MODIFIERS = [
    "KC_LEFT_CTRL", "KC_LEFT_SHIFT", "KC_LEFT_ALT", "KC_LEFT_GUI",
    "KC_RIGHT_CTRL", "KC_RIGHT_SHIFT", "KC_RIGHT_ALT", "KC_RIGHT_GUI",
]

# QMK puts mouse keys in the 0xF0-0xFF range the HID tables leave unallocated.
_MOUSE = [
    "KC_MS_UP", "KC_MS_DOWN", "KC_MS_LEFT", "KC_MS_RIGHT",
    "KC_MS_BTN1", "KC_MS_BTN2", "KC_MS_BTN3", "KC_MS_BTN4", "KC_MS_BTN5",
    "KC_MS_WH_UP", "KC_MS_WH_DOWN", "KC_MS_WH_LEFT", "KC_MS_WH_RIGHT",
    "KC_MS_ACCEL0", "KC_MS_ACCEL1", "KC_MS_ACCEL2",
]

_CANONICAL: list[tuple[str, int]] = [
    ("KC_TRANSPARENT", KC_TRANSPARENT),
    *_block(0xA5, _MEDIA),
    *((name, code) for name, code in _block(0x00, _BASIC) if name is not None),
    *_block(0xE0, _MODIFIERS),
    *_block(0xC0, [f"KC_FN{n}" for n in range(32)]),
    *_block(0xF0, _MOUSE),
    *_block(FN_MO13, ["FN_MO13", "FN_MO23"]),
    *_block(MACRO00, [f"MACRO{n:02d}" for n in range(16)]),
    *_block(USER00, [f"USER{n:02d}" for n in range(16)]),
]

KEYCODE_NAMES: dict[int, str] = {code: name for name, code in _CANONICAL}
KEYCODES: dict[str, int] = {name: code for name, code in _CANONICAL}

# Short QMK aliases and legacy names, keyed without the KC_ prefix.
_ALIASES: dict[str, str] = {
    "TRNS": "KC_TRANSPARENT",
    "ROLL_OVER": "KC_TRANSPARENT",

    # Punctuation
    "ENT": "KC_ENTER", "ESC": "KC_ESCAPE", "BSPC": "KC_BACKSPACE",
    "SPC": "KC_SPACE", "MINS": "KC_MINUS", "EQL": "KC_EQUAL",
    "LBRC": "KC_LEFT_BRACKET", "RBRC": "KC_RIGHT_BRACKET",
    "BSLS": "KC_BACKSLASH", "NUHS": "KC_NONUS_HASH",
    "SCLN": "KC_SEMICOLON", "QUOT": "KC_QUOTE", "GRV": "KC_GRAVE",
    "COMM": "KC_COMMA", "SLSH": "KC_SLASH", "NUBS": "KC_NONUS_BACKSLASH",

    # Lock keys
    "CAPS": "KC_CAPS_LOCK", "SCRL": "KC_SCROLL_LOCK", "NUM": "KC_NUM_LOCK",
    "LCAP": "KC_LOCKING_CAPS_LOCK", "LNUM": "KC_LOCKING_NUM_LOCK",
    "LSCR": "KC_LOCKING_SCROLL_LOCK",

    # Commands
    "PSCR": "KC_PRINT_SCREEN", "PAUS": "KC_PAUSE", "BRK": "KC_PAUSE",
    "INS": "KC_INSERT", "PGUP": "KC_PAGE_UP", "DEL": "KC_DELETE",
    "PGDN": "KC_PAGE_DOWN", "RGHT": "KC_RIGHT", "APP": "KC_APPLICATION",
    "EXEC": "KC_EXECUTE", "SLCT": "KC_SELECT", "AGIN": "KC_AGAIN",
    "PSTE": "KC_PASTE", "ERAS": "KC_ALTERNATE_ERASE",
    "SYRQ": "KC_SYSTEM_REQUEST", "CNCL": "KC_CANCEL", "CLR": "KC_CLEAR",
    "PRIR": "KC_PRIOR", "RETN": "KC_RETURN", "SEPR": "KC_SEPARATOR",
    "CLAG": "KC_CLEAR_AGAIN", "CRSL": "KC_CRSEL", "EXSL": "KC_EXSEL",

    # Keypad
    "PSLS": "KC_KP_SLASH", "PAST": "KC_KP_ASTERISK", "PMNS": "KC_KP_MINUS",
    "PPLS": "KC_KP_PLUS", "PENT": "KC_KP_ENTER", "PDOT": "KC_KP_DOT",
    "PEQL": "KC_KP_EQUAL", "PCMM": "KC_KP_COMMA",
    **{f"P{d}": f"KC_KP_{d}" for d in "1234567890"},

    # Language specific
    **{f"INT{n}": f"KC_INTERNATIONAL_{n}" for n in range(1, 10)},
    **{f"LNG{n}": f"KC_LANGUAGE_{n}" for n in range(1, 10)},

    # Modifiers
    "LCTL": "KC_LEFT_CTRL", "LSFT": "KC_LEFT_SHIFT", "LALT": "KC_LEFT_ALT",
    "LOPT": "KC_LEFT_ALT", "LGUI": "KC_LEFT_GUI", "LCMD": "KC_LEFT_GUI",
    "LWIN": "KC_LEFT_GUI", "RCTL": "KC_RIGHT_CTRL",
    "RSFT": "KC_RIGHT_SHIFT", "RALT": "KC_RIGHT_ALT", "ALGR": "KC_RIGHT_ALT",
    "ROPT": "KC_RIGHT_ALT", "RGUI": "KC_RIGHT_GUI", "RCMD": "KC_RIGHT_GUI",
    "RWIN": "KC_RIGHT_GUI",

    # Media
    "PWR": "KC_SYSTEM_POWER", "SLEP": "KC_SYSTEM_SLEEP",
    "WAKE": "KC_SYSTEM_WAKE", "MUTE": "KC_AUDIO_MUTE",
    "VOLU": "KC_AUDIO_VOL_UP", "VOLD": "KC_AUDIO_VOL_DOWN",
    "MNXT": "KC_MEDIA_NEXT_TRACK", "MPRV": "KC_MEDIA_PREV_TRACK",
    "MSTP": "KC_MEDIA_STOP", "MPLY": "KC_MEDIA_PLAY_PAUSE",
    "MSEL": "KC_MEDIA_SELECT", "EJCT": "KC_MEDIA_EJECT",
    "CALC": "KC_CALCULATOR", "MYCM": "KC_MY_COMPUTER",
    "WSCH": "KC_WWW_SEARCH", "WHOM": "KC_WWW_HOME", "WBAK": "KC_WWW_BACK",
    "WFWD": "KC_WWW_FORWARD", "WSTP": "KC_WWW_STOP",
    "WREF": "KC_WWW_REFRESH", "WFAV": "KC_WWW_FAVORITES",
    "MFFD": "KC_MEDIA_FAST_FORWARD", "MRWD": "KC_MEDIA_REWIND",
    "BRIU": "KC_BRIGHTNESS_UP", "BRID": "KC_BRIGHTNESS_DOWN",

    # macOS display brightness
    "BRMU": "KC_PAUSE", "BRMD": "KC_SCROLL_LOCK",

    # Mouse keys
    "MS_U": "KC_MS_UP", "MS_D": "KC_MS_DOWN", "MS_L": "KC_MS_LEFT",
    "MS_R": "KC_MS_RIGHT",
    **{f"BTN{n}": f"KC_MS_BTN{min(n, 5)}" for n in range(1, 9)},
    **{f"MS_BTN{n}": "KC_MS_BTN5" for n in range(6, 9)},
    "WH_U": "KC_MS_WH_UP", "WH_D": "KC_MS_WH_DOWN",
    "WH_L": "KC_MS_WH_LEFT", "WH_R": "KC_MS_WH_RIGHT",
    "ACL0": "KC_MS_ACCEL0", "ACL1": "KC_MS_ACCEL1", "ACL2": "KC_MS_ACCEL2",

    # Legacy
    "BSPACE": "KC_BACKSPACE", "LBRACKET": "KC_LEFT_BRACKET",
    "RBRACKET": "KC_RIGHT_BRACKET", "BSLASH": "KC_BACKSLASH",
    "SCOLON": "KC_SEMICOLON", "CAPSLOCK": "KC_CAPS_LOCK",
    "PSCREEN": "KC_PRINT_SCREEN", "SCROLLLOCK": "KC_SCROLL_LOCK",
    "PGDOWN": "KC_PAGE_DOWN", "NUMLOCK": "KC_NUM_LOCK",
    "NONUS_BSLASH": "KC_NONUS_BACKSLASH", "POWER": "KC_KB_POWER",
    "_MUTE": "KC_KB_MUTE", "_VOLUP": "KC_KB_VOLUME_UP",
    "_VOLDOWN": "KC_KB_VOLUME_DOWN",
    "LOCKING_CAPS": "KC_LOCKING_CAPS_LOCK",
    "LOCKING_NUM": "KC_LOCKING_NUM_LOCK",
    "LOCKING_SCROLL": "KC_LOCKING_SCROLL_LOCK",
    **{f"LANG{n}": f"KC_LANGUAGE_{n}" for n in range(1, 10)},
    "ALT_ERASE": "KC_ALTERNATE_ERASE", "SYSREQ": "KC_SYSTEM_REQUEST",
    "LCTRL": "KC_LEFT_CTRL", "LSHIFT": "KC_LEFT_SHIFT",
    "RCTRL": "KC_RIGHT_CTRL", "RSHIFT": "KC_RIGHT_SHIFT",
    "ZKHK": "KC_GRAVE", "RO": "KC_INTERNATIONAL_1",
    "KANA": "KC_INTERNATIONAL_2", "JYEN": "KC_INTERNATIONAL_3",
    "HENK": "KC_INTERNATIONAL_4", "MHEN": "KC_INTERNATIONAL_5",
    "HAEN": "KC_LANGUAGE_1", "HANJ": "KC_LANGUAGE_2",
    "CLCK": "KC_CAPS_LOCK", "SLCK": "KC_SCROLL_LOCK", "NLCK": "KC_NUM_LOCK",
}

_LOOKUP: dict[str, int] = {
    name.replace("KC_", ""): code for name, code in _CANONICAL
}
_LOOKUP.update({alias: KEYCODES[name] for alias, name in _ALIASES.items()})


def keycode_from_bytes(msb: int, lsb: int) -> int:
    """Combine two wire bytes (most significant first) into a keycode."""
    return ((msb & 0xFF) << 8) | (lsb & 0xFF)


def keycode_to_bytes(keycode: int) -> bytes:
    """Split a keycode into its two big-endian wire bytes."""
    if not 0 <= keycode <= 0xFFFF:
        raise ValueError(f"Keycode must be 0x0000-0xFFFF, got {keycode:#x}")
    return bytes([(keycode >> 8) & 0xFF, keycode & 0xFF])


def keycode_name(keycode: int) -> str:
    """Canonical name of a keycode, or ``"UNKNOWN"``."""
    return KEYCODE_NAMES.get(keycode, UNKNOWN_NAME)


def parse_keycode(value: str) -> int:
    """Parse a keycode name such as ``KC_A``, ``ESC`` or ``{KC_LCTL}``.

    Braces and every ``KC_`` prefix are removed and the rest is matched
    case-insensitively against canonical names, QMK short aliases and legacy
    names.

    Raises:
        UnknownKeycodeError: If the name is not known. The error's
            ``keycode`` is ``KC_NO``.
    """
    key = value.replace("{", "").replace("}", "").replace("KC_", "").upper()
    try:
        return _LOOKUP[key]
    except KeyError:
        raise UnknownKeycodeError(value, KC_NO) from None


def all_keycodes() -> list[tuple[str, int]]:
    """Every canonical ``(name, keycode)`` pair, in table order."""
    return list(_CANONICAL)
