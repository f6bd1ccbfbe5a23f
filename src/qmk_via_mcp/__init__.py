"""VIA protocol client and MCP server for QMK keyboards."""

from .client import KeyboardClient, connect
from .exceptions import ViaError
from .macros import MacroStore
from .models.color import Color, parse_color
from .models.effects import BacklightEffect, RgblightEffect
from .models.keycodes import keycode_name, parse_keycode
from .transport.hid_connection import KeyboardInfo, list_keyboards

__version__ = "0.1.0"

__all__ = [
    "BacklightEffect",
    "Color",
    "KeyboardClient",
    "KeyboardInfo",
    "MacroStore",
    "RgblightEffect",
    "ViaError",
    "connect",
    "keycode_name",
    "list_keyboards",
    "parse_color",
    "parse_keycode",
]
