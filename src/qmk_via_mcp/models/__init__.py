"""Value codecs for colors, lighting effects, and keycodes."""

from .color import RGB, Color, NAMED_COLORS, all_colors, parse_color
from .effects import BacklightEffect, RgblightEffect
from .keycodes import keycode_name, parse_keycode
