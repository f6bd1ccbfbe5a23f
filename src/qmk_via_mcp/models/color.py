"""RGB light colors.

The firmware stores color as hue/saturation/value, so ``Color`` is an HSV
triple (hue 0-360, saturation and brightness 0-100) and RGB is only ever a
derived view. Two colors are equal when their HSV triples are equal.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import NamedTuple

from ..exceptions import UnknownColorFormatError
from ..utils.scaling import round_half_away

_HSV_RE = re.compile(r"^hsv\((\d+),(\d+),(\d+)\)$")
_RGB_RE = re.compile(r"^rgb\((\d+),(\d+),(\d+)\)$")
_HEX_RE = re.compile(r"^#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$")


class RGB(NamedTuple):
    """An 8-bit RGB triple."""

    red: int
    green: int
    blue: int

    def to_hsv(self) -> Color:
        return rgb_to_hsv(self.red, self.green, self.blue)

    def to_string(self) -> str:
        return f"rgb({self.red},{self.green},{self.blue})"

    def to_hex_string(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


@dataclass(frozen=True)
class Color:
    """An HSV color as stored by the firmware."""

    hue: int = 0
    saturation: int = 0
    brightness: int = 0

    @property
    def name(self) -> str:
        """Predefined color name, or ``"Unknown"``."""
        return _COLOR_NAMES.get(self, "Unknown")

    def to_rgb(self) -> RGB:
        return hsv_to_rgb(self.hue, self.saturation, self.brightness)

    def to_hsv_string(self) -> str:
        return f"hsv({self.hue},{self.saturation},{self.brightness})"

    def to_rgb_string(self) -> str:
        return self.to_rgb().to_string()

    def to_hex_string(self) -> str:
        return self.to_rgb().to_hex_string()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "hsv": self.to_hsv_string(),
            "rgb": self.to_rgb_string(),
            "hex": self.to_hex_string(),
        }


def hsv_to_rgb(hue: int, saturation: int, brightness: int) -> RGB:
    """Convert HSV (0-360, 0-100, 0-100) to 8-bit RGB."""
    h = float(hue)
    s = saturation / 100.0
    v = brightness / 100.0
    chroma = s * v
    x = chroma * (1 - abs(math.fmod(h / 60.0, 2) - 1))
    m = v - chroma

    if 0 <= h < 60:
        r, g, b = chroma, x, 0.0
    elif 60 <= h < 120:
        r, g, b = x, chroma, 0.0
    elif 120 <= h < 180:
        r, g, b = 0.0, chroma, x
    elif 180 <= h < 240:
        r, g, b = 0.0, x, chroma
    elif 240 <= h < 300:
        r, g, b = x, 0.0, chroma
    else:
        r, g, b = chroma, 0.0, x

    return RGB(
        round_half_away((r + m) * 255.0),
        round_half_away((g + m) * 255.0),
        round_half_away((b + m) * 255.0),
    )


def rgb_to_hsv(red: int, green: int, blue: int) -> Color:
    """Convert 8-bit RGB to an HSV ``Color``."""
    r, g, b = float(red), float(green), float(blue)
    cmax = max(r, g, b)
    cmin = min(r, g, b)
    diff = cmax - cmin
    value = round_half_away(cmax * 100.0 / 255.0)

    if cmax == 0:
        return Color(0, 0, value)

    saturation = round_half_away(diff * 100.0 / cmax)
    if diff == 0:
        hue = 0
    elif cmax == r:
        hue = round_half_away(60 * ((g - b) / diff) + 360) % 360
    elif cmax == g:
        hue = round_half_away(60 * ((b - r) / diff) + 120) % 360
    else:
        hue = round_half_away(60 * ((r - g) / diff) + 240) % 360

    return Color(hue, saturation, value)


# QMK default colors as HSV
COLOR_BLACK = Color(0, 0, 0)
COLOR_WHITE = Color(0, 0, 100)
COLOR_RED = Color(0, 100, 100)
COLOR_CORAL = Color(16, 69, 100)
COLOR_ORANGE = Color(40, 100, 100)
COLOR_GOLD = Color(42, 100, 85)
COLOR_GOLDENROD = Color(43, 85, 85)
COLOR_YELLOW = Color(61, 100, 100)
COLOR_CHARTREUSE = Color(90, 100, 100)
COLOR_GREEN = Color(120, 100, 100)
COLOR_SPRING_GREEN = Color(150, 100, 100)
COLOR_TURQUOISE = Color(174, 35, 44)
COLOR_TEAL = Color(181, 100, 50)
COLOR_CYAN = Color(181, 100, 100)
COLOR_AZURE = Color(186, 40, 100)
COLOR_BLUE = Color(240, 100, 100)
COLOR_PURPLE = Color(270, 100, 100)
COLOR_MAGENTA = Color(301, 100, 100)
COLOR_PINK = Color(330, 50, 100)

COLOR_OFF = COLOR_BLACK

NAMED_COLORS: dict[str, Color] = {
    "Black": COLOR_BLACK,
    "White": COLOR_WHITE,
    "Red": COLOR_RED,
    "Coral": COLOR_CORAL,
    "Orange": COLOR_ORANGE,
    "Gold": COLOR_GOLD,
    "Goldenrod": COLOR_GOLDENROD,
    "Yellow": COLOR_YELLOW,
    "Chartreuse": COLOR_CHARTREUSE,
    "Green": COLOR_GREEN,
    "SpringGreen": COLOR_SPRING_GREEN,
    "Turquoise": COLOR_TURQUOISE,
    "Teal": COLOR_TEAL,
    "Cyan": COLOR_CYAN,
    "Azure": COLOR_AZURE,
    "Blue": COLOR_BLUE,
    "Purple": COLOR_PURPLE,
    "Magenta": COLOR_MAGENTA,
    "Pink": COLOR_PINK,
}

_COLOR_NAMES: dict[Color, str] = {color: name for name, color in NAMED_COLORS.items()}
_COLORS_BY_KEY: dict[str, Color] = {
    name.lower(): color for name, color in NAMED_COLORS.items()
}


def all_colors() -> list[Color]:
    """The predefined colors, in table order."""
    return list(NAMED_COLORS.values())


def parse_color(value: str) -> Color:
    """Parse a color name, ``#rrggbb``, ``rgb(r,g,b)`` or ``hsv(h,s,v)``.

    Matching is case-insensitive and ignores spaces and the word "color".

    Raises:
        UnknownColorFormatError: For any other shape or an out-of-range
            component.
    """
    s = value.lower().replace(" ", "").replace("color", "")

    if s.startswith("hsv"):
        match = _HSV_RE.match(s)
        if match is None:
            raise UnknownColorFormatError(f"invalid hsv color {value!r}")
        h, sat, v = (int(part) for part in match.groups())
        if h > 360 or sat > 100 or v > 100:
            raise UnknownColorFormatError(f"hsv component out of range in {value!r}")
        return Color(h, sat, v)

    if s.startswith("rgb"):
        match = _RGB_RE.match(s)
        if match is None:
            raise UnknownColorFormatError(f"invalid rgb color {value!r}")
        r, g, b = (int(part) for part in match.groups())
        if r > 255 or g > 255 or b > 255:
            raise UnknownColorFormatError(f"rgb component out of range in {value!r}")
        return rgb_to_hsv(r, g, b)

    if s.startswith("#"):
        match = _HEX_RE.match(s)
        if match is None:
            raise UnknownColorFormatError(f"invalid hex color {value!r}")
        r, g, b = (int(part, 16) for part in match.groups())
        return rgb_to_hsv(r, g, b)

    try:
        return _COLORS_BY_KEY[s]
    except KeyError:
        raise UnknownColorFormatError(f"unknown color {value!r}") from None
