"""Scaling between VIA wire bytes and human-facing values.

Lighting values travel as a single byte (0-255). Brightness, saturation and
effect speed are presented as percentages (0-100) and hue as degrees (0-360).
Both directions round half away from zero, so 50% encodes as 128 rather than
the 127 that Python's banker's rounding would give.
"""

from __future__ import annotations

import math

BYTE_MAX = 255
PERCENT_MAX = 100
HUE_MAX = 360


def round_half_away(value: float) -> int:
    """Round to the nearest integer, with ties going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def percentage_from_byte(value: int) -> int:
    """Convert a wire byte (0-255) to a percentage (0-100)."""
    return round_half_away(value * PERCENT_MAX / BYTE_MAX)


def percentage_to_byte(percentage: int) -> int:
    """Convert a percentage (0-100) to a wire byte (0-255)."""
    return round_half_away(percentage * BYTE_MAX / PERCENT_MAX)


def hue_from_byte(value: int) -> int:
    """Convert a wire byte (0-255) to a hue in degrees (0-360)."""
    return round_half_away(value * HUE_MAX / BYTE_MAX)


def hue_to_byte(hue: int) -> int:
    """Convert a hue in degrees (0-360) to a wire byte (0-255)."""
    return round_half_away(hue * BYTE_MAX / HUE_MAX)
