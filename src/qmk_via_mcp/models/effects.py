"""Lighting effect enumerations for the backlight and RGB light subsystems.

Both enumerations end with an ``UNKNOWN`` member used for unrecognised names
and out-of-range bytes. Effect names are matched case-insensitively, ignoring
spaces and the word "effect".
"""

from __future__ import annotations

from enum import IntEnum


def _normalize(value: str) -> str:
    return value.lower().replace(" ", "").replace("effect", "")


class BacklightEffect(IntEnum):
    """Single-color backlight effects."""

    BREATHING_OFF = 0
    BREATHING_ON = 1
    UNKNOWN = 2

    @property
    def label(self) -> str:
        return _BACKLIGHT_LABELS.get(self, "Unknown")

    def to_byte(self) -> int:
        return int(self)

    @classmethod
    def from_byte(cls, value: int) -> BacklightEffect:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def all(cls) -> list[BacklightEffect]:
        """Every real effect, excluding ``UNKNOWN``."""
        return [effect for effect in cls if effect is not cls.UNKNOWN]

    @classmethod
    def parse(cls, value: str) -> BacklightEffect:
        return _BACKLIGHT_ALIASES.get(_normalize(value), cls.UNKNOWN)


_BACKLIGHT_LABELS: dict[BacklightEffect, str] = {
    BacklightEffect.BREATHING_OFF: "Breathing Off",
    BacklightEffect.BREATHING_ON: "Breathing On",
}

_BACKLIGHT_ALIASES: dict[str, BacklightEffect] = {
    "off": BacklightEffect.BREATHING_OFF,
    "breathingoff": BacklightEffect.BREATHING_OFF,
    "on": BacklightEffect.BREATHING_ON,
    "breathing": BacklightEffect.BREATHING_ON,
    "breathingon": BacklightEffect.BREATHING_ON,
}


class RgblightEffect(IntEnum):
    """RGB light animation modes, in QMK rgblight mode order."""

    ALL_OFF = 0
    SOLID_COLOR = 1
    BREATHING_1 = 2
    BREATHING_2 = 3
    BREATHING_3 = 4
    BREATHING_4 = 5
    RAINBOW_MOOD_1 = 6
    RAINBOW_MOOD_2 = 7
    RAINBOW_MOOD_3 = 8
    RAINBOW_SWIRL_1 = 9
    RAINBOW_SWIRL_2 = 10
    RAINBOW_SWIRL_3 = 11
    RAINBOW_SWIRL_4 = 12
    RAINBOW_SWIRL_5 = 13
    RAINBOW_SWIRL_6 = 14
    SNAKE_1 = 15
    SNAKE_2 = 16
    SNAKE_3 = 17
    SNAKE_4 = 18
    SNAKE_5 = 19
    SNAKE_6 = 20
    KNIGHT_1 = 21
    KNIGHT_2 = 22
    KNIGHT_3 = 23
    CHRISTMAS = 24
    GRADIENT_1 = 25
    GRADIENT_2 = 26
    GRADIENT_3 = 27
    GRADIENT_4 = 28
    GRADIENT_5 = 29
    GRADIENT_6 = 30
    GRADIENT_7 = 31
    GRADIENT_8 = 32
    GRADIENT_9 = 33
    GRADIENT_10 = 34
    RGB_TEST = 35
    ALTERNATING = 36
    UNKNOWN = 37

    @property
    def label(self) -> str:
        return _RGBLIGHT_LABELS.get(self, "Unknown")

    def to_byte(self) -> int:
        return int(self)

    @classmethod
    def from_byte(cls, value: int) -> RgblightEffect:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def all(cls) -> list[RgblightEffect]:
        """Every real effect, excluding ``UNKNOWN``."""
        return [effect for effect in cls if effect is not cls.UNKNOWN]

    @classmethod
    def parse(cls, value: str) -> RgblightEffect:
        return _RGBLIGHT_ALIASES.get(_normalize(value), cls.UNKNOWN)


def _rgblight_label(effect: RgblightEffect) -> str:
    special = {
        RgblightEffect.SOLID_COLOR: "Solid Color",
        RgblightEffect.RGB_TEST: "RGB Test",
    }
    if effect in special:
        return special[effect]
    return effect.name.replace("_", " ").title()


_RGBLIGHT_LABELS: dict[RgblightEffect, str] = {
    effect: _rgblight_label(effect) for effect in RgblightEffect.all()
}

# Every label is accepted in normalized form, plus these shorthands.
_RGBLIGHT_ALIASES: dict[str, RgblightEffect] = {
    _normalize(label): effect for effect, label in _RGBLIGHT_LABELS.items()
}
_RGBLIGHT_ALIASES.update({
    "off": RgblightEffect.ALL_OFF,
    "solid": RgblightEffect.SOLID_COLOR,
    "static": RgblightEffect.SOLID_COLOR,
    "color": RgblightEffect.SOLID_COLOR,
    "staticcolor": RgblightEffect.SOLID_COLOR,
    "breathing": RgblightEffect.BREATHING_1,
    "mood": RgblightEffect.RAINBOW_MOOD_1,
    "mood1": RgblightEffect.RAINBOW_MOOD_1,
    "mood2": RgblightEffect.RAINBOW_MOOD_2,
    "mood3": RgblightEffect.RAINBOW_MOOD_3,
    "rainbowmood": RgblightEffect.RAINBOW_MOOD_1,
    "swirl": RgblightEffect.RAINBOW_SWIRL_1,
    "swirl1": RgblightEffect.RAINBOW_SWIRL_1,
    "swirl2": RgblightEffect.RAINBOW_SWIRL_2,
    "swirl3": RgblightEffect.RAINBOW_SWIRL_3,
    "swirl4": RgblightEffect.RAINBOW_SWIRL_4,
    "swirl5": RgblightEffect.RAINBOW_SWIRL_5,
    "swirl6": RgblightEffect.RAINBOW_SWIRL_6,
    "rainbowswirl": RgblightEffect.RAINBOW_SWIRL_1,
    "snake": RgblightEffect.SNAKE_1,
    "knight": RgblightEffect.KNIGHT_1,
    "gradient": RgblightEffect.GRADIENT_1,
    "test": RgblightEffect.RGB_TEST,
})
