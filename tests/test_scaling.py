"""Tests for percentage and hue byte scaling."""

import pytest

from qmk_via_mcp.utils.scaling import (
    hue_from_byte,
    hue_to_byte,
    percentage_from_byte,
    percentage_to_byte,
    round_half_away,
)


@pytest.mark.parametrize("value,expected", [
    (0.5, 1), (1.5, 2), (2.5, 3), (-0.5, -1), (-2.5, -3), (2.4999, 2), (0.0, 0),
])
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


@pytest.mark.parametrize("byte,percentage", [(0, 0), (128, 50), (255, 100)])
def test_percentage_boundaries(byte, percentage):
    assert percentage_from_byte(byte) == percentage
    assert percentage_to_byte(percentage) == byte
    assert percentage_to_byte(percentage_from_byte(byte)) == byte


@pytest.mark.parametrize("byte,hue", [(0, 0), (128, 181), (255, 360)])
def test_hue_boundaries(byte, hue):
    assert hue_from_byte(byte) == hue
    assert hue_to_byte(hue) == byte


def test_hue_half_turn():
    assert hue_to_byte(180) == 128
