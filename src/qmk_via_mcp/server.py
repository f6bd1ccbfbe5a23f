"""MCP server entry point for VIA-enabled QMK keyboards.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import KeyboardClient, connect as connect_keyboard
from .exceptions import UnknownColorFormatError, UnknownKeycodeError
from .models.color import NAMED_COLORS, parse_color
from .models.effects import BacklightEffect, RgblightEffect
from .models.keycodes import keycode_name, parse_keycode
from .transport.hid_connection import list_keyboards as discover_keyboards

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "qmk-via",
    instructions="MCP server for configuring VIA-enabled QMK keyboards over USB HID",
)

# Global connection state
_client: KeyboardClient | None = None


def _get_client() -> KeyboardClient:
    """Get the active keyboard client, raising if not connected."""
    if _client is None:
        raise RuntimeError(
            "Not connected to a keyboard. Use the 'connect' tool first."
        )
    return _client


def _parse_id(value: str | int | None) -> int | None:
    if value is None or isinstance(value, int):
        return value
    return int(value, 0)


def _resolve_keycode(value: str) -> int:
    """Accept a keycode name (``KC_A``, ``ESC``) or a number (``0x0004``)."""
    try:
        return parse_keycode(value)
    except UnknownKeycodeError:
        try:
            code = int(value, 0)
        except ValueError:
            raise UnknownKeycodeError(value) from None
        if not 0 <= code <= 0xFFFF:
            raise UnknownKeycodeError(value) from None
        return code


def _keycode_dict(code: int) -> dict[str, Any]:
    return {"keycode": f"0x{code:04X}", "name": keycode_name(code)}


def _macro_dict(index: int, data: bytes) -> dict[str, Any]:
    return {
        "index": index,
        "text": data.decode("utf-8", errors="replace"),
        "hex": data.hex(),
        "length": len(data),
    }


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def list_keyboards() -> dict[str, Any]:
    """List attached keyboards that expose the VIA raw HID interface."""
    keyboards = discover_keyboards()
    return {
        "keyboards": [kb.to_dict() for kb in keyboards],
        "count": len(keyboards),
    }


@mcp.tool()
def connect(
    vendor_id: str | None = None,
    product_id: str | None = None,
    serial: str | None = None,
) -> dict[str, Any]:
    """Connect to a VIA keyboard and verify its protocol version.

    Args:
        vendor_id: USB vendor ID, e.g. "0x3434" (optional).
        product_id: USB product ID, e.g. "0x0111" (optional).
        serial: Serial number, to pick one of several identical boards.
    """
    global _client
    if _client is not None:
        return {
            "connected": True,
            "message": "Already connected",
            "product": _client.info.product if _client.info else "",
        }

    try:
        vid = _parse_id(vendor_id)
        pid = _parse_id(product_id)
    except ValueError:
        return {"error": "vendor_id and product_id must be numbers, e.g. 0x3434"}

    _client = connect_keyboard(vid, pid, serial)
    result: dict[str, Any] = {
        "connected": True,
        "protocol_version": f"0x{_client.get_protocol_version():04X}",
    }
    if _client.info is not None:
        result.update(_client.info.to_dict())
    return result


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the keyboard."""
    global _client
    if _client is None:
        return {"disconnected": True}
    _client.close()
    _client = None
    return {"disconnected": True}


@mcp.tool()
def get_device_info() -> dict[str, Any]:
    """Protocol version, uptime, layer and macro counts, layout options."""
    client = _get_client()
    result: dict[str, Any] = client.info.to_dict() if client.info else {}
    result.update({
        "protocol_version": f"0x{client.get_protocol_version():04X}",
        "uptime_ms": client.get_uptime(),
        "layout_options": client.get_layout_options(),
        "layer_count": client.get_layer_count(),
        "macro_count": client.get_macro_count(),
        "macro_buffer_size": client.get_macro_buffer_size(),
    })
    return result


# ─── KEYMAP TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def get_keycode(layer: int, row: int, column: int) -> dict[str, Any]:
    """Read the keycode at one matrix position.

    Args:
        layer: Keymap layer (0-based).
        row: Matrix row.
        column: Matrix column.
    """
    code = _get_client().get_keycode(layer, row, column)
    result = _keycode_dict(code)
    result.update({"layer": layer, "row": row, "column": column})
    return result


@mcp.tool()
def set_keycode(layer: int, row: int, column: int, keycode: str) -> dict[str, Any]:
    """Assign a keycode to one matrix position.

    Args:
        layer: Keymap layer (0-based).
        row: Matrix row.
        column: Matrix column.
        keycode: Name such as "KC_A", "ESC", "LCTL", "MACRO03", or a
            number such as "0x0004".
    """
    try:
        code = _resolve_keycode(keycode)
    except UnknownKeycodeError:
        return {"error": f"Unknown keycode: {keycode}"}

    _get_client().set_keycode(layer, row, column, code)
    result = _keycode_dict(code)
    result.update({"layer": layer, "row": row, "column": column, "success": True})
    return result


@mcp.tool()
def get_keymap(rows: int, columns: int) -> dict[str, Any]:
    """Dump every layer of the keymap as keycode names.

    Args:
        rows: Number of matrix rows on this keyboard.
        columns: Number of matrix columns on this keyboard.
    """
    if rows <= 0 or columns <= 0:
        return {"error": "rows and columns must be positive"}

    keymap = _get_client().get_keymap(rows, columns)
    return {
        "layers": [
            [[keycode_name(code) for code in row] for row in layer]
            for layer in keymap
        ],
        "layer_count": len(keymap),
    }


@mcp.tool()
def reset_keymap() -> dict[str, bool]:
    """Restore the firmware's default keymap on every layer."""
    _get_client().reset_keymap()
    return {"success": True}


# ─── LIGHTING TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def get_backlight() -> dict[str, Any]:
    """Read backlight brightness (0-100) and breathing effect."""
    client = _get_client()
    effect = client.get_backlight_effect()
    return {
        "brightness": client.get_backlight_brightness(),
        "effect": effect.label,
    }


@mcp.tool()
def set_backlight(
    brightness: int | None = None,
    effect: str | None = None,
) -> dict[str, Any]:
    """Change backlight settings. Unspecified settings are left alone.

    Args:
        brightness: 0-100.
        effect: "on"/"breathing" or "off".
    """
    if brightness is not None and not 0 <= brightness <= 100:
        return {"error": "brightness must be 0-100"}
    parsed_effect = None
    if effect is not None:
        parsed_effect = BacklightEffect.parse(effect)
        if parsed_effect is BacklightEffect.UNKNOWN:
            return {"error": f"Unknown backlight effect: {effect}"}

    client = _get_client()
    if brightness is not None:
        client.set_backlight_brightness(brightness)
    if parsed_effect is not None:
        client.set_backlight_effect(parsed_effect)
    return get_backlight()


@mcp.tool()
def get_rgblight() -> dict[str, Any]:
    """Read RGB light color, effect, effect speed and brightness."""
    client = _get_client()
    color = client.get_rgblight_color()
    effect = client.get_rgblight_effect()
    return {
        "color": color.to_dict(),
        "effect": effect.label,
        "effect_id": int(effect),
        "speed": client.get_rgblight_effect_speed(),
        "brightness": color.brightness,
    }


@mcp.tool()
def set_rgblight(
    color: str | None = None,
    effect: str | None = None,
    speed: int | None = None,
    brightness: int | None = None,
) -> dict[str, Any]:
    """Change RGB light settings. Unspecified settings are left alone.

    Args:
        color: A name ("teal"), "#rrggbb", "rgb(r,g,b)" or "hsv(h,s,v)".
            The color's brightness is applied unless ``brightness`` is given.
        effect: Effect name such as "solid", "breathing 2", "rainbow swirl 3".
        speed: Effect speed 0-100.
        brightness: 0-100.
    """
    parsed_color = None
    if color is not None:
        try:
            parsed_color = parse_color(color)
        except UnknownColorFormatError:
            return {"error": f"Unknown color: {color}"}
    parsed_effect = None
    if effect is not None:
        parsed_effect = RgblightEffect.parse(effect)
        if parsed_effect is RgblightEffect.UNKNOWN:
            return {"error": f"Unknown RGB light effect: {effect}"}
    for label, value in (("speed", speed), ("brightness", brightness)):
        if value is not None and not 0 <= value <= 100:
            return {"error": f"{label} must be 0-100"}

    client = _get_client()
    if parsed_effect is not None:
        client.set_rgblight_effect(parsed_effect)
    if parsed_color is not None:
        client.set_rgblight_color(parsed_color, set_brightness=brightness is None)
    if brightness is not None:
        client.set_rgblight_brightness(brightness)
    if speed is not None:
        client.set_rgblight_effect_speed(speed)
    return get_rgblight()


@mcp.tool()
def save_lighting() -> dict[str, bool]:
    """Persist the current backlight and RGB light settings to EEPROM."""
    _get_client().save_lighting()
    return {"success": True}


# ─── MACRO TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def list_macros() -> dict[str, Any]:
    """Read every macro slot."""
    macros = _get_client().get_macros()
    return {
        "macros": [_macro_dict(i, data) for i, data in enumerate(macros)],
        "count": len(macros),
    }


@mcp.tool()
def get_macro(index: int) -> dict[str, Any]:
    """Read one macro.

    Args:
        index: Macro slot (0-based).
    """
    if index < 0:
        return {"error": "index must not be negative"}
    return _macro_dict(index, _get_client().get_macro(index))


@mcp.tool()
def set_macro(
    index: int,
    text: str | None = None,
    hex_data: str | None = None,
) -> dict[str, Any]:
    """Replace one macro with plain text or raw bytes.

    Args:
        index: Macro slot (0-based).
        text: Text to type, UTF-8 encoded.
        hex_data: Raw macro bytes as hex, including QMK action codes.
    """
    if (text is None) == (hex_data is None):
        return {"error": "Provide exactly one of text or hex_data"}
    if index < 0:
        return {"error": "index must not be negative"}
    if text is not None:
        data = text.encode("utf-8")
    else:
        try:
            data = bytes.fromhex(hex_data)
        except ValueError:
            return {"error": f"Invalid hex data: {hex_data}"}
    if b"\x00" in data:
        return {"error": "Macro data must not contain zero bytes"}

    client = _get_client()
    client.set_macro(index, data)
    return _macro_dict(index, client.get_macro(index))


@mcp.tool()
def reset_macros() -> dict[str, bool]:
    """Erase every macro."""
    _get_client().reset_macros()
    return {"success": True}


@mcp.tool()
def reset_eeprom() -> dict[str, bool]:
    """Reset the keyboard's EEPROM (keymap, macros, lighting) to defaults."""
    _get_client().reset_eeprom()
    return {"success": True}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("via://keyboard/info")
def resource_keyboard_info() -> str:
    """Connected keyboard identity and connection state."""
    if _client is None:
        return json.dumps({"connected": False})

    info = _client.info.to_dict() if _client.info else {}
    return json.dumps({"connected": True, **info})


@mcp.resource("via://catalog/colors")
def resource_color_catalog() -> str:
    """Predefined RGB light colors."""
    colors = [color.to_dict() for color in NAMED_COLORS.values()]
    return json.dumps({"colors": colors, "count": len(colors)})


@mcp.resource("via://catalog/rgblight-effects")
def resource_rgblight_effects() -> str:
    """RGB light effects with their IDs."""
    effects = [{"id": int(e), "name": e.label} for e in RgblightEffect.all()]
    return json.dumps({"effects": effects, "count": len(effects)})


@mcp.resource("via://catalog/backlight-effects")
def resource_backlight_effects() -> str:
    """Backlight effects with their IDs."""
    effects = [{"id": int(e), "name": e.label} for e in BacklightEffect.all()]
    return json.dumps({"effects": effects, "count": len(effects)})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def design_lighting(mood: str) -> str:
    """Design an RGB lighting scheme for a mood.

    Args:
        mood: Desired mood (e.g., "calm evening", "focused coding").
    """
    colors = ", ".join(NAMED_COLORS)
    return f"""Design RGB lighting for a "{mood}" mood.
Consider:
- A base color (named, #rrggbb, rgb(r,g,b) or hsv(h,s,v))
- An effect (solid, breathing, rainbow mood, swirl, snake, knight, gradient...)
- Effect speed and brightness (0-100)

Named colors: {colors}
Effects: read the via://catalog/rgblight-effects resource.

Use get_rgblight to see the current state, set_rgblight to apply,
and save_lighting once the result looks right."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
