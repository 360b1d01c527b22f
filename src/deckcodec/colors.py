# colors.py
"""Colour resolution (import side) and colour sanitization (export side)."""

import logging
import re
import xml.etree.ElementTree as ET

from deckcodec.models import Theme

log = logging.getLogger("deckcodec")

# region consts
DEFAULT_COLOR = "#000000"

# Export-side defaults, without the leading '#'
TEXT_DEFAULT = "000000"
STROKE_DEFAULT = "000000"
FILL_DEFAULT = "FFFFFF"
BACKGROUND_DEFAULT = "FFFFFF"

# region preset colors
PRESET_COLORS = {
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "green": "#00FF00",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    "gray": "#808080",
    "grey": "#808080",
    "darkGray": "#A9A9A9",
    "darkGrey": "#A9A9A9",
    "lightGray": "#D3D3D3",
    "lightGrey": "#D3D3D3",
    "orange": "#FFA500",
    "pink": "#FFC0CB",
    "purple": "#800080",
    "brown": "#A52A2A",
}
# endregion

# Text/background scheme names used by slides, mapped onto the theme's palette slots
# (the default colour map every stock master uses).
SCHEME_ALIASES = {
    "tx1": "dk1",
    "bg1": "lt1",
    "tx2": "dk2",
    "bg2": "lt2",
}

_HEX6 = re.compile(r"^[0-9A-F]{6}$")
_HEX3 = re.compile(r"^[0-9A-F]{3}$")

_NS_A = "{http://schemas.openxmlformats.org/drawingml/2006/main}"
# endregion


# region resolve_color
def resolve_color(
    node: ET.Element | None, theme: Theme | None = None, default: str = DEFAULT_COLOR
) -> str:
    """
    Resolve a colour-bearing node (e.g. <a:solidFill>, <a:gs>) to '#RRGGBB'.

    Resolution order, first match wins:
    1. <a:srgbClr val="..."> direct hex value
    2. <a:schemeClr val="..."> looked up in the theme (skipped when there is no theme)
    3. <a:sysClr lastClr="...">
    4. <a:prstClr val="..."> from PRESET_COLORS
    5. the caller's default

    Never raises.
    """
    if node is None:
        return default

    try:
        srgb = node.find(f"{_NS_A}srgbClr")
        if srgb is not None:
            direct = _normalize_hex(srgb.get("val"))
            if direct:
                return direct

        scheme = node.find(f"{_NS_A}schemeClr")
        if scheme is not None and theme is not None:
            themed = resolve_scheme_color(scheme.get("val"), theme)
            if themed:
                return themed

        sys_clr = node.find(f"{_NS_A}sysClr")
        if sys_clr is not None:
            last = _normalize_hex(sys_clr.get("lastClr"))
            if last:
                return last

        preset = node.find(f"{_NS_A}prstClr")
        if preset is not None:
            named = PRESET_COLORS.get(preset.get("val") or "")
            if named:
                return named
    except (AttributeError, TypeError) as e:
        log.debug(f"Could not resolve colour node {node!r}: {e}")

    return default


# endregion


# region resolve_scheme_color
def resolve_scheme_color(name: str | None, theme: Theme | None) -> str | None:
    """Look up a scheme colour name in the theme palette. Returns None when it can't be resolved."""
    if not name or theme is None:
        return None
    slot = SCHEME_ALIASES.get(name, name)
    return _normalize_hex(theme.colors.lookup(slot))


# endregion


# region sanitize_color
def sanitize_color(value: str | None, default: str = TEXT_DEFAULT) -> str:
    """
    Normalize a colour for export: 'RRGGBB', uppercase, no '#'.

    3-digit hex expands by doubling each digit ('abc' -> 'AABBCC'). Anything else returns
    the default for the caller's context (TEXT_DEFAULT, FILL_DEFAULT, ...).
    """
    if not value or not isinstance(value, str):
        return default
    cleaned = value.strip()
    if cleaned.startswith("#"):
        cleaned = cleaned[1:]
    cleaned = cleaned.upper()
    if _HEX6.match(cleaned):
        return cleaned
    if _HEX3.match(cleaned):
        return "".join(c * 2 for c in cleaned)
    return default


# endregion


# region _normalize_hex
def _normalize_hex(value: str | None) -> str | None:
    """'FF8800' / '#FF8800' -> '#FF8800' (case kept); anything that isn't 6-digit hex -> None."""
    if not value:
        return None
    cleaned = value.strip().lstrip("#")
    if _HEX6.match(cleaned.upper()):
        return f"#{cleaned}"
    return None


# endregion
