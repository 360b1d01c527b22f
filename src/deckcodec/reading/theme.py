# theme.py
"""Theme part parsing: the 12-slot colour palette and the major/minor fonts."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping

from deckcodec.models import DEFAULT_THEME, Theme, ThemeColors, ThemeFonts
from deckcodec.reading.package import PRESENTATION_PART, PackageReader, resolve_part_path
from deckcodec.reading.xml_utils import attr, find, parse_xml_blob

log = logging.getLogger("deckcodec")

# Wire slot name -> ThemeColors field
_SLOTS = {
    "dk1": "dk1",
    "lt1": "lt1",
    "dk2": "dk2",
    "lt2": "lt2",
    "accent1": "accent1",
    "accent2": "accent2",
    "accent3": "accent3",
    "accent4": "accent4",
    "accent5": "accent5",
    "accent6": "accent6",
    "hlink": "hlink",
    "folHlink": "fol_hlink",
}


# region find_theme_path
def find_theme_path(presentation_rels: Mapping[str, str]) -> str | None:
    """The theme part's package path, from the presentation's relationships."""
    for target in presentation_rels.values():
        if "theme" in target:
            return resolve_part_path(PRESENTATION_PART, target)
    return None


# endregion


# region load_theme
def load_theme(reader: PackageReader, presentation_rels: Mapping[str, str]) -> Theme:
    """Read and parse the presentation's theme, falling back to the default theme."""
    theme_path = find_theme_path(presentation_rels)
    if theme_path is None:
        log.debug("Presentation has no theme relationship; using the default theme.")
        return DEFAULT_THEME

    blob = reader.read(theme_path)
    if blob is None:
        log.warning(f"Theme part {theme_path} is missing; using the default theme.")
        return DEFAULT_THEME

    try:
        return parse_theme(parse_xml_blob(blob))
    except ValueError:
        log.warning(f"Theme part {theme_path} is malformed; using the default theme.")
        return DEFAULT_THEME


# endregion


# region parse_theme
def parse_theme(root: ET.Element) -> Theme:
    """Build a Theme from an <a:theme> element."""
    elements = find(root, "a:themeElements")
    if elements is None:
        return DEFAULT_THEME

    color_scheme = find(elements, "a:clrScheme")
    colors = _parse_colors(color_scheme) if color_scheme is not None else ThemeColors()

    font_scheme = find(elements, "a:fontScheme")
    fonts = _parse_fonts(font_scheme) if font_scheme is not None else ThemeFonts()

    return Theme(name=root.get("name") or "Theme", colors=colors, fonts=fonts)


def _parse_colors(color_scheme: ET.Element) -> ThemeColors:
    values: dict[str, str] = {}
    for slot, field_name in _SLOTS.items():
        values[field_name] = _slot_color(find(color_scheme, f"a:{slot}"))
    return ThemeColors(**values)


def _slot_color(node: ET.Element | None) -> str:
    """Theme slots only ever hold a literal or a system colour."""
    srgb = find(node, "a:srgbClr")
    if srgb is not None and srgb.get("val"):
        return f"#{srgb.get('val')}"
    sys_clr = find(node, "a:sysClr")
    if sys_clr is not None:
        return f"#{sys_clr.get('lastClr') or '000000'}"
    return "#000000"


def _parse_fonts(font_scheme: ET.Element) -> ThemeFonts:
    major = attr(find(font_scheme, "a:majorFont/a:latin"), "typeface")
    minor = attr(find(font_scheme, "a:minorFont/a:latin"), "typeface")
    return ThemeFonts(major_font=major or "Calibri", minor_font=minor or "Calibri")


# endregion
