# text.py
"""Parse <p:txBody>/<a:txBody> paragraph and run trees into the rich-text model."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import replace

from deckcodec.colors import DEFAULT_COLOR, resolve_color
from deckcodec.models import (
    BulletType,
    Paragraph,
    TextAlignment,
    TextContent,
    TextRun,
    Theme,
)
from deckcodec.reading.xml_utils import attr, find, findall, is_truthy, local_name
from deckcodec.units import parse_int

log = logging.getLogger("deckcodec")

# region consts
FALLBACK_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE = 18
DEFAULT_LINE_HEIGHT = 1.2

ALIGNMENT_MAP = {
    "l": TextAlignment.LEFT,
    "ctr": TextAlignment.CENTER,
    "r": TextAlignment.RIGHT,
    "just": TextAlignment.JUSTIFY,
}

STRIKE_VALUES = {"sngStrike", "dblStrike"}
# endregion


# region parse_text_body
def parse_text_body(
    tx_body: ET.Element | None, theme: Theme | None = None
) -> tuple[TextContent, ...]:
    """Parse a text body into a one-item tuple of TextContent (empty tuple when there's no body)."""
    if tx_body is None:
        return ()
    paragraphs = tuple(parse_paragraph(p, theme) for p in findall(tx_body, "a:p"))
    return (TextContent(paragraphs=paragraphs),)


# endregion


# region parse_paragraph
def parse_paragraph(p_node: ET.Element, theme: Theme | None = None) -> Paragraph:
    """
    Parse one <a:p>.

    Runs are read in document order. A paragraph without runs gets exactly one empty run,
    formatted from <a:endParaRPr>, so the font of an empty line isn't lost.
    """
    runs: list[TextRun] = []
    for child in p_node:
        name = local_name(child)
        if name == "r":
            runs.append(parse_run(child, theme))
        elif name == "br":
            # Soft line break inside the paragraph
            runs.append(replace(_run_from_properties(find(child, "a:rPr"), theme), text="\n"))

    if not runs:
        runs.append(_run_from_properties(find(p_node, "a:endParaRPr"), theme))

    p_pr = find(p_node, "a:pPr")
    return Paragraph(
        runs=tuple(runs),
        alignment=ALIGNMENT_MAP.get(attr(p_pr, "algn") or "l", TextAlignment.LEFT),
        line_height=_parse_line_height(p_pr),
        space_before=_parse_spacing(find(p_pr, "a:spcBef")),
        space_after=_parse_spacing(find(p_pr, "a:spcAft")),
        bullet_type=parse_bullet_type(p_pr),
        indent_level=parse_int(attr(p_pr, "lvl"), 0),
    )


# endregion


# region parse_run
def parse_run(r_node: ET.Element, theme: Theme | None = None) -> TextRun:
    """Parse one <a:r>: its text plus run properties."""
    t_node = find(r_node, "a:t")
    text = t_node.text if t_node is not None and t_node.text else ""
    return replace(_run_from_properties(find(r_node, "a:rPr"), theme), text=text)


def _run_from_properties(r_pr: ET.Element | None, theme: Theme | None) -> TextRun:
    """A text-less run carrying the formatting of an rPr/endParaRPr node (defaults when absent)."""
    size_raw = attr(r_pr, "sz")
    font_size = parse_int(size_raw, DEFAULT_FONT_SIZE * 100) / 100 if size_raw else DEFAULT_FONT_SIZE

    underline = attr(r_pr, "u")

    color = DEFAULT_COLOR
    solid_fill = find(r_pr, "a:solidFill")
    if solid_fill is not None:
        color = resolve_color(solid_fill, theme)

    highlight_node = find(r_pr, "a:highlight")
    highlight = resolve_color(highlight_node, theme) if highlight_node is not None else None

    return TextRun(
        text="",
        bold=is_truthy(attr(r_pr, "b")),
        italic=is_truthy(attr(r_pr, "i")),
        underline=underline is not None and underline != "none",
        strikethrough=attr(r_pr, "strike") in STRIKE_VALUES,
        font_family=resolve_font_family(attr(find(r_pr, "a:latin"), "typeface"), theme),
        font_size=_whole_if_integral(font_size),
        color=color,
        highlight=highlight,
        # Left as a relationship id; resolve_links() swaps in the target.
        link=attr(find(r_pr, "a:hlinkClick"), "r:id"),
    )


# endregion


# region resolve_font_family
def resolve_font_family(typeface: str | None, theme: Theme | None) -> str:
    """
    Resolve a typeface attribute.

    '+mj-lt' / '+mn-lt' style values point at the theme's major/minor font.
    """
    if not typeface:
        return FALLBACK_FONT_FAMILY
    if typeface.startswith("+mj"):
        return theme.fonts.major_font if theme else FALLBACK_FONT_FAMILY
    if typeface.startswith("+mn"):
        return theme.fonts.minor_font if theme else FALLBACK_FONT_FAMILY
    return typeface


# endregion


# region paragraph properties
def parse_bullet_type(p_pr: ET.Element | None) -> BulletType:
    """Explicit "no bullet" beats a character bullet, which beats auto-numbering."""
    if find(p_pr, "a:buNone") is not None:
        return BulletType.NONE
    if find(p_pr, "a:buChar") is not None:
        return BulletType.BULLET
    if find(p_pr, "a:buAutoNum") is not None:
        return BulletType.NUMBER
    return BulletType.NONE


def _parse_spacing(spacing: ET.Element | None) -> float:
    """spcBef/spcAft in points; percentage spacing and absent nodes read as 0."""
    pts = find(spacing, "a:spcPts")
    if pts is None:
        return 0
    return _whole_if_integral(parse_int(attr(pts, "val"), 0) / 100)


def _parse_line_height(p_pr: ET.Element | None) -> float:
    pct = find(p_pr, "a:lnSpc/a:spcPct")
    if pct is None:
        return DEFAULT_LINE_HEIGHT
    value = parse_int(attr(pct, "val"), 0)
    if value <= 0:
        return DEFAULT_LINE_HEIGHT
    return value / 100000


def _whole_if_integral(value: float) -> float:
    return int(value) if float(value).is_integer() else value


# endregion


# region resolve_links
def resolve_links(
    contents: tuple[TextContent, ...], relationships: Mapping[str, str]
) -> tuple[TextContent, ...]:
    """
    Replace hyperlink relationship ids with their targets.

    Links whose id has no relationship are dropped; the run text itself is kept.
    """
    if not contents:
        return contents

    def _resolve(run: TextRun) -> TextRun:
        if run.link is None:
            return run
        target = relationships.get(run.link)
        if target is None:
            log.debug(f"Dropping hyperlink with unknown relationship id {run.link}.")
        return replace(run, link=target)

    return tuple(
        TextContent(
            paragraphs=tuple(
                replace(p, runs=tuple(_resolve(r) for r in p.runs)) for p in content.paragraphs
            )
        )
        for content in contents
    )


# endregion


# region has_visible_text
def has_visible_text(contents: tuple[TextContent, ...] | None) -> bool:
    """True if any run anywhere has non-whitespace text."""
    if not contents:
        return False
    return any(
        run.text and run.text.strip()
        for content in contents
        for paragraph in content.paragraphs
        for run in paragraph.runs
    )


# endregion
