# shapes.py
"""Build typed slide elements from <p:sp>, <p:cxnSp>, <p:pic> and <p:graphicFrame> nodes."""

from __future__ import annotations

import logging
import uuid
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass, field

from deckcodec.colors import resolve_color
from deckcodec.models import (
    NO_STROKE,
    AutoFitType,
    CropArea,
    DashStyle,
    FillStyle,
    FillType,
    GradientFill,
    GradientStop,
    GradientType,
    ImageElement,
    Omission,
    OmissionKind,
    Padding,
    PlaceholderType,
    ShapeElement,
    ShapeType,
    StrokeStyle,
    TableCell,
    TableElement,
    TextBoxProperties,
    TextElement,
    Theme,
    VerticalAlign,
)
from deckcodec.reading.media import MediaMap, resolve_media
from deckcodec.reading.text import has_visible_text, parse_text_body, resolve_links
from deckcodec.reading.xml_utils import attr, find, findall
from deckcodec.units import emu_to_pixels, parse_int, parse_rotation

log = logging.getLogger("deckcodec")

# region consts
# Where title/body placeholders sit when the slide doesn't carry their geometry
# (they normally inherit it from the layout). Values are pixels: x, y, width, height.
PLACEHOLDER_DEFAULT_POSITIONS: dict[PlaceholderType, tuple[int, int, int, int]] = {
    PlaceholderType.CENTER_TITLE: (50, 200, 860, 100),
    PlaceholderType.TITLE: (50, 30, 860, 60),
    PlaceholderType.SUBTITLE: (100, 320, 760, 60),
    PlaceholderType.BODY: (50, 120, 860, 400),
}
FALLBACK_PLACEHOLDER_SIZE = (0, 0, 100, 50)

# Placeholders that only make sense when they actually hold text
CHROME_PLACEHOLDERS = {
    PlaceholderType.DATE,
    PlaceholderType.FOOTER,
    PlaceholderType.SLIDE_NUMBER,
}

# Fill used for shapes whose look comes from a theme style reference we don't resolve
STYLE_REFERENCE_FILL = FillStyle(type=FillType.SOLID, color="#E5E7EB", opacity=0.8)

PRESET_GEOMETRY_MAP = {
    "rect": ShapeType.RECT,
    "roundRect": ShapeType.ROUND_RECT,
    "ellipse": ShapeType.ELLIPSE,
    "triangle": ShapeType.TRIANGLE,
    "rtTriangle": ShapeType.TRIANGLE,
    "diamond": ShapeType.DIAMOND,
    "pentagon": ShapeType.PENTAGON,
    "hexagon": ShapeType.HEXAGON,
    "star5": ShapeType.STAR5,
    "star6": ShapeType.STAR6,
    "rightArrow": ShapeType.ARROW,
    "leftArrow": ShapeType.ARROW,
    "upArrow": ShapeType.ARROW,
    "downArrow": ShapeType.ARROW,
    "chevron": ShapeType.CHEVRON,
    "wedgeRoundRectCallout": ShapeType.CALLOUT,
    "wedgeRectCallout": ShapeType.CALLOUT,
    "line": ShapeType.LINE,
    "straightConnector1": ShapeType.CONNECTOR,
    "curvedConnector3": ShapeType.CURVED_LINE,
}

VERTICAL_ANCHOR_MAP = {
    "t": VerticalAlign.TOP,
    "ctr": VerticalAlign.MIDDLE,
    "b": VerticalAlign.BOTTOM,
}

DASH_MAP = {
    "dash": DashStyle.DASHED,
    "lgDash": DashStyle.DASHED,
    "dot": DashStyle.DOTTED,
    "sysDot": DashStyle.DOTTED,
}

# DrawingML percentages are stored in thousandths of a percent
PERCENT_SCALE = 100000
# endregion


# region SlideContext
@dataclass
class SlideContext:
    """
    Everything an element builder needs from outside the node it's building.

    One context per slide; the theme and media map are shared, already-complete, read-only values.
    """

    theme: Theme
    relationships: Mapping[str, str]
    media: MediaMap
    slide_index: int
    omissions: list[Omission] = field(default_factory=list)

    def omit(self, kind: OmissionKind, reason: str, element_id: str | None = None) -> None:
        log.debug(f"Slide {self.slide_index + 1}: omitting element ({kind.value}): {reason}")
        self.omissions.append(
            Omission(kind=kind, reason=reason, slide_index=self.slide_index, element_id=element_id)
        )


# endregion


# region transforms
@dataclass(frozen=True)
class GroupTransform:
    """
    The child-coordinate mapping of a <p:grpSp>.

    Children of a group are positioned in the group's own coordinate space (chOff/chExt); this maps
    them back onto the group's frame (off/ext) and then through any enclosing groups.
    """

    off_x: int = 0
    off_y: int = 0
    ch_off_x: int = 0
    ch_off_y: int = 0
    scale_x: float = 1.0
    scale_y: float = 1.0
    parent: GroupTransform | None = None

    @classmethod
    def from_group(cls, grp_sp: ET.Element, parent: GroupTransform | None) -> GroupTransform:
        xfrm = find(grp_sp, "p:grpSpPr/a:xfrm")
        off = find(xfrm, "a:off")
        ext = find(xfrm, "a:ext")
        ch_off = find(xfrm, "a:chOff")
        ch_ext = find(xfrm, "a:chExt")

        def _scale(outer: ET.Element | None, inner: ET.Element | None, key: str) -> float:
            outer_size = parse_int(attr(outer, key), 0)
            inner_size = parse_int(attr(inner, key), 0)
            if outer_size <= 0 or inner_size <= 0:
                return 1.0
            return outer_size / inner_size

        return cls(
            off_x=parse_int(attr(off, "x"), 0),
            off_y=parse_int(attr(off, "y"), 0),
            ch_off_x=parse_int(attr(ch_off, "x"), 0),
            ch_off_y=parse_int(attr(ch_off, "y"), 0),
            scale_x=_scale(ext, ch_ext, "cx"),
            scale_y=_scale(ext, ch_ext, "cy"),
            parent=parent,
        )

    def map_point(self, x: float, y: float) -> tuple[float, float]:
        mapped_x = self.off_x + (x - self.ch_off_x) * self.scale_x
        mapped_y = self.off_y + (y - self.ch_off_y) * self.scale_y
        if self.parent is not None:
            return self.parent.map_point(mapped_x, mapped_y)
        return mapped_x, mapped_y

    def map_size(self, cx: float, cy: float) -> tuple[float, float]:
        mapped = (cx * self.scale_x, cy * self.scale_y)
        if self.parent is not None:
            return self.parent.map_size(*mapped)
        return mapped


@dataclass(frozen=True)
class Transform:
    """Position, size (pixels) and rotation (degrees) of one element on the slide."""

    x: float
    y: float
    width: float
    height: float
    rotation: float = 0


def parse_transform(xfrm: ET.Element | None, group: GroupTransform | None = None) -> Transform | None:
    """
    Read an <a:xfrm>/<p:xfrm> block. Returns None when the block is absent.

    Missing offset/extent attributes read as 0.
    """
    if xfrm is None:
        return None

    off = find(xfrm, "a:off")
    ext = find(xfrm, "a:ext")
    x: float = parse_int(attr(off, "x"), 0)
    y: float = parse_int(attr(off, "y"), 0)
    cx: float = parse_int(attr(ext, "cx"), 0)
    cy: float = parse_int(attr(ext, "cy"), 0)

    if group is not None:
        x, y = group.map_point(x, y)
        cx, cy = group.map_size(cx, cy)

    return Transform(
        x=emu_to_pixels(x),
        y=emu_to_pixels(y),
        width=emu_to_pixels(cx),
        height=emu_to_pixels(cy),
        rotation=parse_rotation(attr(xfrm, "rot")),
    )


# endregion


# region fill & stroke
def parse_fill(sp_pr: ET.Element | None, theme: Theme | None = None) -> FillStyle:
    """Fill of a shape-properties node. No fill node at all means no fill."""
    if sp_pr is None:
        return FillStyle()

    if find(sp_pr, "a:noFill") is not None:
        return FillStyle(type=FillType.NONE)

    solid = find(sp_pr, "a:solidFill")
    if solid is not None:
        return FillStyle(
            type=FillType.SOLID, color=resolve_color(solid, theme), opacity=_alpha(solid)
        )

    gradient_node = find(sp_pr, "a:gradFill")
    if gradient_node is not None:
        return FillStyle(type=FillType.GRADIENT, gradient=parse_gradient(gradient_node, theme))

    pattern = find(sp_pr, "a:pattFill")
    if pattern is not None:
        # Passed through as the foreground colour; pattern geometry isn't modelled.
        return FillStyle(type=FillType.PATTERN, color=resolve_color(find(pattern, "a:fgClr"), theme))

    return FillStyle()


def parse_gradient(grad_fill: ET.Element, theme: Theme | None = None) -> GradientFill:
    """Stops of an <a:gradFill>, offsets as 0..1 fractions."""
    stops = tuple(
        GradientStop(
            offset=parse_int(attr(gs, "pos"), 0) / PERCENT_SCALE,
            color=resolve_color(gs, theme),
        )
        for gs in findall(grad_fill, "a:gsLst/a:gs")
    )
    gradient_type = GradientType.RADIAL if find(grad_fill, "a:path") is not None else GradientType.LINEAR
    angle = parse_rotation(attr(find(grad_fill, "a:lin"), "ang"))
    return GradientFill(type=gradient_type, angle=angle, stops=stops)


def parse_stroke(sp_pr: ET.Element | None, theme: Theme | None = None) -> StrokeStyle:
    """
    Outline of a shape-properties node.

    No <a:ln> (or an explicit noFill) means no stroke: width 0, opacity 0. A line without a
    width is 1px wide; otherwise the width is at least 1px.
    """
    ln = find(sp_pr, "a:ln")
    if ln is None or find(ln, "a:noFill") is not None:
        return NO_STROKE

    w = parse_int(attr(ln, "w"), 0)
    width = max(1, emu_to_pixels(w)) if w > 0 else 1

    color = "#000000"
    solid = find(ln, "a:solidFill")
    if solid is not None:
        color = resolve_color(solid, theme)

    dash = DASH_MAP.get(attr(find(ln, "a:prstDash"), "val") or "", DashStyle.SOLID)
    return StrokeStyle(color=color, width=width, dash_style=dash, opacity=1)


def _alpha(color_parent: ET.Element) -> float:
    """Opacity from an <a:alpha> modifier on the colour node, 1 when absent."""
    for color_node in color_parent:
        alpha = find(color_node, "a:alpha")
        if alpha is not None:
            return min(1.0, max(0.0, parse_int(attr(alpha, "val"), PERCENT_SCALE) / PERCENT_SCALE))
    return 1


# endregion


# region map_shape_type
def map_shape_type(prst: str | None) -> ShapeType:
    """Preset geometry name -> ShapeType. Unknown geometry reads as a rectangle."""
    return PRESET_GEOMETRY_MAP.get(prst or "rect", ShapeType.RECT)


# endregion


# region parse_text_box_properties
def parse_text_box_properties(body_pr: ET.Element | None) -> TextBoxProperties:
    """Box-level text settings from <a:bodyPr>: anchor, insets, auto-fit, wrapping and columns."""
    if body_pr is None:
        return TextBoxProperties()

    defaults = Padding()

    def _inset(name: str, default: float) -> float:
        raw = attr(body_pr, name)
        return emu_to_pixels(parse_int(raw, 0)) if raw is not None else default

    if find(body_pr, "a:normAutofit") is not None:
        auto_fit = AutoFitType.SHRINK
    elif find(body_pr, "a:spAutoFit") is not None:
        auto_fit = AutoFitType.RESIZE
    else:
        auto_fit = AutoFitType.NONE

    return TextBoxProperties(
        vertical_align=VERTICAL_ANCHOR_MAP.get(attr(body_pr, "anchor") or "t", VerticalAlign.TOP),
        padding=Padding(
            top=_inset("tIns", defaults.top),
            right=_inset("rIns", defaults.right),
            bottom=_inset("bIns", defaults.bottom),
            left=_inset("lIns", defaults.left),
        ),
        auto_fit=auto_fit,
        word_wrap=attr(body_pr, "wrap") != "none",
        columns=max(1, parse_int(attr(body_pr, "numCol"), 1)),
    )


# endregion


# region build_shape
def build_shape(
    sp: ET.Element, ctx: SlideContext, group: GroupTransform | None = None
) -> TextElement | ShapeElement | None:
    """
    Build a text box or a shape from a <p:sp>.

    Returns None (recording why) for empty date/footer/slide-number placeholders, for
    non-placeholder shapes without geometry, and for shapes with nothing visible at all.
    """
    nv_sp_pr = find(sp, "p:nvSpPr")
    if nv_sp_pr is None:
        ctx.omit(OmissionKind.UNSUPPORTED_ELEMENT, "Shape has no non-visual properties.")
        return None

    ph = find(nv_sp_pr, "p:nvPr/p:ph")
    placeholder = parse_placeholder_type(ph)
    sp_pr = find(sp, "p:spPr")

    transform = parse_transform(find(sp_pr, "a:xfrm"), group)
    if transform is None:
        if ph is None:
            ctx.omit(OmissionKind.INVALID_GEOMETRY, f"Shape '{_shape_name(nv_sp_pr)}' has no position.")
            return None
        x, y, w, h = PLACEHOLDER_DEFAULT_POSITIONS.get(placeholder, FALLBACK_PLACEHOLDER_SIZE)  # type: ignore[arg-type]
        transform = Transform(x=x, y=y, width=w, height=h)

    fill = parse_fill(sp_pr, ctx.theme)
    stroke = parse_stroke(sp_pr, ctx.theme)
    shape_type = map_shape_type(attr(find(sp_pr, "a:prstGeom"), "prst"))

    tx_body = find(sp, "p:txBody")
    content = resolve_links(parse_text_body(tx_body, ctx.theme), ctx.relationships)
    has_text = has_visible_text(content)

    has_style_reference = _has_style_reference(sp)
    if fill.type is FillType.NONE and has_style_reference:
        fill = STYLE_REFERENCE_FILL

    if placeholder in CHROME_PLACEHOLDERS and not has_text:
        ctx.omit(OmissionKind.EMPTY_PLACEHOLDER, f"Empty {placeholder.value} placeholder.")  # type: ignore[union-attr]
        return None

    is_text_box = (
        (ph is not None and has_text)
        or (has_text and shape_type is ShapeType.RECT)
        or (has_text and fill.type is FillType.NONE and stroke.width == 0)
    )

    if is_text_box:
        return TextElement(
            id=new_element_id(),
            x=transform.x,
            y=transform.y,
            width=transform.width,
            height=transform.height,
            rotation=transform.rotation,
            content=content,
            text_box=parse_text_box_properties(find(tx_body, "a:bodyPr")),
            placeholder=placeholder,
        )

    # Placeholders are structural, so they're kept even when visually empty.
    if (
        fill.type is FillType.NONE
        and stroke.width == 0
        and not has_text
        and not has_style_reference
        and ph is None
    ):
        ctx.omit(OmissionKind.EMPTY_TEXT, f"Shape '{_shape_name(nv_sp_pr)}' has nothing to draw.")
        return None

    return ShapeElement(
        id=new_element_id(),
        x=transform.x,
        y=transform.y,
        width=transform.width,
        height=transform.height,
        rotation=transform.rotation,
        shape_type=shape_type,
        fill=fill,
        stroke=stroke,
        text=content or None,
    )


def parse_placeholder_type(ph: ET.Element | None) -> PlaceholderType | None:
    """
    Placeholder kind of a <p:ph>.

    A <p:ph> without a type is a content ("obj") placeholder, which is treated as body text.
    Kinds with no model counterpart (pictures, charts, ...) return None.
    """
    if ph is None:
        return None
    ph_type = attr(ph, "type") or "obj"
    if ph_type == "obj":
        return PlaceholderType.BODY
    try:
        return PlaceholderType(ph_type)
    except ValueError:
        return None


def _has_style_reference(sp: ET.Element) -> bool:
    style = find(sp, "p:style")
    if style is None:
        return False
    return find(style, "a:fillRef") is not None or find(style, "a:lnRef") is not None


# endregion


# region build_connector
def build_connector(
    cxn_sp: ET.Element, ctx: SlideContext, group: GroupTransform | None = None
) -> ShapeElement | None:
    """Build a line/connector shape from a <p:cxnSp>."""
    sp_pr = find(cxn_sp, "p:spPr")
    transform = parse_transform(find(sp_pr, "a:xfrm"), group)
    if transform is None:
        ctx.omit(OmissionKind.INVALID_GEOMETRY, "Connector has no position.")
        return None

    prst = attr(find(sp_pr, "a:prstGeom"), "prst")
    shape_type = map_shape_type(prst) if prst in PRESET_GEOMETRY_MAP else ShapeType.CONNECTOR

    stroke = parse_stroke(sp_pr, ctx.theme)
    if stroke.width == 0 and find(sp_pr, "a:ln/a:noFill") is None and _has_style_reference(cxn_sp):
        # Connector drawn from the theme's line style; give it a visible default outline.
        stroke = StrokeStyle(width=1, opacity=1)

    return ShapeElement(
        id=new_element_id(),
        x=transform.x,
        y=transform.y,
        width=transform.width,
        height=transform.height,
        rotation=transform.rotation,
        shape_type=shape_type,
        fill=FillStyle(type=FillType.NONE),
        stroke=stroke,
    )


# endregion


# region build_picture
def build_picture(
    pic: ET.Element, ctx: SlideContext, group: GroupTransform | None = None
) -> ImageElement | None:
    """
    Build an image element from a <p:pic>.

    The blip's relationship id is resolved through the slide relationships to an embedded media
    file. Any broken link in that chain drops the picture; the rest of the slide is unaffected.
    """
    blip = find(pic, "p:blipFill/a:blip")
    rel_id = attr(blip, "r:embed")
    if not rel_id:
        ctx.omit(OmissionKind.MISSING_RELATIONSHIP, "Picture has no embedded image reference.")
        return None
    if rel_id not in ctx.relationships:
        ctx.omit(OmissionKind.MISSING_RELATIONSHIP, f"Picture references unknown relationship {rel_id}.")
        return None

    resolved = resolve_media(rel_id, ctx.relationships, ctx.media)
    if resolved is None:
        ctx.omit(
            OmissionKind.MISSING_MEDIA,
            f"Picture media {ctx.relationships[rel_id]} is not in the package.",
        )
        return None
    asset, target = resolved

    transform = parse_transform(find(pic, "p:spPr/a:xfrm"), group)
    if transform is None:
        ctx.omit(OmissionKind.INVALID_GEOMETRY, f"Picture {asset.filename} has no position.")
        return None

    return ImageElement(
        id=new_element_id(),
        x=transform.x,
        y=transform.y,
        width=transform.width,
        height=transform.height,
        rotation=transform.rotation,
        src=asset.data_uri,
        original_src=target,
        crop=parse_crop(find(pic, "p:blipFill/a:srcRect")),
    )


def parse_crop(src_rect: ET.Element | None) -> CropArea | None:
    """<a:srcRect> edge insets -> visible fraction of the source image. None when uncropped."""
    if src_rect is None:
        return None
    left = parse_int(attr(src_rect, "l"), 0) / PERCENT_SCALE
    top = parse_int(attr(src_rect, "t"), 0) / PERCENT_SCALE
    right = parse_int(attr(src_rect, "r"), 0) / PERCENT_SCALE
    bottom = parse_int(attr(src_rect, "b"), 0) / PERCENT_SCALE
    if not any((left, top, right, bottom)):
        return None
    return CropArea(top=top, left=left, width=1 - left - right, height=1 - top - bottom)


# endregion


# region build_graphic_frame
def build_graphic_frame(
    frame: ET.Element, ctx: SlideContext, group: GroupTransform | None = None
) -> TableElement | None:
    """
    Build a table from a <p:graphicFrame>.

    Charts, diagrams and embedded objects share the same wrapper; those are recorded as
    unsupported and skipped.
    """
    graphic_data = find(frame, "a:graphic/a:graphicData")
    tbl = find(graphic_data, "a:tbl")
    if tbl is None:
        uri = attr(graphic_data, "uri") or "unknown"
        ctx.omit(OmissionKind.UNSUPPORTED_ELEMENT, f"Graphic frame content {uri} is not supported.")
        return None

    transform = parse_transform(find(frame, "p:xfrm"), group)
    if transform is None:
        ctx.omit(OmissionKind.INVALID_GEOMETRY, "Table has no position.")
        return None

    rows = tuple(
        tuple(_parse_table_cell(tc) for tc in findall(tr, "a:tc")) for tr in findall(tbl, "a:tr")
    )
    cols = len(findall(tbl, "a:tblGrid/a:gridCol")) or max((len(r) for r in rows), default=0)

    return TableElement(
        id=new_element_id(),
        x=transform.x,
        y=transform.y,
        width=transform.width,
        height=transform.height,
        rotation=transform.rotation,
        rows=len(rows),
        cols=cols,
        cells=rows,
    )


def _parse_table_cell(tc: ET.Element) -> TableCell:
    """Literal cell text (paragraphs joined by newlines) plus spans. Merged-away cells keep span 1."""
    lines = []
    for p in findall(tc, "a:txBody/a:p"):
        lines.append("".join(t.text or "" for t in findall(p, ".//a:t")))
    return TableCell(
        text="\n".join(lines),
        row_span=max(1, parse_int(attr(tc, "rowSpan"), 1)),
        col_span=max(1, parse_int(attr(tc, "gridSpan"), 1)),
    )


# endregion


# region helpers
def new_element_id() -> str:
    return uuid.uuid4().hex


def _shape_name(nv_pr_parent: ET.Element) -> str:
    return attr(find(nv_pr_parent, "p:cNvPr"), "name") or "unnamed"


# endregion
