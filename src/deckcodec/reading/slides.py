# slides.py
"""Turn one slide part into a Slide: its shape tree, background and layout."""

import logging
import re
import uuid
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator, Mapping
from dataclasses import replace

from deckcodec.colors import resolve_color
from deckcodec.models import (
    Background,
    BackgroundType,
    Omission,
    OmissionKind,
    Slide,
    SlideElement,
    Theme,
)
from deckcodec.reading.media import MediaMap, resolve_media
from deckcodec.reading.shapes import (
    GroupTransform,
    SlideContext,
    build_connector,
    build_graphic_frame,
    build_picture,
    build_shape,
    parse_gradient,
)
from deckcodec.reading.xml_utils import attr, find, local_name

log = logging.getLogger("deckcodec")

# region consts
# Optional explicit stacking order on <p:cNvPr>, written by tools that reorder shapes without
# rewriting the tree. When present it wins over document order.
ORDER_HINT_NS = "urn:deckcodec:order"
ORDER_HINT_ATTR = f"{{{ORDER_HINT_NS}}}z"

DEFAULT_LAYOUT_ID = "1"
_LAYOUT_PATTERN = re.compile(r"slideLayout(\d+)")

# Non-visual property wrapper holding <p:cNvPr>, per element tag
_NV_WRAPPERS = {
    "sp": "p:nvSpPr",
    "pic": "p:nvPicPr",
    "cxnSp": "p:nvCxnSpPr",
    "graphicFrame": "p:nvGraphicFramePr",
    "grpSp": "p:nvGrpSpPr",
}

# Children of a shape tree that describe the tree itself rather than draw anything
_TREE_PROPERTY_TAGS = {"nvGrpSpPr", "grpSpPr", "extLst"}

_WHITE_BACKGROUND = Background(type=BackgroundType.SOLID, color="#FFFFFF")
# endregion

ElementBuilder = Callable[[ET.Element, SlideContext, GroupTransform | None], SlideElement | None]

_BUILDERS: dict[str, ElementBuilder] = {
    "sp": build_shape,
    "cxnSp": build_connector,
    "pic": build_picture,
    "graphicFrame": build_graphic_frame,
}


# region parse_slide
def parse_slide(
    root: ET.Element,
    *,
    index: int,
    relationships: Mapping[str, str],
    media: MediaMap,
    theme: Theme,
    notes: str = "",
) -> tuple[Slide, list[Omission]]:
    """
    Build a Slide from a parsed <p:sld> root.

    Elements come back in document order. Each gets z_index = its position among the kept
    elements, unless its <p:cNvPr> carries an explicit order hint.

    Returns the slide and the omissions recorded while building it.
    """
    ctx = SlideContext(
        theme=theme, relationships=relationships, media=media, slide_index=index
    )

    sp_tree = find(root, "p:cSld/p:spTree")
    elements: list[SlideElement] = []
    if sp_tree is None:
        log.debug(f"Slide {index + 1} has no shape tree.")
    else:
        for position, (element, hint) in enumerate(_walk_tree(sp_tree, ctx, None)):
            z_index = hint if hint is not None else position
            elements.append(replace(element, z_index=z_index))

    slide = Slide(
        id=uuid.uuid4().hex,
        index=index,
        layout_id=extract_layout_id(relationships),
        elements=tuple(elements),
        background=parse_background(find(root, "p:cSld/p:bg"), ctx),
        notes=notes,
    )
    log.debug(
        f"Parsed slide {index + 1}: {len(elements)} element(s), {len(ctx.omissions)} omission(s)."
    )
    return slide, ctx.omissions


def _walk_tree(
    tree: ET.Element, ctx: SlideContext, group: GroupTransform | None
) -> Iterator[tuple[SlideElement, int | None]]:
    """Yield (element, order hint) for every drawable node, descending into groups."""
    for child in tree:
        tag = local_name(child)
        if tag in _TREE_PROPERTY_TAGS:
            continue

        if tag == "grpSp":
            yield from _walk_tree(child, ctx, GroupTransform.from_group(child, group))
            continue

        builder = _BUILDERS.get(tag)
        if builder is None:
            ctx.omit(OmissionKind.UNSUPPORTED_ELEMENT, f"<{tag}> is not supported.")
            continue

        element = builder(child, ctx, group)
        if element is not None:
            yield element, read_order_hint(child)


def read_order_hint(node: ET.Element) -> int | None:
    """The explicit stacking order on a node's <p:cNvPr>, if it has a usable one."""
    wrapper = _NV_WRAPPERS.get(local_name(node))
    if wrapper is None:
        return None
    c_nv_pr = find(node, f"{wrapper}/p:cNvPr")
    raw = c_nv_pr.get(ORDER_HINT_ATTR) if c_nv_pr is not None else None
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        log.debug(f"Ignoring non-integer order hint {raw!r}.")
        return None


# endregion


# region parse_background
def parse_background(bg: ET.Element | None, ctx: SlideContext) -> Background:
    """
    Slide background from <p:bg>.

    Explicit properties (<p:bgPr>) can be solid, gradient, picture or no fill. A theme style
    reference (<p:bgRef>) contributes its colour. Everything else is plain white.
    """
    if bg is None:
        return _WHITE_BACKGROUND

    bg_pr = find(bg, "p:bgPr")
    if bg_pr is None:
        bg_ref = find(bg, "p:bgRef")
        if bg_ref is not None:
            return Background(type=BackgroundType.SOLID, color=resolve_color(bg_ref, ctx.theme, "#FFFFFF"))
        return _WHITE_BACKGROUND

    solid = find(bg_pr, "a:solidFill")
    if solid is not None:
        return Background(type=BackgroundType.SOLID, color=resolve_color(solid, ctx.theme))

    gradient = find(bg_pr, "a:gradFill")
    if gradient is not None:
        return Background(
            type=BackgroundType.GRADIENT, color=None, gradient=parse_gradient(gradient, ctx.theme)
        )

    blip_fill = find(bg_pr, "a:blipFill")
    if blip_fill is not None:
        resolved = resolve_media(attr(find(blip_fill, "a:blip"), "r:embed"), ctx.relationships, ctx.media)
        if resolved is None:
            ctx.omit(OmissionKind.MISSING_MEDIA, "Background picture could not be resolved.")
            return _WHITE_BACKGROUND
        asset, _ = resolved
        return Background(type=BackgroundType.IMAGE, color=None, image_url=asset.data_uri)

    if find(bg_pr, "a:noFill") is not None:
        return Background(type=BackgroundType.NONE, color=None)

    return _WHITE_BACKGROUND


# endregion


# region extract_layout_id
def extract_layout_id(relationships: Mapping[str, str]) -> str:
    """Number of the slide layout the slide uses ('slideLayout3.xml' -> '3'); '1' if unknown."""
    for target in relationships.values():
        if "slideLayout" in target:
            match = _LAYOUT_PATTERN.search(target)
            if match:
                return match.group(1)
    return DEFAULT_LAYOUT_ID


# endregion
