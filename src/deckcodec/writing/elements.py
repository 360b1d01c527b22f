# elements.py
"""Serialize slide elements through a PackageWriter, one element at a time."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import assert_never

import requests
from PIL import Image

from deckcodec.colors import FILL_DEFAULT, STROKE_DEFAULT, sanitize_color
from deckcodec.internals.constants import DEFAULT_IMAGE_FETCH_TIMEOUT, DEFAULT_MAX_WORKERS
from deckcodec.models import (
    FillStyle,
    FillType,
    ImageElement,
    Omission,
    OmissionKind,
    ShapeElement,
    ShapeType,
    SlideElement,
    TableCell,
    TableElement,
    TextBoxProperties,
    TextElement,
    VerticalAlign,
)
from deckcodec.units import pixels_to_points
from deckcodec.writing.sanitize import (
    MIN_LINE_WIDTH_PT,
    ImageSourceKind,
    classify_image_source,
    decode_data_uri_payload,
    has_valid_extent,
    placement_for,
)
from deckcodec.writing.text import build_text_frame_spec, has_exportable_text, sanitize_text
from deckcodec.writing.writer import LineSpec, PackageWriter, ShapeSpec, TableSpec

log = logging.getLogger("deckcodec")

# Stand-in drawn where an image can't be decoded or fetched
IMAGE_PLACEHOLDER_COLOR = "CCCCCC"

# Shape text sits in the middle of the shape, like PowerPoint's own default for autoshapes
SHAPE_TEXT_BOX = TextBoxProperties(vertical_align=VerticalAlign.MIDDLE)


# region image payloads
class PayloadStatus(Enum):
    READY = "ready"
    PLACEHOLDER = "placeholder"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ImagePayload:
    """Bytes for one image element, or why there aren't any."""

    status: PayloadStatus
    data: bytes = b""
    reason: str = ""


def prepare_image(
    element: ImageElement, fetch_timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT
) -> ImagePayload:
    """
    Decode or download an image's bytes and check they are a readable image.

    An unusable source (not a data URI, not http(s)) is REJECTED and the element is skipped.
    A usable source whose bytes can't be had or can't be read becomes a PLACEHOLDER.
    """
    source = classify_image_source(element.src)
    if source.kind is ImageSourceKind.INVALID:
        return ImagePayload(
            PayloadStatus.REJECTED, reason=f"Unknown image source format: {element.src[:50]!r}"
        )

    try:
        if source.kind is ImageSourceKind.DATA_URI:
            data = decode_data_uri_payload(source.value)
        else:
            data = fetch_image(source.value, fetch_timeout)
    except (ValueError, requests.RequestException) as e:
        return ImagePayload(PayloadStatus.PLACEHOLDER, reason=str(e))

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (OSError, SyntaxError, ValueError) as e:
        return ImagePayload(PayloadStatus.PLACEHOLDER, reason=f"Image data can't be decoded: {e}")

    return ImagePayload(PayloadStatus.READY, data=data)


def fetch_image(url: str, timeout: float) -> bytes:
    """Download a remote image. Raises requests.RequestException on any failure or timeout."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def prepare_images(
    elements: Iterable[SlideElement],
    fetch_timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, ImagePayload]:
    """Prepare every image element's payload in parallel, keyed by element id."""
    images = [e for e in elements if isinstance(e, ImageElement) and has_valid_extent(e)]
    if not images:
        return {}
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        payloads = list(executor.map(lambda e: prepare_image(e, fetch_timeout), images))
    return {element.id: payload for element, payload in zip(images, payloads)}


# endregion


# region ExportContext
@dataclass
class ExportContext:
    """What element emission needs for one slide."""

    writer: PackageWriter
    slide: int  # writer handle
    slide_index: int
    payloads: Mapping[str, ImagePayload] = field(default_factory=dict)
    omissions: list[Omission] = field(default_factory=list)

    def omit(self, kind: OmissionKind, reason: str, element_id: str | None = None) -> None:
        self.omissions.append(
            Omission(kind=kind, reason=reason, slide_index=self.slide_index, element_id=element_id)
        )


# endregion


# region emit_element
def emit_element(element: SlideElement, ctx: ExportContext) -> bool:
    """
    Write one element. Returns False (with an omission recorded) when it was skipped.

    Failures are contained to the element: the rest of the slide still gets written.
    """
    if not has_valid_extent(element):
        log.warning(
            f"Skipping {element.type.value} element {element.id} with size "
            f"{element.width}x{element.height}."
        )
        ctx.omit(OmissionKind.INVALID_GEOMETRY, "Element has no area.", element.id)
        return False

    try:
        match element:
            case TextElement():
                return _emit_text(element, ctx)
            case ShapeElement():
                return _emit_shape(element, ctx)
            case ImageElement():
                return _emit_image(element, ctx)
            case TableElement():
                return _emit_table(element, ctx)
            case _:
                assert_never(element)
    except Exception as e:
        log.warning(f"Failed to export {element.type.value} element {element.id}: {e}")
        ctx.omit(OmissionKind.WRITE_FAILED, str(e), element.id)
        return False


def _emit_text(element: TextElement, ctx: ExportContext) -> bool:
    if not has_exportable_text(element.content):
        ctx.omit(OmissionKind.EMPTY_TEXT, "Text box has no visible text.", element.id)
        return False
    ctx.writer.add_text_box(
        ctx.slide, placement_for(element), build_text_frame_spec(element.content, element.text_box)
    )
    return True


def _emit_shape(element: ShapeElement, ctx: ExportContext) -> bool:
    text = None
    if has_exportable_text(element.text):
        text = build_text_frame_spec(element.text, SHAPE_TEXT_BOX)

    spec = ShapeSpec(
        shape_type=element.shape_type,
        fill_color=fill_color_for(element.fill),
        line=line_for(element),
        text=text,
    )
    ctx.writer.add_shape(ctx.slide, placement_for(element), spec)
    return True


def _emit_image(element: ImageElement, ctx: ExportContext) -> bool:
    payload = ctx.payloads.get(element.id) or prepare_image(element)

    if payload.status is PayloadStatus.REJECTED:
        log.warning(f"Skipping image {element.id}: {payload.reason}")
        ctx.omit(OmissionKind.INVALID_IMAGE_SOURCE, payload.reason, element.id)
        return False

    placement = placement_for(element)
    if payload.status is PayloadStatus.READY:
        try:
            ctx.writer.add_picture(ctx.slide, placement, payload.data, element.crop)
            return True
        except Exception as e:
            payload = ImagePayload(PayloadStatus.PLACEHOLDER, reason=f"Image could not be embedded: {e}")

    log.warning(f"Image {element.id} replaced by a placeholder: {payload.reason}")
    ctx.writer.add_shape(
        ctx.slide,
        placement,
        ShapeSpec(shape_type=ShapeType.RECT, fill_color=IMAGE_PLACEHOLDER_COLOR),
    )
    ctx.omit(OmissionKind.IMAGE_PLACEHOLDER, payload.reason, element.id)
    return True


def _emit_table(element: TableElement, ctx: ExportContext) -> bool:
    if element.rows <= 0 or element.cols <= 0:
        ctx.omit(OmissionKind.INVALID_GEOMETRY, "Table has no rows or columns.", element.id)
        return False
    cells = tuple(
        tuple(
            TableCell(text=sanitize_text(cell.text), row_span=cell.row_span, col_span=cell.col_span)
            for cell in row
        )
        for row in element.cells
    )
    ctx.writer.add_table(
        ctx.slide,
        placement_for(element),
        TableSpec(rows=element.rows, cols=element.cols, cells=cells),
    )
    return True


# endregion


# region fill & line
def fill_color_for(fill: FillStyle) -> str | None:
    """Solid fills export as-is; gradients export as their first stop; everything else is no fill."""
    if fill.type is FillType.SOLID and fill.color:
        return sanitize_color(fill.color, FILL_DEFAULT)
    if fill.type is FillType.GRADIENT and fill.gradient and fill.gradient.stops:
        return sanitize_color(fill.gradient.stops[0].color, FILL_DEFAULT)
    return None


def line_for(element: ShapeElement) -> LineSpec | None:
    """A stroke with no width means no outline at all. Stroke widths are pixels, LineSpec wants points."""
    stroke = element.stroke
    if stroke is None or stroke.width <= 0:
        return None
    return LineSpec(
        color=sanitize_color(stroke.color, STROKE_DEFAULT),
        width=max(MIN_LINE_WIDTH_PT, pixels_to_points(stroke.width)),
        dash=stroke.dash_style,
    )


# endregion
