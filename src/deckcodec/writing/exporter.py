# exporter.py
"""Export a Presentation model to .pptx bytes."""

import logging

from deckcodec.colors import BACKGROUND_DEFAULT, sanitize_color
from deckcodec.internals.constants import (
    DEFAULT_AUTHOR,
    DEFAULT_IMAGE_FETCH_TIMEOUT,
    DEFAULT_MAX_WORKERS,
)
from deckcodec.models import (
    Background,
    BackgroundType,
    ExportResult,
    Omission,
    OmissionKind,
    Presentation,
    Slide,
)
from deckcodec.units import pixels_to_inches
from deckcodec.writing.elements import ExportContext, ImagePayload, emit_element, prepare_images
from deckcodec.writing.text import sanitize_text
from deckcodec.writing.writer import PackageWriter, PptxPackageWriter

log = logging.getLogger("deckcodec")


# region export_presentation
def export_presentation(
    presentation: Presentation,
    writer: PackageWriter | None = None,
    default_author: str = DEFAULT_AUTHOR,
    include_notes: bool = True,
    fetch_timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> ExportResult:
    """
    Write a Presentation into a new package and return its bytes.

    Image bytes are decoded/downloaded up front in parallel. Everything after that is emitted
    to the writer sequentially: slides in order, and each slide's elements in ascending
    z_index order. Elements that can't be written are skipped and reported in
    ExportResult.omissions; they never abort the export.
    """
    writer = writer or PptxPackageWriter()
    metadata = presentation.metadata

    writer.set_metadata(
        author=metadata.author or default_author,
        title=metadata.title or presentation.name,
        subject=presentation.name,
        created=metadata.created,
        modified=metadata.modified,
    )
    writer.set_slide_size(
        pixels_to_inches(presentation.slide_width), pixels_to_inches(presentation.slide_height)
    )

    payloads = prepare_images(
        (element for slide in presentation.slides for element in slide.elements),
        fetch_timeout=fetch_timeout,
        max_workers=max_workers,
    )

    omissions: list[Omission] = []
    for slide in presentation.slides:
        omissions.extend(_export_slide(writer, slide, payloads, include_notes))

    data = writer.save()
    log.info(
        f"Exported '{presentation.name}': {len(presentation.slides)} slide(s), "
        f"{len(omissions)} omission(s), {len(data)} bytes."
    )
    return ExportResult(data=data, omissions=tuple(omissions))


# endregion


# region _export_slide
def _export_slide(
    writer: PackageWriter,
    slide: Slide,
    payloads: dict[str, ImagePayload],
    include_notes: bool,
) -> list[Omission]:
    handle = writer.add_slide()
    ctx = ExportContext(writer=writer, slide=handle, slide_index=slide.index, payloads=payloads)

    apply_background(slide.background, ctx)

    # Draw order is z_index order; sorted() is stable, so ties keep their array order.
    for element in sorted(slide.elements, key=lambda e: e.z_index):
        emit_element(element, ctx)

    if include_notes and slide.notes:
        notes = sanitize_text(slide.notes)
        if notes.strip():
            writer.set_notes(handle, notes)

    log.debug(f"Exported slide {slide.index + 1} with {len(ctx.omissions)} omission(s).")
    return ctx.omissions


# endregion


# region apply_background
def apply_background(background: Background, ctx: ExportContext) -> None:
    """
    Solid backgrounds get their sanitized colour (white when invalid), gradients their first
    stop's colour. Image and empty backgrounds leave the template's background alone.
    """
    match background.type:
        case BackgroundType.SOLID:
            color = sanitize_color(background.color, BACKGROUND_DEFAULT)
        case BackgroundType.GRADIENT:
            stops = background.gradient.stops if background.gradient else ()
            color = sanitize_color(stops[0].color if stops else None, BACKGROUND_DEFAULT)
        case BackgroundType.IMAGE:
            ctx.omit(OmissionKind.UNSUPPORTED_ELEMENT, "Picture backgrounds are not exported.")
            return
        case _:
            return
    ctx.writer.set_background(ctx.slide, color)


# endregion
