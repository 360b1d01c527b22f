# importer.py
"""Import a .pptx package into a Presentation model."""

import logging
import uuid
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from deckcodec.internals.constants import DEFAULT_MAX_WORKERS
from deckcodec.models import (
    ImportResult,
    Omission,
    OmissionKind,
    Presentation,
    PresentationMetadata,
    Slide,
)
from deckcodec.reading.media import extract_media
from deckcodec.reading.notes import find_notes_path, parse_notes_slide
from deckcodec.reading.package import (
    CORE_PROPERTIES_PART,
    PRESENTATION_PART,
    InvalidPackageError,
    PackageReader,
    read_relationships,
    resolve_part_path,
)
from deckcodec.reading.slides import parse_slide
from deckcodec.reading.theme import load_theme
from deckcodec.reading.xml_utils import attr, find, findall, parse_xml_blob
from deckcodec.units import emu_to_pixels, parse_int

log = logging.getLogger("deckcodec")

# region consts
# 10in x 7.5in, the classic 4:3 slide
DEFAULT_SLIDE_WIDTH_EMU = 9144000
DEFAULT_SLIDE_HEIGHT_EMU = 6858000
DEFAULT_PRESENTATION_NAME = "Presentation"
# endregion


@dataclass(frozen=True)
class _SlidePart:
    """A slide part that exists and parsed as XML, with what's needed to build it."""

    path: str
    root: ET.Element
    relationships: dict[str, str]
    notes: str


# region import_presentation
def import_presentation(
    source: bytes | Path | str,
    name: str | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> ImportResult:
    """
    Read a .pptx package (bytes or a file path) into an immutable Presentation.

    Media extraction and theme parsing finish before any slide is built; slides are then built
    in parallel and put back in presentation order. Broken references inside the package drop
    the affected element or slide and are reported in ImportResult.omissions.

    Raises:
        InvalidPackageError: the input isn't a ZIP archive, or ppt/presentation.xml is missing
            or malformed.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        reader = PackageReader.from_path(path)
        name = name or path.stem
    else:
        reader = PackageReader.from_bytes(source)
    name = name or DEFAULT_PRESENTATION_NAME

    presentation_root = _read_presentation_part(reader)
    presentation_rels = read_relationships(reader, PRESENTATION_PART)
    omissions: list[Omission] = []
    workers = max(1, max_workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # Shared lookups first: every slide builder reads them.
        media_future = executor.submit(extract_media, reader, workers)
        theme_future = executor.submit(load_theme, reader, presentation_rels)
        slide_paths = _slide_paths(presentation_root, presentation_rels, omissions)
        loaded = list(executor.map(lambda p: _load_slide_part(reader, p), slide_paths))
        media = media_future.result()
        theme = theme_future.result()

        slide_parts: list[_SlidePart] = []
        for slide_path, part in zip(slide_paths, loaded):
            if part is None:
                omissions.append(
                    Omission(
                        kind=OmissionKind.MISSING_PART,
                        reason=f"Slide part {slide_path} is missing or malformed.",
                    )
                )
                continue
            slide_parts.append(part)

        built = list(
            executor.map(
                lambda item: parse_slide(
                    item[1].root,
                    index=item[0],
                    relationships=item[1].relationships,
                    media=media,
                    theme=theme,
                    notes=item[1].notes,
                ),
                enumerate(slide_parts),
            )
        )

    slides: list[Slide] = []
    for slide, slide_omissions in built:
        slides.append(slide)
        omissions.extend(slide_omissions)

    width, height = parse_slide_size(presentation_root)
    presentation = Presentation(
        id=uuid.uuid4().hex,
        name=name,
        slides=tuple(slides),
        theme=theme,
        slide_width=width,
        slide_height=height,
        metadata=parse_metadata(reader),
    )

    log.info(
        f"Imported '{name}': {len(slides)} slide(s), {len(media)} media file(s), "
        f"{len(omissions)} omission(s)."
    )
    return ImportResult(presentation=presentation, omissions=tuple(omissions))


# endregion


# region package parts
def _read_presentation_part(reader: PackageReader) -> ET.Element:
    blob = reader.read(PRESENTATION_PART)
    if blob is None:
        log.error(f"Package has no {PRESENTATION_PART}.")
        raise InvalidPackageError(f"Invalid presentation package: missing {PRESENTATION_PART}")
    try:
        return parse_xml_blob(blob)
    except ValueError as e:
        raise InvalidPackageError(f"Invalid presentation package: {PRESENTATION_PART} is malformed") from e


def _slide_paths(
    presentation_root: ET.Element,
    presentation_rels: dict[str, str],
    omissions: list[Omission],
) -> list[str]:
    """Slide part paths in presentation order, from <p:sldIdLst>."""
    paths = []
    for sld_id in findall(presentation_root, "p:sldIdLst/p:sldId"):
        rel_id = attr(sld_id, "r:id")
        target = presentation_rels.get(rel_id or "")
        if not target:
            omissions.append(
                Omission(
                    kind=OmissionKind.MISSING_RELATIONSHIP,
                    reason=f"Slide entry {rel_id} has no relationship target.",
                )
            )
            continue
        paths.append(resolve_part_path(PRESENTATION_PART, target))
    return paths


def _load_slide_part(reader: PackageReader, slide_path: str) -> _SlidePart | None:
    blob = reader.read(slide_path)
    if blob is None:
        log.warning(f"Slide part {slide_path} is missing from the package.")
        return None
    try:
        root = parse_xml_blob(blob)
    except ValueError:
        log.warning(f"Slide part {slide_path} is malformed; skipping it.")
        return None

    relationships = read_relationships(reader, slide_path)
    notes = ""
    notes_path = find_notes_path(slide_path, relationships)
    if notes_path is not None:
        notes = parse_notes_slide(reader.read(notes_path))

    return _SlidePart(path=slide_path, root=root, relationships=relationships, notes=notes)


# endregion


# region parse_slide_size
def parse_slide_size(presentation_root: ET.Element) -> tuple[int, int]:
    """Slide size in pixels from <p:sldSz>, defaulting to 10in x 7.5in."""
    sld_sz = find(presentation_root, "p:sldSz")
    cx = parse_int(attr(sld_sz, "cx"), DEFAULT_SLIDE_WIDTH_EMU)
    cy = parse_int(attr(sld_sz, "cy"), DEFAULT_SLIDE_HEIGHT_EMU)
    if cx <= 0 or cy <= 0:
        log.warning(f"Ignoring invalid slide size {cx}x{cy} EMU.")
        cx, cy = DEFAULT_SLIDE_WIDTH_EMU, DEFAULT_SLIDE_HEIGHT_EMU
    return emu_to_pixels(cx), emu_to_pixels(cy)


# endregion


# region parse_metadata
def parse_metadata(reader: PackageReader) -> PresentationMetadata:
    """Author, title and timestamps from docProps/core.xml. Missing values get defaults."""
    blob = reader.read(CORE_PROPERTIES_PART)
    if blob is None:
        return PresentationMetadata()
    try:
        root = parse_xml_blob(blob)
    except ValueError:
        log.warning(f"{CORE_PROPERTIES_PART} is malformed; using default metadata.")
        return PresentationMetadata()

    def _text(path: str) -> str:
        node = find(root, path)
        return (node.text or "").strip() if node is not None else ""

    now = datetime.now()
    return PresentationMetadata(
        author=_text("dc:creator"),
        title=_text("dc:title"),
        created=_parse_timestamp(_text("dcterms:created")) or now,
        modified=_parse_timestamp(_text("dcterms:modified")) or now,
    )


def _parse_timestamp(value: str) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        log.debug(f"Unparseable timestamp in core properties: {value!r}")
        return None


# endregion
