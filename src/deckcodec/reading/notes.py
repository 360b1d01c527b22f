# notes.py
"""Speaker notes: find a slide's notes part and pull the plain text out of it."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping

from deckcodec.reading.package import resolve_part_path
from deckcodec.reading.xml_utils import attr, find, findall, local_name, parse_xml_blob

log = logging.getLogger("deckcodec")


# region find_notes_path
def find_notes_path(slide_part: str, slide_relationships: Mapping[str, str]) -> str | None:
    """Package path of the notes part linked from a slide, or None when it has no notes."""
    for target in slide_relationships.values():
        if "notesSlide" in target:
            return resolve_part_path(slide_part, target)
    return None


# endregion


# region parse_notes_slide
def parse_notes_slide(xml_blob: bytes | str | None) -> str:
    """
    Text of the body placeholder of a <p:notes> part.

    Paragraph text (runs and fields such as slide numbers) is joined with newlines and
    stripped. Notes are best-effort: anything unreadable gives an empty string.
    """
    if not xml_blob:
        return ""
    try:
        root = parse_xml_blob(xml_blob)
    except ValueError:
        log.warning("Speaker notes part is malformed; ignoring it.")
        return ""

    parts = []
    for sp in findall(root, "p:cSld/p:spTree/p:sp"):
        if attr(find(sp, "p:nvSpPr/p:nvPr/p:ph"), "type") != "body":
            continue
        text = _text_of_body(find(sp, "p:txBody"))
        if text:
            parts.append(text)
    return "\n".join(parts).strip()


def _text_of_body(tx_body: ET.Element | None) -> str:
    lines = []
    for p in findall(tx_body, "a:p"):
        text = "".join(_t(child) for child in p if local_name(child) in ("r", "fld"))
        if text:
            lines.append(text)
    return "\n".join(lines)


def _t(run: ET.Element) -> str:
    node = find(run, "a:t")
    if node is None:
        return ""
    return node.text or ""


# endregion
