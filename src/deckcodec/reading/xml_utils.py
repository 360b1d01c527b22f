# xml_utils.py
"""XML parsing helpers shared by the part parsers."""

import logging
import xml.etree.ElementTree as ET

log = logging.getLogger("deckcodec")

# region namespaces
NS = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
    "cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
}
# endregion


# region qn
def qn(tag: str) -> str:
    """Turn a prefixed name like 'r:embed' into ElementTree's '{uri}embed' form."""
    prefix, local = tag.split(":", 1)
    return f"{{{NS[prefix]}}}{local}"


# endregion


# region parse_xml_blob
def parse_xml_blob(xml_blob: bytes | str) -> ET.Element:
    """Parse an XML part into an Element. Raises ValueError on bad encoding or malformed XML."""
    try:
        if isinstance(xml_blob, str):
            # ElementTree refuses str input that still carries an encoding declaration
            xml_blob = xml_blob.encode("utf-8")
        return ET.fromstring(bytes(xml_blob))
    except UnicodeEncodeError as e:
        log.error(f"Invalid encoding in XML blob: {e}")
        raise ValueError(f"XML has invalid encoding: {e}") from e
    except ET.ParseError as e:
        log.error(f"Malformed XML: {e}")
        raise ValueError(f"XML is malformed: {e}") from e


# endregion


# region lookups
def find(node: ET.Element | None, path: str) -> ET.Element | None:
    """namespace-aware find() that tolerates a None parent."""
    if node is None:
        return None
    return node.find(path, NS)


def findall(node: ET.Element | None, path: str) -> list[ET.Element]:
    if node is None:
        return []
    return node.findall(path, NS)


def attr(node: ET.Element | None, name: str, default: str | None = None) -> str | None:
    """Read an attribute; prefixed names ('r:id') are expanded to their namespace."""
    if node is None:
        return default
    key = qn(name) if ":" in name else name
    return node.get(key, default)


def is_truthy(value: str | None) -> bool:
    """Boolean-like XML attribute: only '1' and 'true' count as set."""
    return value in ("1", "true")


def local_name(node: ET.Element) -> str:
    """Tag without its namespace, e.g. 'sp' for '{...presentationml...}sp'."""
    tag = node.tag
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


# endregion
