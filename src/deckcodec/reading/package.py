# package.py
"""Read access to the ZIP package and its relationship parts."""

from __future__ import annotations

import io
import logging
import posixpath
import zipfile
import zlib
from pathlib import Path

from deckcodec.reading.xml_utils import NS, parse_xml_blob

log = logging.getLogger("deckcodec")

PRESENTATION_PART = "ppt/presentation.xml"
CORE_PROPERTIES_PART = "docProps/core.xml"
MEDIA_PREFIX = "ppt/media/"


# region InvalidPackageError
class InvalidPackageError(ValueError):
    """The input can't be read as a presentation package at all, so no model can be built."""


# endregion


# region PackageReader
class PackageReader:
    """
    Enumerate and extract parts of a presentation package by path.

    Every entry is read into memory once, when the reader is created, so the reader is
    read-only afterwards and safe to share between worker threads.
    """

    def __init__(self, parts: dict[str, bytes]) -> None:
        self._parts = parts

    # region constructors
    @classmethod
    def from_bytes(cls, data: bytes) -> PackageReader:
        """Open a package held in memory. Raises InvalidPackageError if it isn't a ZIP archive."""
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                parts = {
                    info.filename: archive.read(info)
                    for info in archive.infolist()
                    if not info.is_dir()
                }
        # Corrupt deflate streams raise zlib.error, encrypted entries RuntimeError and
        # unknown compression methods NotImplementedError
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            RuntimeError,
            NotImplementedError,
            EOFError,
        ) as e:
            log.error(f"Input is not a valid package archive: {e}")
            raise InvalidPackageError(f"Not a valid package (ZIP) file: {e}") from e
        log.debug(f"Opened package with {len(parts)} parts.")
        return cls(parts)

    @classmethod
    def from_path(cls, path: Path | str) -> PackageReader:
        return cls.from_bytes(Path(path).read_bytes())

    # endregion

    def names(self) -> list[str]:
        return sorted(self._parts)

    def exists(self, path: str) -> bool:
        return path in self._parts

    def read(self, path: str) -> bytes | None:
        """Bytes of a part, or None when the package has no such part."""
        return self._parts.get(path)

    def read_text(self, path: str) -> str | None:
        data = self.read(path)
        if data is None:
            return None
        return data.decode("utf-8", errors="replace")

    def list_dir(self, prefix: str) -> list[str]:
        """Every part path under a folder prefix, e.g. 'ppt/media/'."""
        return [name for name in self.names() if name.startswith(prefix)]


# endregion


# region relationships
def relationships_path_for(part_path: str) -> str:
    """'ppt/slides/slide1.xml' -> 'ppt/slides/_rels/slide1.xml.rels'"""
    folder, filename = posixpath.split(part_path)
    return posixpath.join(folder, "_rels", f"{filename}.rels")


def parse_relationships(xml_blob: bytes | str | None) -> dict[str, str]:
    """
    Build the relationship map (id -> target) of one part.

    A missing or malformed relationships part yields an empty map.
    """
    if not xml_blob:
        return {}
    try:
        root = parse_xml_blob(xml_blob)
    except ValueError:
        log.warning("Skipping malformed relationships part.")
        return {}

    rels: dict[str, str] = {}
    for rel in root.findall("rel:Relationship", NS):
        rel_id = rel.get("Id")
        target = rel.get("Target")
        if rel_id and target:
            rels[rel_id] = target
    return rels


def read_relationships(reader: PackageReader, part_path: str) -> dict[str, str]:
    """Relationship map for a part, read from the package."""
    return parse_relationships(reader.read(relationships_path_for(part_path)))


def resolve_part_path(source_part: str, target: str) -> str:
    """
    Resolve a relationship target relative to the part that owns the relationship.

    resolve_part_path('ppt/slides/slide1.xml', '../media/image1.png') -> 'ppt/media/image1.png'
    Absolute targets ('/ppt/...') are taken from the package root.
    """
    if target.startswith("/"):
        return target.lstrip("/")
    base = posixpath.dirname(source_part)
    return posixpath.normpath(posixpath.join(base, target))


def target_filename(target: str) -> str:
    """Last path segment of a relationship target."""
    return target.rsplit("/", 1)[-1]


# endregion
