"""Tests for package access: ZIP reading, relationships, media and theme lookup."""

import base64
import io
import zipfile

import pytest

from deckcodec.models import DEFAULT_THEME
from deckcodec.reading.media import extract_media, mime_type_for, resolve_media
from deckcodec.reading.package import (
    InvalidPackageError,
    PackageReader,
    parse_relationships,
    read_relationships,
    relationships_path_for,
    resolve_part_path,
)
from deckcodec.reading.theme import load_theme
from tests.helpers import PNG_BYTES, build_pptx, rels_xml, slide_xml

_ENTRY_NAME = "ppt/slides/slide1.xml"


def _deflated_zip(payload: bytes) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(_ENTRY_NAME, payload)
    return buffer.getvalue()


# region PackageReader
class TestPackageReader:
    def test_not_a_zip_raises(self) -> None:
        with pytest.raises(InvalidPackageError):
            PackageReader.from_bytes(b"definitely not a zip")

    def test_invalid_package_error_is_a_value_error(self) -> None:
        assert issubclass(InvalidPackageError, ValueError)

    def test_corrupt_compressed_entry_raises(self) -> None:
        """A deflate stream that can't be inflated is an unreadable package, not a crash."""
        data = bytearray(_deflated_zip(b"<p:sld/>" * 200))
        start = 30 + len(_ENTRY_NAME)
        data[start : start + 8] = b"\xff" * 8
        with pytest.raises(InvalidPackageError):
            PackageReader.from_bytes(bytes(data))

    def test_encrypted_entry_raises(self) -> None:
        data = bytearray(_deflated_zip(b"<p:sld/>"))
        central = data.rindex(b"PK\x01\x02")
        data[6] |= 0x01
        data[central + 8] |= 0x01
        with pytest.raises(InvalidPackageError, match="encrypted"):
            PackageReader.from_bytes(bytes(data))

    def test_lists_and_reads_parts(self) -> None:
        reader = PackageReader.from_bytes(build_pptx([slide_xml()], media={"image1.png": PNG_BYTES}))
        assert reader.exists("ppt/presentation.xml")
        assert reader.read("ppt/media/image1.png") == PNG_BYTES
        assert reader.read("ppt/nope.xml") is None
        assert reader.list_dir("ppt/media/") == ["ppt/media/image1.png"]


# endregion


# region relationships
class TestRelationships:
    def test_relationships_path(self) -> None:
        assert relationships_path_for("ppt/slides/slide1.xml") == "ppt/slides/_rels/slide1.xml.rels"

    def test_parse_relationships(self) -> None:
        rels = parse_relationships(rels_xml({"rId1": "../media/image1.png", "rId2": "slide2.xml"}))
        assert rels == {"rId1": "../media/image1.png", "rId2": "slide2.xml"}

    def test_missing_or_malformed_relationships_are_empty(self) -> None:
        assert parse_relationships(None) == {}
        assert parse_relationships("<Relationships") == {}

    def test_read_relationships_for_missing_part(self) -> None:
        reader = PackageReader.from_bytes(build_pptx([slide_xml()]))
        assert read_relationships(reader, "ppt/slides/slide99.xml") == {}

    @pytest.mark.parametrize(
        "source,target,expected",
        [
            ("ppt/slides/slide1.xml", "../media/image1.png", "ppt/media/image1.png"),
            ("ppt/presentation.xml", "slides/slide1.xml", "ppt/slides/slide1.xml"),
            ("ppt/slides/slide1.xml", "/ppt/media/image2.png", "ppt/media/image2.png"),
        ],
    )
    def test_resolve_part_path(self, source: str, target: str, expected: str) -> None:
        assert resolve_part_path(source, target) == expected


# endregion


# region media
class TestMedia:
    def test_extract_media_encodes_every_file(self) -> None:
        reader = PackageReader.from_bytes(
            build_pptx([slide_xml()], media={"image1.png": PNG_BYTES, "photo.jpg": b"\xff\xd8jpeg"})
        )
        media = extract_media(reader, max_workers=2)
        assert set(media) == {"image1.png", "photo.jpg"}
        png = media["image1.png"]
        assert png.mime_type == "image/png"
        assert png.data_uri == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        assert media["photo.jpg"].data_uri.startswith("data:image/jpeg;base64,")

    def test_unknown_extension_is_png(self) -> None:
        assert mime_type_for("blob.xyz") == "image/png"
        assert mime_type_for("diagram.SVG") == "image/svg+xml"

    def test_resolve_media_follows_relationship_by_filename(self) -> None:
        reader = PackageReader.from_bytes(build_pptx([slide_xml()], media={"image1.png": PNG_BYTES}))
        media = extract_media(reader)
        resolved = resolve_media("rId2", {"rId2": "../media/image1.png"}, media)
        assert resolved is not None
        asset, target = resolved
        assert asset.filename == "image1.png"
        assert target == "../media/image1.png"

    def test_resolve_media_misses(self) -> None:
        assert resolve_media(None, {}, {}) is None
        assert resolve_media("rId2", {}, {}) is None
        assert resolve_media("rId2", {"rId2": "../media/gone.png"}, {}) is None


# endregion


# region theme
class TestTheme:
    def test_theme_colors_and_fonts(self) -> None:
        reader = PackageReader.from_bytes(build_pptx([slide_xml()]))
        theme = load_theme(reader, read_relationships(reader, "ppt/presentation.xml"))
        assert theme.name == "Test Theme"
        assert theme.colors.accent1 == "#C00000"
        assert theme.colors.fol_hlink == "#800080"
        assert theme.fonts.major_font == "Georgia"
        assert theme.fonts.minor_font == "Verdana"

    def test_missing_theme_falls_back_to_default(self) -> None:
        reader = PackageReader.from_bytes(build_pptx([slide_xml()], theme=None))
        assert load_theme(reader, read_relationships(reader, "ppt/presentation.xml")) == DEFAULT_THEME

    def test_malformed_theme_falls_back_to_default(self) -> None:
        reader = PackageReader.from_bytes(build_pptx([slide_xml()], theme="<a:theme"))
        assert load_theme(reader, read_relationships(reader, "ppt/presentation.xml")) == DEFAULT_THEME


# endregion
