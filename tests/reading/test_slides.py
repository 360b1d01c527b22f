"""Tests for slide assembly: z-order, groups, backgrounds and layout ids."""

from deckcodec.models import (
    DEFAULT_THEME,
    BackgroundType,
    ElementType,
    Omission,
    OmissionKind,
    Slide,
)
from deckcodec.reading.media import MediaAsset
from deckcodec.reading.slides import extract_layout_id, parse_slide
from deckcodec.reading.xml_utils import parse_xml_blob
from tests.helpers import grp_sp, pic, slide_xml, sp, xfrm

SOLID = '<a:solidFill><a:srgbClr val="00AA00"/></a:solidFill>'
ASSET = MediaAsset(filename="image1.png", mime_type="image/png", data_uri="data:image/png;base64,AAAA")


def parse(
    shapes: str,
    background: str = "",
    relationships: dict[str, str] | None = None,
    media: dict[str, MediaAsset] | None = None,
) -> tuple[Slide, list[Omission]]:
    return parse_slide(
        parse_xml_blob(slide_xml(shapes, background)),
        index=0,
        relationships=relationships or {},
        media=media or {},
        theme=DEFAULT_THEME,
    )


# region z-order
class TestZOrder:
    def test_document_order_gives_z_index(self) -> None:
        slide, _ = parse(sp(2, "A", text=["a"]) + sp(3, "B", text=["b"]) + sp(4, "C", text=["c"]))
        assert [e.z_index for e in slide.elements] == [0, 1, 2]
        assert [e.content[0].text for e in slide.elements] == ["a", "b", "c"]

    def test_order_hint_wins_over_document_order(self) -> None:
        slide, _ = parse(
            sp(2, "A", text=["a"], order=3) + sp(3, "B", text=["b"], order=1) + sp(4, "C", text=["c"], order=2)
        )
        assert [e.z_index for e in slide.elements] == [3, 1, 2]

    def test_skipped_elements_do_not_leave_gaps(self) -> None:
        slide, omissions = parse(sp(2, "A", text=["a"]) + sp(3, "Empty") + sp(4, "C", text=["c"]))
        assert [e.z_index for e in slide.elements] == [0, 1]
        assert [o.kind for o in omissions] == [OmissionKind.EMPTY_TEXT]


# endregion


# region groups & unsupported
def test_group_children_are_flattened_onto_the_slide() -> None:
    group = grp_sp(
        sp(5, "Inside", text=["in group"], geometry=xfrm(x=0, y=0, cx=952500, cy=952500)),
        off=(952500, 952500),
        ext=(952500, 952500),
    )
    slide, _ = parse(sp(2, "Before", text=["before"]) + group)
    assert len(slide.elements) == 2
    inside = slide.elements[1]
    assert (inside.x, inside.y) == (100, 100)
    assert inside.z_index == 1


def test_unknown_tree_children_are_recorded() -> None:
    slide, omissions = parse('<p:contentPart r:id="rId9"/>' + sp(2, "A", text=["a"]))
    assert len(slide.elements) == 1
    assert omissions[0].kind is OmissionKind.UNSUPPORTED_ELEMENT
    assert omissions[0].slide_index == 0


def test_picture_with_missing_media_is_omitted_and_rest_kept() -> None:
    slide, omissions = parse(
        sp(2, "A", text=["a"]) + pic(3, "rId2"),
        relationships={"rId2": "../media/image7.png"},
        media={"image1.png": ASSET},
    )
    assert [e.type for e in slide.elements] == [ElementType.TEXT]
    assert omissions[0].kind is OmissionKind.MISSING_MEDIA


# endregion


# region backgrounds
class TestBackground:
    def test_no_background_is_white(self) -> None:
        slide, _ = parse("")
        assert slide.background.type is BackgroundType.SOLID
        assert slide.background.color == "#FFFFFF"

    def test_solid_background(self) -> None:
        slide, _ = parse("", background=f"<p:bg><p:bgPr>{SOLID}<a:effectLst/></p:bgPr></p:bg>")
        assert slide.background.color == "#00AA00"

    def test_gradient_background(self) -> None:
        slide, _ = parse(
            "",
            background=(
                '<p:bg><p:bgPr><a:gradFill><a:gsLst><a:gs pos="0"><a:srgbClr val="000000"/></a:gs>'
                '<a:gs pos="100000"><a:srgbClr val="FFFFFF"/></a:gs></a:gsLst></a:gradFill></p:bgPr></p:bg>'
            ),
        )
        assert slide.background.type is BackgroundType.GRADIENT
        assert slide.background.color is None
        assert slide.background.gradient is not None
        assert len(slide.background.gradient.stops) == 2

    def test_picture_background(self) -> None:
        slide, _ = parse(
            "",
            background='<p:bg><p:bgPr><a:blipFill><a:blip r:embed="rId3"/></a:blipFill></p:bgPr></p:bg>',
            relationships={"rId3": "../media/image1.png"},
            media={"image1.png": ASSET},
        )
        assert slide.background.type is BackgroundType.IMAGE
        assert slide.background.image_url == ASSET.data_uri

    def test_style_reference_background(self) -> None:
        slide, _ = parse("", background='<p:bg><p:bgRef idx="1001"><a:schemeClr val="accent1"/></p:bgRef></p:bg>')
        assert slide.background.color == DEFAULT_THEME.colors.accent1


# endregion


def test_layout_id_from_relationships() -> None:
    assert extract_layout_id({"rId1": "../slideLayouts/slideLayout3.xml"}) == "3"
    assert extract_layout_id({}) == "1"
