"""Shared test helper functions: build small .pptx packages from hand-written XML parts."""

import base64
import io
import xml.etree.ElementTree as ET
import zipfile
from typing import Iterable, Mapping

from PIL import Image

from deckcodec.reading.xml_utils import NS

NSDECL = (
    f'xmlns:a="{NS["a"]}" xmlns:p="{NS["p"]}" xmlns:r="{NS["r"]}" xmlns:o="urn:deckcodec:order"'
)
REL_NS = NS["rel"]


def png_bytes(size: tuple[int, int] = (2, 2), color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


PNG_BYTES = png_bytes()
PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


# region XML fragments
def xml(fragment: str) -> ET.Element:
    """Parse a fragment that uses the a:/p:/r: prefixes without declaring them."""
    tag_end = fragment.index(">")
    if fragment[tag_end - 1] == "/":
        tag_end -= 1
    return ET.fromstring(f"{fragment[:tag_end]} {NSDECL}{fragment[tag_end:]}")


def xfrm(x: int = 0, y: int = 0, cx: int = 952500, cy: int = 476250, rot: int = 0) -> str:
    rot_attr = f' rot="{rot}"' if rot else ""
    return f'<a:xfrm{rot_attr}><a:off x="{x}" y="{y}"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'


def text_body(*paragraphs: str, body_pr: str = "<a:bodyPr/>") -> str:
    paras = "".join(f"<a:p><a:r><a:rPr/><a:t>{p}</a:t></a:r></a:p>" for p in paragraphs)
    return f"<p:txBody>{body_pr}<a:lstStyle/>{paras}</p:txBody>"


def sp(
    shape_id: int = 2,
    name: str = "Shape",
    *,
    geometry: str | None = None,
    prst: str = "rect",
    fill: str = "",
    line: str = "",
    text: Iterable[str] = (),
    ph: str | None = None,
    order: int | None = None,
    style: str = "",
) -> str:
    """One <p:sp>. geometry=None uses a default xfrm; geometry="" leaves it out."""
    order_attr = f' o:z="{order}"' if order is not None else ""
    nv_pr = f"<p:nvPr>{ph}</p:nvPr>" if ph else "<p:nvPr/>"
    xfrm_xml = xfrm() if geometry is None else geometry
    text = list(text)
    body = text_body(*text) if text else ""
    return (
        f'<p:sp><p:nvSpPr><p:cNvPr id="{shape_id}" name="{name}"{order_attr}/><p:cNvSpPr/>{nv_pr}</p:nvSpPr>'
        f'<p:spPr>{xfrm_xml}<a:prstGeom prst="{prst}"><a:avLst/></a:prstGeom>{fill}{line}</p:spPr>'
        f"{style}{body}</p:sp>"
    )


def pic(shape_id: int = 3, rel_id: str = "rId2", *, geometry: str | None = None, src_rect: str = "") -> str:
    xfrm_xml = xfrm() if geometry is None else geometry
    return (
        f'<p:pic><p:nvPicPr><p:cNvPr id="{shape_id}" name="Picture {shape_id}"/><p:cNvPicPr/><p:nvPr/></p:nvPicPr>'
        f'<p:blipFill><a:blip r:embed="{rel_id}"/>{src_rect}<a:stretch><a:fillRect/></a:stretch></p:blipFill>'
        f'<p:spPr>{xfrm_xml}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom></p:spPr></p:pic>'
    )


def grp_sp(children: str, *, off: tuple[int, int], ext: tuple[int, int],
           ch_off: tuple[int, int] = (0, 0), ch_ext: tuple[int, int] | None = None) -> str:
    ch_ext = ch_ext or ext
    return (
        '<p:grpSp><p:nvGrpSpPr><p:cNvPr id="10" name="Group"/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        f'<p:grpSpPr><a:xfrm><a:off x="{off[0]}" y="{off[1]}"/><a:ext cx="{ext[0]}" cy="{ext[1]}"/>'
        f'<a:chOff x="{ch_off[0]}" y="{ch_off[1]}"/><a:chExt cx="{ch_ext[0]}" cy="{ch_ext[1]}"/></a:xfrm></p:grpSpPr>'
        f"{children}</p:grpSp>"
    )


def table_frame(rows: list[list[str]], *, merged_first_row: bool = False) -> str:
    grid = "".join('<a:gridCol w="914400"/>' for _ in rows[0])
    trs = []
    for r, row in enumerate(rows):
        tcs = []
        for c, cell in enumerate(row):
            span = ' gridSpan="2"' if merged_first_row and r == 0 and c == 0 else ""
            tcs.append(f"<a:tc{span}><a:txBody><a:bodyPr/><a:p><a:r><a:t>{cell}</a:t></a:r></a:p></a:txBody><a:tcPr/></a:tc>")
        trs.append(f'<a:tr h="370840">{"".join(tcs)}</a:tr>')
    return (
        '<p:graphicFrame><p:nvGraphicFramePr><p:cNvPr id="4" name="Table"/><p:cNvGraphicFramePr/><p:nvPr/></p:nvGraphicFramePr>'
        '<p:xfrm><a:off x="0" y="0"/><a:ext cx="1828800" cy="741680"/></p:xfrm>'
        '<a:graphic><a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/table">'
        f"<a:tbl><a:tblGrid>{grid}</a:tblGrid>{''.join(trs)}</a:tbl></a:graphicData></a:graphic></p:graphicFrame>"
    )


def slide_xml(shapes: str = "", background: str = "") -> str:
    return (
        f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?><p:sld {NSDECL}><p:cSld>{background}'
        '<p:spTree><p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr><p:grpSpPr/>'
        f"{shapes}</p:spTree></p:cSld></p:sld>"
    )


def notes_xml(*lines: str, raw_paragraphs: str = "") -> str:
    """Notes part whose body holds one plain run per line, then any hand-written <a:p> markup."""
    paras = "".join(f"<a:p><a:r><a:t>{line}</a:t></a:r></a:p>" for line in lines) + raw_paragraphs
    return (
        f"<p:notes {NSDECL}><p:cSld><p:spTree>"
        '<p:sp><p:nvSpPr><p:cNvPr id="2" name="Slide Image"/><p:cNvSpPr/><p:nvPr><p:ph type="sldImg"/></p:nvPr></p:nvSpPr><p:spPr/></p:sp>'
        '<p:sp><p:nvSpPr><p:cNvPr id="3" name="Notes"/><p:cNvSpPr/><p:nvPr><p:ph type="body" idx="1"/></p:nvPr></p:nvSpPr>'
        f"<p:spPr/><p:txBody><a:bodyPr/>{paras}</p:txBody></p:sp>"
        "</p:spTree></p:cSld></p:notes>"
    )


def rels_xml(rels: Mapping[str, str]) -> str:
    entries = "".join(
        f'<Relationship Id="{rel_id}" Type="http://example.invalid/rel" Target="{target}"/>'
        for rel_id, target in rels.items()
    )
    return f'<Relationships xmlns="{REL_NS}">{entries}</Relationships>'


THEME_XML = (
    f'<a:theme {NSDECL} name="Test Theme"><a:themeElements>'
    '<a:clrScheme name="Test"><a:dk1><a:srgbClr val="111111"/></a:dk1><a:lt1><a:srgbClr val="FEFEFE"/></a:lt1>'
    '<a:dk2><a:srgbClr val="222222"/></a:dk2><a:lt2><a:srgbClr val="EEEEEE"/></a:lt2>'
    '<a:accent1><a:srgbClr val="C00000"/></a:accent1><a:accent2><a:srgbClr val="00B050"/></a:accent2>'
    '<a:accent3><a:srgbClr val="0070C0"/></a:accent3><a:accent4><a:srgbClr val="7030A0"/></a:accent4>'
    '<a:accent5><a:srgbClr val="FFC000"/></a:accent5><a:accent6><a:srgbClr val="00B0F0"/></a:accent6>'
    '<a:hlink><a:srgbClr val="0000FF"/></a:hlink><a:folHlink><a:srgbClr val="800080"/></a:folHlink></a:clrScheme>'
    '<a:fontScheme name="Test"><a:majorFont><a:latin typeface="Georgia"/></a:majorFont>'
    '<a:minorFont><a:latin typeface="Verdana"/></a:minorFont></a:fontScheme>'
    "</a:themeElements></a:theme>"
)

CORE_XML = (
    '<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
    'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/" '
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    "<dc:title>Quarterly Review</dc:title><dc:creator>Sam Rivera</dc:creator>"
    '<dcterms:created xsi:type="dcterms:W3CDTF">2024-03-01T09:30:00</dcterms:created>'
    '<dcterms:modified xsi:type="dcterms:W3CDTF">2024-03-02T10:00:00</dcterms:modified>'
    "</cp:coreProperties>"
)
# endregion


# region build_pptx
def build_pptx(
    slides: list[str],
    *,
    slide_rels: Mapping[int, Mapping[str, str]] | None = None,
    notes: Mapping[int, str] | None = None,
    media: Mapping[str, bytes] | None = None,
    theme: str | None = THEME_XML,
    core: str | None = CORE_XML,
    slide_size: tuple[int, int] | None = (9144000, 6858000),
    extra_parts: Mapping[str, bytes | str] | None = None,
) -> bytes:
    """
    Zip up a minimal presentation package.

    slides are full slide XML documents; slide_rels/notes are keyed by slide position (0-based).
    Notes parts are linked from their slide automatically.
    """
    slide_rels = {i: dict(r) for i, r in (slide_rels or {}).items()}
    parts: dict[str, bytes | str] = {}

    pres_rels = {f"rId{i + 1}": f"slides/slide{i + 1}.xml" for i in range(len(slides))}
    if theme is not None:
        pres_rels["rIdTheme"] = "theme/theme1.xml"
        parts["ppt/theme/theme1.xml"] = theme

    sld_ids = "".join(f'<p:sldId id="{256 + i}" r:id="rId{i + 1}"/>' for i in range(len(slides)))
    size = f'<p:sldSz cx="{slide_size[0]}" cy="{slide_size[1]}"/>' if slide_size else ""
    parts["ppt/presentation.xml"] = (
        f"<p:presentation {NSDECL}><p:sldIdLst>{sld_ids}</p:sldIdLst>{size}</p:presentation>"
    )
    parts["ppt/_rels/presentation.xml.rels"] = rels_xml(pres_rels)

    for i, slide in enumerate(slides):
        rels = slide_rels.setdefault(i, {})
        rels.setdefault("rIdLayout", "../slideLayouts/slideLayout1.xml")
        if notes and i in notes:
            rels["rIdNotes"] = f"../notesSlides/notesSlide{i + 1}.xml"
            parts[f"ppt/notesSlides/notesSlide{i + 1}.xml"] = notes[i]
        parts[f"ppt/slides/slide{i + 1}.xml"] = slide
        parts[f"ppt/slides/_rels/slide{i + 1}.xml.rels"] = rels_xml(rels)

    for filename, data in (media or {}).items():
        parts[f"ppt/media/{filename}"] = data
    if core is not None:
        parts["docProps/core.xml"] = core
    parts.update(extra_parts or {})

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in parts.items():
            archive.writestr(name, content)
    return buffer.getvalue()


# endregion
