# writer.py
"""The package-writer capability, and its python-pptx implementation."""

# For python-pptx's private _element attributes:
# pyright: reportPrivateUsage=false

# For incomplete type stubs in python-pptx:
# pyright: reportAttributeAccessIssue=false
# mypy: disable-error-code="import-untyped"

# region imports
from __future__ import annotations

import io
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.dml import MSO_LINE_DASH_STYLE
from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE
from pptx.enum.text import PP_PARAGRAPH_ALIGNMENT as PP_ALIGN
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from deckcodec.models import (
    AutoFitType,
    BulletType,
    CropArea,
    DashStyle,
    ShapeType,
    TableCell,
    TextAlignment,
    VerticalAlign,
)

# endregion

log = logging.getLogger("deckcodec")

# region consts
# Index of the "Blank" layout in python-pptx's default template
BLANK_LAYOUT_INDEX = 6

ALIGNMENT_MAP = {
    TextAlignment.LEFT: PP_ALIGN.LEFT,
    TextAlignment.CENTER: PP_ALIGN.CENTER,
    TextAlignment.RIGHT: PP_ALIGN.RIGHT,
    TextAlignment.JUSTIFY: PP_ALIGN.JUSTIFY,
}

ANCHOR_MAP = {
    VerticalAlign.TOP: MSO_ANCHOR.TOP,
    VerticalAlign.MIDDLE: MSO_ANCHOR.MIDDLE,
    VerticalAlign.BOTTOM: MSO_ANCHOR.BOTTOM,
}

AUTO_SIZE_MAP = {
    AutoFitType.NONE: MSO_AUTO_SIZE.NONE,
    AutoFitType.SHRINK: MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE,
    AutoFitType.RESIZE: MSO_AUTO_SIZE.SHAPE_TO_FIT_TEXT,
}

DASH_MAP = {
    DashStyle.SOLID: MSO_LINE_DASH_STYLE.SOLID,
    DashStyle.DASHED: MSO_LINE_DASH_STYLE.DASH,
    DashStyle.DOTTED: MSO_LINE_DASH_STYLE.ROUND_DOT,  # 'sysDot'
}

AUTOSHAPE_MAP = {
    ShapeType.RECT: MSO_SHAPE.RECTANGLE,
    ShapeType.ROUND_RECT: MSO_SHAPE.ROUNDED_RECTANGLE,
    ShapeType.ELLIPSE: MSO_SHAPE.OVAL,
    ShapeType.TRIANGLE: MSO_SHAPE.ISOSCELES_TRIANGLE,
    ShapeType.DIAMOND: MSO_SHAPE.DIAMOND,
    ShapeType.PENTAGON: MSO_SHAPE.REGULAR_PENTAGON,
    ShapeType.HEXAGON: MSO_SHAPE.HEXAGON,
    ShapeType.STAR5: MSO_SHAPE.STAR_5_POINT,
    ShapeType.STAR6: MSO_SHAPE.STAR_6_POINT,
    ShapeType.ARROW: MSO_SHAPE.RIGHT_ARROW,
    ShapeType.CHEVRON: MSO_SHAPE.CHEVRON,
    ShapeType.CALLOUT: MSO_SHAPE.ROUNDED_RECTANGULAR_CALLOUT,
}

CONNECTOR_MAP = {
    ShapeType.LINE: MSO_CONNECTOR.STRAIGHT,
    ShapeType.CONNECTOR: MSO_CONNECTOR.STRAIGHT,
    ShapeType.CURVED_LINE: MSO_CONNECTOR.CURVE,
}

# <a:rPr> children that must come after <a:highlight>
_HIGHLIGHT_SUCCESSORS = (
    "a:uLnTx",
    "a:uLn",
    "a:uFillTx",
    "a:uFill",
    "a:latin",
    "a:ea",
    "a:cs",
    "a:sym",
    "a:hlinkClick",
    "a:hlinkMouseOver",
    "a:rtl",
    "a:extLst",
)
# endregion


# region spec types
@dataclass(frozen=True)
class Placement:
    """Where an element goes on the slide, in inches (rotation in degrees)."""

    x: float
    y: float
    width: float
    height: float
    rotation: float = 0


@dataclass(frozen=True)
class RunSpec:
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    font_family: str = "Arial"
    font_size: float = 18  # points
    color: str = "000000"  # RRGGBB, no '#'
    highlight: str | None = None
    link: str | None = None


@dataclass(frozen=True)
class ParagraphSpec:
    runs: tuple[RunSpec, ...] = ()
    alignment: TextAlignment = TextAlignment.LEFT
    line_spacing: float = 1.2
    space_before: float = 0  # points
    space_after: float = 0  # points
    level: int = 0
    bullet: BulletType = BulletType.NONE


@dataclass(frozen=True)
class TextFrameSpec:
    paragraphs: tuple[ParagraphSpec, ...]
    vertical_align: VerticalAlign = VerticalAlign.TOP
    # top, right, bottom, left in inches
    margins: tuple[float, float, float, float] = (0.05, 0.05, 0.05, 0.05)
    word_wrap: bool = True
    auto_fit: AutoFitType = AutoFitType.NONE
    columns: int = 1


@dataclass(frozen=True)
class LineSpec:
    color: str  # RRGGBB
    width: float  # points
    dash: DashStyle = DashStyle.SOLID


@dataclass(frozen=True)
class ShapeSpec:
    shape_type: ShapeType
    fill_color: str | None = None  # RRGGBB, None for no fill
    line: LineSpec | None = None  # None for no outline
    text: TextFrameSpec | None = None


@dataclass(frozen=True)
class TableSpec:
    rows: int
    cols: int
    cells: tuple[tuple[TableCell, ...], ...]


# endregion


# region PackageWriter
class PackageWriter(ABC):
    """
    Everything the export engine needs from an output package.

    Slides are addressed by the handle add_slide() returned. A writer is a single stateful
    object: callers emit one write at a time.
    """

    @abstractmethod
    def set_metadata(
        self, author: str, title: str, subject: str, created: datetime, modified: datetime
    ) -> None: ...

    @abstractmethod
    def set_slide_size(self, width_in: float, height_in: float) -> None: ...

    @abstractmethod
    def add_slide(self) -> int: ...

    @abstractmethod
    def set_background(self, slide: int, color: str) -> None: ...

    @abstractmethod
    def add_text_box(self, slide: int, placement: Placement, text: TextFrameSpec) -> None: ...

    @abstractmethod
    def add_shape(self, slide: int, placement: Placement, shape: ShapeSpec) -> None: ...

    @abstractmethod
    def add_picture(
        self, slide: int, placement: Placement, image: bytes, crop: CropArea | None = None
    ) -> None: ...

    @abstractmethod
    def add_table(self, slide: int, placement: Placement, table: TableSpec) -> None: ...

    @abstractmethod
    def set_notes(self, slide: int, text: str) -> None: ...

    @abstractmethod
    def save(self) -> bytes: ...


# endregion


# region PptxPackageWriter
class PptxPackageWriter(PackageWriter):
    """
    PackageWriter on top of a python-pptx Presentation built from the default template.

    Every call takes the same lock, so only one write is ever in flight even if callers
    emit from several threads.
    """

    def __init__(self) -> None:
        self._prs = Presentation()
        self._slides: list = []
        self._lock = threading.Lock()

    # region package-level
    def set_metadata(
        self, author: str, title: str, subject: str, created: datetime, modified: datetime
    ) -> None:
        with self._lock:
            props = self._prs.core_properties
            props.author = author
            props.title = title
            props.subject = subject
            props.created = created
            props.modified = modified

    def set_slide_size(self, width_in: float, height_in: float) -> None:
        with self._lock:
            self._prs.slide_width = Inches(width_in)
            self._prs.slide_height = Inches(height_in)

    def add_slide(self) -> int:
        with self._lock:
            layout = self._prs.slide_layouts[BLANK_LAYOUT_INDEX]
            self._slides.append(self._prs.slides.add_slide(layout))
            return len(self._slides) - 1

    def save(self) -> bytes:
        with self._lock:
            buffer = io.BytesIO()
            self._prs.save(buffer)
            return buffer.getvalue()

    # endregion

    # region per-slide
    def set_background(self, slide: int, color: str) -> None:
        with self._lock:
            fill = self._slides[slide].background.fill
            fill.solid()
            fill.fore_color.rgb = RGBColor.from_string(color)

    def set_notes(self, slide: int, text: str) -> None:
        with self._lock:
            notes_text_frame = self._slides[slide].notes_slide.notes_text_frame
            if notes_text_frame is None:
                # Only happens when the notes master has lost its body placeholder.
                log.error(f"No notes text frame on slide {slide + 1}; can't write notes.")
                raise ValueError(f"Slide {slide + 1} has no notes text frame.")
            notes_text_frame.text = text

    def add_text_box(self, slide: int, placement: Placement, text: TextFrameSpec) -> None:
        with self._lock:
            shape = self._slides[slide].shapes.add_textbox(*_box(placement))
            shape.rotation = placement.rotation
            _fill_text_frame(shape.text_frame, text)

    def add_shape(self, slide: int, placement: Placement, shape: ShapeSpec) -> None:
        with self._lock:
            shapes = self._slides[slide].shapes
            connector_type = CONNECTOR_MAP.get(shape.shape_type)
            if connector_type is not None:
                left, top, width, height = _box(placement)
                new_shape = shapes.add_connector(
                    connector_type, left, top, left + width, top + height
                )
            else:
                new_shape = shapes.add_shape(
                    AUTOSHAPE_MAP.get(shape.shape_type, MSO_SHAPE.RECTANGLE), *_box(placement)
                )
                if shape.fill_color is None:
                    new_shape.fill.background()
                else:
                    new_shape.fill.solid()
                    new_shape.fill.fore_color.rgb = RGBColor.from_string(shape.fill_color)
                if shape.text is not None:
                    _fill_text_frame(new_shape.text_frame, shape.text)

            new_shape.rotation = placement.rotation
            line = new_shape.line
            if shape.line is None:
                line.fill.background()
            else:
                line.color.rgb = RGBColor.from_string(shape.line.color)
                line.width = Pt(shape.line.width)
                line.dash_style = DASH_MAP[shape.line.dash]

    def add_picture(
        self, slide: int, placement: Placement, image: bytes, crop: CropArea | None = None
    ) -> None:
        with self._lock:
            picture = self._slides[slide].shapes.add_picture(
                io.BytesIO(image), *_box(placement)
            )
            picture.rotation = placement.rotation
            if crop is not None:
                picture.crop_left = crop.left
                picture.crop_top = crop.top
                picture.crop_right = max(0.0, 1 - crop.left - crop.width)
                picture.crop_bottom = max(0.0, 1 - crop.top - crop.height)

    def add_table(self, slide: int, placement: Placement, table: TableSpec) -> None:
        with self._lock:
            frame = self._slides[slide].shapes.add_table(
                table.rows, table.cols, *_box(placement)
            )
            grid = frame.table
            for r, row in enumerate(table.cells[: table.rows]):
                for c, cell in enumerate(row[: table.cols]):
                    grid.cell(r, c).text = cell.text
            # Merge after filling so each origin cell keeps its own text.
            for r, row in enumerate(table.cells[: table.rows]):
                for c, cell in enumerate(row[: table.cols]):
                    if cell.row_span == 1 and cell.col_span == 1:
                        continue
                    last_row = min(table.rows, r + cell.row_span) - 1
                    last_col = min(table.cols, c + cell.col_span) - 1
                    origin = grid.cell(r, c)
                    if origin.is_spanned or (last_row == r and last_col == c):
                        continue
                    origin.merge(grid.cell(last_row, last_col))

    # endregion


# endregion


# region text frame helpers
def _box(placement: Placement) -> tuple[int, int, int, int]:
    return (
        Inches(placement.x),
        Inches(placement.y),
        Inches(placement.width),
        Inches(placement.height),
    )


def _fill_text_frame(text_frame, spec: TextFrameSpec) -> None:  # type: ignore[no-untyped-def]
    text_frame.word_wrap = spec.word_wrap
    text_frame.vertical_anchor = ANCHOR_MAP[spec.vertical_align]
    text_frame.auto_size = AUTO_SIZE_MAP[spec.auto_fit]
    top, right, bottom, left = spec.margins
    text_frame.margin_top = Inches(top)
    text_frame.margin_right = Inches(right)
    text_frame.margin_bottom = Inches(bottom)
    text_frame.margin_left = Inches(left)
    if spec.columns > 1:
        text_frame._bodyPr.set("numCol", str(spec.columns))

    for i, paragraph_spec in enumerate(spec.paragraphs):
        # A new text frame starts with one empty paragraph; use it for the first one.
        paragraph = text_frame.paragraphs[0] if i == 0 else text_frame.add_paragraph()
        _fill_paragraph(paragraph, paragraph_spec)


def _fill_paragraph(paragraph, spec: ParagraphSpec) -> None:  # type: ignore[no-untyped-def]
    paragraph.alignment = ALIGNMENT_MAP[spec.alignment]
    paragraph.level = max(0, min(8, spec.level))
    paragraph.line_spacing = spec.line_spacing
    if spec.space_before:
        paragraph.space_before = Pt(spec.space_before)
    if spec.space_after:
        paragraph.space_after = Pt(spec.space_after)
    _set_bullet(paragraph, spec.bullet)

    for run_spec in spec.runs:
        if run_spec.text == "\n":
            paragraph.add_line_break()
            continue
        run = paragraph.add_run()
        run.text = run_spec.text
        _apply_run_formatting(run, run_spec)


def _apply_run_formatting(run, spec: RunSpec) -> None:  # type: ignore[no-untyped-def]
    font = run.font
    font.bold = spec.bold
    font.italic = spec.italic
    font.underline = spec.underline
    font.name = spec.font_family
    font.size = Pt(spec.font_size)
    font.color.rgb = RGBColor.from_string(spec.color)

    # python-pptx has no strikethrough property; set the rPr attribute directly.
    if spec.strikethrough:
        font._element.set("strike", "sngStrike")

    if spec.highlight:
        r_pr = run._r.get_or_add_rPr()
        highlight = OxmlElement("a:highlight")
        srgb_clr = OxmlElement("a:srgbClr")
        srgb_clr.set("val", spec.highlight)
        highlight.append(srgb_clr)
        r_pr.insert_element_before(highlight, *_HIGHLIGHT_SUCCESSORS)

    if spec.link:
        run.hyperlink.address = spec.link


def _set_bullet(paragraph, bullet: BulletType) -> None:  # type: ignore[no-untyped-def]
    """Text boxes have no inherited bullets, so only explicit ones need writing."""
    if bullet is BulletType.NONE:
        return
    p_pr = paragraph._p.get_or_add_pPr()
    if bullet is BulletType.BULLET:
        node = OxmlElement("a:buChar")
        node.set("char", "•")
    else:
        node = OxmlElement("a:buAutoNum")
        node.set("type", "arabicPeriod")
    p_pr.append(node)


# endregion
