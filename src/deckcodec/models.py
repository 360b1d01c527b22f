# models.py
"""Immutable data model for presentation documents, plus the diagnostics returned next to it."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union


# region Enums
class ElementType(Enum):
    """Type tag shared by every slide element variant."""

    TEXT = "text"
    SHAPE = "shape"
    IMAGE = "image"
    TABLE = "table"


class ShapeType(Enum):
    """Shape kinds the codec understands. Anything else reads in as RECT."""

    RECT = "rect"
    ROUND_RECT = "roundRect"
    ELLIPSE = "ellipse"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"
    PENTAGON = "pentagon"
    HEXAGON = "hexagon"
    STAR5 = "star5"
    STAR6 = "star6"
    ARROW = "arrow"
    CHEVRON = "chevron"
    CALLOUT = "callout"
    LINE = "line"
    CURVED_LINE = "curvedLine"
    CONNECTOR = "connector"


class TextAlignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class VerticalAlign(Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class AutoFitType(Enum):
    NONE = "none"
    SHRINK = "shrink"
    RESIZE = "resize"


class BulletType(Enum):
    NONE = "none"
    BULLET = "bullet"
    NUMBER = "number"


class DashStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class FillType(Enum):
    NONE = "none"
    SOLID = "solid"
    GRADIENT = "gradient"
    PATTERN = "pattern"


class GradientType(Enum):
    LINEAR = "linear"
    RADIAL = "radial"


class BackgroundType(Enum):
    SOLID = "solid"
    GRADIENT = "gradient"
    IMAGE = "image"
    NONE = "none"


class PlaceholderType(Enum):
    """Placeholder kinds, valued by their wire names."""

    TITLE = "title"
    CENTER_TITLE = "ctrTitle"
    SUBTITLE = "subTitle"
    BODY = "body"
    DATE = "dt"
    FOOTER = "ftr"
    SLIDE_NUMBER = "sldNum"


class OmissionKind(Enum):
    """Why something from the source (or the model) did not make it into the output."""

    MISSING_RELATIONSHIP = "missing_relationship"
    MISSING_MEDIA = "missing_media"
    MISSING_PART = "missing_part"
    EMPTY_PLACEHOLDER = "empty_placeholder"
    UNSUPPORTED_ELEMENT = "unsupported_element"
    INVALID_GEOMETRY = "invalid_geometry"
    EMPTY_TEXT = "empty_text"
    INVALID_IMAGE_SOURCE = "invalid_image_source"
    IMAGE_PLACEHOLDER = "image_placeholder"
    WRITE_FAILED = "write_failed"


# endregion


# region Text
@dataclass(frozen=True)
class TextRun:
    text: str = ""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    font_family: str = "Arial"
    font_size: float = 18
    color: str = "#000000"
    highlight: str | None = None
    link: str | None = None  # Relationship id while parsing, target URL once resolved


@dataclass(frozen=True)
class Paragraph:
    """
    One paragraph of rich text.

    After import a paragraph always holds at least one run; an empty line keeps a single
    empty run so its font context survives edits.
    """

    runs: tuple[TextRun, ...] = ()
    alignment: TextAlignment = TextAlignment.LEFT
    line_height: float = 1.2
    space_before: float = 0
    space_after: float = 0
    bullet_type: BulletType = BulletType.NONE
    indent_level: int = 0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TextContent:
    paragraphs: tuple[Paragraph, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.paragraphs)


@dataclass(frozen=True)
class Padding:
    top: float = 5
    right: float = 5
    bottom: float = 5
    left: float = 5


@dataclass(frozen=True)
class TextBoxProperties:
    vertical_align: VerticalAlign = VerticalAlign.TOP
    padding: Padding = field(default_factory=Padding)
    auto_fit: AutoFitType = AutoFitType.NONE
    word_wrap: bool = True
    columns: int = 1


# endregion


# region Fill & stroke
@dataclass(frozen=True)
class GradientStop:
    offset: float  # 0.0 - 1.0
    color: str


@dataclass(frozen=True)
class GradientFill:
    type: GradientType = GradientType.LINEAR
    angle: float = 0
    stops: tuple[GradientStop, ...] = ()


@dataclass(frozen=True)
class FillStyle:
    type: FillType = FillType.NONE
    color: str | None = None
    opacity: float = 1
    gradient: GradientFill | None = None


@dataclass(frozen=True)
class StrokeStyle:
    color: str = "#000000"
    width: float = 0
    dash_style: DashStyle = DashStyle.SOLID
    opacity: float = 0


NO_STROKE = StrokeStyle()
# endregion


# region Elements
@dataclass(frozen=True, kw_only=True)
class BaseElement:
    """Fields shared by every slide element. Geometry is in device pixels, rotation in degrees."""

    type: ClassVar[ElementType]

    id: str
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    rotation: float = 0
    locked: bool = False
    z_index: int = 0


@dataclass(frozen=True, kw_only=True)
class TextElement(BaseElement):
    type: ClassVar[ElementType] = ElementType.TEXT

    content: tuple[TextContent, ...] = ()
    text_box: TextBoxProperties = field(default_factory=TextBoxProperties)
    placeholder: PlaceholderType | None = None


@dataclass(frozen=True, kw_only=True)
class ShapeElement(BaseElement):
    type: ClassVar[ElementType] = ElementType.SHAPE

    shape_type: ShapeType = ShapeType.RECT
    fill: FillStyle = field(default_factory=FillStyle)
    stroke: StrokeStyle = NO_STROKE
    text: tuple[TextContent, ...] | None = None


@dataclass(frozen=True)
class CropArea:
    """Crop fractions (0.0 - 1.0) of the source image."""

    top: float = 0
    left: float = 0
    width: float = 1
    height: float = 1


@dataclass(frozen=True, kw_only=True)
class ImageElement(BaseElement):
    type: ClassVar[ElementType] = ElementType.IMAGE

    src: str  # data URI or http(s) URL
    original_src: str = ""  # Path of the asset inside the source package
    crop: CropArea | None = None


@dataclass(frozen=True)
class TableCell:
    text: str = ""
    row_span: int = 1
    col_span: int = 1


@dataclass(frozen=True, kw_only=True)
class TableElement(BaseElement):
    type: ClassVar[ElementType] = ElementType.TABLE

    rows: int = 0
    cols: int = 0
    cells: tuple[tuple[TableCell, ...], ...] = ()


SlideElement = Union[TextElement, ShapeElement, ImageElement, TableElement]
# endregion


# region Theme
@dataclass(frozen=True)
class ThemeColors:
    """The fixed 12-slot theme palette. Values are '#RRGGBB' strings."""

    dk1: str = "#000000"
    lt1: str = "#FFFFFF"
    dk2: str = "#44546A"
    lt2: str = "#E7E6E6"
    accent1: str = "#4472C4"
    accent2: str = "#ED7D31"
    accent3: str = "#A5A5A5"
    accent4: str = "#FFC000"
    accent5: str = "#5B9BD5"
    accent6: str = "#70AD47"
    hlink: str = "#0563C1"
    fol_hlink: str = "#954F72"

    # Wire slot name -> attribute name, for the one slot whose name isn't a valid snake_case attr
    _SLOT_ALIASES: ClassVar[dict[str, str]] = {"folHlink": "fol_hlink"}

    def lookup(self, slot: str) -> str | None:
        """Return the colour for a wire slot name ('accent2', 'folHlink', ...) or None if it is not a slot."""
        attr = self._SLOT_ALIASES.get(slot, slot)
        if attr not in {f.name for f in fields(self)}:
            return None
        value = getattr(self, attr)
        return value or None


@dataclass(frozen=True)
class ThemeFonts:
    major_font: str = "Calibri"
    minor_font: str = "Calibri"


@dataclass(frozen=True)
class Theme:
    name: str = "Default"
    colors: ThemeColors = field(default_factory=ThemeColors)
    fonts: ThemeFonts = field(default_factory=ThemeFonts)


DEFAULT_THEME = Theme()
# endregion


# region Slide & Presentation
@dataclass(frozen=True)
class Background:
    type: BackgroundType = BackgroundType.SOLID
    color: str | None = "#FFFFFF"
    gradient: GradientFill | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class Slide:
    id: str
    index: int
    layout_id: str = "1"
    elements: tuple[SlideElement, ...] = ()
    background: Background = field(default_factory=Background)
    notes: str = ""
    thumbnail: str | None = None


@dataclass(frozen=True)
class PresentationMetadata:
    author: str = ""
    title: str = ""
    created: datetime = field(default_factory=datetime.now)
    modified: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Presentation:
    """A whole document. Width/height are device pixels."""

    id: str
    name: str
    slides: tuple[Slide, ...] = ()
    theme: Theme = DEFAULT_THEME
    slide_width: int = 960
    slide_height: int = 720
    metadata: PresentationMetadata = field(default_factory=PresentationMetadata)

    def __post_init__(self) -> None:
        if self.slide_width <= 0 or self.slide_height <= 0:
            raise ValueError(
                f"Slide dimensions must be positive, got {self.slide_width}x{self.slide_height}"
            )
        for position, slide in enumerate(self.slides):
            if slide.index != position:
                raise ValueError(
                    f"Slide index {slide.index} does not match its position {position}"
                )


# endregion


# region Diagnostics
@dataclass(frozen=True)
class Omission:
    """Something that was dropped or replaced instead of failing the whole document."""

    kind: OmissionKind
    reason: str
    slide_index: int | None = None
    element_id: str | None = None


@dataclass(frozen=True)
class ImportResult:
    presentation: Presentation
    omissions: tuple[Omission, ...] = ()


@dataclass(frozen=True)
class ExportResult:
    data: bytes
    omissions: tuple[Omission, ...] = ()


# endregion


# region presentation_to_dict
def presentation_to_dict(presentation: Presentation) -> dict[str, Any]:
    """Convert the model into plain JSON-serializable data (enums by value, datetimes as ISO strings)."""
    result = _to_plain(presentation)
    assert isinstance(result, dict)
    return result


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        data: dict[str, Any] = {}
        if isinstance(value, BaseElement):
            data["type"] = value.type.value
        for f in fields(value):
            data[f.name] = _to_plain(getattr(value, f.name))
        return data
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


# endregion
