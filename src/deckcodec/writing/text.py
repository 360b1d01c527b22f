# text.py
"""Turn model text into writer paragraph specs, cleaning it for XML on the way."""

import re

from deckcodec.colors import TEXT_DEFAULT, sanitize_color
from deckcodec.models import Paragraph, TextBoxProperties, TextContent, TextRun
from deckcodec.units import pixels_to_inches
from deckcodec.writing.writer import ParagraphSpec, RunSpec, TextFrameSpec

# XML 1.0 can't carry C0 control characters other than tab, LF and CR.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

FALLBACK_FONT_SIZE = 12
FALLBACK_FONT_FAMILY = "Arial"


def sanitize_text(text: str | None) -> str:
    """Remove characters that aren't allowed in XML text."""
    if not text:
        return ""
    return _CONTROL_CHARS.sub("", text)


def has_exportable_text(contents: tuple[TextContent, ...] | None) -> bool:
    """False when no run anywhere has non-blank text after sanitizing."""
    if not contents:
        return False
    return any(
        sanitize_text(run.text).strip()
        for content in contents
        for paragraph in content.paragraphs
        for run in paragraph.runs
    )


def build_run_spec(run: TextRun) -> RunSpec | None:
    """None for runs with nothing left to write."""
    text = sanitize_text(run.text)
    if not text:
        return None
    highlight = sanitize_color(run.highlight, "") if run.highlight else None
    return RunSpec(
        text=text,
        bold=run.bold,
        italic=run.italic,
        underline=run.underline,
        strikethrough=run.strikethrough,
        font_family=run.font_family or FALLBACK_FONT_FAMILY,
        font_size=run.font_size if run.font_size > 0 else FALLBACK_FONT_SIZE,
        color=sanitize_color(run.color, TEXT_DEFAULT),
        highlight=highlight or None,
        # Only web links survive; anything else (slide jumps, files) has no target here.
        link=run.link if run.link and run.link.startswith("http") else None,
    )


def build_paragraph_spec(paragraph: Paragraph) -> ParagraphSpec:
    runs = tuple(spec for spec in map(build_run_spec, paragraph.runs) if spec is not None)
    return ParagraphSpec(
        runs=runs,
        alignment=paragraph.alignment,
        line_spacing=paragraph.line_height if paragraph.line_height > 0 else 1.2,
        space_before=max(0, paragraph.space_before),
        space_after=max(0, paragraph.space_after),
        level=max(0, paragraph.indent_level),
        bullet=paragraph.bullet_type,
    )


def build_paragraph_specs(contents: tuple[TextContent, ...] | None) -> tuple[ParagraphSpec, ...]:
    """
    One ParagraphSpec per model paragraph, across every TextContent in order.

    Each model paragraph becomes its own paragraph in the output, so n paragraphs are separated
    by exactly n - 1 paragraph breaks. Runs whose sanitized text is empty are dropped.
    """
    if not contents:
        return ()
    return tuple(
        build_paragraph_spec(paragraph)
        for content in contents
        for paragraph in content.paragraphs
    )


def build_text_frame_spec(
    contents: tuple[TextContent, ...] | None, box: TextBoxProperties | None = None
) -> TextFrameSpec:
    """Paragraphs plus box settings (padding converted to inches)."""
    box = box or TextBoxProperties()
    padding = box.padding
    return TextFrameSpec(
        paragraphs=build_paragraph_specs(contents),
        vertical_align=box.vertical_align,
        margins=(
            pixels_to_inches(max(0, padding.top)),
            pixels_to_inches(max(0, padding.right)),
            pixels_to_inches(max(0, padding.bottom)),
            pixels_to_inches(max(0, padding.left)),
        ),
        word_wrap=box.word_wrap,
        auto_fit=box.auto_fit,
        columns=max(1, box.columns),
    )
