"""Tests for rich-text parsing: paragraphs, runs, fonts, bullets and links."""

from deckcodec.models import BulletType, TextAlignment, Theme, ThemeFonts
from deckcodec.reading.text import (
    DEFAULT_LINE_HEIGHT,
    FALLBACK_FONT_FAMILY,
    has_visible_text,
    parse_paragraph,
    parse_run,
    parse_text_body,
    resolve_font_family,
    resolve_links,
)
from tests.helpers import xml

THEME = Theme(fonts=ThemeFonts(major_font="Georgia", minor_font="Verdana"))


# region parse_run
class TestParseRun:
    def test_formatting_attributes(self) -> None:
        run = parse_run(
            xml(
                '<a:r><a:rPr sz="2400" b="1" i="1" u="sng" strike="sngStrike">'
                '<a:solidFill><a:srgbClr val="FF0000"/></a:solidFill><a:latin typeface="Courier New"/>'
                "</a:rPr><a:t>Bold claim</a:t></a:r>"
            )
        )
        assert run.text == "Bold claim"
        assert run.font_size == 24
        assert run.bold and run.italic and run.underline and run.strikethrough
        assert run.color == "#FF0000"
        assert run.font_family == "Courier New"

    def test_defaults_without_properties(self) -> None:
        run = parse_run(xml("<a:r><a:t>plain</a:t></a:r>"))
        assert run.font_size == 18
        assert run.font_family == FALLBACK_FONT_FAMILY
        assert run.color == "#000000"
        assert not (run.bold or run.italic or run.underline or run.strikethrough)
        assert run.highlight is None
        assert run.link is None

    def test_underline_none_is_not_underlined(self) -> None:
        run = parse_run(xml('<a:r><a:rPr u="none"/><a:t>x</a:t></a:r>'))
        assert run.underline is False

    def test_fractional_font_size(self) -> None:
        run = parse_run(xml('<a:r><a:rPr sz="1050"/><a:t>x</a:t></a:r>'))
        assert run.font_size == 10.5

    def test_highlight_and_link_id(self) -> None:
        run = parse_run(
            xml(
                '<a:r><a:rPr><a:highlight><a:srgbClr val="FFFF00"/></a:highlight>'
                '<a:hlinkClick r:id="rId7"/></a:rPr><a:t>see here</a:t></a:r>'
            )
        )
        assert run.highlight == "#FFFF00"
        assert run.link == "rId7"


# endregion


# region parse_paragraph
class TestParseParagraph:
    def test_runs_keep_document_order(self) -> None:
        paragraph = parse_paragraph(
            xml("<a:p><a:r><a:t>one </a:t></a:r><a:r><a:t>two</a:t></a:r></a:p>")
        )
        assert [r.text for r in paragraph.runs] == ["one ", "two"]
        assert paragraph.text == "one two"

    def test_line_break_becomes_newline_run(self) -> None:
        paragraph = parse_paragraph(
            xml("<a:p><a:r><a:t>a</a:t></a:r><a:br/><a:r><a:t>b</a:t></a:r></a:p>")
        )
        assert [r.text for r in paragraph.runs] == ["a", "\n", "b"]

    def test_empty_paragraph_has_one_empty_run_from_end_properties(self) -> None:
        paragraph = parse_paragraph(xml('<a:p><a:endParaRPr sz="3200" b="1"/></a:p>'))
        assert len(paragraph.runs) == 1
        assert paragraph.runs[0].text == ""
        assert paragraph.runs[0].font_size == 32
        assert paragraph.runs[0].bold

    def test_paragraph_properties(self) -> None:
        paragraph = parse_paragraph(
            xml(
                '<a:p><a:pPr algn="ctr" lvl="2"><a:lnSpc><a:spcPct val="150000"/></a:lnSpc>'
                '<a:spcBef><a:spcPts val="1200"/></a:spcBef><a:spcAft><a:spcPts val="600"/></a:spcAft>'
                '<a:buChar char="•"/></a:pPr><a:r><a:t>x</a:t></a:r></a:p>'
            )
        )
        assert paragraph.alignment is TextAlignment.CENTER
        assert paragraph.indent_level == 2
        assert paragraph.line_height == 1.5
        assert paragraph.space_before == 12
        assert paragraph.space_after == 6
        assert paragraph.bullet_type is BulletType.BULLET

    def test_defaults(self) -> None:
        paragraph = parse_paragraph(xml("<a:p><a:r><a:t>x</a:t></a:r></a:p>"))
        assert paragraph.alignment is TextAlignment.LEFT
        assert paragraph.line_height == DEFAULT_LINE_HEIGHT
        assert paragraph.bullet_type is BulletType.NONE
        assert paragraph.indent_level == 0

    def test_numbered_and_explicitly_unbulleted(self) -> None:
        numbered = parse_paragraph(
            xml('<a:p><a:pPr><a:buAutoNum type="arabicPeriod"/></a:pPr><a:r><a:t>x</a:t></a:r></a:p>')
        )
        none = parse_paragraph(xml("<a:p><a:pPr><a:buNone/></a:pPr><a:r><a:t>x</a:t></a:r></a:p>"))
        assert numbered.bullet_type is BulletType.NUMBER
        assert none.bullet_type is BulletType.NONE


# endregion


# region parse_text_body
def test_parse_text_body_none_is_empty() -> None:
    assert parse_text_body(None) == ()


def test_parse_text_body_wraps_all_paragraphs() -> None:
    contents = parse_text_body(
        xml("<p:txBody><a:bodyPr/><a:p><a:r><a:t>a</a:t></a:r></a:p><a:p><a:r><a:t>b</a:t></a:r></a:p></p:txBody>")
    )
    assert len(contents) == 1
    assert contents[0].text == "a\nb"


# endregion


# region fonts and links
def test_theme_font_references() -> None:
    assert resolve_font_family("+mj-lt", THEME) == "Georgia"
    assert resolve_font_family("+mn-lt", THEME) == "Verdana"
    assert resolve_font_family("+mn-lt", None) == FALLBACK_FONT_FAMILY
    assert resolve_font_family(None, THEME) == FALLBACK_FONT_FAMILY


def test_resolve_links_swaps_ids_for_targets_and_drops_unknown() -> None:
    contents = parse_text_body(
        xml(
            "<p:txBody><a:p>"
            '<a:r><a:rPr><a:hlinkClick r:id="rId1"/></a:rPr><a:t>known</a:t></a:r>'
            '<a:r><a:rPr><a:hlinkClick r:id="rId9"/></a:rPr><a:t>unknown</a:t></a:r>'
            "</a:p></p:txBody>"
        )
    )
    resolved = resolve_links(contents, {"rId1": "https://example.com"})
    runs = resolved[0].paragraphs[0].runs
    assert runs[0].link == "https://example.com"
    assert runs[1].link is None
    assert runs[1].text == "unknown"


def test_has_visible_text() -> None:
    blank = parse_text_body(xml("<p:txBody><a:p><a:r><a:t>   </a:t></a:r></a:p></p:txBody>"))
    filled = parse_text_body(xml("<p:txBody><a:p><a:r><a:t>hi</a:t></a:r></a:p></p:txBody>"))
    assert not has_visible_text(blank)
    assert not has_visible_text(None)
    assert has_visible_text(filled)


# endregion
