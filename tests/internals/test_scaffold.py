"""Tests to ensure the deckcodec directory structure gets created properly under the users' Documents."""

from pathlib import Path

from deckcodec.internals import scaffold
from deckcodec.internals.define_config import CodecConfig
from deckcodec.models import ShapeType
from deckcodec.reading.importer import import_presentation


# region test ensure_user_scaffold
def test_ensure_user_scaffold_happy_path(isolated_user_dirs: Path) -> None:
    """Test that scaffold creates expected directory structure."""
    base = isolated_user_dirs
    scaffold.ensure_user_scaffold()

    assert (base / "README.md").is_file()
    for folder in ("input", "output", "logs", "configs", "manifests"):
        assert (base / folder).is_dir()
    assert (base / "input" / "sample_deck.pptx").is_file()
    assert (base / "configs" / "sample_config.toml").is_file()


def test_readme_comes_from_packaged_resource(isolated_user_dirs: Path) -> None:
    scaffold.ensure_user_scaffold()
    readme = (isolated_user_dirs / "README.md").read_text(encoding="utf-8")
    assert "deckcodec" in readme
    assert "User folder created automatically" not in readme


def test_ensure_user_scaffold_does_not_overwrite(isolated_user_dirs: Path) -> None:
    """Calling ensure_user_scaffold() again leaves the user's edits alone."""
    scaffold.ensure_user_scaffold()

    readme_path = isolated_user_dirs / "README.md"
    readme_path.write_text("# CUSTOM USER CONTENT - DO NOT OVERWRITE", encoding="utf-8")
    deck_path = isolated_user_dirs / "input" / "sample_deck.pptx"
    deck_path.write_bytes(b"CUSTOM DECK DATA")

    scaffold.ensure_user_scaffold()

    assert readme_path.read_text(encoding="utf-8") == "# CUSTOM USER CONTENT - DO NOT OVERWRITE"
    assert deck_path.read_bytes() == b"CUSTOM DECK DATA"


def test_sample_config_points_at_sample_deck(isolated_user_dirs: Path) -> None:
    scaffold.ensure_user_scaffold()
    cfg = CodecConfig.from_toml(isolated_user_dirs / "configs" / scaffold.SAMPLE_CONFIG_FILENAME)
    assert cfg.input_pptx == isolated_user_dirs / "input" / "sample_deck.pptx"
    cfg.pre_run_check()


# endregion


# region sample deck
def test_sample_deck_imports_cleanly(isolated_user_dirs: Path) -> None:
    """The generated sample deck goes through the importer without omissions."""
    scaffold.ensure_user_scaffold()
    result = import_presentation(isolated_user_dirs / "input" / "sample_deck.pptx")

    assert result.omissions == ()
    title_slide, shapes_slide = result.presentation.slides
    assert title_slide.notes.startswith("Open this deck")
    assert result.presentation.metadata.author == "deckcodec"
    assert {e.shape_type for e in shapes_slide.elements} == {ShapeType.ROUND_RECT, ShapeType.ELLIPSE}


def test_build_sample_presentation_has_two_slides() -> None:
    presentation = scaffold.build_sample_presentation()
    assert [s.index for s in presentation.slides] == [0, 1]


# endregion
