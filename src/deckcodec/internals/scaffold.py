"""User directory structure creation and initialization.
Auto-creates ~/Documents/deckcodec/ with a README, a sample config and a sample deck.

On first run, this creates:
- ~/Documents/deckcodec/
  ├── README.md           (explains what each folder is for)
  ├── input/              (sample_deck.pptx)
  ├── output/             (converted files land here)
  ├── configs/            (sample_config.toml)
  ├── manifests/          (one JSON manifest per run)
  └── logs/               (deckcodec.log lives here)

Safe to call repeatedly - won't overwrite existing user files.
"""

import logging
from datetime import datetime
from importlib.resources import files
from pathlib import Path

from deckcodec.internals.define_config import SAMPLE_DECK_FILENAME, CodecConfig
from deckcodec.internals.paths import (
    user_base_dir,
    user_configs_dir,
    user_input_dir,
    user_log_dir_path,
    user_manifests_dir,
    user_output_dir,
)
from deckcodec.models import (
    FillStyle,
    FillType,
    Paragraph,
    Presentation,
    PresentationMetadata,
    ShapeElement,
    ShapeType,
    Slide,
    TextAlignment,
    TextContent,
    TextElement,
    TextRun,
)

log = logging.getLogger("deckcodec")

SAMPLE_CONFIG_FILENAME = "sample_config.toml"


def ensure_user_scaffold() -> None:
    """
    Create folder structure, README, sample config and sample deck on first run.

    Safe to call every time - won't overwrite existing user files.
    """
    base = user_base_dir()

    # paths.py functions do the mkdir
    input_dir = user_input_dir()
    user_output_dir()
    user_log_dir_path()
    user_manifests_dir()
    configs_dir = user_configs_dir()

    readme_path = base / "README.md"
    if not readme_path.exists():
        _create_readme(readme_path)
        log.info(f"Created new README at {readme_path}")

    sample_deck = input_dir / SAMPLE_DECK_FILENAME
    if not sample_deck.exists():
        _write_sample_deck(sample_deck)
        log.info(f"Created sample deck: {sample_deck}")
    else:
        log.debug(f"Sample deck already exists (not overwriting): {sample_deck}")

    sample_config = configs_dir / SAMPLE_CONFIG_FILENAME
    if not sample_config.exists():
        cfg = CodecConfig.with_defaults()
        cfg.input_pptx = sample_deck
        cfg.save_toml(sample_config)
    else:
        log.debug(f"Sample config already exists (not overwriting): {sample_config}")

    log.debug(f"User scaffold ready at {base}")


def _create_readme(path: Path) -> None:
    """Copy the packaged README into the user folder."""
    source = files("deckcodec").joinpath("resources", "scaffold_README.md")

    if source.is_file():
        path.write_text(source.read_text(encoding="utf-8"), encoding="utf-8")
    else:
        log.error(f"README template not found: {source}")
        path.write_text("# deckcodec\n\nUser folder created automatically.\n", encoding="utf-8")


def _write_sample_deck(path: Path) -> None:
    """Build a two-slide deck from the model and write it with the exporter."""
    # Deferred: the exporter pulls in python-pptx, which isn't needed for most startups.
    from deckcodec.writing.exporter import export_presentation

    result = export_presentation(build_sample_presentation())
    path.write_bytes(result.data)


def build_sample_presentation() -> Presentation:
    """A small deck exercising text, shapes and notes."""

    def text(value: str, size: float, bold: bool = False) -> tuple[TextContent, ...]:
        run = TextRun(text=value, font_size=size, bold=bold)
        return (TextContent(paragraphs=(Paragraph(runs=(run,), alignment=TextAlignment.CENTER),)),)

    title_slide = Slide(
        id="sample-1",
        index=0,
        elements=(
            TextElement(id="title", x=80, y=260, width=800, height=100, content=text("deckcodec", 44, bold=True)),
            TextElement(
                id="subtitle", x=80, y=380, width=800, height=60,
                content=text("A sample deck for round-tripping", 24), z_index=1,
            ),
        ),
        notes="Open this deck, edit it, and run deckcodec on it again.",
    )
    shapes_slide = Slide(
        id="sample-2",
        index=1,
        elements=(
            ShapeElement(
                id="box", x=120, y=200, width=320, height=240,
                shape_type=ShapeType.ROUND_RECT,
                fill=FillStyle(type=FillType.SOLID, color="#4472C4"),
                text=text("Shapes keep their text", 20),
            ),
            ShapeElement(
                id="circle", x=520, y=200, width=240, height=240, z_index=1,
                shape_type=ShapeType.ELLIPSE,
                fill=FillStyle(type=FillType.SOLID, color="#ED7D31"),
            ),
        ),
    )
    return Presentation(
        id="sample",
        name="deckcodec sample",
        slides=(title_slide, shapes_slide),
        metadata=PresentationMetadata(author="deckcodec", title="deckcodec sample", created=datetime(2025, 1, 1)),
    )
