# roundtrip.py
"""PowerPoint to model and back to PowerPoint."""

import logging
from pathlib import Path

from deckcodec import io
from deckcodec.internals.define_config import CodecConfig
from deckcodec.internals.paths import user_log_dir_path
from deckcodec.internals.run_context import get_pipeline_run_id
from deckcodec.models import Omission
from deckcodec.reading.importer import import_presentation
from deckcodec.writing.exporter import export_presentation

log = logging.getLogger("deckcodec")


def run_roundtrip_pipeline(cfg: CodecConfig) -> tuple[Path, tuple[Omission, ...]]:
    """Import the input deck, export the model again, and save the result.

    Returns the saved path plus every omission recorded on the way in and out.
    """
    pipeline_id = get_pipeline_run_id()
    log.info(f"Starting roundtrip pipeline [pipeline:{pipeline_id}]")

    user_pptx_path = cfg.get_input_pptx_file()
    if user_pptx_path is None:
        raise ValueError(
            "input_pptx is None inside run_roundtrip_pipeline(). Validation should have caught this; "
            "use CodecConfig.with_defaults() to create a test config."
        )

    data = io.load_pptx_bytes(user_pptx_path)
    imported = import_presentation(data, name=user_pptx_path.stem, max_workers=cfg.max_workers)
    presentation = imported.presentation
    log.info(
        f"Imported {len(presentation.slides)} slide(s) with {len(imported.omissions)} omission(s) "
        f"[pipeline:{pipeline_id}]"
    )

    exported = export_presentation(
        presentation,
        default_author=cfg.default_author,
        include_notes=cfg.include_notes,
        fetch_timeout=cfg.image_fetch_timeout,
        max_workers=cfg.max_workers,
    )
    omissions = imported.omissions + exported.omissions
    for omission in omissions:
        log.debug(f"Omitted ({omission.kind.value}): {omission.reason} [pipeline:{pipeline_id}]")

    log.debug(f"Attempting to save new pptx file. [pipeline:{pipeline_id}]")
    saved_output_path = io.save_pptx_output(exported.data, cfg, slide_count=len(presentation.slides))

    log.info(f"roundtrip pipeline complete [pipeline:{pipeline_id}]")
    log.info(f"  Original: {user_pptx_path}")
    log.info(f"  -> Final:  {saved_output_path}")
    log.info(f"See log: {user_log_dir_path()}")
    return saved_output_path, omissions
