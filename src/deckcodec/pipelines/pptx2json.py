# pptx2json.py
"""PowerPoint to a JSON dump of the document model."""

import logging
from pathlib import Path

from deckcodec import io
from deckcodec.internals.define_config import CodecConfig
from deckcodec.internals.run_context import get_pipeline_run_id
from deckcodec.models import Omission, presentation_to_dict
from deckcodec.reading.importer import import_presentation

log = logging.getLogger("deckcodec")


def run_pptx2json_pipeline(cfg: CodecConfig) -> tuple[Path, tuple[Omission, ...]]:
    """Import the input deck and write the model, plus its omissions, as JSON."""
    pipeline_id = get_pipeline_run_id()
    log.info(f"Starting pptx2json pipeline [pipeline:{pipeline_id}]")

    user_pptx_path = cfg.get_input_pptx_file()
    if user_pptx_path is None:
        raise ValueError(
            "input_pptx is None inside run_pptx2json_pipeline(). Validation should have caught this."
        )

    data = io.load_pptx_bytes(user_pptx_path)
    result = import_presentation(data, name=user_pptx_path.stem, max_workers=cfg.max_workers)

    payload = {
        "presentation": presentation_to_dict(result.presentation),
        "omissions": [
            {
                "kind": o.kind.value,
                "reason": o.reason,
                "slide_index": o.slide_index,
                "element_id": o.element_id,
            }
            for o in result.omissions
        ],
    }
    saved_output_path = io.save_json_output(payload, cfg)

    log.info(f"pptx2json pipeline complete [pipeline:{pipeline_id}]")
    log.info(f"  Original: {user_pptx_path}")
    log.info(f"  -> Final:  {saved_output_path}")
    return saved_output_path, result.omissions
