"""Route program flow to the appropriate pipeline based on user-indicated direction."""

import logging
from pathlib import Path

from deckcodec.internals.define_config import CodecConfig, PipelineDirection
from deckcodec.internals.manifest import RunManifest
from deckcodec.internals.run_context import (
    get_pipeline_run_id,
    get_session_id,
    start_pipeline_run,
)
from deckcodec.pipelines import pptx2json, roundtrip

log = logging.getLogger("deckcodec")


# region run_pipeline
def run_pipeline(cfg: CodecConfig) -> Path:
    """Run validation and then route to the appropriate pipeline based on config."""
    cfg.pre_run_check()

    pipeline_id = start_pipeline_run()
    log.info(f"Initializing pipeline run. [pipeline:{pipeline_id}]")

    run_manifest = RunManifest(cfg, run_id=pipeline_id)
    run_manifest.start()

    log_pipeline_info(cfg)

    try:
        if cfg.direction == PipelineDirection.ROUND_TRIP:
            output_path, omissions = roundtrip.run_roundtrip_pipeline(cfg)
        elif cfg.direction == PipelineDirection.PPTX_TO_JSON:
            output_path, omissions = pptx2json.run_pptx2json_pipeline(cfg)
        else:
            raise ValueError(f"Unknown pipeline direction: {cfg.direction}")

        if omissions:
            log.warning(
                f"{len(omissions)} item(s) could not be carried over; see the manifest. [pipeline:{pipeline_id}]"
            )
        run_manifest.record_omissions(omissions)
        run_manifest.complete(output_path)
        return output_path

    except Exception as e:
        run_manifest.fail(e)
        raise  # Re-raise so the CLI still sees the error


# endregion


# region log_pipeline_info
def log_pipeline_info(cfg: CodecConfig) -> None:
    """Print this pipeline run's run ID, session ID, and general config info to the log."""
    log.info("=== Pipeline Run Started ===")
    log.info(f"Run ID: {get_pipeline_run_id()}")
    log.info(f"Session ID: {get_session_id()}")
    log.info(f"Direction: {cfg.direction.value}")
    log.info(f"Input: {cfg.input_pptx}")
    log.info(f"Configuration: {cfg}")


# endregion
