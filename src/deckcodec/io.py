# io.py
"""File I/O for pipeline runs: input validation, loading decks, saving outputs."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from deckcodec.internals import constants
from deckcodec.internals.define_config import CodecConfig
from deckcodec.internals.run_context import get_pipeline_run_id

log = logging.getLogger("deckcodec")

MAX_REASONABLE_SLIDE_COUNT = 1000


# region Path Helpers
def validate_path(user_path: str | Path) -> Path:
    """Ensure filepath exists and is a file."""
    path = Path(user_path)
    pipeline_id = get_pipeline_run_id()
    if not path.exists():
        log.error(f"File not found: {user_path} [pipeline:{pipeline_id}]")
        raise FileNotFoundError(f"File not found: {user_path}")
    if not path.is_file():
        log.error(f"Path is not a file (might be a directory): {user_path} [pipeline:{pipeline_id}]")
        raise ValueError(f"Path is not a file: {user_path}")
    return path


def validate_pptx_path(user_path: str | Path) -> Path:
    """Validates the filepath exists and is actually a pptx file."""
    path = validate_path(user_path)
    pipeline_id = get_pipeline_run_id()

    if path.suffix.lower() == ".ppt":
        log.error(f"Unsupported .ppt file: {path} [pipeline:{pipeline_id}]")
        raise ValueError(
            "This tool only supports .pptx files. Please convert your .ppt file to .pptx format first."
        )
    if path.suffix.lower() != ".pptx":
        log.error(f"Wrong file extension: expected .pptx, got {path.suffix} [pipeline:{pipeline_id}]")
        raise ValueError(f"Expected a .pptx file, but got: {path.suffix}")
    return path


def build_timestamped_output_filename(base_filename: str) -> str:
    """Apply a per-run timestamp to an output's base filename."""
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    name, ext = base_filename.rsplit(".", 1)
    return f"{name}_{timestamp}.{ext}"


# endregion


# region Disk I/O - Read
def load_pptx_bytes(pptx_path: Path | str) -> bytes:
    """Validate the input path and read the whole deck into memory."""
    pipeline_id = get_pipeline_run_id()
    path = validate_pptx_path(pptx_path)

    try:
        data = path.read_bytes()
    except OSError as e:
        log.error(f"Could not read {path} [pipeline:{pipeline_id}]. Error: {e}")
        raise

    if not data:
        log.error(f"File {path} is empty [pipeline:{pipeline_id}]")
        raise ValueError(f"File is empty: {path}")

    log.info(f"Read {len(data)} bytes from {path} [pipeline:{pipeline_id}]")
    return data


# endregion


# region Disk I/O - Write
def save_pptx_output(data: bytes, cfg: CodecConfig, slide_count: int = 0) -> Path:
    """Write exported deck bytes to a timestamped file in the output folder."""
    if slide_count > MAX_REASONABLE_SLIDE_COUNT:
        log.warning(
            f"This is about to save a pptx file with over {MAX_REASONABLE_SLIDE_COUNT} slides ... that seems a bit long!"
        )
    return _write_output(
        cfg, constants.OUTPUT_PPTX_FILENAME, lambda path: path.write_bytes(data)
    )


def save_json_output(payload: dict[str, Any], cfg: CodecConfig) -> Path:
    """Write a JSON document (the model dump) to a timestamped file in the output folder."""

    def write(path: Path) -> None:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

    return _write_output(cfg, constants.OUTPUT_JSON_FILENAME, write)


def _write_output(
    cfg: CodecConfig, base_filename: str, write: Callable[[Path], Any]
) -> Path:
    pipeline_id = get_pipeline_run_id()

    save_folder = cfg.get_output_folder()
    save_folder.mkdir(parents=True, exist_ok=True)
    output_filepath = save_folder / build_timestamped_output_filename(base_filename)

    try:
        write(output_filepath)
        log.info(f"Successfully saved to {output_filepath}. [pipeline:{pipeline_id}]")
    except PermissionError as e:
        log.error(f"Save failed due to permission error [pipeline:{pipeline_id}]: {e}")
        raise PermissionError("Save failed: File may be open in another program") from e
    except OSError as e:
        log.error(f"Save failed in [pipeline:{pipeline_id}]: {e}")
        raise OSError(f"Save failed (disk space or IO issue): {e}") from e

    return output_filepath


# endregion
