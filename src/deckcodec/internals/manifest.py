"""Track and record metadata for pipeline runs."""

from __future__ import annotations

import json
import logging
import platform
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from deckcodec.internals.define_config import CodecConfig, PipelineDirection
from deckcodec.internals.paths import user_log_dir_path, user_manifests_dir
from deckcodec.internals.run_context import get_session_id
from deckcodec.models import Omission

log = logging.getLogger("deckcodec")

MANIFEST_VERSION = "1.0"


# region RunManifest
class RunManifest:
    """Tracks and records metadata for a pipeline run."""

    # region init
    def __init__(self, cfg: CodecConfig, run_id: str) -> None:
        """In-memory manifest with initial fields. Caller must immediately call .start()."""
        self.cfg = cfg
        self.run_id = run_id
        self.start_time: datetime = datetime.now()
        self.manifest_path = user_manifests_dir() / f"run_{self.run_id}_manifest.json"
        self.manifest: dict[str, Any] = self._build_manifest()

        # None until completed/failed
        self.end_time: datetime | None = None
        self.duration: float | None = None

    # endregion

    # region start
    def start(self) -> None:
        """Write initial manifest to disk."""
        self.manifest["status"] = "running"

        log.info(f"Writing initial manifest to disk with status = running, at {self.manifest_path}")
        self._write_manifest()

    # endregion

    # region record_omissions
    def record_omissions(self, omissions: Iterable[Omission]) -> None:
        """Add omission totals (overall and per kind) to the manifest. Call before complete()."""
        omissions = list(omissions)
        by_kind = Counter(o.kind.value for o in omissions)
        self.manifest["omissions_count"] = len(omissions)
        self.manifest["omissions_by_kind"] = dict(sorted(by_kind.items()))

    # endregion

    # region complete
    def complete(self, output_path: Path) -> None:
        """Update manifest on success."""
        self._get_time_stats()

        self.manifest["status"] = "success"
        self.manifest["end_time"] = self.end_time.isoformat() if self.end_time else None
        self.manifest["duration_seconds"] = self.duration
        self.manifest["output_path"] = str(output_path)

        self._write_manifest()
        log.info(f"Updated manifest: success, at {self.manifest_path}")

    # endregion

    # region fail
    def fail(self, error: Exception) -> None:
        """Update manifest on failure with error information."""
        self._get_time_stats()

        self.manifest["status"] = "fail"
        self.manifest["error"] = str(error)
        self.manifest["error_type"] = type(error).__name__
        self.manifest["end_time"] = self.end_time.isoformat() if self.end_time else None
        self.manifest["duration_seconds"] = self.duration

        self._write_manifest()
        log.error(f"Updated manifest ({self.manifest_path}): failed - {error}")

    # endregion

    # region _build_manifest
    def _build_manifest(self) -> dict[str, Any]:
        return {
            "manifest_version": MANIFEST_VERSION,
            "run_id": self.run_id,
            "session_id": get_session_id(),
            "environment": self._get_environment_info(),
            "start_time": self.start_time.isoformat(),
            "end_time": None,
            "duration_seconds": None,
            "direction": self.cfg.direction.value,
            "pipeline_name": self._get_pipeline_name(),
            "input_file": str(self.cfg.get_input_pptx_file()),
            "output_folder": str(self.cfg.get_output_folder()),
            "log_path": str(user_log_dir_path()),
            "config": self.cfg.config_to_dict(),
            "omissions_count": None,
            "omissions_by_kind": {},
            "error": None,
            "error_type": None,
        }

    # endregion

    # region _write_manifest
    def _write_manifest(self) -> None:
        try:
            with open(self.manifest_path, "w", encoding="utf-8", newline="\n") as f:
                json.dump(self.manifest, f, indent=2)
        except OSError as e:
            log.error(f"Failed to write manifest to {self.manifest_path}: {e}")

    # endregion

    # region helpers
    def _get_time_stats(self) -> None:
        self.end_time = datetime.now()
        self.duration = (self.end_time - self.start_time).total_seconds()

    def _get_pipeline_name(self) -> str:
        if self.cfg.direction == PipelineDirection.ROUND_TRIP:
            return "run_roundtrip_pipeline"
        elif self.cfg.direction == PipelineDirection.PPTX_TO_JSON:
            return "run_pptx2json_pipeline"
        else:
            return "unknown_pipeline"

    def _get_environment_info(self) -> dict[str, Any]:
        """Get execution environment information."""
        return {
            "python_version": sys.version.split()[0],
            "platform": platform.system(),
            "platform_release": platform.release(),
            "app_version": self._get_app_version(),
        }

    def _get_app_version(self) -> str:
        try:
            from deckcodec import __version__

            return __version__
        except (ImportError, AttributeError):
            return "unknown"

    # endregion


# endregion
