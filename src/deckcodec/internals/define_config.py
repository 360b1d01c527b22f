# internals/define_config.py
"""Codec run configuration dataclass and validation."""

# region imports
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import tomli_w  # For writing (no stdlib equivalent yet)

from deckcodec.internals.constants import (
    DEFAULT_AUTHOR,
    DEFAULT_IMAGE_FETCH_TIMEOUT,
    DEFAULT_MAX_WORKERS,
)
from deckcodec.internals.paths import resolve_path, user_input_dir, user_output_dir

# endregion

log = logging.getLogger("deckcodec")

SAMPLE_DECK_FILENAME = "sample_deck.pptx"


# region PipelineDirection
class PipelineDirection(Enum):
    """What to do with the input deck."""

    ROUND_TRIP = "roundtrip"  # import, then export again as .pptx
    PPTX_TO_JSON = "pptx2json"  # import, then dump the model as JSON

    @classmethod
    def from_string(cls, value: str) -> PipelineDirection:
        """Convert a string to a PipelineDirection, accepting a couple of aliases."""
        value = value.lower().strip()

        aliases = {
            "round-trip": cls.ROUND_TRIP,
            "json": cls.PPTX_TO_JSON,
            # Aliases also need adding to the CLI's choices.
        }
        if value in aliases:
            return aliases[value]

        for member in cls:
            if member.value == value:
                return member

        valid_values = [m.value for m in cls] + list(aliases.keys())
        raise ValueError(
            f"'{value}' is not a valid PipelineDirection. Valid options: {', '.join(valid_values)}"
        )


# endregion


# region class CodecConfig
@dataclass
class CodecConfig:
    """All user-configurable settings for a deckcodec run."""

    # region class fields
    input_pptx: Optional[Path] = None
    output_folder: Optional[Path] = None  # Where outputs are saved; defaults to the user output dir

    direction: PipelineDirection = PipelineDirection.ROUND_TRIP

    # Export options
    default_author: str = DEFAULT_AUTHOR  # Used when the deck has no author of its own
    include_notes: bool = True
    image_fetch_timeout: float = DEFAULT_IMAGE_FETCH_TIMEOUT  # seconds, for http(s) images

    # Thread pool size for media extraction, slide parsing and image preparation
    max_workers: int = DEFAULT_MAX_WORKERS
    # endregion

    # region post_init
    def __post_init__(self) -> None:
        """Convert string inputs of path fields into Path objects."""
        if self.input_pptx is not None:
            self.input_pptx = Path(self.input_pptx)
        if self.output_folder is not None:
            self.output_folder = Path(self.output_folder)

    # endregion

    # region with_defaults
    @classmethod
    def with_defaults(cls) -> CodecConfig:
        """
        Config pointing at the scaffolded sample deck, for a zero-argument CLI demo.

        Lets `python -m deckcodec` do something useful straight away.
        """
        cfg = cls()
        cfg.input_pptx = user_input_dir() / SAMPLE_DECK_FILENAME
        return cfg

    # endregion

    # region from_toml
    @classmethod
    def from_toml(cls, path: Path) -> CodecConfig:
        """
        Load configuration from a TOML file of flat key/value pairs named like the fields.

        Example TOML:
            input_pptx = "~/decks/quarterly.pptx"
            direction = "pptx2json"
            include_notes = false

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the TOML is invalid or holds an invalid enum value
        """
        if not path.exists():
            error_msg = f"Config file not found: {path}"
            log.error(error_msg)
            raise FileNotFoundError(error_msg)
        if path.is_dir():
            error_msg = f"This is a directory (folder), not a toml file: {path}"
            log.error(error_msg)
            raise ValueError(error_msg)

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            error_msg = f"Invalid TOML syntax in {path}. Check for missing or mismatched quote marks."
            log.error(error_msg)
            raise ValueError(error_msg) from e
        except PermissionError as e:
            error_msg = f"We hit a permission error when trying to access {path}"
            log.error(error_msg)
            raise ValueError(error_msg) from e

        if not data:
            log.warning(f"Config toml file loaded as empty, so no fields were set from: {path}.")

        valid_fields = {f.name for f in fields(cls)}
        unexpected = set(data.keys()) - valid_fields
        if unexpected:
            log.warning(
                f"Ignoring unexpected fields in TOML config: {', '.join(sorted(unexpected))}. "
                f"Check for typos. Valid fields: {', '.join(sorted(valid_fields))}"
            )
            data = {k: v for k, v in data.items() if k in valid_fields}

        if "direction" in data:
            try:
                data["direction"] = PipelineDirection.from_string(data["direction"])
            except (ValueError, AttributeError) as e:
                error_msg = (
                    f"Invalid direction: '{data['direction']}'. "
                    f"Valid options: {[d.value for d in PipelineDirection]}"
                )
                log.error(error_msg)
                raise ValueError(error_msg) from e

        # TOML has no float/int distinction for whole numbers like 10
        if isinstance(data.get("image_fetch_timeout"), int) and not isinstance(
            data["image_fetch_timeout"], bool
        ):
            data["image_fetch_timeout"] = float(data["image_fetch_timeout"])

        return cls(**data)

    # endregion

    # region path getters
    def get_input_pptx_file(self) -> Path | None:
        """The input deck as an absolute path, or None if not specified."""
        if self.input_pptx:
            return resolve_path(str(self.input_pptx))
        return None

    def get_output_folder(self) -> Path:
        """The output folder, with fallback to ~/Documents/deckcodec/output/."""
        if self.output_folder:
            return resolve_path(str(self.output_folder))
        return user_output_dir()

    # endregion

    # region save_toml
    def save_toml(self, path: Path) -> None:
        """Save configuration to a TOML file (unset fields are left out)."""
        path = Path(path)

        if path.exists() and path.is_dir():
            error_msg = f"Cannot save config: path is a directory, not a file: {path}."
            log.error(error_msg)
            raise ValueError(error_msg)

        path.parent.mkdir(parents=True, exist_ok=True)

        # TOML can't serialize None
        data = {k: v for k, v in self.config_to_dict().items() if v is not None}

        try:
            with open(path, "wb") as f:
                tomli_w.dump(data, f)
            log.info(f"Saved toml config file at {path}")
        except PermissionError as e:
            error_msg = f"Permission denied writing to: {path}"
            log.error(error_msg)
            raise PermissionError(error_msg) from e
        except OSError as e:
            error_msg = f"Failed to write config file to {path}"
            log.error(error_msg)
            raise OSError(error_msg) from e

    # endregion

    # region config_to_dict
    def config_to_dict(self) -> dict[str, Any]:
        """TOML/JSON-serializable dict of the config; paths use forward slashes."""
        return {
            "input_pptx": self.input_pptx.as_posix() if self.input_pptx else None,
            "output_folder": self.output_folder.as_posix() if self.output_folder else None,
            "direction": self.direction.value,
            "default_author": self.default_author,
            "include_notes": self.include_notes,
            "image_fetch_timeout": self.image_fetch_timeout,
            "max_workers": self.max_workers,
        }

    # endregion

    # region validation
    def pre_run_check(self) -> None:
        """Validate everything a pipeline run needs: intrinsic values, then external state."""
        self.validate()
        self.validate_pipeline_requirements()

    def validate(self) -> None:
        """
        Validate intrinsic config values (no filesystem access).

        Catches wrong types sneaking in from TOML or programmatic construction.
        """
        if not self.input_pptx:
            log.error("No input file specified")
            raise ValueError("No input file provided: input_pptx must be set.")

        if not isinstance(self.direction, PipelineDirection):  # type: ignore[unreachable]
            log.error("Invalid value in direction; must be enum.")
            raise ValueError(
                f"direction must be a PipelineDirection enum, got {type(self.direction).__name__}. "
                f"Valid values: {[e.value for e in PipelineDirection]}"
            )

        if not isinstance(self.include_notes, bool):
            log.error(f"include_notes must be a boolean, got {type(self.include_notes).__name__}")
            raise ValueError(
                f"include_notes must be a boolean, got {type(self.include_notes).__name__}"
            )

        if not isinstance(self.default_author, str):
            log.error(f"default_author must be a string, got {type(self.default_author).__name__}")
            raise ValueError(
                f"default_author must be a string, got {type(self.default_author).__name__}"
            )

        # bool is an int subclass; reject it explicitly
        if not isinstance(self.max_workers, int) or isinstance(self.max_workers, bool):
            log.error(f"max_workers must be an integer, got {type(self.max_workers).__name__}")
            raise ValueError(
                f"max_workers must be an integer, got {type(self.max_workers).__name__}"
            )
        if self.max_workers < 1:
            log.error(f"max_workers must be >= 1, got {self.max_workers}")
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        if not isinstance(self.image_fetch_timeout, (int, float)) or isinstance(
            self.image_fetch_timeout, bool
        ):
            log.error(
                f"image_fetch_timeout must be a number, got {type(self.image_fetch_timeout).__name__}"
            )
            raise ValueError(
                f"image_fetch_timeout must be a number, got {type(self.image_fetch_timeout).__name__}"
            )
        if self.image_fetch_timeout <= 0:
            log.error(f"image_fetch_timeout must be > 0, got {self.image_fetch_timeout}")
            raise ValueError(f"image_fetch_timeout must be > 0, got {self.image_fetch_timeout}")

    def validate_pipeline_requirements(self) -> None:
        """
        Validate external state right before a run: the input deck exists and is a file,
        and the output folder is usable.
        """
        input_path = self.get_input_pptx_file()
        if input_path is None:
            log.error("No input pptx file specified.")
            raise ValueError(
                "No input pptx file specified. Please set input_pptx before running the pipeline."
            )
        if not input_path.exists():
            error_msg = f"Input pptx file not found: {input_path}"
            log.error(error_msg)
            raise FileNotFoundError(error_msg)
        if not input_path.is_file():
            error_msg = f"Input pptx is not a file: {input_path}"
            log.error(error_msg)
            raise ValueError(error_msg)

        output_folder = self.get_output_folder()
        if output_folder.exists() and not output_folder.is_dir():
            error_msg = f"Output path exists but is not a directory: {output_folder}"
            log.error(error_msg)
            raise ValueError(error_msg)

    # endregion


# endregion
