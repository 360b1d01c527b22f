"""CLI Interface Logic (argparse etc)"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path
from typing import Sequence

from deckcodec.internals.define_config import CodecConfig, PipelineDirection
from deckcodec.orchestrator import run_pipeline

log = logging.getLogger("deckcodec")

# CLI-only args that have no CodecConfig field
EXCLUDED_ARGS = {"help", "version", "config"}


def run(argv: Sequence[str] | None = None) -> Path:
    """Run CLI interface. Assumes startup.initialize_application() was already called."""
    args = parse_args(argv)

    # CLI args > config file > defaults
    cfg = build_config_from_args(args)

    return run_pipeline(cfg)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with one flag per CodecConfig field, plus --config."""
    from deckcodec import __version__

    parser = argparse.ArgumentParser(
        prog="deckcodec",
        description="Import a PowerPoint deck into a document model and export it again (or dump it as JSON)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Round-trip the generated sample deck
  deckcodec

  # Round-trip a real deck
  deckcodec --input-pptx quarterly.pptx

  # Dump the model as JSON instead
  deckcodec --input-pptx quarterly.pptx --direction pptx2json

  # Override config file settings
  deckcodec --config settings.toml --no-include-notes
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Config file (special - loads other values)
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to TOML configuration file. See ~/Documents/deckcodec/configs/sample_config.toml after at least 1 run",
    )

    # Input/Output
    parser.add_argument(
        "--input-pptx",
        type=str,
        dest="input_pptx",
        metavar="PATH",
        help="Input PowerPoint file (.pptx file)",
    )
    parser.add_argument(
        "--output-folder",
        type=str,
        dest="output_folder",
        metavar="PATH",
        help="Output folder for converted files",
    )

    # Processing options
    parser.add_argument(
        "--direction",
        type=str,
        choices=[d.value for d in PipelineDirection] + ["round-trip", "json"],
        help="What to produce from the input deck (default: roundtrip)",
    )
    parser.add_argument(
        "--default-author",
        type=str,
        dest="default_author",
        metavar="NAME",
        help="Author written to the exported deck when the input has none",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        dest="max_workers",
        metavar="N",
        help="Thread pool size for media extraction, slide parsing and image preparation (default: 4)",
    )
    parser.add_argument(
        "--image-fetch-timeout",
        type=float,
        dest="image_fetch_timeout",
        metavar="SECONDS",
        help="Timeout for downloading http(s) images during export (default: 10)",
    )

    # Boolean flags - speaker notes
    notes_group = parser.add_mutually_exclusive_group()
    notes_group.add_argument(
        "--include-notes",
        action="store_true",
        dest="include_notes",
        help="Write speaker notes into the exported deck (default: enabled)",
    )
    notes_group.add_argument(
        "--no-include-notes",
        action="store_false",
        dest="include_notes",
        help="Leave speaker notes out of the exported deck",
    )
    # None means "not given", so config file values aren't clobbered
    parser.set_defaults(include_notes=None)

    _validate_args_match_config(parser)

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments (sys.argv when argv is None)."""
    return build_parser().parse_args(argv)


def build_config_from_args(args: argparse.Namespace) -> CodecConfig:
    """
    Build CodecConfig from parsed arguments with proper priority.

    Priority order (highest to lowest):
    1. CLI arguments (if explicitly provided)
    2. Config file values (if --config provided)
    3. CodecConfig defaults (the sample deck, when nothing names an input)
    """
    if args.config:
        config_path = Path(args.config)
        log.info(f"Loading config from {config_path}")
        cfg = CodecConfig.from_toml(config_path)
    else:
        cfg = CodecConfig()

    if args.input_pptx is not None:
        cfg.input_pptx = Path(args.input_pptx)
    if args.output_folder is not None:
        cfg.output_folder = Path(args.output_folder)
    if args.direction is not None:
        cfg.direction = PipelineDirection.from_string(args.direction)
    if args.default_author is not None:
        cfg.default_author = args.default_author
    if args.max_workers is not None:
        cfg.max_workers = args.max_workers
    if args.image_fetch_timeout is not None:
        cfg.image_fetch_timeout = args.image_fetch_timeout
    if args.include_notes is not None:
        cfg.include_notes = args.include_notes

    if cfg.input_pptx is None:
        log.info("No input deck given; using the sample deck.")
        cfg.input_pptx = CodecConfig.with_defaults().input_pptx

    cfg.validate()

    return cfg


def _validate_args_match_config(parser: argparse.ArgumentParser) -> None:
    """
    Ensure all CodecConfig fields have corresponding CLI arguments, and vice versa.

    Raises:
        RuntimeError: If there's a mismatch between config fields and CLI args
    """
    config_fields = {f.name for f in fields(CodecConfig)}
    arg_names = {action.dest for action in parser._actions if action.dest not in EXCLUDED_ARGS}

    missing_in_args = config_fields - arg_names
    extra_in_args = arg_names - config_fields

    if missing_in_args:
        log.error(
            "CodecConfig fields must have a corresponding arg in cli.build_parser() to keep the interfaces in step."
        )
        raise RuntimeError(
            f"CLI arguments missing for CodecConfig fields: {missing_in_args}\n"
            "These config fields need corresponding arguments added to build_parser()"
        )

    if extra_in_args:
        log.error(
            "Unexpected CLI args that do not match CodecConfig fields. New args must either have a "
            "matching CodecConfig field, or be CLI-only and listed in EXCLUDED_ARGS."
        )
        raise RuntimeError(
            f"CLI arguments don't match CodecConfig fields: {extra_in_args}\n"
            "Either remove these CLI args or add corresponding fields to CodecConfig"
        )


def main() -> None:
    """Console-script entry point (`deckcodec`)."""
    from deckcodec import startup

    log = startup.initialize_application()
    try:
        run()
    except Exception:
        log.exception("Fatal error in CLI")
        raise


if __name__ == "__main__":
    main()
