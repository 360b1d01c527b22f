"""Cross-platform path resolution for user directories.

Uses platformdirs to find the OS-appropriate Documents folder, and keeps everything under
~/Documents/deckcodec/:
- logs/      (deckcodec.log)
- output/    (round-tripped decks and JSON dumps)
- input/     (optional staging area for source decks)
- configs/   (saved TOML configurations)
- manifests/ (one JSON manifest per pipeline run)
"""

import os
from pathlib import Path

from platformdirs import user_documents_dir

PACKAGE_NAME = "deckcodec"


# region user_base_dir
def user_base_dir() -> Path:
    """
    Base directory for all deckcodec user files.

    Examples:
        Windows: C:/Users/YourName/Documents/deckcodec/
        macOS: /Users/YourName/Documents/deckcodec/
        Linux: /home/yourname/Documents/deckcodec/
    """
    base = Path(user_documents_dir()) / PACKAGE_NAME
    base.mkdir(parents=True, exist_ok=True)
    return base


# endregion


# region subdirectories
def _user_subdir(name: str) -> Path:
    path = user_base_dir() / name
    path.mkdir(parents=True, exist_ok=True)
    return path


def user_log_dir_path() -> Path:
    return _user_subdir("logs")


def user_output_dir() -> Path:
    """Default output directory for converted files."""
    return _user_subdir("output")


def user_input_dir() -> Path:
    return _user_subdir("input")


def user_configs_dir() -> Path:
    return _user_subdir("configs")


def user_manifests_dir() -> Path:
    return _user_subdir("manifests")


# endregion


# region resolve_path
def resolve_path(raw: str) -> Path:
    """
    Expand ~ and ${VARS}; resolve to an absolute path.

    Relative paths resolve against the current working directory.
    """
    expanded = os.path.expandvars(raw)
    return Path(expanded).expanduser().resolve()


# endregion
