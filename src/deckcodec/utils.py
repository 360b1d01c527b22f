"""Utilities for use across the entire program."""

import io
import logging
import os
import platform
import sys

from deckcodec.internals import constants

log = logging.getLogger("deckcodec")


# region setup_console_encoding
def setup_console_encoding() -> None:
    """Configure UTF-8 on the Windows console so non-ASCII slide text can be logged."""
    if platform.system() == "Windows":
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")


# endregion


# region get_debug_mode
def get_debug_mode() -> bool:
    """Debug mode from the DECKCODEC_DEBUG env variable, falling back to the constant."""
    env_debug_str = os.environ.get(constants.DEBUG_ENV_VAR)
    if env_debug_str is not None:
        try:
            return str_to_bool(env_debug_str)
        except ValueError:
            log.warning(
                f"Warning: Invalid value for {constants.DEBUG_ENV_VAR} env var: '{env_debug_str}'. Using default."
            )

    return constants.DEBUG_MODE_DEFAULT


# endregion


# region str_to_bool
def str_to_bool(value: str) -> bool:
    """Convert strings like "True"/"no"/"1" to booleans."""
    if value.lower().strip() in {"false", "f", "0", "no", "n"}:
        return False
    elif value.lower().strip() in {"true", "t", "1", "yes", "y"}:
        return True
    else:
        log.warning(f"{value} is not a valid boolean value.")
        raise ValueError(f"{value} is not a valid boolean value.")


# endregion
