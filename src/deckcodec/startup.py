"""Startup logic needed before anything else happens.

- Logging configuration
- User directory scaffolding (README, sample config, sample deck)
- Console encoding setup
"""

import logging

from deckcodec.internals.logger import setup_logger
from deckcodec.internals.scaffold import ensure_user_scaffold
from deckcodec.utils import get_debug_mode, setup_console_encoding


# region initialize_application
def initialize_application() -> logging.Logger:
    """Common startup tasks for the CLI and `python -m deckcodec`."""
    # Must happen before any console output
    setup_console_encoding()

    log = setup_logger(enable_trace=get_debug_mode())
    log.info("Starting deckcodec Log.")

    log.debug("Checking for existing deckcodec user folders and scaffolding if needed.")
    ensure_user_scaffold()

    return log


# endregion
