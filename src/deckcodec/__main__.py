"""Entry point for `python -m deckcodec`."""

from __future__ import annotations

import logging

from deckcodec import startup
from deckcodec.cli import run as run_cli


def main() -> None:
    """Application entry point: initialize logging and user folders, then run the CLI.

    Call like:
    ```
    python -m deckcodec --input-pptx deck.pptx
    ```
    """
    log: logging.Logger = startup.initialize_application()

    try:
        run_cli()
    except Exception:
        log.exception("Unhandled exception - program crashed.")  # Logs full traceback
        raise


if __name__ == "__main__":
    main()
