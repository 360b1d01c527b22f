"""
Basic logging setup; creates console and file handlers with the session id in every log line.
"""

import logging

from deckcodec.internals.paths import user_log_dir_path
from deckcodec.internals.run_context import get_session_id


def setup_logger(
    name: str = "deckcodec",
    level: int = logging.DEBUG,
    enable_trace: bool = False,
) -> logging.Logger:
    """
    Setup logging with console and file output.

    Every line carries the session id. Safe to call more than once: an already-configured
    logger is returned as-is.

    Example:
        >>> log = setup_logger()
        >>> log.info("Importing deck")
        2025-01-09 14:23:45 [INFO] Importing deck [run:a1b2c3d4]
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(level)

    # Keep deckcodec's lines out of the root logger (and other libraries' lines out of ours).
    logger.propagate = False

    run_id = get_session_id()

    log_format = f"%(asctime)s [%(levelname)s] %(message)s [run:{run_id}]"
    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.INFO)
    logger.addHandler(console_handler)

    # ~/Documents/deckcodec/logs/deckcodec.log gets everything
    log_file = user_log_dir_path() / "deckcodec.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)

    if enable_trace:
        trace_log_format = (
            f"%(filename)s: %(funcName)s(), Line: %(lineno)d: - [%(levelname)s] "
            f"%(asctime)s - %(message)s -- [run_id={run_id}]"
        )
        trace_formatter = logging.Formatter(trace_log_format, datefmt="%Y-%m-%d %H:%M:%S")
        trace_file_handler = logging.FileHandler(
            user_log_dir_path() / "trace_deckcodec.log", encoding="utf-8"
        )
        trace_file_handler.setFormatter(trace_formatter)
        trace_file_handler.setLevel(logging.DEBUG)
        logger.addHandler(trace_file_handler)

    logger.info(f"Logger initialized. Writing to {log_file}")

    return logger
