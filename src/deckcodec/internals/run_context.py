"""Process-wide tracking IDs.

- session_id: one per process (a CLI invocation or an embedding application's lifetime)
- pipeline_run_id: a fresh one for every import/export pipeline run
"""

from __future__ import annotations

import logging
import os
import threading
import uuid

SESSION_ID_ENV_VAR = "DECKCODEC_SESSION_ID"

_session_id: str | None = None
_pipeline_run_id: str | None = None

_session_lock = threading.Lock()
_pipeline_lock = threading.Lock()


# region session id
def seed_session_id(value: str) -> None:
    """Set the session ID before anything generates one. No effect once it's set."""
    global _session_id
    with _session_lock:
        if _session_id is None:
            _session_id = value


def get_session_id() -> str:
    """
    Return the session ID, generating it on first use.

    Resolution order:
    1. A value given to seed_session_id().
    2. The DECKCODEC_SESSION_ID environment variable, so tests and outside tooling
       can correlate logs with a known ID.
    3. A random 8-character hex string.
    """
    global _session_id
    if _session_id is None:
        with _session_lock:
            # Re-check inside the lock: another thread may have won the race.
            if _session_id is None:
                _session_id = os.environ.get(SESSION_ID_ENV_VAR) or uuid.uuid4().hex[:8]
    return _session_id


# endregion


# region pipeline run id
def start_pipeline_run() -> str:
    """Generate, store and return a fresh pipeline run ID. Always replaces the previous one."""
    global _pipeline_run_id
    with _pipeline_lock:
        _pipeline_run_id = uuid.uuid4().hex[:8]
    return _pipeline_run_id


def get_pipeline_run_id() -> str:
    """The current pipeline run ID, or 'Unknown' when no run has started."""
    if _pipeline_run_id is None:
        logging.getLogger("deckcodec").debug(
            "No pipeline run ID yet; returning Unknown. Call start_pipeline_run() first."
        )
        return "Unknown"
    return _pipeline_run_id


def seed_pipeline_run_id(value: str) -> None:
    """Set the pipeline run ID directly (for tests)."""
    global _pipeline_run_id
    with _pipeline_lock:
        _pipeline_run_id = value


# endregion
