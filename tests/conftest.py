"""Shared fixtures"""

# tests/conftest.py
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from deckcodec.internals import run_context
from deckcodec.internals.define_config import CodecConfig
from tests.helpers import build_pptx, notes_xml, slide_xml, sp


@pytest.fixture(autouse=True)
def isolated_user_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point ~/Documents at a temp dir so no test touches the real user folder."""
    documents = tmp_path / "Documents"
    documents.mkdir()
    monkeypatch.setattr(
        "deckcodec.internals.paths.user_documents_dir", lambda: str(documents)
    )
    return documents / "deckcodec"


@pytest.fixture(autouse=True)
def reset_run_context(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each test starts without a pipeline run ID."""
    monkeypatch.setattr(run_context, "_pipeline_run_id", None)


@pytest.fixture(autouse=True)
def propagate_deckcodec_logs() -> Iterator[None]:
    """setup_logger() turns propagation off; caplog needs it on."""
    logger = logging.getLogger("deckcodec")
    original = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = original


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Temporary directory for test output files"""
    output = tmp_path / "output"
    output.mkdir()
    return output


@pytest.fixture
def clean_debug_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Ensure debug env var is not set before test."""
    monkeypatch.delenv("DECKCODEC_DEBUG", raising=False)
    return monkeypatch


@pytest.fixture
def simple_pptx_bytes() -> bytes:
    """Two slides: a title text box, then a filled ellipse, plus notes on the first."""
    return build_pptx(
        [
            slide_xml(sp(2, "Title", text=["Hello deck"])),
            slide_xml(
                sp(
                    2,
                    "Box",
                    prst="ellipse",
                    fill='<a:solidFill><a:srgbClr val="4472C4"/></a:solidFill>',
                )
            ),
        ],
        notes={0: notes_xml("Remember to smile")},
    )


@pytest.fixture
def simple_pptx_path(tmp_path: Path, simple_pptx_bytes: bytes) -> Path:
    path = tmp_path / "simple.pptx"
    path.write_bytes(simple_pptx_bytes)
    return path


@pytest.fixture
def sample_cfg(simple_pptx_path: Path, temp_output_dir: Path) -> CodecConfig:
    """Sample config object for roundtrip testing"""
    return CodecConfig(input_pptx=simple_pptx_path, output_folder=temp_output_dir)
