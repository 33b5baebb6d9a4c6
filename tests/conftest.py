# tests/conftest.py - v2
"""Shared test fixtures: temp corpus/output trees and fake stage functions.

No external services: the summarizer and translator are mocked and PDFs are
generated locally with PyMuPDF.
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from corpusdigest.core.models import Document
from corpusdigest.storage.local_store import LocalArtifactStore


# === FIXTURES: Logging ===


@pytest.fixture(autouse=True)
def _reset_corpusdigest_logger():
    """Drop handlers installed by setup_logging() so they never outlive a test."""
    yield
    root = logging.getLogger("corpusdigest")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


# === FIXTURES: Temp dirs ===


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Corpus root with two PDFs (one nested) and one ineligible file."""
    root = tmp_path / "corpus"
    (root / "reports").mkdir(parents=True)
    (root / "alpha.pdf").write_bytes(b"%PDF-1.4 alpha")
    (root / "reports" / "beta.pdf").write_bytes(b"%PDF-1.4 beta")
    (root / "notes.txt").write_text("not a pdf")
    return root


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "output"
    out.mkdir()
    return out


@pytest.fixture
def store(corpus_dir: Path, output_dir: Path) -> LocalArtifactStore:
    return LocalArtifactStore(output_root=output_dir, corpus_root=corpus_dir)


@pytest.fixture
def alpha() -> Document:
    return Document(relative_path="alpha.pdf")


@pytest.fixture
def beta() -> Document:
    return Document(relative_path="reports/beta.pdf")


# === FIXTURES: Stage functions ===


@pytest.fixture
def fake_extract() -> AsyncMock:
    """Extract returning 'text of <file name>'."""
    return AsyncMock(side_effect=lambda path: f"text of {Path(path).name}")


@pytest.fixture
def fake_summarize() -> AsyncMock:
    return AsyncMock(side_effect=lambda text: f"summary of {text}")


@pytest.fixture
def fake_translate() -> AsyncMock:
    return AsyncMock(side_effect=lambda text: f"translation of {text}")
