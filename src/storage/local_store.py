# src/storage/local_store.py - v1
"""Local filesystem artifact store (default backend)."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from corpusdigest.core.errors import ArtifactNotFound, StorageError
from corpusdigest.core.models import Document, Stage
from corpusdigest.storage import layout
from corpusdigest.storage.base_artifact_store import BaseArtifactStore

logger = logging.getLogger(__name__)


class LocalArtifactStore(BaseArtifactStore):
    """Store artifacts under an output root mirroring the corpus tree."""

    def __init__(self, output_root: Path | str, corpus_root: Path | str) -> None:
        """Initialize with output and corpus roots.

        Args:
            output_root: Root directory for all artifacts.
            corpus_root: Root directory of the source documents (for copy_source).
        """
        self._output_root = Path(output_root)
        self._corpus_root = Path(corpus_root)

    @property
    def output_root(self) -> Path:
        return self._output_root

    def path_for(self, document: Document, stage: Stage) -> Path:
        """Resolve the on-disk path of an artifact."""
        return self._output_root / layout.artifact_path(document, stage)

    async def exists(self, document: Document, stage: Stage) -> bool:
        return self.path_for(document, stage).is_file()

    async def read(self, document: Document, stage: Stage) -> bytes:
        p = self.path_for(document, stage)
        try:
            return p.read_bytes()
        except FileNotFoundError as exc:
            raise ArtifactNotFound(document.document_id, stage) from exc
        except OSError as exc:
            raise StorageError(f"Cannot read {p}: {exc}", stage=stage) from exc

    async def write(self, document: Document, stage: Stage, content: bytes | str) -> None:
        p = self.path_for(document, stage)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                p.write_bytes(content)
            else:
                p.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot write {p}: {exc}", stage=stage) from exc
        logger.debug("Wrote %s", p)

    async def copy_source(self, document: Document) -> None:
        src = self._corpus_root / document.relative_path
        dst = self.path_for(document, "source-copy")
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, dst)
        except OSError as exc:
            raise StorageError(
                f"Cannot copy {src} to {dst}: {exc}", stage="source-copy",
            ) from exc
