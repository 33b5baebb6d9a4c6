# src/corpus/walker.py - v1
"""Corpus walker: deterministic discovery of eligible source documents."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from corpusdigest.core.errors import EnumerationError
from corpusdigest.core.models import Document

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".pdf",)


class CorpusWalker:
    """List every file under a root whose extension is in the filter.

    Documents come back sorted by relative POSIX path, so repeated walks of an
    unchanged corpus yield identical sequences. Any directory that cannot be
    read fails the whole walk; a partial corpus is never returned.
    """

    def __init__(self, extensions: list[str] | tuple[str, ...] | None = None) -> None:
        exts = extensions or DEFAULT_EXTENSIONS
        self._extensions = {"." + e.lower().lstrip(".") for e in exts}

    @property
    def extensions(self) -> set[str]:
        return set(self._extensions)

    def walk(self, root: Path) -> list[Document]:
        """Enumerate eligible documents under root.

        Raises:
            EnumerationError: If root is missing or any directory is unreadable.
        """
        root = Path(root)
        if not root.is_dir():
            raise EnumerationError(f"Corpus root is not a readable directory: {root}")

        def _fail(err: OSError) -> None:
            raise EnumerationError(f"Cannot read {err.filename}: {err.strerror}") from err

        relative_paths: list[str] = []
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_fail):
            for name in filenames:
                if Path(name).suffix.lower() not in self._extensions:
                    continue
                full = Path(dirpath) / name
                if not full.is_file():
                    continue
                relative_paths.append(full.relative_to(root).as_posix())

        documents = [Document(relative_path=p) for p in sorted(relative_paths)]
        logger.info(
            "Scanned %s: found %d documents (%s)",
            root, len(documents), ", ".join(sorted(self._extensions)),
        )
        return documents
