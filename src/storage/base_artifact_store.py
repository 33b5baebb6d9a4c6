# src/storage/base_artifact_store.py - v1
"""Abstract artifact store interface.

An artifact's presence in the store is the only record that its stage
completed; there is no separate ledger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from corpusdigest.core.errors import StorageError
from corpusdigest.core.models import Document, Stage


class BaseArtifactStore(ABC):
    """Unified interface for artifact storage backends."""

    @abstractmethod
    async def exists(self, document: Document, stage: Stage) -> bool:
        """Return True iff the stage's artifact was written for the document."""

    @abstractmethod
    async def read(self, document: Document, stage: Stage) -> bytes:
        """Read an artifact.

        Raises:
            ArtifactNotFound: If the artifact is absent.
            StorageError: On any other read failure.
        """

    @abstractmethod
    async def write(self, document: Document, stage: Stage, content: bytes | str) -> None:
        """Write an artifact, creating containing locations as needed.

        Raises:
            StorageError: On write failure.
        """

    @abstractmethod
    async def copy_source(self, document: Document) -> None:
        """Store the original document bytes unchanged as its source copy."""

    async def read_text(self, document: Document, stage: Stage) -> str:
        """Read an artifact decoded as UTF-8."""
        data = await self.read(document, stage)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StorageError(
                f"'{stage}' artifact for {document.document_id} is not valid UTF-8",
                stage=stage,
            ) from exc
