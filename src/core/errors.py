# src/core/errors.py - v1
"""Error taxonomy for the pipeline.

EnumerationError aborts a whole run. Every other error is recoverable at
document granularity: the runner logs it and moves on to the next document.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all corpusdigest errors."""

    stage: str | None = None

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class EnumerationError(PipelineError):
    """The corpus root cannot be enumerated; the run must not proceed."""


class ExtractionError(PipelineError):
    """Text extraction failed (malformed or unreadable document)."""

    stage = "text"


class SummarizationError(PipelineError):
    """Summarization service returned an error or a malformed body."""

    stage = "summary"


class TranslationError(PipelineError):
    """Translation service call failed."""

    stage = "translation"


class StorageError(PipelineError):
    """Artifact read or write failed."""


class ArtifactNotFound(StorageError):
    """Requested artifact does not exist in the store."""

    def __init__(self, document_id: str, stage: str) -> None:
        self.document_id = document_id
        super().__init__(f"No '{stage}' artifact for {document_id}", stage=stage)
