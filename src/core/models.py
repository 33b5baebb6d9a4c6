# src/core/models.py - v2
"""Shared Pydantic domain models: documents, stages, and run results.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Literal

from pydantic import BaseModel, Field, field_validator


Stage = Literal["source-copy", "text", "summary", "translation"]

# Processing order. "source-copy" is a provenance artifact, not a dependency.
STAGES: tuple[Stage, ...] = ("source-copy", "text", "summary", "translation")


class Document(BaseModel, frozen=True):
    """A source document, identified by its corpus-relative POSIX path."""

    relative_path: str

    @field_validator("relative_path")
    @classmethod
    def _normalize_path(cls, v: str) -> str:
        path = PurePosixPath(v.replace("\\", "/"))
        if path.is_absolute() or ".." in path.parts or not path.name:
            raise ValueError(f"Not a corpus-relative file path: {v!r}")
        return str(path)

    @property
    def filename(self) -> str:
        return PurePosixPath(self.relative_path).name

    @property
    def base_name(self) -> str:
        """File name with its extension stripped."""
        return PurePosixPath(self.relative_path).stem

    @property
    def directory(self) -> str:
        """Parent directory relative to the corpus root ("" at top level)."""
        parent = str(PurePosixPath(self.relative_path).parent)
        return "" if parent == "." else parent

    @property
    def document_id(self) -> str:
        """Relative path with the extension stripped; also the artifact folder."""
        return str(PurePosixPath(self.relative_path).with_suffix(""))


class DocumentOutcome(BaseModel):
    """Result of driving one document through the stages."""

    document_id: str
    status: Literal["completed", "failed"]
    failed_stage: Stage | None = None
    error: str | None = None
    computed_stages: list[Stage] = Field(default_factory=list)
    reused_stages: list[Stage] = Field(default_factory=list)


class RunResult(BaseModel):
    """Summary of one traversal of the corpus."""

    corpus_root: str
    total_documents: int
    completed: int = 0
    failed: int = 0
    stage_calls: dict[str, int] = Field(default_factory=dict)
    outcomes: list[DocumentOutcome] = Field(default_factory=list)
    duration_seconds: float = 0.0
