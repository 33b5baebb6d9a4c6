# src/storage/layout.py - v2
"""Artifact path conventions.

For a document at ``d/name.ext`` every artifact lives in the folder
``d/name/`` under the output root:

    d/name/name.ext               source copy
    d/name/name.text.txt          extracted text
    d/name/name.summary.txt       summary
    d/name/name.translation.txt   translated summary

Paths are returned as POSIX keys relative to the output root so the same
layout serves the local filesystem and object storage.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from corpusdigest.core.models import Document, Stage

TEXT_SUFFIX = ".text.txt"
SUMMARY_SUFFIX = ".summary.txt"
TRANSLATION_SUFFIX = ".translation.txt"

_STAGE_SUFFIXES: dict[str, str] = {
    "text": TEXT_SUFFIX,
    "summary": SUMMARY_SUFFIX,
    "translation": TRANSLATION_SUFFIX,
}


def document_dir(document: Document) -> str:
    """Return the artifact folder of a document."""
    return document.document_id


def source_copy_path(document: Document) -> str:
    return str(PurePosixPath(document_dir(document)) / document.filename)


def text_path(document: Document) -> str:
    return artifact_path(document, "text")


def summary_path(document: Document) -> str:
    return artifact_path(document, "summary")


def translation_path(document: Document) -> str:
    return artifact_path(document, "translation")


def artifact_path(document: Document, stage: Stage) -> str:
    """Return the key of one stage's artifact for a document.

    Raises:
        ValueError: If the stage is unknown.
    """
    if stage == "source-copy":
        return source_copy_path(document)
    try:
        suffix = _STAGE_SUFFIXES[stage]
    except KeyError:
        raise ValueError(f"Unknown stage: {stage!r}") from None
    return str(PurePosixPath(document_dir(document)) / f"{document.base_name}{suffix}")
