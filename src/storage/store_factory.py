# src/storage/store_factory.py - v1
"""Factory: instantiate the artifact store from configuration."""

from __future__ import annotations

from corpusdigest.config.settings import Settings
from corpusdigest.storage.base_artifact_store import BaseArtifactStore
from corpusdigest.storage.local_store import LocalArtifactStore


def create_store(settings: Settings) -> BaseArtifactStore:
    """Create the artifact store selected by ARTIFACT_STORE.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.artifact_store == "local":
        return LocalArtifactStore(
            output_root=settings.out_folder, corpus_root=settings.in_folder,
        )

    if settings.artifact_store == "s3":
        from corpusdigest.storage.s3_store import S3ArtifactStore

        return S3ArtifactStore(
            bucket=settings.artifact_s3_bucket,
            corpus_root=settings.in_folder,
            prefix=settings.artifact_s3_prefix,
            region=settings.artifact_s3_region or None,
            endpoint_url=settings.artifact_s3_endpoint_url or None,
        )

    raise ValueError(f"Unsupported artifact store: {settings.artifact_store!r}")
