# src/storage/s3_store.py - v1
"""S3-compatible artifact store (ARTIFACT_STORE=s3).

Supports AWS S3, MinIO, and other S3-compatible storage with the same key
layout as the local backend. Source documents are still read from the local
corpus root. Requires the 'boto3' package: pip install boto3.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from corpusdigest.core.errors import ArtifactNotFound, StorageError
from corpusdigest.core.models import Document, Stage
from corpusdigest.storage import layout
from corpusdigest.storage.base_artifact_store import BaseArtifactStore

logger = logging.getLogger(__name__)


class S3ArtifactStore(BaseArtifactStore):
    """Store artifacts as objects in an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        corpus_root: Path | str,
        prefix: str = "corpusdigest/",
        region: str | None = None,
        endpoint_url: str | None = None,
        client: Any = None,
    ) -> None:
        """Initialize S3 store.

        Args:
            bucket: S3 bucket name.
            corpus_root: Local root of the source documents.
            prefix: Key prefix for all objects (e.g. "corpusdigest/").
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
            client: Pre-built boto3 S3 client (skips client construction).
        """
        if client is None:
            try:
                import boto3
            except ImportError as e:
                raise ImportError(
                    "boto3 package required for S3 artifact store: pip install boto3"
                ) from e

            kwargs: dict[str, str] = {}
            if region:
                kwargs["region_name"] = region
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)

        self._s3 = client
        self._bucket = bucket
        self._corpus_root = Path(corpus_root)
        self._prefix = prefix.rstrip("/") + "/" if prefix else ""

    def key_for(self, document: Document, stage: Stage) -> str:
        """Build the full S3 key of an artifact."""
        return f"{self._prefix}{layout.artifact_path(document, stage)}"

    async def exists(self, document: Document, stage: Stage) -> bool:
        key = self.key_for(document, stage)
        try:
            self._s3.head_object(Bucket=self._bucket, Key=key)
        except self._s3.exceptions.ClientError as exc:
            code = str(getattr(exc, "response", {}).get("Error", {}).get("Code", ""))
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageError(f"Cannot stat s3://{self._bucket}/{key}: {exc}", stage=stage) from exc
        return True

    async def read(self, document: Document, stage: Stage) -> bytes:
        key = self.key_for(document, stage)
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=key)
        except self._s3.exceptions.NoSuchKey as exc:
            raise ArtifactNotFound(document.document_id, stage) from exc
        except self._s3.exceptions.ClientError as exc:
            raise StorageError(f"Cannot read s3://{self._bucket}/{key}: {exc}", stage=stage) from exc
        return response["Body"].read()

    async def write(self, document: Document, stage: Stage, content: bytes | str) -> None:
        key = self.key_for(document, stage)
        body = content.encode("utf-8") if isinstance(content, str) else content
        try:
            self._s3.put_object(Bucket=self._bucket, Key=key, Body=body)
        except self._s3.exceptions.ClientError as exc:
            raise StorageError(f"Cannot write s3://{self._bucket}/{key}: {exc}", stage=stage) from exc
        logger.debug("S3 write: s3://%s/%s (%d bytes)", self._bucket, key, len(body))

    async def copy_source(self, document: Document) -> None:
        src = self._corpus_root / document.relative_path
        try:
            data = src.read_bytes()
        except OSError as exc:
            raise StorageError(f"Cannot read source {src}: {exc}", stage="source-copy") from exc
        await self.write(document, "source-copy", data)
