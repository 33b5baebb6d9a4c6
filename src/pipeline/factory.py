# src/pipeline/factory.py - v1
"""Factory: wire a PipelineRunner from Settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from corpusdigest.pipeline.runner import PipelineRunner
from corpusdigest.pipeline.throttle import Throttle
from corpusdigest.stages.extractor import PdfTextExtractor
from corpusdigest.stages.summarizer import Summarizer
from corpusdigest.stages.translator import Translator
from corpusdigest.storage.store_factory import create_store

if TYPE_CHECKING:
    import httpx

    from corpusdigest.config.settings import Settings
    from corpusdigest.storage.base_artifact_store import BaseArtifactStore


def create_runner(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
    store: BaseArtifactStore | None = None,
    translate_client: object = None,
) -> PipelineRunner:
    """Build a runner with the PDF extractor, HTTP summarizer and Google translator.

    Args:
        settings: Validated settings.
        http_client: Shared client for the summarizer (caller closes it).
        store: Artifact store override (defaults to create_store(settings)).
        translate_client: Pre-built translation client override.
    """
    summarizer = Summarizer(
        endpoint=settings.summarization_endpoint,
        api_key=settings.summarization_key,
        limit=settings.summarization_limit,
        timeout_s=settings.summarization_timeout_s,
        client=http_client,
    )
    translator = Translator(settings.target_language, client=translate_client)

    return PipelineRunner(
        store=store or create_store(settings),
        corpus_root=settings.in_folder,
        extract=PdfTextExtractor(),
        summarize=summarizer,
        translate=translator,
        throttle=Throttle(settings.throttle_delay_s),
    )
