# src/pipeline/runner.py - v2
"""Pipeline runner: drives each document through the stages in order.

Per document:
  1. source-copy  copy the original bytes (failure is logged, not fatal)
  2. text         extract, or read back an existing artifact
  3. summary      summarize the text, or read back an existing artifact
  4. translation  translate the summary unless it already exists

Each stage runs only when its artifact is absent from the store, so a
repeated or interrupted run resumes where the last one stopped. A failing
stage abandons the rest of its document; the next document is unaffected.
Nothing is retried within a run: the next run re-attempts missing artifacts.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from pathlib import Path
from typing import Awaitable, Callable

from corpusdigest.core.models import Document, DocumentOutcome, RunResult, Stage
from corpusdigest.logging.context import clear_context, set_document_context, stage_context
from corpusdigest.pipeline.throttle import Throttle
from corpusdigest.storage.base_artifact_store import BaseArtifactStore

logger = logging.getLogger(__name__)

ExtractFn = Callable[[Path], Awaitable[str]]
TextFn = Callable[[str], Awaitable[str]]

_STAGE_LABELS: dict[str, str] = {
    "text": "Text",
    "summary": "Summary",
    "translation": "Translation",
}


class StageFailed(Exception):
    """Internal signal: a stage failed and its document is abandoned."""

    def __init__(self, stage: Stage, error: BaseException) -> None:
        self.stage = stage
        self.error = error
        super().__init__(f"{stage}: {error}")


class PipelineRunner:
    """Sequential, checkpointed runner over an ordered document list.

    Usage:
        runner = PipelineRunner(store, corpus_root, extract, summarize, translate)
        result = await runner.run(CorpusWalker().walk(corpus_root))
    """

    def __init__(
        self,
        store: BaseArtifactStore,
        corpus_root: Path,
        extract: ExtractFn,
        summarize: TextFn,
        translate: TextFn,
        throttle: Throttle | None = None,
    ) -> None:
        self._store = store
        self._corpus_root = Path(corpus_root)
        self._extract = extract
        self._summarize = summarize
        self._translate = translate
        self._throttle = throttle or Throttle(0)
        self._calls: Counter[str] = Counter()

    async def run(self, documents: list[Document]) -> RunResult:
        """Process documents one at a time in the given order."""
        t0 = time.perf_counter()
        self._calls = Counter()
        outcomes: list[DocumentOutcome] = []
        total = len(documents)

        for index, document in enumerate(documents, start=1):
            await self._throttle.wait()
            set_document_context(document.document_id)
            try:
                logger.info("Processing %s | (%d / %d)", document.relative_path, index, total)
                outcomes.append(await self.process_document(document))
            finally:
                clear_context()

        completed = sum(1 for o in outcomes if o.status == "completed")
        result = RunResult(
            corpus_root=str(self._corpus_root),
            total_documents=total,
            completed=completed,
            failed=total - completed,
            stage_calls={stage: self._calls[stage] for stage in _STAGE_LABELS},
            outcomes=outcomes,
            duration_seconds=round(time.perf_counter() - t0, 2),
        )
        logger.info(
            "Run finished: %d documents, %d completed, %d failed",
            result.total_documents, result.completed, result.failed,
            extra={"data": {"stage_calls": result.stage_calls, "duration_seconds": result.duration_seconds}},
        )
        return result

    async def process_document(self, document: Document) -> DocumentOutcome:
        """Drive one document from its current state to translation or failure."""
        computed: list[Stage] = []
        reused: list[Stage] = []

        await self._preserve_source(document, computed, reused)

        try:
            text = await self._text_stage(document, computed, reused)
            summary = await self._summary_stage(document, text, computed, reused)
            await self._translation_stage(document, summary, computed, reused)
        except StageFailed as failure:
            return DocumentOutcome(
                document_id=document.document_id,
                status="failed",
                failed_stage=failure.stage,
                error=str(failure.error),
                computed_stages=computed,
                reused_stages=reused,
            )

        return DocumentOutcome(
            document_id=document.document_id,
            status="completed",
            computed_stages=computed,
            reused_stages=reused,
        )

    # --- Stages ---

    async def _preserve_source(
        self, document: Document, computed: list[Stage], reused: list[Stage],
    ) -> None:
        with stage_context("source-copy"):
            try:
                if await self._store.exists(document, "source-copy"):
                    logger.info("Src file copy found. Skipping.")
                    reused.append("source-copy")
                    return
                logger.info("Copying src file")
                await self._store.copy_source(document)
                computed.append("source-copy")
            except Exception as exc:
                # Later stages read the corpus, not the copy.
                logger.error("Source copy failed for %s: %s", document.relative_path, exc)

    async def _text_stage(
        self, document: Document, computed: list[Stage], reused: list[Stage],
    ) -> str:
        source = self._corpus_root / document.relative_path
        return await self._stage(
            document, "text", lambda: self._extract(source), computed, reused,
        )

    async def _summary_stage(
        self, document: Document, text: str, computed: list[Stage], reused: list[Stage],
    ) -> str:
        return await self._stage(
            document, "summary", lambda: self._summarize(text), computed, reused,
        )

    async def _translation_stage(
        self, document: Document, summary: str, computed: list[Stage], reused: list[Stage],
    ) -> None:
        # Terminal stage: an existing artifact is not read back.
        await self._stage(
            document, "translation", lambda: self._translate(summary), computed, reused,
            read_back=False,
        )

    async def _stage(
        self,
        document: Document,
        stage: Stage,
        compute: Callable[[], Awaitable[str]],
        computed: list[Stage],
        reused: list[Stage],
        read_back: bool = True,
    ) -> str:
        """Run one guarded stage: reuse the artifact if present, else compute and write it.

        Raises:
            StageFailed: Wrapping any stage or storage error.
        """
        label = _STAGE_LABELS[stage]
        with stage_context(stage):
            try:
                if await self._store.exists(document, stage):
                    logger.info("%s found. Skipping.", label)
                    reused.append(stage)
                    if not read_back:
                        return ""
                    return await self._store.read_text(document, stage)

                logger.info("Generating %s", stage)
                self._calls[stage] += 1
                value = await compute()
                await self._store.write(document, stage, value)
                computed.append(stage)
                return value
            except Exception as exc:
                logger.error(
                    "%s stage failed for %s: %s: %s",
                    label, document.relative_path, type(exc).__name__, exc,
                )
                raise StageFailed(stage, exc) from exc
