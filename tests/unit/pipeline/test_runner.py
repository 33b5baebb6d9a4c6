# tests/unit/pipeline/test_runner.py - v2
"""Tests for pipeline/runner.py - checkpointed per-document stage sequencing."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from corpusdigest.core.errors import ExtractionError, StorageError, SummarizationError, TranslationError
from corpusdigest.corpus.walker import CorpusWalker
from corpusdigest.pipeline.runner import PipelineRunner
from corpusdigest.pipeline.throttle import Throttle


def _runner(store, corpus_dir, extract, summarize, translate, throttle=None) -> PipelineRunner:
    return PipelineRunner(
        store=store,
        corpus_root=corpus_dir,
        extract=extract,
        summarize=summarize,
        translate=translate,
        throttle=throttle,
    )


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------

class TestFullRun:
    @pytest.mark.asyncio
    async def test_writes_all_artifacts(
        self, store, corpus_dir, output_dir, fake_extract, fake_summarize, fake_translate,
    ):
        docs = CorpusWalker().walk(corpus_dir)
        result = await _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
        ).run(docs)

        assert result.total_documents == 2
        assert result.completed == 2
        assert result.failed == 0
        assert result.stage_calls == {"text": 2, "summary": 2, "translation": 2}

        beta_dir = output_dir / "reports" / "beta"
        assert (beta_dir / "beta.pdf").read_bytes() == b"%PDF-1.4 beta"
        assert (beta_dir / "beta.text.txt").read_text() == "text of beta.pdf"
        assert (beta_dir / "beta.summary.txt").read_text() == "summary of text of beta.pdf"
        assert (beta_dir / "beta.translation.txt").read_text() == (
            "translation of summary of text of beta.pdf"
        )
        fake_extract.assert_any_await(corpus_dir / "reports" / "beta.pdf")

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(
        self, store, corpus_dir, output_dir, fake_extract, fake_summarize, fake_translate,
    ):
        docs = CorpusWalker().walk(corpus_dir)
        runner = _runner(store, corpus_dir, fake_extract, fake_summarize, fake_translate)
        await runner.run(docs)
        before = _snapshot(output_dir)
        for fn in (fake_extract, fake_summarize, fake_translate):
            fn.reset_mock()

        result = await runner.run(CorpusWalker().walk(corpus_dir))

        fake_extract.assert_not_awaited()
        fake_summarize.assert_not_awaited()
        fake_translate.assert_not_awaited()
        assert result.stage_calls == {"text": 0, "summary": 0, "translation": 0}
        assert result.completed == 2
        assert _snapshot(output_dir) == before
        assert all(
            o.reused_stages == ["source-copy", "text", "summary", "translation"]
            for o in result.outcomes
        )

    @pytest.mark.asyncio
    async def test_throttle_before_each_document(
        self, store, corpus_dir, fake_extract, fake_summarize, fake_translate,
    ):
        sleep = AsyncMock()
        runner = _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
            throttle=Throttle(1.5, sleep=sleep),
        )
        await runner.run(CorpusWalker().walk(corpus_dir))
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_document_list(self, store, corpus_dir, fake_extract, fake_summarize, fake_translate):
        result = await _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
        ).run([])
        assert result.total_documents == 0
        assert result.outcomes == []


# ---------------------------------------------------------------------------
# Resumption
# ---------------------------------------------------------------------------

class TestResume:
    @pytest.mark.asyncio
    async def test_existing_text_skips_extract(
        self, store, corpus_dir, alpha, fake_extract, fake_summarize, fake_translate,
    ):
        await store.write(alpha, "text", "cached text")
        outcome = await _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
        ).process_document(alpha)

        fake_extract.assert_not_awaited()
        fake_summarize.assert_awaited_once_with("cached text")
        fake_translate.assert_awaited_once_with("summary of cached text")
        assert outcome.status == "completed"
        assert outcome.reused_stages == ["text"]
        assert outcome.computed_stages == ["source-copy", "summary", "translation"]

    @pytest.mark.asyncio
    async def test_existing_summary_is_read_back_for_translation(
        self, store, corpus_dir, alpha, fake_extract, fake_summarize, fake_translate,
    ):
        await store.write(alpha, "text", "cached text")
        await store.write(alpha, "summary", "cached summary")
        await _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
        ).process_document(alpha)

        fake_summarize.assert_not_awaited()
        fake_translate.assert_awaited_once_with("cached summary")
        assert await store.read_text(alpha, "translation") == "translation of cached summary"

    @pytest.mark.asyncio
    async def test_existing_translation_is_not_recomputed(
        self, store, corpus_dir, alpha, fake_extract, fake_summarize, fake_translate,
    ):
        await store.write(alpha, "text", "t")
        await store.write(alpha, "summary", "s")
        await store.write(alpha, "translation", "kept")
        outcome = await _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
        ).process_document(alpha)

        fake_translate.assert_not_awaited()
        assert await store.read_text(alpha, "translation") == "kept"
        assert outcome.status == "completed"

    @pytest.mark.asyncio
    async def test_failed_stage_retried_on_next_run(
        self, store, corpus_dir, alpha, fake_extract, fake_translate,
    ):
        summarize = AsyncMock(side_effect=[SummarizationError("down"), "summary ok"])
        runner = _runner(store, corpus_dir, fake_extract, summarize, fake_translate)

        first = await runner.run([alpha])
        assert first.outcomes[0].failed_stage == "summary"
        assert await store.exists(alpha, "summary") is False

        second = await runner.run([alpha])
        assert second.outcomes[0].status == "completed"
        assert second.stage_calls == {"text": 0, "summary": 1, "translation": 1}
        assert fake_extract.await_count == 1


# ---------------------------------------------------------------------------
# Failure isolation
# ---------------------------------------------------------------------------

class TestFailures:
    @pytest.mark.asyncio
    async def test_summary_failure_isolated_to_document(
        self, store, corpus_dir, alpha, beta, fake_extract, fake_translate,
    ):
        async def summarize(text: str) -> str:
            if "alpha" in text:
                raise SummarizationError("HTTP 500")
            return f"summary of {text}"

        result = await _runner(
            store, corpus_dir, fake_extract, summarize, fake_translate,
        ).run([alpha, beta])

        a, b = result.outcomes
        assert a.status == "failed"
        assert a.failed_stage == "summary"
        assert "HTTP 500" in a.error
        assert await store.exists(alpha, "text") is True
        assert await store.exists(alpha, "summary") is False
        assert await store.exists(alpha, "translation") is False

        assert b.status == "completed"
        for stage in ("source-copy", "text", "summary", "translation"):
            assert await store.exists(beta, stage) is True
        assert result.completed == 1
        assert result.failed == 1

    @pytest.mark.asyncio
    async def test_extract_failure_abandons_document(
        self, store, corpus_dir, alpha, fake_summarize, fake_translate,
    ):
        extract = AsyncMock(side_effect=ExtractionError("malformed"))
        outcome = await _runner(
            store, corpus_dir, extract, fake_summarize, fake_translate,
        ).process_document(alpha)

        assert outcome.failed_stage == "text"
        fake_summarize.assert_not_awaited()
        fake_translate.assert_not_awaited()
        assert await store.exists(alpha, "text") is False
        assert await store.exists(alpha, "source-copy") is True

    @pytest.mark.asyncio
    async def test_translation_failure(
        self, store, corpus_dir, alpha, beta, fake_extract, fake_summarize,
    ):
        translate = AsyncMock(side_effect=[TranslationError("quota"), "ok"])
        result = await _runner(
            store, corpus_dir, fake_extract, fake_summarize, translate,
        ).run([alpha, beta])

        assert result.outcomes[0].failed_stage == "translation"
        assert await store.exists(alpha, "summary") is True
        assert await store.exists(alpha, "translation") is False
        assert result.outcomes[1].status == "completed"

    @pytest.mark.asyncio
    async def test_source_copy_failure_is_not_fatal(
        self, store, corpus_dir, alpha, fake_extract, fake_summarize, fake_translate, caplog,
    ):
        store.copy_source = AsyncMock(side_effect=StorageError("disk full"))
        with caplog.at_level(logging.ERROR, logger="corpusdigest"):
            outcome = await _runner(
                store, corpus_dir, fake_extract, fake_summarize, fake_translate,
            ).process_document(alpha)

        assert outcome.status == "completed"
        assert "source-copy" not in outcome.computed_stages
        assert "disk full" in caplog.text

    @pytest.mark.asyncio
    async def test_write_failure_counts_as_stage_failure(
        self, store, corpus_dir, alpha, fake_extract, fake_summarize, fake_translate,
    ):
        original_write = store.write

        async def failing_write(document, stage, content):
            if stage == "summary":
                raise StorageError("read-only filesystem")
            await original_write(document, stage, content)

        store.write = failing_write
        outcome = await _runner(
            store, corpus_dir, fake_extract, fake_summarize, fake_translate,
        ).process_document(alpha)

        assert outcome.failed_stage == "summary"
        fake_translate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_is_logged_with_document_and_stage(
        self, store, corpus_dir, alpha, fake_extract, fake_translate, caplog,
    ):
        summarize = AsyncMock(side_effect=SummarizationError("bad body"))
        with caplog.at_level(logging.INFO, logger="corpusdigest"):
            await _runner(store, corpus_dir, fake_extract, summarize, fake_translate).run([alpha])

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "alpha.pdf" in errors[0].getMessage()
        assert "Summary" in errors[0].getMessage()
        assert "bad body" in errors[0].getMessage()
        assert any("Processing alpha.pdf | (1 / 1)" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_run_summary_record_carries_stage_calls(
        self, store, corpus_dir, alpha, fake_extract, fake_summarize, fake_translate, caplog,
    ):
        with caplog.at_level(logging.INFO, logger="corpusdigest"):
            await _runner(
                store, corpus_dir, fake_extract, fake_summarize, fake_translate,
            ).run([alpha])

        finished = [r for r in caplog.records if r.getMessage().startswith("Run finished")]
        assert len(finished) == 1
        assert finished[0].data["stage_calls"] == {"text": 1, "summary": 1, "translation": 1}
