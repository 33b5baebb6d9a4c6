# src/main.py - v2
"""CLI entry point: run and status commands.

Usage:
    corpusdigest run [--input DIR] [--output DIR] [--delay SECONDS]
    corpusdigest status [--input DIR] [--output DIR]

Locations, service endpoints and credentials come from the environment
(see config.settings); the flags override them.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from corpusdigest.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from corpusdigest.config.settings import ConfigurationError

    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        _setup_logging("DEBUG" if args.verbose else "INFO")
        logger.error("Configuration error: %s", exc)
        return 1

    _setup_logging(
        "DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="corpusdigest",
        description=f"corpusdigest v{__version__}: extract, summarize and translate a document corpus",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser(
        "run", help="Process every pending document in the corpus",
    )
    _add_location_args(p_run)
    p_run.add_argument(
        "--delay", type=float, default=None,
        help="Seconds to wait before each document (default: THROTTLE_DELAY_S)",
    )
    p_run.set_defaults(func=_cmd_run)

    # --- status ---
    p_status = subparsers.add_parser(
        "status", help="Show which artifacts exist for each document",
    )
    _add_location_args(p_status)
    p_status.set_defaults(func=_cmd_status)

    return parser


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-i", "--input", type=Path, default=None,
        help="Corpus root (default: IN_FOLDER)",
    )
    p.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output root (default: OUT_FOLDER)",
    )


def _load_settings(args: argparse.Namespace) -> Any:
    from corpusdigest.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.input is not None:
        overrides["in_folder"] = args.input
    if args.output is not None:
        overrides["out_folder"] = args.output
    if getattr(args, "delay", None) is not None:
        overrides["throttle_delay_s"] = args.delay
    return load_settings(**overrides)


async def _cmd_run(args: argparse.Namespace, settings: Any) -> int:
    """Walk the corpus and drive every document through the pipeline."""
    import httpx

    from corpusdigest.corpus.walker import CorpusWalker
    from corpusdigest.pipeline.factory import create_runner

    settings.require_run_config()

    documents = CorpusWalker(settings.source_extensions_list).walk(settings.in_folder)

    async with httpx.AsyncClient(timeout=settings.summarization_timeout_s) as client:
        runner = create_runner(settings, http_client=client)
        result = await runner.run(documents)

    print("\nRun complete:")
    print(f"  Documents:    {result.total_documents}")
    print(f"  Completed:    {result.completed}")
    print(f"  Failed:       {result.failed}")
    calls = ", ".join(f"{stage}={n}" for stage, n in result.stage_calls.items())
    print(f"  Stage calls:  {calls}")
    print(f"  Duration:     {result.duration_seconds:.1f}s")
    for outcome in result.outcomes:
        if outcome.status == "failed":
            print(f"  FAILED {outcome.document_id} ({outcome.failed_stage}): {outcome.error}")
    return 0


async def _cmd_status(args: argparse.Namespace, settings: Any) -> int:
    """Report artifact presence per document without calling any service."""
    from corpusdigest.core.models import STAGES
    from corpusdigest.corpus.walker import CorpusWalker
    from corpusdigest.storage.store_factory import create_store

    documents = CorpusWalker(settings.source_extensions_list).walk(settings.in_folder)
    store = create_store(settings)

    totals = dict.fromkeys(STAGES, 0)
    print(f"\nStatus for {settings.in_folder} -> {settings.out_folder}:")
    for document in documents:
        marks = []
        for stage in STAGES:
            present = await store.exists(document, stage)
            totals[stage] += int(present)
            marks.append(f"{stage}={'yes' if present else 'no'}")
        print(f"  {document.relative_path}: {' '.join(marks)}")

    print(f"  Documents:  {len(documents)}")
    for stage in STAGES:
        print(f"  {stage + ':':13s}{totals[stage]}")
    return 0


def _setup_logging(
    level: str,
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """Configure logging for CLI usage."""
    from corpusdigest.logging.logger import setup_logging

    setup_logging(
        level=level, log_format=log_format, log_file=log_file,
        rotation=rotation, retention=retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
