#!/usr/bin/env python3
"""
pdfprep command-line entry point.

    python main.py run [--input DIR ...] [--concurrency N]
    python main.py reprocess FILE [FILE ...]
    python main.py validate
    python main.py models

Configuration comes from the environment / .env (see pdfprep.config.settings);
command-line flags override it for a single run.
"""

import argparse
import asyncio
import json
import logging
import sys

from loguru import logger as loguru_logger

from pdfprep import (
    MODEL_REGISTRY,
    ArtifactStore,
    BatchOrchestrator,
    LoggingProgressReporter,
    PdfPrepError,
    PipelineConfig,
    RagRequirements,
    load_settings,
    validate_artifacts,
)

logger = logging.getLogger("main")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=level.upper())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PDF to RAG chunk preprocessing")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Process every new document under the input roots")
    run.add_argument("--input", action="append", dest="inputs", help="Document root (repeatable)")
    run.add_argument("--output", help="Output directory")
    run.add_argument("--concurrency", type=int, help="Documents per concurrency group")
    run.add_argument("--no-embeddings", action="store_true", help="Skip embedding generation")

    reprocess = sub.add_parser("reprocess", help="Re-run named documents, replacing their artifacts")
    reprocess.add_argument("files", nargs="+")
    reprocess.add_argument("--input", action="append", dest="inputs")
    reprocess.add_argument("--output")

    validate = sub.add_parser("validate", help="Check stored artifacts for RAG readiness")
    validate.add_argument("--output")

    sub.add_parser("models", help="List supported embedding models")
    return parser


async def run_batch(args: argparse.Namespace) -> int:
    settings = load_settings()
    config = PipelineConfig.from_settings(settings)
    if getattr(args, "no_embeddings", False):
        config = config.model_copy(update={"generate_embeddings": False})

    async with BatchOrchestrator(
        config=config,
        store=ArtifactStore(args.output or settings.OUTPUT_DIR),
        input_dirs=args.inputs or settings.INPUT_DIRS,
        on_progress=LoggingProgressReporter("pdfprep.batch").report,
    ) as orchestrator:
        if args.command == "reprocess":
            report = await orchestrator.reprocess(args.files)
        else:
            report = await orchestrator.run_batch(concurrency_limit=args.concurrency)

    summary = report.to_dict()
    logger.info(f"Summary: {json.dumps(summary['summary'], ensure_ascii=False)}")
    logger.info(f"Duration: {summary['timing']['totalDurationFormatted']}")
    for error in report.errors:
        logger.warning(f"Failed: {error.file}: {error.error}")
    logger.info(f"Report: {orchestrator.last_report_path}")
    return 1 if report.failed else 0


def validate(args: argparse.Namespace) -> int:
    settings = load_settings()
    config = PipelineConfig.from_settings(settings)
    summary = validate_artifacts(
        ArtifactStore(args.output or settings.OUTPUT_DIR),
        RagRequirements.for_config(config),
    )
    print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    return 0 if summary.rag_ready else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command is None:
        args = build_parser().parse_args(["run", *(argv or [])])

    setup_logging(load_settings().LOG_LEVEL)

    try:
        if args.command == "models":
            print(json.dumps(MODEL_REGISTRY.list_models(), ensure_ascii=False, indent=2))
            return 0
        if args.command == "validate":
            return validate(args)
        return asyncio.run(run_batch(args))
    except PdfPrepError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
