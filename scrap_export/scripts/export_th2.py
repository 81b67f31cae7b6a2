#!/usr/bin/env python3
"""
Export Th2 Script.

Convert an editor project file (paper.js JSON) to a Therion ``.th2``
drawing.

Usage:
    python -m scrap_export.scripts.export_th2 cave.json
    python -m scrap_export.scripts.export_th2 cave.json -o cave.th2
    python -m scrap_export.scripts.export_th2 cave.json -c export.yaml --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from scrap_export.configs.loader import ConfigError, ExportConfig, load_config
from scrap_export.errors import ExportError
from scrap_export.scene.decoder import load_project
from scrap_export.th2.exporter import Th2Exporter, render_document
from scrap_export.utils.fs import atomic_write_text
from scrap_export.utils.logging_config import setup_logging, shutdown

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export an editor project to a Therion .th2 drawing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input",
        type=str,
        help="Project JSON file",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output .th2 file (default: stdout)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    log_cfg = config.logging
    setup_logging(
        args.log_level or log_cfg.level,
        log_cfg.file,
        json=log_cfg.json,
        color=log_cfg.color,
        rotate=log_cfg.rotate,
        context={"input": Path(args.input).name},
    )

    try:
        return _run(args, config)
    finally:
        shutdown()


def _run(args: argparse.Namespace, config: ExportConfig) -> int:
    try:
        project = load_project(args.input)
        exporter = Th2Exporter(
            precision=config.output.precision,
            encoding=config.output.encoding,
        )
        lines = exporter.export_project(project)
    except (ExportError, FileNotFoundError) as e:
        logger.error("Export failed: %s", e)
        return 1

    text = render_document(lines, trailing_newline=config.output.trailing_newline)

    if args.output:
        try:
            atomic_write_text(args.output, text)
        except RuntimeError as e:
            logger.error("%s", e)
            return 1
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
