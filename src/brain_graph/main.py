#!/usr/bin/env python
"""Main entry point for the note graph export."""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from brain_graph import __version__
from brain_graph.config import BrainGraphConfig, config
from brain_graph.exceptions import ConfigurationError, ExportError
from brain_graph.observability import configure_logging
from brain_graph.services.graph_builder import GraphBuilder
from brain_graph.storage.graph_writer import write_graph


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Export an Obsidian-style vault as a link-resolved note graph"
    )
    parser.add_argument(
        "vault",
        nargs="?",
        help="Vault directory (defaults to BRAIN_PATH)",
        default=None,
    )
    parser.add_argument(
        "--images-dir",
        help="Directory of image assets (defaults to BRAIN_IMAGES_PATH)",
        type=str,
        default=None,
    )
    parser.add_argument(
        "--exclude",
        help="Comma-separated top-level folders to leave out (defaults to EXCLUDED_FOLDERS)",
        type=str,
        default=None,
    )
    parser.add_argument(
        "--output",
        help="Path of the exported JSON file",
        type=str,
        default=None,
    )
    parser.add_argument(
        "--images-output",
        help="Directory resolved images are copied into",
        type=str,
        default=None,
    )
    parser.add_argument(
        "--log-level",
        help="Logging level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("BRAIN_LOG_LEVEL", "INFO")
    )
    parser.add_argument(
        "--log-dir",
        help="Also write rotating log files to this directory",
        type=str,
        default=os.environ.get("BRAIN_LOG_DIR")
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def update_config(args, cfg: BrainGraphConfig) -> None:
    """Apply command line overrides to the config."""
    if args.vault:
        cfg.vault_path = Path(args.vault)
    if args.images_dir:
        cfg.images_path = Path(args.images_dir)
    if args.exclude is not None:
        cfg.excluded_folders = args.exclude
    if args.output:
        cfg.output_path = Path(args.output)
    if args.images_output:
        cfg.images_output_dir = Path(args.images_output)


def main(argv: Optional[List[str]] = None) -> None:
    """Run one export."""
    args = parse_args(argv)
    # Overrides apply to this run only
    run_config = config.model_copy(deep=True)
    update_config(args, run_config)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    try:
        configure_logging(level=log_level, log_dir=args.log_dir, console=True)
    except OSError as e:
        logging.basicConfig(level=log_level)
        logging.getLogger(__name__).warning(f"Failed to configure file logging: {e}")

    logger = logging.getLogger(__name__)

    # Fatal configuration problems abort before anything is written
    try:
        builder = GraphBuilder.from_config(run_config)
    except ConfigurationError as e:
        logger.error(e.message)
        sys.exit(1)

    result = builder.build()
    output_path = run_config.get_output_path()
    try:
        write_graph(result.graph, output_path)
    except ExportError as e:
        logger.error(str(e))
        sys.exit(1)

    if result.failed:
        logger.warning(
            f"Skipped {len(result.failed)} documents: "
            + ", ".join(path for path, _ in result.failed[:5])
            + ("..." if len(result.failed) > 5 else "")
        )
    logger.info(f"Exported {result.note_count} notes to {output_path}")


if __name__ == "__main__":
    main()
