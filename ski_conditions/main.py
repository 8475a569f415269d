"""CLI entry point for the ski conditions pipeline."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from ski_conditions.aggregate import build_document
from ski_conditions.config import ConfigError, load_settings
from ski_conditions.notify import notify_failure
from ski_conditions.output import write_json_atomic
from ski_conditions.publish import publish_document
from ski_conditions.registry import load_sources

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Quiet noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def update_command(args) -> int:
    """Run the update pipeline."""
    setup_logging(args.verbose)

    settings = load_settings()
    publish = not args.no_publish

    if publish:
        try:
            settings.require_publishing()
        except ConfigError as e:
            logger.error(str(e))
            return 1

    logger.info(f"Starting data fetch: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    try:
        sources = load_sources(settings.sources_path)
        document = build_document(sources)

        if args.output:
            write_json_atomic(args.output, document)

        if publish:
            publish_document(document, settings)
            logger.info("Data updated successfully")

    except Exception as e:
        logger.exception(f"Error updating data: {e}")
        notify_failure(e, settings.discord_webhook)
        return 1

    return 0


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ski-conditions",
        description="Ski conditions aggregator"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Update command
    update_parser = subparsers.add_parser(
        "update",
        help="Fetch all sources and publish the conditions document"
    )
    update_parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Also write the document to this local file"
    )
    update_parser.add_argument(
        "--no-publish",
        action="store_true",
        help="Skip publishing to GitHub (no credentials needed)"
    )
    update_parser.set_defaults(func=update_command)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
