"""CLI entry point for the Notion projects exporter."""

import argparse
import asyncio
import sys
import logging
from typing import List, Optional

from ..config.config_loader import load_config
from ..config.config_schema import ConfigError
from ..utils.logging import setup_logging
from .client import NotionAPIError, NotionClient
from .exporter import ProjectExporter
from .transcoder import BlockTranscoder


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Export a Notion projects database to a static JSON artifact",
        prog="portfolio-export",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )

    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Artifact path (default: public/projects.json)",
    )

    parser.add_argument(
        "--table-style",
        choices=["ascii", "html"],
        default=None,
        help="How tables are rendered into content lines",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv, -vvv)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and transcode everything but do not write the artifact",
    )

    return parser


async def run_export(args: argparse.Namespace) -> int:
    """
    Run the exporter with given arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success)
    """
    logger = logging.getLogger(__name__)

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    if config.logging.log_file:
        setup_logging(verbosity=args.verbose, log_file=config.logging.log_file)

    export_config = config.export
    output_path = args.output or export_config.output_path
    table_style = args.table_style or export_config.table_style

    async with NotionClient(
        api_key=config.notion.api_key,
        api_version=config.notion.api_version,
        page_size=config.notion.page_size,
        rate_limit_delay=config.notion.rate_limit_delay,
    ) as notion_client:
        transcoder = BlockTranscoder(
            client=notion_client,
            table_style=table_style,
            max_indent_depth=export_config.max_indent_depth,
            max_column_width=export_config.max_column_width,
            numbered_lists=export_config.numbered_lists,
        )
        exporter = ProjectExporter(
            notion_client=notion_client,
            transcoder=transcoder,
            untitled_label=export_config.untitled_label,
            unknown_status_label=export_config.unknown_status_label,
        )

        try:
            if args.dry_run:
                artifact = await exporter.build_artifact(config.notion.database_id)
                print("DRY RUN - No changes will be made\n")
                for project in artifact["projects"]:
                    print(f"  - {project['title']} [{project['status']}] ({len(project['content'])} lines)")
                print(f"\nTotal projects: {len(artifact['projects'])}")
                return 0

            stats = await exporter.export(config.notion.database_id, output_path)
        except NotionAPIError as e:
            logger.debug("Export aborted", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return 1

    print(f"Wrote {stats.pages_exported} projects → {stats.output_path}")
    if stats.pages_failed:
        print(f"  {stats.pages_failed} without content (see log)")

    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging based on verbosity
    setup_logging(verbosity=args.verbose)

    try:
        exit_code = asyncio.run(run_export(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nExport cancelled by user", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
