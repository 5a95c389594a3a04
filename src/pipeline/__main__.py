#!/usr/bin/env python3
"""
CLI interface for the content sync pipeline.

Collects videos and albums, downloads their images, writes their markdown
posts, optionally runs the site build, and prints the JSON run report on
stdout.

Usage:
    uv run -m src.pipeline
    uv run -m src.pipeline --sources youtube
    uv run -m src.pipeline --content-dir site/content --images-dir site/static/images
    uv run -m src.pipeline --build-command "hugo --minify" --list-files
    uv run -m src.pipeline --no-build --summary --verbose
"""

import argparse
import json
import sys

from rich.console import Console
from rich.table import Table

from src.collectors import COLLECTORS, default_collectors
from src.logger import setup_logging
from src.sync.config import SyncConfig
from src.sync.models import RunReport
from .orchestrator import run_pipeline


def parse_sources(value: str) -> list[str]:
    """Parse and validate a comma-separated list of source names."""
    names = [s.strip() for s in value.split(",") if s.strip()]
    invalid = [name for name in names if name not in COLLECTORS]
    if invalid or not names:
        raise argparse.ArgumentTypeError(
            f"Invalid source name(s): {', '.join(invalid) or value!r}. "
            f"Valid sources: {', '.join(COLLECTORS)}"
        )
    return names


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Content Sync Pipeline - Turns videos and albums into site posts and images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment (.env supported):
  CONTENT_DIR, IMAGES_DIR       Output roots (default: content, static/images)
  BUILD_COMMAND                 Site build command run after the sync
  YOUTUBE_API_KEY, YOUTUBE_CHANNEL_ID
  FLICKR_API_KEY, FLICKR_USER_ID

Notes:
  - Existing posts and images are never overwritten; delete a file to recreate it
  - The JSON report is the only output on stdout
  - Logs written to logs/content_sync.log
        """,
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument("--content-dir", metavar="DIR", help="Markdown output root")
    output_group.add_argument("--images-dir", metavar="DIR", help="Image output root")
    output_group.add_argument(
        "--list-files",
        action="store_true",
        help="Include a listing of both output roots in the report",
    )

    build_group = parser.add_argument_group("build")
    build_exclusive = build_group.add_mutually_exclusive_group()
    build_exclusive.add_argument(
        "--build-command", metavar="CMD", help="Override BUILD_COMMAND"
    )
    build_exclusive.add_argument(
        "--no-build", action="store_true", help="Skip the build step"
    )

    options_group = parser.add_argument_group("options")
    options_group.add_argument(
        "--sources",
        type=parse_sources,
        metavar="SOURCE,...",
        help=f"Collectors to run (default: {','.join(COLLECTORS)})",
    )
    options_group.add_argument(
        "--run-timeout",
        type=float,
        metavar="SECONDS",
        help="Stop processing new items after this many seconds",
    )
    options_group.add_argument(
        "--summary",
        action="store_true",
        help="Print a summary table on stderr",
    )
    options_group.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging output"
    )

    return parser.parse_args(argv)


def print_summary(report: RunReport, console: Console) -> None:
    table = Table(title="Content sync")
    table.add_column("Source")
    table.add_column("Title")
    table.add_column("Date")
    table.add_column("Image", justify="center")
    table.add_column("Post", justify="center")

    for record in report.items:
        post = "✓" if record.document_created else ("review" if record.needs_review else "-")
        table.add_row(
            record.source,
            record.title,
            record.timestamp,
            "✓" if record.image_downloaded else "-",
            post,
        )
    console.print(table)

    for name, error in report.collector_errors.items():
        console.print(f"[red]✗ {name}: {error}[/red]")
    if report.build_output is not None:
        console.print(f"Build exit code: {report.build_output.exit_code}")


def main(argv=None) -> int:
    args = parse_arguments(argv)
    logger = setup_logging(verbose=args.verbose)

    try:
        config = SyncConfig.from_env(
            documents_root=args.content_dir,
            images_root=args.images_dir,
            build_command=args.build_command,
            run_timeout=args.run_timeout,
            list_files=args.list_files or None,
        )
        if args.no_build:
            config.build_command = None

        collectors = default_collectors(args.sources)
        report = run_pipeline(config, collectors)
    except KeyboardInterrupt:
        logger.info("Sync interrupted by user")
        print("\nSync interrupted by user", file=sys.stderr)
        return 130
    except (RuntimeError, EnvironmentError, ValueError) as e:
        logger.error(f"Sync failed: {e}")
        print(f"✗ Sync failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))

    if args.summary:
        print_summary(report, Console(stderr=True))

    return 0


if __name__ == "__main__":
    sys.exit(main())
