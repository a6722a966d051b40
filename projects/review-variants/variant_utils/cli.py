"""
review-variants command line.

Examples:
  # Group a product's reviews by purchased variant
  review-variants group-by-variant exports/product-reviews.csv

  # Same, four lookups in flight, also saved as CSV
  review-variants group-by-variant exports/product-reviews.csv --workers 4 --output by_variant.csv

  # Storybook stub from a Frontastic component schema
  review-variants create-story schemas/product-reviews.json

Set SHOP_NAME and API_KEY (or put them in .env) before grouping.
"""
import argparse
import logging
import sys

from connections.errors import ConfigError, FormatError

from .config import MAX_WORKERS, RESOLVE_TIMEOUT
from .pipeline import format_report, run_pipeline, write_report_csv
from .story import create_story

logger = logging.getLogger(__name__)


def positive_int(value) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-variants",
        description="Review export utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    group = subparsers.add_parser(
        "group-by-variant",
        help="Group reviews by the variant bought in the reviewed order"
    )
    group.add_argument("file_path", help="Review platform CSV export")
    group.add_argument(
        "--workers",
        type=positive_int,
        default=MAX_WORKERS,
        help=f"Order lookups in flight at once (default: {MAX_WORKERS})"
    )
    group.add_argument(
        "--timeout",
        type=float,
        default=RESOLVE_TIMEOUT,
        help="Seconds to wait for each order lookup"
    )
    group.add_argument("--output", help="Also write the report to this CSV file")

    story = subparsers.add_parser(
        "create-story",
        help="Convert a Frontastic component schema to a Storybook story file"
    )
    story.add_argument("file_path", help="Component schema JSON")
    story.add_argument(
        "--output-dir",
        default=".",
        help="Where to write <Name>.stories.tsx (default: current directory)"
    )

    return parser


def group_by_variant(args) -> int:
    result = run_pipeline(args.file_path, max_workers=args.workers, timeout=args.timeout)
    print()
    print(format_report(result))
    if args.output:
        path = write_report_csv(result.report, args.output)
        print(f"\nSaved to {path}")
    return 0


def create_story_command(args) -> int:
    path = create_story(args.file_path, args.output_dir)
    print(f"Created {path}")
    return 0


COMMANDS = {
    "group-by-variant": group_by_variant,
    "create-story": create_story_command,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    try:
        return COMMANDS[args.command](args)
    except (FormatError, ConfigError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
