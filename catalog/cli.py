"""Command-line interface for the catalog database."""

import argparse
import logging
from typing import List, Optional

from catalog.config import DB_PATH, EXPORT_PATH
from catalog.csv_utils import catalog_stats, export_components_to_csv, export_configurations_to_csv
from catalog.db import get_categories, init_db, list_configurations, reset_view_counts
from catalog.logging_config import setup_logging
from catalog.seed import seed_catalog

__all__ = ["main", "parse_args", "show_stats"]

logger = logging.getLogger("catalog.cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="PC shop catalog: database setup, demo data and exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the schema and load the demo catalog
  python -m catalog.cli --init-db --seed

  # Show per-category statistics
  python -m catalog.cli --stats

  # Export GPUs only
  python -m catalog.cli --export-csv data/gpus.csv --category gpu

  # Export configurations
  python -m catalog.cli --export-configurations data/configurations.csv
        """,
    )

    parser.add_argument(
        "--db-path",
        default=DB_PATH,
        help=f"SQLite database path (default: {DB_PATH})",
    )
    parser.add_argument("--init-db", action="store_true", help="Create the database schema")
    parser.add_argument("--seed", action="store_true", help="Load the demo catalog into an empty database")
    parser.add_argument("--stats", action="store_true", help="Show catalog statistics")
    parser.add_argument(
        "--export-csv",
        metavar="PATH",
        nargs="?",
        const=EXPORT_PATH,
        help=f"Export components to CSV (default path: {EXPORT_PATH})",
    )
    parser.add_argument(
        "--category",
        metavar="SLUG",
        help="Export only this category (use with --export-csv)",
    )
    parser.add_argument(
        "--export-configurations",
        metavar="PATH",
        help="Export configurations to CSV",
    )
    parser.add_argument("--reset-views", action="store_true", help="Reset all view counters")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def show_stats(db_path: str) -> None:
    """Print category and configuration statistics."""
    init_db(db_path)

    print(f"\n{'='*50}")
    print(f"Database: {db_path}")
    print(f"{'='*50}")

    categories = get_categories(db_path)
    print(f"\nCategories: {len(categories)}")

    stats = catalog_stats(db_path)
    if stats.empty:
        print("\nNo components yet. Run with --seed to load demo data.")
    else:
        print(f"\nComponents: {int(stats['products'].sum())}")
        print(stats.to_string(index=False))

    configurations = list_configurations(db_path)
    templates = [c for c in configurations if c.is_template]
    print(f"\nConfigurations: {len(configurations)} ({len(templates)} templates)")
    for template in templates:
        visibility = "public" if template.is_public else "private"
        print(f"  {template.name}: {template.total_price:.2f} ({visibility})")
    print()


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for CLI."""
    args = parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.init_db:
        init_db(args.db_path)
        logger.info("Initialized database at %s", args.db_path)

    if args.seed:
        counts = seed_catalog(args.db_path)
        logger.info("Seeded %d components and %d templates", counts["components"], counts["templates"])

    if args.reset_views:
        init_db(args.db_path)
        counts = reset_view_counts(args.db_path)
        logger.info("Reset view counts: %s", counts)

    if args.export_csv:
        init_db(args.db_path)
        export_components_to_csv(args.db_path, args.export_csv, category_slug=args.category)

    if args.export_configurations:
        init_db(args.db_path)
        export_configurations_to_csv(args.db_path, args.export_configurations)

    if args.stats:
        show_stats(args.db_path)


if __name__ == "__main__":
    main()
