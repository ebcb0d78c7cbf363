#!/usr/bin/env python3
"""
Node Catalog Seeding Script

Populates node_definitions and node_parameters from the node reference
table. Existing node types and their parameter rows are updated in place, so
the script can be re-run after editing the table.

Usage:
    python -m scripts.seed_node_catalog [--file PATH] [--dry-run]

Options:
    --file      Reference table to load (defaults to the packaged table)
    --dry-run   Show what would be done without making changes
"""

import argparse
import asyncio
import logging

from core.config import settings
from core.database import get_session_maker, close_db
from services.node_reference import load_reference
from services.node_seeder import NodeCatalogSeeder

logger = logging.getLogger(__name__)


async def run(reference_file=None, dry_run: bool = False):
    """Load the reference table and write it to the database."""
    definitions = load_reference(reference_file)
    logger.info(f"Loaded {len(definitions)} node types from reference table")

    try:
        async with get_session_maker()() as db:
            report = await NodeCatalogSeeder(db).seed(definitions, dry_run=dry_run)
    finally:
        await close_db()

    for type_id in report.inserted:
        print(f"  + {type_id}")
    for type_id in report.updated:
        print(f"  ~ {type_id}")
    print(f"{'Would seed' if dry_run else 'Seeded'} {report.total} node types "
          f"({len(report.inserted)} new, {len(report.updated)} updated)")
    return report


def main():
    """Main seeding function."""
    parser = argparse.ArgumentParser(description="Seed the node catalog database")
    parser.add_argument("--file", default=None,
                        help="Path to a node reference YAML file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be done without making changes")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
    asyncio.run(run(args.file, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
