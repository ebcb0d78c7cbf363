#!/usr/bin/env python3
"""
Starter Template Seeding Script

Inserts the packaged public starter templates into workflow_templates.
Templates whose name is already stored are left untouched.

Usage:
    python -m scripts.seed_templates [--file PATH] [--owner USER_ID] [--dry-run]
"""

import argparse
import asyncio
import logging

from core.config import settings
from core.database import get_session_maker, close_db
from services.template_seeder import WorkflowTemplateSeeder, load_starter_templates

logger = logging.getLogger(__name__)


async def run(templates_file=None, owner_id=None, dry_run: bool = False):
    """Load the starter templates and insert the missing ones."""
    templates = load_starter_templates(templates_file)
    logger.info(f"Loaded {len(templates)} starter templates")

    try:
        async with get_session_maker()() as db:
            report = await WorkflowTemplateSeeder(db, owner_id).seed(templates, dry_run=dry_run)
    finally:
        await close_db()

    for name in report.inserted:
        print(f"  + {name}")
    for name in report.skipped:
        print(f"  = {name} (exists)")
    print(f"{'Would insert' if dry_run else 'Inserted'} {len(report.inserted)} starter templates")
    return report


def main():
    """Main seeding function."""
    parser = argparse.ArgumentParser(description="Seed the public starter templates")
    parser.add_argument("--file", default=None,
                        help="Path to a starter templates YAML file")
    parser.add_argument("--owner", default=None,
                        help="User id recorded as the templates' owner")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be done without making changes")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
    asyncio.run(run(args.file, owner_id=args.owner, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
