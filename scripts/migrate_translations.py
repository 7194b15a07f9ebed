#!/usr/bin/env python3
"""
Migration script to convert legacy single-language catalog fields into
{"en", "ar", "he"} translation objects.

Rows whose fields are already multilingual are left untouched. Run with
--dry-run first; the script otherwise writes to the configured database.

Only products are migrated. The storefront keeps no category table, so
there are no category names to convert.

Usage:
    python scripts/migrate_translations.py --dry-run
    python scripts/migrate_translations.py --table products
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from src.domain.value_objects.multilingual_text import is_multilingual, string_to_translation_object
from src.infrastructure.database.models import Product
from src.infrastructure.database.operations import DatabaseManager, get_db_manager
from src.infrastructure.repositories.session_handler import managed_session
from src.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)

TRANSLATABLE_FIELDS = {
    "products": (Product, ("name", "description")),
}


@dataclass
class MigrationReport:
    table: str
    migrated: int = 0
    skipped: int = 0
    migrated_ids: List[str] = field(default_factory=list)


def migrate_table(table: str, dry_run: bool = False, db_manager: Optional[DatabaseManager] = None) -> MigrationReport:
    """Convert string fields of every row in `table`; returns migrated/skipped counts"""
    model, fields = TRANSLATABLE_FIELDS[table]
    report = MigrationReport(table=table)

    with managed_session(db_manager or get_db_manager()) as session:
        for row in session.scalars(select(model)).all():
            updates = {}
            for name in fields:
                value = getattr(row, name)
                if isinstance(value, str):
                    updates[name] = string_to_translation_object(value)
                elif value is not None and not is_multilingual(value):
                    logger.warning("%s %s: unexpected %s value %r left as is", table, row.id, name, value)

            if not updates:
                report.skipped += 1
                continue

            report.migrated += 1
            report.migrated_ids.append(str(row.id))
            if dry_run:
                logger.info("[dry run] %s %s would migrate %s", table, row.id, ", ".join(updates))
                continue
            for name, value in updates.items():
                setattr(row, name, value)

    logger.info("%s: %d migrated, %d skipped", table, report.migrated, report.skipped)
    return report


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Convert catalog text fields to translation objects")
    parser.add_argument("--dry-run", action="store_true", help="report changes without writing them")
    parser.add_argument("--table", choices=sorted(TRANSLATABLE_FIELDS), help="migrate a single table")
    args = parser.parse_args(argv)

    if args.dry_run:
        logger.info("🔍 DRY RUN MODE - No changes will be made")
    else:
        logger.warning("⚠️ This will modify your database! Make sure you have a backup.")

    tables = [args.table] if args.table else sorted(TRANSLATABLE_FIELDS)
    try:
        for table in tables:
            migrate_table(table, dry_run=args.dry_run)
    except DatabaseError as e:
        logger.error("❌ Migration failed: %s", e)
        return 1

    logger.info("✅ Migration completed successfully!")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    sys.exit(main())
