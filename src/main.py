"""Maintenance entry point.

Administrative commands that operate directly on the database, outside the
HTTP API:

    python main.py init-db
    python main.py backfill-parent-codes
    python main.py clear-parent-links --yes
"""

import argparse
import logging
import sys
from typing import List, Optional

from core.database import SessionLocal, init_db
from core.logging_config import setup_logging
from utils.relationship_store import RelationshipStore
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def backfill_parent_codes() -> int:
    """Give every student without a parent code a fresh one."""
    db = SessionLocal()
    try:
        updated, failed = UserManager(db).backfill_parent_codes()
    finally:
        db.close()
    print(f"Updated {updated} students with parent codes")
    print(f"Failed to update {failed} students")
    return 0 if failed == 0 else 1


def clear_parent_links(confirmed: bool) -> int:
    """Delete every parent link. Parents will show no children afterwards."""
    if not confirmed:
        print("Refusing to delete all parent links without --yes")
        return 2
    db = SessionLocal()
    try:
        count = RelationshipStore(db).clear_parent_links()
    finally:
        db.close()
    print(f"Deleted {count} parent-child relationships")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SchoolHub maintenance commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create all database tables")
    subparsers.add_parser(
        "backfill-parent-codes",
        help="Assign parent codes to students that have none",
    )
    clear = subparsers.add_parser(
        "clear-parent-links",
        help="Delete all parent-child links",
    )
    clear.add_argument("--yes", action="store_true", help="Confirm the deletion")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)

    if args.command == "init-db":
        init_db()
        print("Database tables created")
        return 0
    if args.command == "backfill-parent-codes":
        return backfill_parent_codes()
    if args.command == "clear-parent-links":
        return clear_parent_links(args.yes)
    return 2


if __name__ == "__main__":
    sys.exit(main())
