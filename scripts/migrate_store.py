#!/usr/bin/env python3
# =============================================================================
# scripts/migrate_store.py - Copy Local JSON Data Into the Configured Store
# =============================================================================
# Moves records from a local data directory into whatever STORAGE_BACKEND
# is configured (typically sqlite or supabase).
#
# The source directory may hold either:
# - store.json, the document written by the file backend, or
# - the older loose files: admin.json, products.json, messages.json and
#   subscribers.json
#
# Existing records win: the admin is copied only if absent, products are
# skipped when one with the same name exists, and subscribers when the
# email exists. Messages are always copied. A record that fails is logged
# and counted; the run continues.
#
# Usage:
#   python scripts/migrate_store.py --source-dir ./data
#   STORAGE_BACKEND=sqlite python scripts/migrate_store.py --source-dir ./legacy
# =============================================================================

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

from app.config import get_settings
from app.exceptions import StorefrontException
from core.models import MessageStatus
from core.stores import RecordStore, build_record_store
from lib.utils import to_utc_iso

logger = logging.getLogger("migrate_store")

LEGACY_FILES = {
    "admins": "admin.json",
    "products": "products.json",
    "messages": "messages.json",
    "subscribers": "subscribers.json",
}


@dataclass
class TableReport:
    migrated: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class MigrationReport:
    tables: dict[str, TableReport] = field(default_factory=dict)

    def table(self, name: str) -> TableReport:
        return self.tables.setdefault(name, TableReport())

    @property
    def failed(self) -> int:
        return sum(report.failed for report in self.tables.values())


# =============================================================================
# Loading
# =============================================================================

def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def load_source(source_dir: Path) -> dict[str, list[Any]]:
    """
    Read the source records, one list per table.

    store.json takes precedence over the loose legacy files.
    """
    document = source_dir / "store.json"
    if document.exists():
        tables = _read_json(document).get("tables", {})
        return {name: list(tables.get(name, [])) for name in LEGACY_FILES}

    records: dict[str, list[Any]] = {}
    for name, filename in LEGACY_FILES.items():
        path = source_dir / filename
        if not path.exists():
            # Older layouts kept messages and subscribers next to the app
            path = source_dir.parent / filename
        if not path.exists():
            records[name] = []
            continue
        data = _read_json(path)
        # admin.json holds a single object
        records[name] = data if isinstance(data, list) else [data]
    return records


def _pick(record: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key among snake_case and camelCase spellings."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _timestamp(record: dict[str, Any], *keys: str) -> str | None:
    """The first present timestamp, re-emitted as fixed-width UTC; None if absent."""
    value = _pick(record, *keys)
    return to_utc_iso(value) if value is not None else None


# =============================================================================
# Per-table migration
# =============================================================================

def migrate_admins(records: list[Any], target: RecordStore, report: TableReport) -> None:
    for record in records:
        try:
            username = record["username"]
            if target.credentials.find_by("username", username) is not None:
                logger.info(f"Admin '{username}' already exists")
                report.skipped += 1
                continue
            # Already a bcrypt hash; copied as is
            target.credentials.create({
                "username": username,
                "password": record["password"],
                "created_at": _timestamp(record, "created_at", "createdAt"),
            })
            report.migrated += 1
        except (KeyError, TypeError, ValueError, StorefrontException) as e:
            logger.error(f"Error migrating admin: {e}")
            report.failed += 1


def migrate_products(records: list[Any], target: RecordStore, report: TableReport) -> None:
    existing_names = {product.name for product in target.products.get_all()}
    for record in records:
        try:
            name = record["name"]
            if name in existing_names:
                report.skipped += 1
                continue
            target.products.create({
                "name": name,
                "description": _pick(record, "description", default=""),
                "price": float(record["price"]),
                "category": record["category"],
                "image": _pick(record, "image", default=""),
                "in_stock": bool(_pick(record, "in_stock", "inStock", default=True)),
                "featured": bool(_pick(record, "featured", default=False)),
                "created_at": _timestamp(record, "created_at", "createdAt"),
            })
            existing_names.add(name)
            report.migrated += 1
        except (KeyError, TypeError, ValueError, StorefrontException) as e:
            logger.error(f"Error migrating product {record!r:.60}: {e}")
            report.failed += 1


def migrate_messages(records: list[Any], target: RecordStore, report: TableReport) -> None:
    for record in records:
        try:
            status = _pick(record, "status")
            if status is None:
                # Older messages carry a "read" flag instead of a status
                status = MessageStatus.READ if record.get("read") else MessageStatus.UNREAD
            target.messages.create({
                "name": record["name"],
                "email": record["email"],
                "subject": _pick(record, "subject", default=""),
                "message": record["message"],
                "status": status,
                "created_at": _timestamp(record, "created_at", "createdAt", "date"),
            })
            report.migrated += 1
        except (KeyError, TypeError, ValueError, AttributeError, StorefrontException) as e:
            logger.error(f"Error migrating message: {e}")
            report.failed += 1


def migrate_subscribers(records: list[Any], target: RecordStore, report: TableReport) -> None:
    for record in records:
        try:
            # Some exports are a bare list of addresses
            email = record if isinstance(record, str) else record["email"]
            email = email.strip().lower()
            if target.subscribers.find_by("email", email) is not None:
                report.skipped += 1
                continue
            created_at = None
            if isinstance(record, dict):
                created_at = _timestamp(record, "subscribed_at", "subscribedAt", "date")
            target.subscribers.create({
                "email": email,
                "status": "active",
                "subscribed_at": created_at,
            })
            report.migrated += 1
        except (KeyError, TypeError, ValueError, AttributeError, StorefrontException) as e:
            logger.error(f"Error migrating subscriber: {e}")
            report.failed += 1


def migrate(source_dir: Path, target: RecordStore) -> MigrationReport:
    """
    Copy every table from source_dir into an initialized target store.

    Returns:
        MigrationReport with per-table counts
    """
    records = load_source(source_dir)
    report = MigrationReport()

    migrate_admins(records["admins"], target, report.table("admins"))
    migrate_products(records["products"], target, report.table("products"))
    migrate_messages(records["messages"], target, report.table("messages"))
    migrate_subscribers(records["subscribers"], target, report.table("subscribers"))

    return report


def print_summary(report: MigrationReport) -> None:
    print("\nMigration summary")
    print("-" * 44)
    print(f"{'table':<14}{'migrated':>10}{'skipped':>10}{'failed':>10}")
    for name, table in report.tables.items():
        print(f"{name:<14}{table.migrated:>10}{table.skipped:>10}{table.failed:>10}")
    print("-" * 44)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Copy local JSON data into the configured record store")
    parser.add_argument(
        "--source-dir",
        type=Path,
        default=Path("data"),
        help="Directory holding store.json or the legacy JSON files (default: ./data)",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

    if not args.source_dir.is_dir():
        print(f"ERROR: source directory not found: {args.source_dir}")
        return 1

    settings = get_settings()
    logger.info(f"Migrating {args.source_dir} into the {settings.STORAGE_BACKEND} store")

    with build_record_store(settings) as target:
        report = migrate(args.source_dir, target)

    print_summary(report)
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
