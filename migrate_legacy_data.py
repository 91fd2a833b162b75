"""Import company data exported from older storage formats.

Reads a JSON file holding snapshot blobs, wide company rows or field rows
(see app/services/legacy_data.py), creates the schema if needed and writes
the companies into the current tables.

    python migrate_legacy_data.py export.json
    python migrate_legacy_data.py export.json --dry-run --user-id <uuid>
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from sqlalchemy import func, select

from app.core import database
from app.core.config import get_log_level
from app.core.errors import LegacyFormatError
from app.models.db import Company, User
from app.services.legacy_data import import_companies, normalize_payload

logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)


async def report_counts() -> None:
    async with database.session_scope() as session:
        users = await session.scalar(select(func.count()).select_from(User))
        companies = await session.scalar(select(func.count()).select_from(Company))
    print(f"📊 Found {users} users and {companies} companies")
    if not users:
        print("🌱 No existing data found. Run seed_data.py to add sample data.")


async def migrate(path: str, user_id: Optional[str], dry_run: bool) -> int:
    print("🔄 Starting legacy data import...")
    await database.init_db()

    with open(path, encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as e:
            print(f"❌ {path} is not valid JSON: {e}")
            return 1

    try:
        companies, errors = normalize_payload(payload)
    except LegacyFormatError as e:
        print(f"❌ {e.message}")
        return 1

    for company in companies:
        print(f"  • {company.name} [{company.source_shape}] {len(company.filled_fields())} fields")

    async with database.session_scope() as session:
        report = await import_companies(session, companies, user_id=user_id, dry_run=dry_run)
    report.errors.extend(errors)

    label = "Dry run" if dry_run else "Import"
    print(
        f"✅ {label} finished: {report.created} created, {report.updated} updated, "
        f"{report.unchanged} unchanged, {report.fields_written} fields written"
    )
    for error in report.errors:
        print(f"⚠️  {error}")

    await report_counts()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", help="JSON export to import")
    parser.add_argument("--user-id", default=None, help="Owner of the imported companies")
    parser.add_argument("--dry-run", action="store_true", help="Report what would change without writing")
    args = parser.parse_args(argv)
    return asyncio.run(migrate(args.path, args.user_id, args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
