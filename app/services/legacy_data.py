"""Reading company data written by earlier versions of the application.

Three storage shapes have existed over time:

* ``snapshot``: the browser key-value store kept one JSON blob per user,
  ``{"user_id": ..., "data": {camelCase fields}, "lastUpdated": ..., "version": "1.0"}``.
  A flat dict of camelCase fields is accepted as the same shape.
* ``wide_row``: a ``companies`` table with one snake_case column per field
  (``company_size``, ``target_market``, ...) plus ``id``/``user_id``/timestamps.
* ``field_rows``: key/value rows (``field_name``/``field_value``, or the
  camelCase ``fieldName``/``fieldValue``) keyed by company or by user. This
  is also the shape the current schema stores.

Every shape is normalized into ``NormalizedCompany`` and can be imported
into the current schema with ``import_companies``.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import LegacyFormatError
from app.models.company_profile import FIELD_ORDER, is_filled
from app.repos.companies import CompanyRepository

logger = logging.getLogger(__name__)

SNAPSHOT = "snapshot"
WIDE_ROW = "wide_row"
FIELD_ROWS = "field_rows"

DEFAULT_IMPORT_NAME = "Imported Company"
SNAPSHOT_VERSION = "1.0"

_WIDE_ROW_META = {"id", "user_id", "created_at", "updated_at"}
_FIELD_NAME_KEYS = ("field_name", "fieldName")
_FIELD_VALUE_KEYS = ("field_value", "fieldValue")
_ROW_OWNER_KEYS = ("company_id", "companyId", "user_id", "userId")


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


# snake_case column -> camelCase field
WIDE_COLUMN_TO_FIELD: Dict[str, str] = {camel_to_snake(f): f for f in FIELD_ORDER}


@dataclass
class NormalizedCompany:
    name: str
    fields: Dict[str, str]
    source_shape: str
    legacy_id: Optional[str] = None
    user_id: Optional[str] = None
    updated_at: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def filled_fields(self) -> Dict[str, str]:
        return {k: v for k, v in self.fields.items() if is_filled(v)}


@dataclass
class ImportReport:
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    fields_written: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "fieldsWritten": self.fields_written,
            "errors": list(self.errors),
        }


def normalize_value(value: Any) -> str:
    """Coerce a stored value to the text form the current schema keeps."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return ", ".join(normalize_value(v) for v in value if normalize_value(v))
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value).strip()


def _field_key(raw_name: str) -> Optional[str]:
    """Map a stored field name (camelCase or snake_case) onto the catalog."""
    if raw_name in FIELD_ORDER:
        return raw_name
    return WIDE_COLUMN_TO_FIELD.get(raw_name)


def _is_field_row(record: Any) -> bool:
    return isinstance(record, dict) and any(key in record for key in _FIELD_NAME_KEYS)


def _first(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def detect_storage_shape(record: Any) -> str:
    """Work out which storage shape a record was written in.

    Raises LegacyFormatError when it matches none.
    """
    if isinstance(record, list):
        if record and all(_is_field_row(row) for row in record):
            return FIELD_ROWS
        raise LegacyFormatError("List records must be field rows with field_name/field_value")

    if not isinstance(record, dict):
        raise LegacyFormatError(f"Unsupported record type: {type(record).__name__}")

    if isinstance(record.get("data"), dict):
        return SNAPSHOT
    if _is_field_row(record):
        return FIELD_ROWS

    keys = set(record)
    snake_only_columns = set(WIDE_COLUMN_TO_FIELD) - set(FIELD_ORDER)
    if (keys & snake_only_columns) or (keys & _WIDE_ROW_META):
        return WIDE_ROW
    if keys & set(FIELD_ORDER):
        return SNAPSHOT

    raise LegacyFormatError("Record does not match any known company data shape")


def _import_name(fields: Dict[str, str], owner: Any) -> str:
    """Name to import under; nameless records are told apart by their legacy owner."""
    if fields.get("name"):
        return fields["name"]
    if owner is None or str(owner) == "":
        return DEFAULT_IMPORT_NAME
    return f"{DEFAULT_IMPORT_NAME} {owner}"


def _normalize_snapshot(record: Dict[str, Any]) -> NormalizedCompany:
    data = record["data"] if isinstance(record.get("data"), dict) else record
    fields: Dict[str, str] = {}
    extras: Dict[str, Any] = {}
    for key, value in data.items():
        field_key = _field_key(key)
        if field_key:
            fields[field_key] = normalize_value(value)
        elif key not in ("user_id", "lastUpdated", "version"):
            extras[key] = value

    return NormalizedCompany(
        name=_import_name(fields, record.get("user_id")),
        fields=fields,
        source_shape=SNAPSHOT,
        user_id=record.get("user_id"),
        updated_at=record.get("lastUpdated"),
        extras=extras,
    )


def _normalize_wide_row(record: Dict[str, Any]) -> NormalizedCompany:
    fields: Dict[str, str] = {}
    extras: Dict[str, Any] = {}
    for key, value in record.items():
        if key in _WIDE_ROW_META:
            continue
        field_key = _field_key(key)
        if field_key:
            fields[field_key] = normalize_value(value)
        else:
            extras[key] = value

    legacy_id = record.get("id")
    updated_at = record.get("updated_at") or record.get("created_at")
    return NormalizedCompany(
        name=_import_name(fields, legacy_id),
        fields=fields,
        source_shape=WIDE_ROW,
        legacy_id=str(legacy_id) if legacy_id is not None else None,
        user_id=record.get("user_id"),
        updated_at=str(updated_at) if updated_at is not None else None,
        extras=extras,
    )


def _normalize_field_rows(rows: List[Dict[str, Any]]) -> NormalizedCompany:
    fields: Dict[str, str] = {}
    extras: Dict[str, Any] = {}
    versions: Dict[str, int] = {}
    for row in rows:
        raw_name = str(_first(row, _FIELD_NAME_KEYS) or "")
        value = _first(row, _FIELD_VALUE_KEYS)
        field_key = _field_key(raw_name)
        if not field_key:
            extras[raw_name] = value
            continue
        # Duplicate rows: the highest version wins
        version = int(row.get("version") or 0)
        if field_key in fields and version < versions.get(field_key, 0):
            continue
        fields[field_key] = normalize_value(value)
        versions[field_key] = version

    owner = _first(rows[0], _ROW_OWNER_KEYS)
    user_id = _first(rows[0], ("user_id", "userId"))
    stamps = [str(_first(r, ("updated_at", "updatedAt"))) for r in rows if _first(r, ("updated_at", "updatedAt"))]
    return NormalizedCompany(
        name=_import_name(fields, owner),
        fields=fields,
        source_shape=FIELD_ROWS,
        legacy_id=str(owner) if owner is not None else None,
        user_id=user_id,
        updated_at=max(stamps) if stamps else None,
        extras=extras,
    )


def normalize_company_record(record: Any) -> NormalizedCompany:
    """Normalize one company in any known shape.

    Field rows must all belong to the same company; use
    ``group_field_rows`` first for mixed exports.
    """
    shape = detect_storage_shape(record)
    if shape == SNAPSHOT:
        company = _normalize_snapshot(record)
    elif shape == WIDE_ROW:
        company = _normalize_wide_row(record)
    else:
        company = _normalize_field_rows(record if isinstance(record, list) else [record])

    company.fields["name"] = company.name
    return company


def group_field_rows(rows: List[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
    """Split field rows by owner (company id, else user id), keeping input order."""
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        owner = _first(row, _ROW_OWNER_KEYS)
        groups.setdefault(str(owner) if owner is not None else "", []).append(row)
    return list(groups.values())


def _split_payload(payload: Any) -> List[Any]:
    if isinstance(payload, dict):
        for key in ("companies", "profiles"):
            if isinstance(payload.get(key), list):
                return _split_payload(payload[key])
        for key in ("company_data", "companyData", "rows"):
            if isinstance(payload.get(key), list):
                return group_field_rows(payload[key])
        return [payload]

    if isinstance(payload, list):
        field_rows = [item for item in payload if _is_field_row(item)]
        others = [item for item in payload if not _is_field_row(item)]
        return others + group_field_rows(field_rows)

    raise LegacyFormatError(f"Unsupported payload type: {type(payload).__name__}")


def normalize_payload(payload: Any) -> Tuple[List[NormalizedCompany], List[str]]:
    """Normalize a whole export file.

    Accepts a single record, a list of records, ``{"companies": [...]}`` or
    ``{"company_data": [...]}``. Records that match no shape are reported in
    the returned error list instead of aborting the run.
    """
    companies: List[NormalizedCompany] = []
    errors: List[str] = []
    for index, record in enumerate(_split_payload(payload)):
        try:
            companies.append(normalize_company_record(record))
        except LegacyFormatError as e:
            errors.append(f"record {index}: {e.message}")
    return companies, errors


def to_snapshot(fields: Dict[str, str], user_id: str, last_updated: Optional[str] = None) -> Dict[str, Any]:
    """Render fields in the snapshot shape older clients read."""
    return {
        "user_id": user_id,
        "data": {name: fields[name] for name in FIELD_ORDER if name in fields},
        "lastUpdated": last_updated or datetime.now(timezone.utc).isoformat(),
        "version": SNAPSHOT_VERSION,
    }


async def import_companies(
    session: AsyncSession,
    companies: List[NormalizedCompany],
    user_id: Optional[str] = None,
    dry_run: bool = False,
) -> ImportReport:
    """Write normalized companies into the current schema.

    Companies are matched by name for the target user. Only changed,
    non-empty fields are written, so importing the same data twice changes
    nothing. The caller owns the transaction.
    """
    repo = CompanyRepository(session, user_id)
    report = ImportReport()
    if not dry_run:
        await repo.ensure_user()

    # Fields per name as they stand after this run; a dry run writes nothing
    # so later records with the same name must compare against this.
    handled: Dict[str, Dict[str, str]] = {}

    for company in companies:
        incoming = company.filled_fields()
        current = handled.get(company.name)
        existing = await repo.find_by_name(company.name)

        if existing is None and current is None:
            report.created += 1
            report.fields_written += len(incoming)
            if not dry_run:
                await repo.create_company(company.name, incoming)
            handled[company.name] = dict(incoming)
            logger.info(f"Import: new company {company.name} ({company.source_shape})")
            continue

        if current is None:
            current = await repo.get_company_data(existing.id)
        changed = {k: v for k, v in incoming.items() if current.get(k) != v}
        if not changed:
            report.unchanged += 1
            continue

        report.updated += 1
        report.fields_written += len(changed)
        if not dry_run:
            for field_name, value in changed.items():
                await repo.upsert_field(existing, field_name, value)
        handled[company.name] = {**current, **changed}
        logger.info(f"Import: updated {len(changed)} fields of {company.name}")

    return report
