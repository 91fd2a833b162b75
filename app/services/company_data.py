import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationFailedError
from app.models.company_profile import (
    FIELD_ORDER,
    completion_progress,
    filled_fields,
    is_filled,
    is_known_field,
    next_unfilled_field,
)
from app.models.db import Company
from app.repos.companies import CompanyRepository, isoformat

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "Default Company"


class CompanyDataService:
    """Form state of the company the assistant is currently editing.

    That is the user's active company, or their first company when none has
    been selected. Writes create a "Default Company" when the user has none.
    """

    def __init__(self, session: AsyncSession, user_id: Optional[str] = None):
        self.session = session
        self.companies = CompanyRepository(session, user_id)

    async def resolve_company(self, create: bool = False) -> Optional[Company]:
        company = await self.companies.get_active_company()
        if company is None:
            company = await self.companies.get_first_company()
        if company is None and create:
            company = await self.companies.create_company(DEFAULT_COMPANY_NAME)
            await self.companies.select_company(company.id)
        return company

    async def _load(self) -> tuple[Optional[Company], Dict[str, str]]:
        company = await self.resolve_company()
        if company is None:
            return None, {}
        return company, await self.companies.get_company_data(company.id)

    async def get_current_data(self) -> Dict[str, Any]:
        company, data = await self._load()
        current = {name: data[name] for name in FIELD_ORDER if name in data}
        last_updated = None
        if company is not None:
            rows = await self.companies.get_data_rows(company.id)
            stamps = [row.updated_at for row in rows if row.updated_at]
            last_updated = isoformat(max(stamps)) if stamps else isoformat(company.updated_at)

        nxt = next_unfilled_field(current)
        return {
            "companyId": company.id if company else None,
            "currentData": current,
            "filledFields": filled_fields(current),
            "nextField": nxt,
            "isComplete": nxt is None,
            "lastUpdated": last_updated,
        }

    async def update_field(self, field_name: str, value: str) -> Dict[str, Any]:
        if not is_known_field(field_name):
            raise ValidationFailedError(f"Unknown field: {field_name}", code="UNKNOWN_FIELD")

        company = await self.resolve_company(create=True)
        row = await self.companies.upsert_field(company, field_name, value)
        logger.info(f"Updated {field_name} for company {company.id} (v{row.version})")
        return {
            "field": field_name,
            "value": value,
            "version": row.version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def get_field_value(self, field_name: str) -> str:
        _, data = await self._load()
        return data.get(field_name, "")

    async def is_field_filled(self, field_name: str) -> bool:
        return is_filled(await self.get_field_value(field_name))

    async def get_next_unfilled_field(self) -> Optional[str]:
        _, data = await self._load()
        return next_unfilled_field(data)

    async def get_completion_progress(self) -> Dict[str, int]:
        _, data = await self._load()
        return completion_progress(data)

    async def reset_data(self) -> int:
        company = await self.resolve_company()
        if company is None:
            return 0
        removed = await self.companies.clear_fields(company.id)
        logger.info(f"Reset {removed} fields for company {company.id}")
        return removed

    async def export_for_icp(self) -> Dict[str, str]:
        _, data = await self._load()
        return {name: data[name] for name in FIELD_ORDER if is_filled(data.get(name))}
