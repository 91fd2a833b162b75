import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_default_user_email, get_default_user_id
from app.core.errors import NotFoundError
from app.models.db import Company, CompanyData, User, UserActiveCompany

logger = logging.getLogger(__name__)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_company(company: Company, data: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Flatten a company and its field rows into one dict.

    Field values come first so the row's own id and name always win.
    """
    payload: Dict[str, Any] = dict(data or {})
    payload.update(
        {
            "id": company.id,
            "name": company.name,
            "userId": company.user_id,
            "createdAt": isoformat(company.created_at),
            "updatedAt": isoformat(company.updated_at),
        }
    )
    return payload


class CompanyRepository:
    """Companies and their key/value profile fields for one user."""

    def __init__(self, session: AsyncSession, user_id: Optional[str] = None):
        self.session = session
        self.user_id = user_id or get_default_user_id()

    async def ensure_user(self) -> User:
        user = await self.session.get(User, self.user_id)
        if user is None:
            email = get_default_user_email() if self.user_id == get_default_user_id() else f"{self.user_id}@local"
            user = User(id=self.user_id, email=email, name="Test User")
            self.session.add(user)
            await self.session.flush()
            logger.info(f"Created user {self.user_id}")
        return user

    async def list_companies(self) -> List[Company]:
        result = await self.session.execute(
            select(Company)
            .where(Company.user_id == self.user_id)
            .order_by(Company.created_at.desc(), Company.id.desc())
        )
        return list(result.scalars().all())

    async def list_companies_with_data(self) -> List[Dict[str, Any]]:
        companies = await self.list_companies()
        return [serialize_company(c, await self.get_company_data(c.id)) for c in companies]

    async def get_company(self, company_id: int) -> Optional[Company]:
        result = await self.session.execute(
            select(Company).where(Company.id == company_id, Company.user_id == self.user_id)
        )
        return result.scalar_one_or_none()

    async def require_company(self, company_id: int) -> Company:
        company = await self.get_company(company_id)
        if company is None:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    async def get_first_company(self) -> Optional[Company]:
        result = await self.session.execute(
            select(Company)
            .where(Company.user_id == self.user_id)
            .order_by(Company.created_at.asc(), Company.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_data_rows(self, company_id: int) -> List[CompanyData]:
        result = await self.session.execute(
            select(CompanyData).where(CompanyData.company_id == company_id).order_by(CompanyData.field_name)
        )
        return list(result.scalars().all())

    async def get_company_data(self, company_id: int) -> Dict[str, str]:
        return {row.field_name: row.field_value for row in await self.get_data_rows(company_id)}

    async def get_company_with_data(self, company_id: int) -> Optional[Dict[str, Any]]:
        company = await self.get_company(company_id)
        if company is None:
            return None
        return serialize_company(company, await self.get_company_data(company_id))

    async def create_company(self, name: str, fields: Optional[Dict[str, str]] = None) -> Company:
        await self.ensure_user()
        company = Company(user_id=self.user_id, name=name)
        self.session.add(company)
        await self.session.flush()

        for field_name, value in (fields or {}).items():
            if field_name == "name" or value is None:
                continue
            await self.upsert_field(company, field_name, str(value))
        await self.upsert_field(company, "name", name)
        logger.info(f"Created company {company.id} ({name})")
        return company

    async def upsert_field(self, company: Company, field_name: str, value: str) -> CompanyData:
        """Insert or overwrite one field; every overwrite bumps the version."""
        result = await self.session.execute(
            select(CompanyData).where(
                CompanyData.company_id == company.id,
                CompanyData.field_name == field_name,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = CompanyData(company_id=company.id, field_name=field_name, field_value=value, version=1)
            self.session.add(row)
        else:
            row.field_value = value
            row.version = (row.version or 0) + 1

        if field_name == "name" and value.strip() and company.name != value.strip():
            company.name = value.strip()

        await self.session.flush()
        return row

    async def update_field(self, company_id: int, field_name: str, value: str) -> CompanyData:
        company = await self.require_company(company_id)
        return await self.upsert_field(company, field_name, value)

    async def clear_fields(self, company_id: int) -> int:
        result = await self.session.execute(delete(CompanyData).where(CompanyData.company_id == company_id))
        return result.rowcount or 0

    async def delete_company(self, company_id: int) -> None:
        company = await self.require_company(company_id)
        await self.session.delete(company)
        await self.session.flush()
        logger.info(f"Deleted company {company_id}")

    async def get_active_company(self) -> Optional[Company]:
        active = await self.session.get(UserActiveCompany, self.user_id)
        if active is None:
            return None
        return await self.get_company(active.company_id)

    async def select_company(self, company_id: int) -> Company:
        company = await self.require_company(company_id)
        await self.ensure_user()
        active = await self.session.get(UserActiveCompany, self.user_id)
        if active is None:
            self.session.add(UserActiveCompany(user_id=self.user_id, company_id=company.id))
        else:
            active.company_id = company.id
        await self.session.flush()
        return company

    async def find_by_name(self, name: str) -> Optional[Company]:
        result = await self.session.execute(
            select(Company)
            .where(Company.user_id == self.user_id, Company.name == name)
            .order_by(Company.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()
