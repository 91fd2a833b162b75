from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import InputValidator, ValidationFailedError
from app.models.company_profile import is_known_field
from app.models.schemas import CompanyCreateRequest, FieldUpdateRequest
from app.repos.campaigns import CampaignRepository, serialize_campaign
from app.repos.companies import CompanyRepository, serialize_company

router = APIRouter(tags=["Companies"])


@router.get("")
async def list_companies(session: AsyncSession = Depends(get_session)):
    repo = CompanyRepository(session)
    companies = await repo.list_companies_with_data()
    active = await repo.get_active_company()
    return {"success": True, "data": {"list": companies, "active": active.id if active else None}}


@router.post("")
async def create_company(payload: CompanyCreateRequest, session: AsyncSession = Depends(get_session)):
    validation = InputValidator.validate_company_name(payload.name)
    if not validation.is_valid:
        issue = validation.first_error()
        raise ValidationFailedError(issue.message, code=issue.code)

    repo = CompanyRepository(session)
    fields = {k: v for k, v in payload.fields.items() if is_known_field(k)}
    company = await repo.create_company(payload.name.strip(), fields)
    data = serialize_company(company, await repo.get_company_data(company.id))
    await session.commit()
    return {"success": True, "data": data, "warnings": validation.warnings}


@router.get("/active")
async def get_active_company(session: AsyncSession = Depends(get_session)):
    repo = CompanyRepository(session)
    company = await repo.get_active_company()
    if company is None:
        return {"success": True, "data": None}
    return {"success": True, "data": await repo.get_company_with_data(company.id)}


@router.get("/{company_id}")
async def get_company(company_id: int, session: AsyncSession = Depends(get_session)):
    repo = CompanyRepository(session)
    await repo.require_company(company_id)
    return {"success": True, "data": await repo.get_company_with_data(company_id)}


@router.put("/{company_id}/fields")
async def update_company_field(
    company_id: int, payload: FieldUpdateRequest, session: AsyncSession = Depends(get_session)
):
    if not is_known_field(payload.field):
        raise ValidationFailedError(f"Unknown field: {payload.field}", code="UNKNOWN_FIELD")

    row = await CompanyRepository(session).update_field(company_id, payload.field, payload.value)
    result = {"field": row.field_name, "value": row.field_value, "version": row.version}
    await session.commit()
    return {"success": True, "data": result}


@router.delete("/{company_id}")
async def delete_company(company_id: int, session: AsyncSession = Depends(get_session)):
    await CompanyRepository(session).delete_company(company_id)
    await session.commit()
    return {"success": True, "message": f"Company {company_id} deleted"}


@router.post("/{company_id}/select")
async def select_company(company_id: int, session: AsyncSession = Depends(get_session)):
    repo = CompanyRepository(session)
    company = await repo.select_company(company_id)
    data = await repo.get_company_with_data(company.id)
    await session.commit()
    return {"success": True, "data": data}


@router.get("/{company_id}/campaigns")
async def list_company_campaigns(company_id: int, session: AsyncSession = Depends(get_session)):
    await CompanyRepository(session).require_company(company_id)
    campaigns = await CampaignRepository(session).list_by_company(company_id)
    return {"success": True, "data": [serialize_campaign(c) for c in campaigns]}
