from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import NotFoundError, ValidationFailedError
from app.models.schemas import ICPGenerationRequest
from app.repos.icp_profiles import ICPProfileRepository, serialize_profile
from app.services.icp import check_readiness, generate_icps, load_company_for_icp

router = APIRouter(tags=["ICP"])


@router.get("/readiness")
async def get_readiness(companyId: Optional[int] = None, session: AsyncSession = Depends(get_session)):
    company, company_data = await load_company_for_icp(session, companyId)
    return {"success": True, "data": {"companyId": company.id, **check_readiness(company_data)}}


@router.post("")
async def create_icps(payload: ICPGenerationRequest, session: AsyncSession = Depends(get_session)):
    profiles = await generate_icps(session, payload.companyId)
    return {"success": True, "data": profiles}


@router.get("")
async def list_icps(companyId: Optional[int] = None, session: AsyncSession = Depends(get_session)):
    repo = ICPProfileRepository(session)
    profiles = await repo.list_by_company(companyId) if companyId is not None else await repo.list_all()
    return {"success": True, "data": [serialize_profile(p) for p in profiles]}


@router.get("/{profile_id}")
async def get_icp(profile_id: str, session: AsyncSession = Depends(get_session)):
    profile = await ICPProfileRepository(session).get_by_id(profile_id)
    if profile is None:
        raise NotFoundError(f"ICP profile with id {profile_id} not found")
    return {"success": True, "data": serialize_profile(profile)}


@router.delete("")
async def delete_icps(
    id: Optional[str] = None, companyId: Optional[int] = None, session: AsyncSession = Depends(get_session)
):
    repo = ICPProfileRepository(session)
    if id:
        deleted = 1 if await repo.delete_by_id(id) else 0
    elif companyId is not None:
        deleted = await repo.delete_by_company(companyId)
    else:
        raise ValidationFailedError("Either id or companyId is required", code="MISSING_PARAMETER")
    await session.commit()
    return {"success": True, "deleted": deleted}


@router.delete("/{profile_id}")
async def delete_icp(profile_id: str, session: AsyncSession = Depends(get_session)):
    if not await ICPProfileRepository(session).delete_by_id(profile_id):
        raise NotFoundError(f"ICP profile with id {profile_id} not found")
    await session.commit()
    return {"success": True, "deleted": 1}
