from typing import Literal

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_default_user_id
from app.core.database import get_session
from app.models.company_profile import completion_progress
from app.models.schemas import FieldUpdateRequest
from app.services.company_data import CompanyDataService
from app.services.legacy_data import to_snapshot

router = APIRouter(tags=["Company Data"])


@router.get("")
async def get_company_data(session: AsyncSession = Depends(get_session)):
    state = await CompanyDataService(session).get_current_data()
    state["progress"] = completion_progress(state["currentData"])
    return {"success": True, "data": state}


@router.post("")
async def update_company_data(payload: FieldUpdateRequest, session: AsyncSession = Depends(get_session)):
    result = await CompanyDataService(session).update_field(payload.field, payload.value)
    await session.commit()
    return {"success": True, **result, "message": f"{payload.field} updated successfully"}


@router.delete("")
async def reset_company_data(session: AsyncSession = Depends(get_session)):
    removed = await CompanyDataService(session).reset_data()
    await session.commit()
    return {"success": True, "removed": removed, "message": "All form fields have been reset successfully"}


@router.get("/progress")
async def get_progress(session: AsyncSession = Depends(get_session)):
    return {"success": True, "data": await CompanyDataService(session).get_completion_progress()}


@router.get("/next-field")
async def get_next_field(session: AsyncSession = Depends(get_session)):
    next_field = await CompanyDataService(session).get_next_unfilled_field()
    return {"success": True, "data": {"nextField": next_field, "isComplete": next_field is None}}


@router.get("/fields/{field_name}")
async def get_field(field_name: str, session: AsyncSession = Depends(get_session)):
    service = CompanyDataService(session)
    value = await service.get_field_value(field_name)
    return {"success": True, "data": {"field": field_name, "value": value, "filled": bool(value.strip())}}


@router.get("/export")
async def export_company_data(
    format: Literal["icp", "snapshot"] = "icp", session: AsyncSession = Depends(get_session)
):
    service = CompanyDataService(session)
    fields = await service.export_for_icp()
    if format == "snapshot":
        state = await service.get_current_data()
        return to_snapshot(fields, get_default_user_id(), state["lastUpdated"])
    return {"success": True, "data": fields}
