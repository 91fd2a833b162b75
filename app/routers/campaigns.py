from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import NotFoundError
from app.models.schemas import CampaignGenerationRequest, CampaignUpdateRequest
from app.repos.campaigns import CampaignRepository, serialize_campaign
from app.services.campaign import generate_campaign

router = APIRouter(tags=["Campaigns"])


@router.post("")
async def create_campaign(payload: CampaignGenerationRequest, session: AsyncSession = Depends(get_session)):
    campaign = await generate_campaign(
        session,
        icp_id=payload.icpId,
        copy_style=payload.copyStyle,
        media_type=payload.mediaType,
        image_prompt=payload.imagePrompt,
        campaign_details=payload.campaignDetails,
    )
    return {"success": True, "data": campaign}


@router.get("")
async def list_campaigns(icpId: Optional[str] = None, session: AsyncSession = Depends(get_session)):
    repo = CampaignRepository(session)
    campaigns = await repo.list_by_icp(icpId) if icpId else await repo.list_all()
    return {"success": True, "data": [serialize_campaign(c) for c in campaigns]}


@router.get("/{campaign_id}")
async def get_campaign(campaign_id: str, session: AsyncSession = Depends(get_session)):
    campaign = await CampaignRepository(session).get_by_id(campaign_id)
    if campaign is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    return {"success": True, "data": serialize_campaign(campaign)}


@router.patch("/{campaign_id}")
async def update_campaign(
    campaign_id: str, payload: CampaignUpdateRequest, session: AsyncSession = Depends(get_session)
):
    updates = payload.model_dump(exclude_unset=True)
    campaign = await CampaignRepository(session).update(campaign_id, updates)
    if campaign is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    data = serialize_campaign(campaign)
    await session.commit()
    return {"success": True, "data": data}


@router.delete("/{campaign_id}")
async def delete_campaign(campaign_id: str, session: AsyncSession = Depends(get_session)):
    if not await CampaignRepository(session).delete(campaign_id):
        raise NotFoundError(f"Campaign {campaign_id} not found")
    await session.commit()
    return {"success": True, "message": f"Campaign {campaign_id} deleted"}
