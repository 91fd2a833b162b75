import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.db import Campaign, ICPProfile
from app.repos.companies import isoformat

logger = logging.getLogger(__name__)

# Request key -> column for PATCH updates
UPDATABLE_FIELDS: Dict[str, str] = {
    "name": "name",
    "copyStyle": "copy_style",
    "mediaType": "media_type",
    "adCopy": "ad_copy",
    "imagePrompt": "image_prompt",
    "imageUrl": "image_url",
    "cta": "cta",
    "hooks": "hooks",
    "landingPageCopy": "landing_page_copy",
}


def serialize_campaign(campaign: Campaign) -> Dict[str, Any]:
    return {
        "id": campaign.id,
        "name": campaign.name,
        "icpId": campaign.icp_id,
        "copyStyle": campaign.copy_style,
        "mediaType": campaign.media_type,
        "adCopy": campaign.ad_copy,
        "imagePrompt": campaign.image_prompt,
        "imageUrl": campaign.image_url,
        "cta": campaign.cta,
        "hooks": campaign.hooks,
        "landingPageCopy": campaign.landing_page_copy,
        "createdAt": isoformat(campaign.created_at),
        "updatedAt": isoformat(campaign.updated_at),
    }


class CampaignRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **values: Any) -> Campaign:
        campaign = Campaign(**values)
        self.session.add(campaign)
        await self.session.flush()
        logger.info(f"Saved campaign {campaign.id} for ICP {campaign.icp_id}")
        return campaign

    async def get_by_id(self, campaign_id: str) -> Optional[Campaign]:
        return await self.session.get(Campaign, campaign_id)

    async def list_all(self) -> List[Campaign]:
        result = await self.session.execute(select(Campaign).order_by(Campaign.created_at.desc()))
        return list(result.scalars().all())

    async def list_by_icp(self, icp_id: str) -> List[Campaign]:
        result = await self.session.execute(
            select(Campaign).where(Campaign.icp_id == icp_id).order_by(Campaign.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_by_company(self, company_id: int) -> List[Campaign]:
        result = await self.session.execute(
            select(Campaign)
            .join(ICPProfile, Campaign.icp_id == ICPProfile.id)
            .where(ICPProfile.company_id == company_id)
            .order_by(Campaign.created_at.desc())
        )
        return list(result.scalars().all())

    async def update(self, campaign_id: str, updates: Dict[str, Any]) -> Optional[Campaign]:
        """Apply whitelisted camelCase updates; unknown keys are ignored."""
        campaign = await self.get_by_id(campaign_id)
        if campaign is None:
            return None

        changes = {UPDATABLE_FIELDS[key]: value for key, value in updates.items() if key in UPDATABLE_FIELDS}
        if not changes:
            return campaign

        for column, value in changes.items():
            setattr(campaign, column, value)
        await self.session.flush()
        return campaign

    async def delete(self, campaign_id: str) -> bool:
        campaign = await self.get_by_id(campaign_id)
        if campaign is None:
            return False
        await self.session.delete(campaign)
        await self.session.flush()
        return True
