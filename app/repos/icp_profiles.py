import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.db import ICPProfile
from app.repos.companies import isoformat

logger = logging.getLogger(__name__)

CONFIDENCE_LEVELS = ("high", "medium", "low")


def serialize_profile(profile: ICPProfile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "companyId": profile.company_id,
        "name": profile.name,
        "description": profile.description,
        "profileData": profile.profile_data,
        "confidenceLevel": profile.confidence_level,
        "createdAt": isoformat(profile.created_at),
        "updatedAt": isoformat(profile.updated_at),
    }


def profile_row_from_icp(icp: Dict[str, Any], company_id: Optional[int]) -> ICPProfile:
    """Map a generated ICP document onto a storable row."""
    confidence = str(icp.get("confidence") or "medium").lower()
    if confidence not in CONFIDENCE_LEVELS:
        confidence = "medium"
    return ICPProfile(
        company_id=company_id,
        name=icp.get("icp_name") or "Unnamed ICP",
        description=", ".join(icp.get("segments") or []),
        profile_data=icp,
        confidence_level=confidence,
    )


class ICPProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save_profiles_for_company(
        self, company_id: Optional[int], icps: List[Dict[str, Any]]
    ) -> List[ICPProfile]:
        rows = [profile_row_from_icp(icp, company_id) for icp in icps]
        self.session.add_all(rows)
        await self.session.flush()
        logger.info(f"Saved {len(rows)} ICP profiles for company {company_id}")
        return rows

    async def list_by_company(self, company_id: int) -> List[ICPProfile]:
        result = await self.session.execute(
            select(ICPProfile)
            .where(ICPProfile.company_id == company_id)
            .order_by(ICPProfile.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(self) -> List[ICPProfile]:
        result = await self.session.execute(select(ICPProfile).order_by(ICPProfile.created_at.desc()))
        return list(result.scalars().all())

    async def get_by_id(self, profile_id: str) -> Optional[ICPProfile]:
        return await self.session.get(ICPProfile, profile_id)

    async def delete_by_id(self, profile_id: str) -> bool:
        profile = await self.get_by_id(profile_id)
        if profile is None:
            return False
        await self.session.delete(profile)
        await self.session.flush()
        return True

    async def delete_by_company(self, company_id: int) -> int:
        result = await self.session.execute(delete(ICPProfile).where(ICPProfile.company_id == company_id))
        return result.rowcount or 0
