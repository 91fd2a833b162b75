import json
import logging
from typing import Any, AsyncGenerator, Dict, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import session_scope
from app.core.errors import AppError, CampaignGenerationError, NotFoundError
from app.core.llm_factory import get_ollama_llm
from app.models.db import ICPProfile
from app.prompts import CAMPAIGN_PROMPT, CAMPAIGN_SYSTEM_PROMPT
from app.repos.campaigns import CampaignRepository, serialize_campaign
from app.repos.companies import CompanyRepository
from app.repos.icp_profiles import ICPProfileRepository
from app.utils.llm import normalize_hooks, parse_campaign_payload
from app.utils.sse import sse_event

logger = logging.getLogger(__name__)

COPY_STYLES = ("facts", "humour", "smart", "emotional", "professional")
MEDIA_TYPES = ("google-ads", "linkedin", "email", "print", "social-media")


def build_icp_summary(icp_data: Dict[str, Any]) -> Dict[str, Any]:
    """Compact view of the ICP; lists are capped at three items to keep the prompt short."""
    needs = icp_data.get("needs_pain_goals") or {}
    return {
        "name": icp_data.get("icp_name"),
        "businessModel": icp_data.get("business_model"),
        "segments": (icp_data.get("segments") or [])[:3],
        "painPoints": (needs.get("pains") or [])[:3],
        "goals": (needs.get("desired_outcomes") or [])[:3],
        "buyingTriggers": (icp_data.get("buying_triggers") or [])[:3],
    }


def build_company_summary(company: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not company:
        return None
    return {
        "name": company.get("name"),
        "industry": company.get("industry"),
        "valueProposition": company.get("valueProposition"),
        "mainOfferings": company.get("mainOfferings"),
    }


def build_campaign_prompt(
    icp_data: Dict[str, Any],
    company_summary: Optional[Dict[str, Any]],
    copy_style: str,
    media_type: str,
    image_prompt: Optional[str] = None,
    campaign_details: Optional[str] = None,
) -> str:
    return CAMPAIGN_PROMPT.format(
        media_type=media_type,
        copy_style=copy_style,
        icp_summary=json.dumps(build_icp_summary(icp_data), indent=2),
        company_section=f"COMPANY: {json.dumps(company_summary, indent=2)}" if company_summary else "",
        image_section=f"IMAGE CONTEXT: {image_prompt}" if image_prompt else "",
        details_section=f"CAMPAIGN DETAILS: {campaign_details}" if campaign_details else "",
    )


def build_campaign_values(
    parsed: Dict[str, Any],
    icp_id: str,
    copy_style: str,
    media_type: str,
    image_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """Column values for a new campaign row from the parsed model output."""
    return {
        "name": f"Campaign for {media_type}",
        "icp_id": icp_id,
        "copy_style": copy_style,
        "media_type": media_type,
        "ad_copy": parsed.get("adCopy") or "",
        "image_prompt": image_prompt or parsed.get("imageSuggestion") or None,
        "cta": parsed.get("cta") or "",
        "hooks": normalize_hooks(parsed.get("hooks")),
        "landing_page_copy": parsed.get("landingPageCopy") or "",
    }


async def load_campaign_context(
    session: AsyncSession, icp_id: str
) -> tuple[ICPProfile, Optional[Dict[str, Any]]]:
    """Fetch the ICP (required) and a company summary (optional context)."""
    profile = await ICPProfileRepository(session).get_by_id(icp_id)
    if profile is None:
        raise NotFoundError(f"ICP profile with id {icp_id} not found")

    company_summary = None
    if profile.company_id is not None:
        try:
            company = await CompanyRepository(session).get_company_with_data(profile.company_id)
            company_summary = build_company_summary(company)
        except Exception as e:
            logger.warning(f"Company context unavailable for ICP {icp_id}: {e}")
    else:
        logger.warning(f"No company ID found for ICP {icp_id}")
    return profile, company_summary


def _campaign_messages(prompt: str) -> list:
    return [
        SystemMessage(content=CAMPAIGN_SYSTEM_PROMPT),
        HumanMessage(content=prompt),
    ]


async def generate_campaign(
    session: AsyncSession,
    icp_id: str,
    copy_style: str,
    media_type: str,
    image_prompt: Optional[str] = None,
    campaign_details: Optional[str] = None,
) -> Dict[str, Any]:
    """Generate and store a campaign in one call. Returns the stored campaign."""
    profile, company_summary = await load_campaign_context(session, icp_id)
    prompt = build_campaign_prompt(
        profile.profile_data or {}, company_summary, copy_style, media_type, image_prompt, campaign_details
    )

    llm = get_ollama_llm(temperature=0.7)
    try:
        response = await llm.ainvoke(_campaign_messages(prompt))
    except Exception as e:
        logger.error(f"LLM call failed: {e}")
        raise CampaignGenerationError(f"LLM unavailable: {e}", code="LLM_UNAVAILABLE") from e
    parsed = parse_campaign_payload(str(response.content))

    campaign = await CampaignRepository(session).create(
        **build_campaign_values(parsed, icp_id, copy_style, media_type, image_prompt)
    )
    result = serialize_campaign(campaign)
    await session.commit()
    return result


async def campaign_event_generator(
    icp_id: str,
    copy_style: str,
    media_type: str,
    image_prompt: Optional[str] = None,
    campaign_details: Optional[str] = None,
) -> AsyncGenerator[str, None]:
    """
    Generates SSE events for campaign creation.

    Flow:
    1. Fetch the ICP and company context
    2. Build prompt
    3. Stream LLM tokens
    4. Parse (falling back to a placeholder campaign) and persist
    """
    try:
        # --- Step 1: Fetch ICP ---
        yield sse_event("status", status="fetching_icp", agent="CampaignCreator")
        async with session_scope() as session:
            profile, company_summary = await load_campaign_context(session, icp_id)
            icp_data = profile.profile_data or {}

        # --- Step 2: Build prompt ---
        yield sse_event("status", status="generating", agent="CampaignCreator")
        prompt = build_campaign_prompt(
            icp_data, company_summary, copy_style, media_type, image_prompt, campaign_details
        )
        llm = get_ollama_llm(temperature=0.7)

        # --- Step 3: Stream tokens ---
        full_content = ""
        try:
            async for chunk in llm.astream(_campaign_messages(prompt)):
                if chunk.content:
                    full_content += chunk.content
                    yield sse_event("chunk", content=chunk.content)
        except Exception as e:
            logger.error(f"LLM stream failed: {e}")
            raise CampaignGenerationError(f"LLM unavailable: {e}", code="LLM_UNAVAILABLE") from e

        # --- Step 4: Parse and persist ---
        parsed = parse_campaign_payload(full_content)
        yield sse_event("status", status="saving", agent="CampaignCreator")
        async with session_scope() as session:
            campaign = await CampaignRepository(session).create(
                **build_campaign_values(parsed, icp_id, copy_style, media_type, image_prompt)
            )
            stored = serialize_campaign(campaign)

        yield sse_event("done", campaign=stored, imageSuggestion=parsed.get("imageSuggestion"))

    except AppError as e:
        logger.error(f"Campaign generation failed ({e.code}): {e.message}")
        yield sse_event("error", error=e.message, code=e.code)
    except Exception as e:
        logger.error(f"Error in campaign event generator: {e}")
        yield sse_event("error", error=str(e), code="CAMPAIGN_GENERATION_FAILED")
