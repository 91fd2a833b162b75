import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_icp_min_filled_fields
from app.core.database import session_scope
from app.core.errors import AppError, ICPGenerationError, InputValidator, NotFoundError
from app.models.company_profile import completion_progress
from app.models.db import Company
from app.repos.companies import CompanyRepository
from app.repos.icp_profiles import ICPProfileRepository, serialize_profile
from app.utils.sse import sse_event
from app.utils.state_factory import StateFactory
from icp_generator_agent.graph import icp_generator_graph

logger = logging.getLogger(__name__)


def check_readiness(company_data: Dict[str, Any], min_filled: Optional[int] = None) -> Dict[str, Any]:
    """Whether enough of the profile is filled to generate ICPs, and why not."""
    required = min_filled if min_filled is not None else get_icp_min_filled_fields()
    validation = InputValidator.validate_icp_generation_input(company_data, required)
    issue = validation.first_error()
    return {
        "canGenerate": validation.is_valid,
        "reason": issue.message if issue else None,
        "progress": completion_progress(company_data),
        "warnings": validation.warnings,
    }


async def load_company_for_icp(
    session: AsyncSession, company_id: Optional[int] = None, user_id: Optional[str] = None
) -> tuple[Company, Dict[str, Any]]:
    """Resolve the company (explicit id, else active, else first) and its fields."""
    repo = CompanyRepository(session, user_id)
    if company_id is not None:
        company = await repo.require_company(company_id)
    else:
        company = await repo.get_active_company() or await repo.get_first_company()
        if company is None:
            raise NotFoundError("No company found. Please create a company profile first.")

    data: Dict[str, Any] = await repo.get_company_data(company.id)
    if not str(data.get("name") or "").strip():
        data["name"] = company.name
    return company, data


def _ensure_ready(company_data: Dict[str, Any]) -> None:
    readiness = check_readiness(company_data)
    if not readiness["canGenerate"]:
        raise ICPGenerationError(
            readiness["reason"],
            code="INVALID_INPUT_DATA",
            details={"progress": readiness["progress"]},
        )


async def run_icp_graph(company_id: Optional[int], company_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    state = StateFactory.create_icp_generator_state(company_id, company_data)
    result = await icp_generator_graph.ainvoke(state)
    icps = result.get("generated_icps") or []
    if not icps:
        raise ICPGenerationError("No ICP profiles were generated")
    return icps


async def generate_icps(
    session: AsyncSession, company_id: Optional[int] = None, user_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Generate ICPs for a company and persist them. Returns the stored profiles."""
    company, company_data = await load_company_for_icp(session, company_id, user_id)
    _ensure_ready(company_data)

    icps = await run_icp_graph(company.id, company_data)
    rows = await ICPProfileRepository(session).save_profiles_for_company(company.id, icps)
    profiles = [serialize_profile(row) for row in rows]
    await session.commit()
    return profiles


async def icp_generation_event_generator(company_id: Optional[int] = None) -> AsyncGenerator[str, None]:
    """
    Generates SSE events for ICP generation.

    Flow:
    1. Load the company and its fields
    2. Check there is enough data
    3. Run the graph, reporting each node as it finishes
    4. Persist the profiles and emit done
    """
    try:
        # --- Step 1: Load company ---
        yield sse_event("status", status="fetching_company", agent="Retriever")
        async with session_scope() as session:
            company, company_data = await load_company_for_icp(session, company_id)

        # --- Step 2: Validate input ---
        readiness = check_readiness(company_data)
        if not readiness["canGenerate"]:
            yield sse_event(
                "error",
                error=readiness["reason"],
                code="INVALID_INPUT_DATA",
                progress=readiness["progress"],
            )
            return

        # --- Step 3: Run graph ---
        yield sse_event("status", status="classifying", agent="Classifier")
        state = StateFactory.create_icp_generator_state(company.id, company_data)
        icps: List[Dict[str, Any]] = []

        async for update in icp_generator_graph.astream(state, stream_mode="updates"):
            for node_name, output in update.items():
                if not output:
                    continue
                if node_name == "Classifier":
                    yield sse_event(
                        "status",
                        status="selecting_templates",
                        agent="TemplateSelector",
                        businessModel=output.get("business_model"),
                    )
                elif node_name == "TemplateSelector":
                    yield sse_event(
                        "status",
                        status="building_profiles",
                        agent="Builder",
                        templates=[t["name"] for t in output.get("selected_templates", [])],
                    )
                elif node_name == "Builder":
                    icps = output.get("generated_icps", icps)
                    yield sse_event("profile", profile=icps[-1], index=len(icps))

        if not icps:
            yield sse_event("error", error="No ICP profiles were generated", code="ICP_GENERATION_FAILED")
            return

        # --- Step 4: Persist ---
        yield sse_event("status", status="saving", agent="Saver")
        async with session_scope() as session:
            rows = await ICPProfileRepository(session).save_profiles_for_company(company.id, icps)
            profiles = [serialize_profile(row) for row in rows]

        yield sse_event("done", profiles=profiles)

    except AppError as e:
        logger.error(f"ICP generation failed ({e.code}): {e.message}")
        yield sse_event("error", error=e.message, code=e.code)
    except Exception as e:
        logger.error(f"Error in ICP event generator: {e}")
        yield sse_event("error", error=str(e), code="ICP_GENERATION_FAILED")
