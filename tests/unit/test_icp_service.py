"""
Unit tests for the ICP service (readiness, SSE stream, persistence)
"""
import json
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from langchain_core.messages import AIMessage

from app.core.errors import ICPGenerationError, NotFoundError
from app.repos.companies import CompanyRepository
from app.repos.icp_profiles import ICPProfileRepository
from app.services.icp import (
    check_readiness,
    generate_icps,
    icp_generation_event_generator,
    load_company_for_icp,
)

COMPANY_FIELDS = {
    "industry": "Software",
    "targetMarket": "Small businesses",
    "valueProposition": "Automate busywork",
    "mainOfferings": "Workflow automation",
    "location": "Europe",
}

BUILDER_RESPONSE = (
    "SEGMENTS: Founders, Ops leads\n"
    "PAINS: Manual work\n"
    "JOBS: Automate approvals\n"
    "OUTCOMES: Save time\n"
)


def _collect_events(raw_events):
    return [json.loads(e.replace("data: ", "").strip()) for e in raw_events]


def _mock_llm():
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(side_effect=[
        AIMessage(content='["tech_startup", "saas_startup", "smb_optimizer"]'),
        AIMessage(content=BUILDER_RESPONSE),
        AIMessage(content=BUILDER_RESPONSE),
        AIMessage(content=BUILDER_RESPONSE),
    ])
    return mock_llm


async def _create_company(session, fields=COMPANY_FIELDS, select=True):
    repo = CompanyRepository(session)
    company = await repo.create_company("TechFlow", fields)
    if select:
        await repo.select_company(company.id)
    await session.commit()
    return company


def test_check_readiness():
    ready = check_readiness({"name": "A", **COMPANY_FIELDS}, min_filled=5)
    assert ready["canGenerate"] is True
    assert ready["reason"] is None
    assert ready["progress"]["filled"] == 6

    not_ready = check_readiness({"name": "A"}, min_filled=5)
    assert not_ready["canGenerate"] is False
    assert "at least 5" in not_ready["reason"]


@pytest.mark.asyncio
async def test_load_company_for_icp_without_companies(db_session):
    with pytest.raises(NotFoundError, match="No company found"):
        await load_company_for_icp(db_session)


@pytest.mark.asyncio
async def test_load_company_for_icp_uses_active_company(db_session):
    await _create_company(db_session, select=False)
    active = await _create_company(db_session, {"industry": "Retail"})
    company, data = await load_company_for_icp(db_session)
    assert company.id == active.id
    assert data == {"name": "TechFlow", "industry": "Retail"}


@pytest.mark.asyncio
async def test_event_generator_full_flow(db_session):
    company = await _create_company(db_session)

    with patch("icp_generator_agent.nodes.llm", _mock_llm()):
        events = _collect_events([e async for e in icp_generation_event_generator(company.id)])

    statuses = [e["status"] for e in events if e["type"] == "status"]
    assert statuses == ["fetching_company", "classifying", "selecting_templates", "building_profiles", "saving"]

    selecting = next(e for e in events if e.get("status") == "selecting_templates")
    assert selecting["businessModel"] == "B2B"
    building = next(e for e in events if e.get("status") == "building_profiles")
    assert building["templates"] == ["Tech Startup", "SaaS Startup", "SMB Optimizer"]

    profile_events = [e for e in events if e["type"] == "profile"]
    assert [e["index"] for e in profile_events] == [1, 2, 3]

    done = events[-1]
    assert done["type"] == "done"
    assert len(done["profiles"]) == 3
    assert done["profiles"][0]["companyId"] == company.id
    assert done["profiles"][0]["description"] == "Founders, Ops leads"
    assert done["profiles"][0]["confidenceLevel"] == "high"

    stored = await ICPProfileRepository(db_session).list_by_company(company.id)
    assert len(stored) == 3


@pytest.mark.asyncio
async def test_event_generator_insufficient_data(db_session):
    company = await _create_company(db_session, {"industry": "Retail"})
    mock_llm = _mock_llm()

    with patch("icp_generator_agent.nodes.llm", mock_llm):
        events = _collect_events([e async for e in icp_generation_event_generator(company.id)])

    error = events[-1]
    assert error["type"] == "error"
    assert error["code"] == "INVALID_INPUT_DATA"
    assert error["progress"]["filled"] == 2
    mock_llm.ainvoke.assert_not_called()


@pytest.mark.asyncio
async def test_event_generator_unknown_company(db_session):
    events = _collect_events([e async for e in icp_generation_event_generator(999)])
    assert events[-1] == {"type": "error", "error": "Company 999 not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_event_generator_reports_parse_failure(db_session):
    company = await _create_company(db_session)
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(return_value=AIMessage(content="I would pick the startup ones"))

    with patch("icp_generator_agent.nodes.llm", mock_llm):
        events = _collect_events([e async for e in icp_generation_event_generator(company.id)])

    assert events[-1]["type"] == "error"
    assert events[-1]["code"] == "PARSING_FAILED"
    assert await ICPProfileRepository(db_session).list_by_company(company.id) == []


@pytest.mark.asyncio
async def test_generate_icps_persists_profiles(db_session):
    company = await _create_company(db_session)

    with patch("icp_generator_agent.nodes.llm", _mock_llm()):
        profiles = await generate_icps(db_session, company.id)

    assert [p["name"] for p in profiles] == ["Tech Startup", "SaaS Startup", "SMB Optimizer"]
    assert all(p["profileData"]["business_model"] == "B2B" for p in profiles)


@pytest.mark.asyncio
async def test_generate_icps_rejects_sparse_profile(db_session):
    company = await _create_company(db_session, {})
    with pytest.raises(ICPGenerationError) as exc_info:
        await generate_icps(db_session, company.id)
    assert exc_info.value.code == "INVALID_INPUT_DATA"
    assert exc_info.value.status_code == 400
