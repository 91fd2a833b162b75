"""
Unit tests for the ICP generator graph nodes and routing
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from langchain_core.messages import AIMessage
from langgraph.graph import END

from app.core.errors import ICPGenerationError
from icp_generator_agent.graph import determine_next_node, icp_generator_graph
from icp_generator_agent.nodes import (
    build_icp_from_response,
    builder_node,
    classifier_node,
    format_company_data,
    template_selector_node,
)
from app.utils.state_factory import StateFactory

COMPANY = {
    "name": "TechFlow",
    "industry": "Software",
    "targetMarket": "Small businesses and startups",
    "valueProposition": "Automate busywork",
    "mainOfferings": "Workflow automation",
    "companySize": "11-50 employees",
}

BUILDER_RESPONSE = (
    "SEGMENTS: Seed-stage founders, Product teams\n"
    "PAINS: Manual handoffs, Slow releases\n"
    "JOBS: Automate approvals, Track work\n"
    "OUTCOMES: Faster delivery, Fewer errors\n"
    "CHANNELS: LinkedIn, Product Hunt\n"
)

TEMPLATE = {
    "id": "tech_startup",
    "name": "Tech Startup",
    "description": "Early-stage technology companies",
    "category": "startups",
}


def _llm_returning(*texts):
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(side_effect=[AIMessage(content=t) for t in texts])
    return mock_llm


def test_format_company_data_skips_empty_fields():
    text = format_company_data({"name": "Acme", "industry": "", "location": "Berlin", "website": "https://a.io"})
    assert text == "name: Acme\nlocation: Berlin"


class TestBuildIcpFromResponse:
    def test_parses_sections_and_fills_defaults(self):
        icp = build_icp_from_response(BUILDER_RESPONSE, COMPANY, TEMPLATE, "B2B")

        assert icp["icp_name"] == "Tech Startup"
        assert icp["template_id"] == "tech_startup"
        assert icp["business_model"] == "B2B"
        assert icp["icp_id"].startswith("icp_")
        assert icp["segments"] == ["Seed-stage founders", "Product teams"]
        assert icp["needs_pain_goals"]["pains"] == ["Manual handoffs", "Slow releases"]
        assert icp["needs_pain_goals"]["jobs_to_be_done"] == ["Automate approvals", "Track work"]
        assert icp["go_to_market"]["primary_channels"] == ["LinkedIn", "Product Hunt"]
        # Sections the model skipped fall back to defaults
        assert icp["common_objections"] == ["High upfront costs", "Implementation time", "ROI uncertainty"]
        assert icp["value_prop_alignment"]["value_prop"] == "Automate busywork"
        assert icp["fit_definition"]["company_attributes"]["company_sizes"] == ["11-50 employees"]
        assert icp["meta"]["source_company"] == "TechFlow"
        assert icp["confidence"] == "high"

    def test_missing_required_section_raises(self):
        with pytest.raises(ICPGenerationError) as exc_info:
            build_icp_from_response("SEGMENTS: Founders\nPAINS: Cost", COMPANY, TEMPLATE, "B2B")
        assert exc_info.value.code == "PARSING_FAILED"
        assert exc_info.value.details["missing"] == ["JOBS", "OUTCOMES"]

    def test_icp_ids_are_unique(self):
        first = build_icp_from_response(BUILDER_RESPONSE, COMPANY, TEMPLATE, "B2B")
        second = build_icp_from_response(BUILDER_RESPONSE, COMPANY, TEMPLATE, "B2B")
        assert first["icp_id"] != second["icp_id"]


@pytest.mark.asyncio
async def test_classifier_node_sets_business_model():
    state = StateFactory.create_icp_generator_state(1, COMPANY)
    result = await classifier_node(state)
    assert result["business_model"] == "B2B"
    assert "B2B" in result["messages"][0].content


@pytest.mark.asyncio
async def test_template_selector_node_resolves_templates():
    state = StateFactory.create_icp_generator_state(1, COMPANY)
    state["business_model"] = "B2B"
    mock_llm = _llm_returning('I suggest ["saas_startup", "tech_startup", "bogus"]')

    with patch("icp_generator_agent.nodes.llm", mock_llm):
        result = await template_selector_node(state)

    ids = [t["id"] for t in result["selected_templates"]]
    assert len(ids) == 3
    assert ids[:2] == ["saas_startup", "tech_startup"]
    assert result["current_template_index"] == 0
    prompt = mock_llm.ainvoke.call_args.args[0][0].content
    assert "TechFlow" in prompt
    assert "B2B" in prompt


@pytest.mark.asyncio
async def test_template_selector_node_rejects_unparseable_selection():
    state = StateFactory.create_icp_generator_state(1, COMPANY)
    state["business_model"] = "B2C"

    with patch("icp_generator_agent.nodes.llm", _llm_returning("gen_z and millennials")):
        with pytest.raises(ICPGenerationError) as exc_info:
            await template_selector_node(state)
    assert exc_info.value.code == "PARSING_FAILED"


@pytest.mark.asyncio
async def test_llm_failure_is_reported_as_unavailable():
    state = StateFactory.create_icp_generator_state(1, COMPANY)
    state["business_model"] = "B2B"
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(side_effect=ConnectionError("connection refused"))

    with patch("icp_generator_agent.nodes.llm", mock_llm):
        with pytest.raises(ICPGenerationError) as exc_info:
            await template_selector_node(state)
    assert exc_info.value.code == "LLM_UNAVAILABLE"


@pytest.mark.asyncio
async def test_builder_node_builds_current_template():
    state = StateFactory.create_icp_generator_state(1, COMPANY)
    state.update(business_model="B2B", selected_templates=[TEMPLATE, TEMPLATE], current_template_index=1)

    with patch("icp_generator_agent.nodes.llm", _llm_returning(BUILDER_RESPONSE)):
        result = await builder_node(state)

    assert result["current_template_index"] == 2
    assert len(result["generated_icps"]) == 1
    assert result["generated_icps"][0]["icp_name"] == "Tech Startup"


def test_determine_next_node():
    templates = [TEMPLATE, TEMPLATE, TEMPLATE]
    assert determine_next_node({"current_template_index": 1, "selected_templates": templates}) == "Builder"
    assert determine_next_node({"current_template_index": 3, "selected_templates": templates}) == END


@pytest.mark.asyncio
async def test_graph_generates_three_icps():
    mock_llm = _llm_returning(
        '["tech_startup", "saas_startup", "ai_startup"]',
        BUILDER_RESPONSE,
        BUILDER_RESPONSE,
        BUILDER_RESPONSE,
    )
    state = StateFactory.create_icp_generator_state(1, COMPANY)

    with patch("icp_generator_agent.nodes.llm", mock_llm):
        result = await icp_generator_graph.ainvoke(state)

    assert result["business_model"] == "B2B"
    assert [icp["template_id"] for icp in result["generated_icps"]] == ["tech_startup", "saas_startup", "ai_startup"]
    assert mock_llm.ainvoke.await_count == 4


def test_graph_keeps_no_checkpoints():
    assert icp_generator_graph.checkpointer is None
