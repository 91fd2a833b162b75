"""
Unit tests for the chat services and the company profile assistant tools
"""
import json
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from app.core.errors import AIServiceError, ValidationFailedError
from app.repos.companies import CompanyRepository
from app.services.chat import chat_event_generator, complete_chat, to_langchain_messages
from company_profile_agent.nodes import build_system_prompt
from company_profile_agent.tools import (
    TOOLS,
    batch_update_fields,
    get_current_form_data,
    get_smart_suggestions,
    reset_form,
    update_form_field,
    validate_form_completion,
)


class AsyncIteratorMock:
    """Helper class to mock async iterators"""
    def __init__(self, items):
        self.items = items
        self.index = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.index >= len(self.items):
            raise StopAsyncIteration
        item = self.items[self.index]
        self.index += 1
        return item


def _collect_events(raw_events):
    return [json.loads(e.replace("data: ", "").strip()) for e in raw_events]


def test_to_langchain_messages_prepends_system_prompt():
    messages = to_langchain_messages([
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello!"},
    ])
    assert isinstance(messages[0], SystemMessage)
    assert isinstance(messages[1], HumanMessage)
    assert isinstance(messages[2], AIMessage)
    assert messages[2].content == "Hello!"


def test_to_langchain_messages_rejects_unknown_role():
    with pytest.raises(ValidationFailedError) as exc_info:
        to_langchain_messages([{"role": "robot", "content": "beep"}])
    assert exc_info.value.code == "INVALID_MESSAGES"


@pytest.mark.asyncio
async def test_complete_chat_returns_reply():
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(return_value=AIMessage(content="An ICP is your ideal customer."))

    with patch("app.services.chat.get_ollama_llm", return_value=mock_llm):
        reply = await complete_chat([{"role": "user", "content": "What is an ICP?"}])

    assert reply == {"role": "assistant", "content": "An ICP is your ideal customer."}


@pytest.mark.asyncio
async def test_complete_chat_requires_messages():
    with pytest.raises(ValidationFailedError, match="Messages array is required"):
        await complete_chat([])


@pytest.mark.asyncio
async def test_complete_chat_wraps_llm_errors():
    mock_llm = MagicMock()
    mock_llm.ainvoke = AsyncMock(side_effect=ConnectionError("refused"))

    with patch("app.services.chat.get_ollama_llm", return_value=mock_llm):
        with pytest.raises(AIServiceError) as exc_info:
            await complete_chat([{"role": "user", "content": "Hi"}])
    assert exc_info.value.code == "LLM_UNAVAILABLE"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_chat_event_generator_maps_graph_events():
    chunk = MagicMock()
    chunk.content = "Saved your industry."
    tool_output = MagicMock()
    tool_output.content = '{"success": true}'
    graph_events = [
        {"event": "on_chat_model_start", "metadata": {"langgraph_node": "Assistant"}, "data": {}},
        {"event": "on_tool_start", "name": "update_form_field", "data": {"input": {"field": "industry"}}},
        {"event": "on_tool_end", "name": "update_form_field", "data": {"output": tool_output}},
        {"event": "on_chat_model_stream", "data": {"chunk": chunk}},
    ]

    with patch("app.services.chat.company_profile_graph") as mock_graph:
        mock_graph.astream_events = MagicMock(return_value=AsyncIteratorMock(graph_events))
        events = _collect_events([e async for e in chat_event_generator("We sell SaaS", "t1")])

    assert [e["type"] for e in events] == ["status", "tool_start", "tool_end", "chunk", "done"]
    assert events[0]["agent"] == "Assistant"
    assert events[1]["input"] == {"field": "industry"}
    assert events[2]["output"] == '{"success": true}'
    assert events[3]["content"] == "Saved your industry."

    config = mock_graph.astream_events.call_args.kwargs["config"]
    assert config == {"configurable": {"thread_id": "t1"}}


@pytest.mark.asyncio
async def test_chat_event_generator_reports_errors():
    with patch("app.services.chat.company_profile_graph") as mock_graph:
        mock_graph.astream_events = MagicMock(side_effect=RuntimeError("graph exploded"))
        events = _collect_events([e async for e in chat_event_generator("Hi", "t2")])
    assert events == [{"type": "error", "error": "graph exploded"}]


def test_system_prompt_lists_fields():
    prompt = build_system_prompt()
    assert "companySize" in prompt
    assert "Startup (1-10 employees)" in prompt


def test_tool_names():
    assert [t.name for t in TOOLS] == [
        "get_current_form_data",
        "update_form_field",
        "batch_update_fields",
        "get_smart_suggestions",
        "validate_form_completion",
        "reset_form",
    ]


@pytest.mark.asyncio
async def test_tools_fill_and_reset_the_form(db_session):
    rejected = json.loads(await update_form_field.ainvoke({"field": "website", "value": "acme.com"}))
    assert rejected["success"] is False
    assert rejected["suggestion"] == "Try: https://acme.com"

    saved = json.loads(await update_form_field.ainvoke({"field": "industry", "value": " Retail "}))
    assert saved["success"] is True
    assert saved["value"] == "Retail"
    assert saved["progress"]["filled"] == 2

    batch = json.loads(await batch_update_fields.ainvoke({
        "fields": {"location": "Europe", "companySize": "huge", "website": "https://acme.com"},
    }))
    assert batch["summary"] == {"total": 3, "successful": 2, "failed": 1}

    state = json.loads(await get_current_form_data.ainvoke({}))
    assert state["currentData"]["location"] == "Europe"
    assert state["nextField"] == "social"
    assert state["progress"]["filled"] == 4

    completion = json.loads(await validate_form_completion.ainvoke({}))
    assert completion["isValid"] is False
    assert "companySize" in completion["missingFields"]

    suggestions = json.loads(await get_smart_suggestions.ainvoke({"field": "location"}))
    assert suggestions["reasoning"] == "Based on your website, consider these target markets"

    reset = json.loads(await reset_form.ainvoke({}))
    assert reset["success"] is True
    assert reset["removed"] == 4
    state = json.loads(await get_current_form_data.ainvoke({}))
    assert state["currentData"] == {}


@pytest.mark.asyncio
async def test_tools_act_for_the_user_in_graph_state(db_session):
    other_user = "22222222-2222-2222-2222-222222222222"
    # Hidden from the model, supplied from state by the tool node
    assert "user_id" not in update_form_field.tool_call_schema.model_json_schema()["properties"]

    saved = json.loads(await update_form_field.ainvoke({"field": "industry", "value": "Retail", "user_id": other_user}))
    assert saved["success"] is True

    other = CompanyRepository(db_session, other_user)
    company = await other.get_first_company()
    assert company.name == "Default Company"
    assert (await other.get_company_data(company.id))["industry"] == "Retail"
    assert await CompanyRepository(db_session).get_first_company() is None

    state = json.loads(await get_current_form_data.ainvoke({"user_id": other_user}))
    assert state["currentData"]["industry"] == "Retail"
