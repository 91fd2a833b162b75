import logging
from typing import AsyncGenerator, Dict, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.core.config import get_default_user_id
from app.core.errors import AIServiceError, ValidationFailedError
from app.core.llm_factory import get_ollama_llm
from app.prompts import CHAT_SYSTEM_PROMPT
from app.utils.sse import sse_event
from app.utils.state_factory import StateFactory
from company_profile_agent.graph import company_profile_graph

logger = logging.getLogger(__name__)

_ROLE_TO_MESSAGE = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


async def chat_event_generator(message: str, thread_id: str) -> AsyncGenerator[str, None]:
    """
    Generates Server-Sent Events (SSE) from the company profile assistant graph.
    """
    inputs = StateFactory.create_company_profile_chat_state(message, get_default_user_id())
    config = {"configurable": {"thread_id": thread_id}}

    try:
        async for event in company_profile_graph.astream_events(inputs, config=config, version="v2"):
            event_type = event["event"]

            # 1. Assistant thinking
            if event_type == "on_chat_model_start":
                metadata = event.get("metadata", {})
                yield sse_event("status", status="thinking", agent=metadata.get("langgraph_node", "Assistant"))

            # 2. Tool execution start
            elif event_type == "on_tool_start":
                yield sse_event("tool_start", tool=event["name"], input=event["data"].get("input"))

            # 3. Tool execution end
            elif event_type == "on_tool_end":
                output = event["data"].get("output")
                content = getattr(output, "content", output)
                yield sse_event("tool_end", tool=event["name"], output=str(content))

            # 4. Streaming tokens
            elif event_type == "on_chat_model_stream":
                chunk = event["data"]["chunk"]
                if chunk.content:
                    yield sse_event("chunk", content=chunk.content)

        yield sse_event("done")

    except Exception as e:
        logger.error(f"Error in chat event generator: {e}")
        yield sse_event("error", error=str(e))


def to_langchain_messages(messages: List[Dict[str, str]]) -> List[BaseMessage]:
    """Convert ``{role, content}`` dicts; unknown roles are rejected."""
    converted: List[BaseMessage] = [SystemMessage(content=CHAT_SYSTEM_PROMPT)]
    for item in messages:
        message_cls = _ROLE_TO_MESSAGE.get(item.get("role", ""))
        if message_cls is None:
            raise ValidationFailedError(f"Unsupported message role: {item.get('role')}", code="INVALID_MESSAGES")
        converted.append(message_cls(content=item.get("content", "")))
    return converted


async def complete_chat(messages: List[Dict[str, str]]) -> Dict[str, str]:
    """Forward a conversation to the LLM and return the assistant reply."""
    if not messages:
        raise ValidationFailedError("Messages array is required", code="INVALID_MESSAGES")

    conversation = to_langchain_messages(messages)
    llm = get_ollama_llm(temperature=0.7)
    try:
        response = await llm.ainvoke(conversation)
    except Exception as e:
        logger.error(f"Chat completion failed: {e}")
        raise AIServiceError(f"Failed to get AI response: {e}", code="LLM_UNAVAILABLE") from e

    return {"role": "assistant", "content": str(response.content)}
