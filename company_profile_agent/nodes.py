import logging
from typing import Any, Dict

from langchain_core.messages import SystemMessage

from app.core.llm_factory import get_ollama_llm
from app.models.company_profile import COMPANY_SIZE_OPTIONS, FIELD_LABELS, FIELD_ORDER
from app.prompts import COMPANY_PROFILE_ASSISTANT_PROMPT

from .state import CompanyProfileChatState
from .tools import TOOLS

logger = logging.getLogger(__name__)

# Initialize LLM with the form tools bound
llm = get_ollama_llm(temperature=0.3)
llm_with_tools = llm.bind_tools(TOOLS)


def build_system_prompt() -> str:
    field_list = "\n".join(
        f"{i}. {name}: {FIELD_LABELS[name]}" for i, name in enumerate(FIELD_ORDER, start=1)
    )
    return COMPANY_PROFILE_ASSISTANT_PROMPT.format(
        field_list=field_list,
        company_sizes=", ".join(COMPANY_SIZE_OPTIONS),
    )


async def assistant_node(state: CompanyProfileChatState) -> Dict[str, Any]:
    """
    Assistant (A): Talks to the user and decides which form tools to call.
    """
    print("--- [A] Company Profile Assistant Node ---")

    messages = [SystemMessage(content=build_system_prompt())] + list(state["messages"])
    response = await llm_with_tools.ainvoke(messages)
    return {"messages": [response]}
