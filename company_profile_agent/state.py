from typing import Annotated, Any, List, TypedDict

from langgraph.graph.message import add_messages


class CompanyProfileChatState(TypedDict):
    """State for the company profile assistant: the conversation and whose profile it edits."""
    messages: Annotated[List[Any], add_messages]
    user_id: str
