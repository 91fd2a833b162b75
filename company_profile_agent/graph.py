from langgraph.graph import StateGraph, START
from langgraph.checkpoint.memory import MemorySaver
from langgraph.prebuilt import ToolNode, tools_condition

from .state import CompanyProfileChatState
from .nodes import assistant_node
from .tools import TOOLS

"""
Company Profile Assistant Graph

Flow:
  START → Assistant ─┬─ tool calls → tools → Assistant
                     └── final answer → END
"""

workflow = StateGraph(CompanyProfileChatState)

workflow.add_node("Assistant", assistant_node)
workflow.add_node("tools", ToolNode(tools=TOOLS))

workflow.add_edge(START, "Assistant")
workflow.add_conditional_edges("Assistant", tools_condition)
workflow.add_edge("tools", "Assistant")

memory = MemorySaver()
company_profile_graph = workflow.compile(checkpointer=memory)
