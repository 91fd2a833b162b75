from langgraph.graph import StateGraph, START, END

from .state import ICPGeneratorState
from .nodes import (
    classifier_node,
    template_selector_node,
    builder_node,
)

"""
ICP Generator Agent Graph

Flow:
  START → Classifier → TemplateSelector → Builder ─┬─ Next template → Builder
                                                   └── All built → END
"""

# 1. Create the graph
workflow = StateGraph(ICPGeneratorState)

# 2. Add nodes
workflow.add_node("Classifier", classifier_node)
workflow.add_node("TemplateSelector", template_selector_node)
workflow.add_node("Builder", builder_node)

# 3. Add edges
workflow.add_edge(START, "Classifier")
workflow.add_edge("Classifier", "TemplateSelector")
workflow.add_edge("TemplateSelector", "Builder")


# Conditional edges from Builder
def determine_next_node(state: ICPGeneratorState):
    index = state.get("current_template_index", 0)
    if index < len(state.get("selected_templates", [])):
        return "Builder"
    return END


workflow.add_conditional_edges(
    "Builder",
    determine_next_node,
    {
        "Builder": "Builder",
        END: END,
    },
)

# 4. Compile the graph; runs are never resumed, so nothing is checkpointed
icp_generator_graph = workflow.compile()
