from typing import Annotated, Any, Dict, List, Optional, TypedDict

from langgraph.graph.message import add_messages


class ICPGeneratorState(TypedDict):
    """
    State for the ICP generation agent.

    Flow: Classifier → TemplateSelector → Builder (once per template) → END
    """
    messages: Annotated[List[Any], add_messages]

    # Input
    company_id: Optional[int]
    company_data: Dict[str, Any]

    # Set by Classifier
    business_model: str

    # Set by TemplateSelector (template dicts: id, name, description, category)
    selected_templates: List[Dict[str, str]]

    # Builder progress
    current_template_index: int
    generated_icps: List[Dict[str, Any]]
