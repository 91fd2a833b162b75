import logging
import time
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, List

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from app.core.errors import ICPGenerationError
from app.core.llm_factory import get_ollama_llm
from app.prompts import ICP_BUILDER_PROMPT, ICP_BUILDER_SYSTEM_PROMPT, TEMPLATE_SELECTOR_PROMPT
from app.utils.llm import extract_json_array, parse_labeled_list, parse_labeled_value

from .rules import determine_business_model
from .state import ICPGeneratorState
from .templates import ICPTemplate, format_catalog, get_templates

logger = logging.getLogger(__name__)

# Initialize LLM
llm = get_ollama_llm(temperature=0.3)

TEMPLATES_PER_RUN = 3

# Company fields shown to the template selector
SELECTOR_FIELDS = [
    "name",
    "industry",
    "targetMarket",
    "valueProposition",
    "mainOfferings",
    "pricingModel",
    "marketSegment",
    "companySize",
    "location",
]

REQUIRED_SECTIONS = ["SEGMENTS", "PAINS", "JOBS", "OUTCOMES"]


def _response_text(response: Any) -> str:
    content = getattr(response, "content", response)
    return content if isinstance(content, str) else str(content)


def format_company_data(company_data: Dict[str, Any]) -> str:
    lines = []
    for field_name in SELECTOR_FIELDS:
        value = company_data.get(field_name)
        if value:
            lines.append(f"{field_name}: {value}")
    return "\n".join(lines)


def resolve_selected_templates(selected_ids: List[Any], available: List[ICPTemplate]) -> List[ICPTemplate]:
    """Map ids to catalog templates and pad from the catalog to exactly three.

    Unknown and duplicate ids are dropped.
    """
    by_id = {t.id: t for t in available}
    selected: List[ICPTemplate] = []
    for template_id in selected_ids:
        template = by_id.get(template_id) if isinstance(template_id, str) else None
        if template and template not in selected:
            selected.append(template)

    for template in available:
        if len(selected) >= TEMPLATES_PER_RUN:
            break
        if template not in selected:
            selected.append(template)

    return selected[:TEMPLATES_PER_RUN]


def build_icp_from_response(
    response_text: str,
    company_data: Dict[str, Any],
    template: Dict[str, str],
    business_model: str,
) -> Dict[str, Any]:
    """Turn the labeled-section response into a full ICP document.

    SEGMENTS, PAINS, JOBS and OUTCOMES are required; the other sections fall
    back to generic defaults.
    """
    sections = {label: parse_labeled_list(response_text, label) for label in REQUIRED_SECTIONS}
    missing = [label for label, items in sections.items() if not items]
    if missing:
        logger.error(f"ICP response for {template['name']} is missing sections: {missing}")
        raise ICPGenerationError(
            "ICP generation failed: AI did not provide all required sections",
            code="PARSING_FAILED",
            details={"template": template["id"], "missing": missing},
        )

    triggers = parse_labeled_list(response_text, "TRIGGERS")
    objections = parse_labeled_list(response_text, "OBJECTIONS")
    value_prop = parse_labeled_value(response_text, "VALUE_PROP")
    features = parse_labeled_list(response_text, "FEATURES")
    advantages = parse_labeled_list(response_text, "ADVANTAGES")
    channels = parse_labeled_list(response_text, "CHANNELS")
    messages = parse_labeled_list(response_text, "MESSAGES")
    content = parse_labeled_list(response_text, "CONTENT")

    company_size = company_data.get("companySize")
    return {
        "icp_id": f"icp_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
        "icp_name": template["name"],
        "template_id": template["id"],
        "business_model": business_model,
        "meta": {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "source_company": company_data.get("name") or "Unknown Company",
        },
        "segments": sections["SEGMENTS"],
        "fit_definition": {
            "company_attributes": {
                "industries": [company_data.get("industry") or "Technology"],
                "company_sizes": [company_size] if company_size else ["Small Business", "Medium Business"],
                "geographies": ["Global"],
                "tech_stack_hints": ["Modern SaaS", "Cloud-based"],
            },
            "buyer_personas": [
                {
                    "role": "Decision Maker",
                    "seniority": "Mid-level",
                    "dept": "Operations",
                    "decision_power": "decision maker",
                }
            ],
        },
        "needs_pain_goals": {
            "pains": sections["PAINS"],
            "jobs_to_be_done": sections["JOBS"],
            "desired_outcomes": sections["OUTCOMES"],
        },
        "buying_triggers": triggers or ["Business expansion", "Technology upgrade", "Cost pressure"],
        "common_objections": objections or ["High upfront costs", "Implementation time", "ROI uncertainty"],
        "value_prop_alignment": {
            "value_prop": value_prop or company_data.get("valueProposition") or "Comprehensive business solutions",
            "unique_features": features or ["AI-powered", "Cloud-based", "Scalable"],
            "competitive_advantages": advantages or ["Advanced technology", "Proven track record", "Expert support"],
        },
        "offerings_pricing": {
            "main_offerings": company_data.get("mainOfferings") or "Software solutions",
            "pricing_model": company_data.get("pricingModel") or "Subscription-based",
            "pricing_tiers": ["Basic", "Professional", "Enterprise"],
        },
        "go_to_market": {
            "primary_channels": channels or ["LinkedIn", "Email Marketing", "Content Marketing"],
            "messages": messages
            or [
                "Transform your business with our solutions",
                "Join industry leaders who trust us",
                "See results in 30 days or less",
            ],
            "content_ideas": content
            or [
                "Case studies from similar companies",
                "Industry trend reports",
                "Best practice guides",
            ],
        },
        "fit_scoring": {
            "score": 85,
            "score_breakdown": {
                "industry_fit": 90,
                "size_fit": 85,
                "geo_fit": 80,
                "pain_alignment": 85,
                "goal_alignment": 90,
            },
        },
        "abm_tier": "Tier 1",
        "confidence": "high",
    }


async def _call_llm(messages: List[Any]) -> str:
    try:
        response = await llm.ainvoke(messages)
    except Exception as e:
        logger.error(f"LLM call failed: {e}")
        raise ICPGenerationError(f"LLM unavailable: {e}", code="LLM_UNAVAILABLE") from e
    return _response_text(response)


async def classifier_node(state: ICPGeneratorState) -> Dict[str, Any]:
    """
    Classifier (C): Derives the business model from the company's market fields.
    """
    print("--- [C] ICP Classifier Node ---")

    business_model = determine_business_model(state.get("company_data", {}))
    logger.info(f"Business model for company {state.get('company_id')}: {business_model}")
    return {
        "business_model": business_model,
        "messages": [AIMessage(content=f"Business model: {business_model}")],
    }


async def template_selector_node(state: ICPGeneratorState) -> Dict[str, Any]:
    """
    TemplateSelector (S): Asks the LLM for the three best-fitting templates.
    """
    print("--- [S] ICP Template Selector Node ---")

    business_model = state["business_model"]
    available = get_templates(business_model)
    prompt = TEMPLATE_SELECTOR_PROMPT.format(
        template_count=len(available),
        company_data=format_company_data(state.get("company_data", {})),
        business_model=business_model,
        template_catalog=format_catalog(available),
    )

    response_text = await _call_llm([HumanMessage(content=prompt)])

    try:
        selected_ids = extract_json_array(response_text)
    except ValueError as e:
        logger.error(f"Template selection parse failed: {e}. Raw: {response_text[:200]}")
        raise ICPGenerationError(
            f"Failed to parse template selection: {e}",
            code="PARSING_FAILED",
            details={"raw": response_text[:200]},
        ) from e

    selected = resolve_selected_templates(selected_ids, available)
    logger.info(f"Selected ICP templates: {', '.join(t.name for t in selected)}")
    return {
        "selected_templates": [asdict(t) for t in selected],
        "current_template_index": 0,
        "generated_icps": [],
        "messages": [AIMessage(content=f"Selected templates: {', '.join(t.id for t in selected)}")],
    }


async def builder_node(state: ICPGeneratorState) -> Dict[str, Any]:
    """
    Builder (B): Generates one ICP for the current template.
    """
    print("--- [B] ICP Builder Node ---")

    index = state.get("current_template_index", 0)
    template = state["selected_templates"][index]
    company_data = state.get("company_data", {})
    business_model = state["business_model"]

    prompt = ICP_BUILDER_PROMPT.format(
        template_name=template["name"],
        template_description=template["description"],
        business_model=business_model,
        name=company_data.get("name") or "Unknown Company",
        industry=company_data.get("industry") or "Technology",
        target_market=company_data.get("targetMarket") or "Businesses",
        value_proposition=company_data.get("valueProposition") or "Software solutions",
        main_offerings=company_data.get("mainOfferings") or "Software services",
        pricing_model=company_data.get("pricingModel") or "Subscription-based",
        company_size=company_data.get("companySize") or "Small to Medium Business",
        market_segment=company_data.get("marketSegment") or "B2B",
        unique_features=company_data.get("uniqueFeatures") or "Innovative technology",
        competitive_advantages=company_data.get("competitiveAdvantages") or "Proven track record",
        current_customers=company_data.get("currentCustomers") or "Various businesses",
        pain_points_solved=company_data.get("painPointsSolved") or "Operational inefficiencies",
        customer_goals=company_data.get("customerGoals") or "Improve efficiency and reduce costs",
    )

    response_text = await _call_llm([
        SystemMessage(content=ICP_BUILDER_SYSTEM_PROMPT),
        HumanMessage(content=prompt),
    ])

    icp = build_icp_from_response(response_text, company_data, template, business_model)
    return {
        "generated_icps": list(state.get("generated_icps", [])) + [icp],
        "current_template_index": index + 1,
        "messages": [AIMessage(content=f"Generated ICP: {icp['icp_name']}")],
    }
