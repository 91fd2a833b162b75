import json
import logging
from typing import Annotated, Dict, Optional

from langchain_core.tools import tool
from langgraph.prebuilt import InjectedState

from app.core.database import session_scope
from app.models.company_profile import (
    completion_progress,
    smart_suggestions,
    validate_field_input,
    validate_form_data,
)
from app.services.company_data import CompanyDataService

logger = logging.getLogger(__name__)

# Filled in by ToolNode from the graph state; direct calls fall back to the default user
StateUserId = Annotated[Optional[str], InjectedState("user_id")]


@tool
async def get_current_form_data(user_id: StateUserId = None) -> str:
    """
    Get the current values of all company profile fields.

    Returns:
        A JSON string with currentData, filledFields, nextField, isComplete and progress.
    """
    async with session_scope() as session:
        state = await CompanyDataService(session, user_id).get_current_data()
    state["progress"] = completion_progress(state["currentData"])
    return json.dumps(state)


@tool
async def update_form_field(field: str, value: str, user_id: StateUserId = None) -> str:
    """
    Validate and save one company profile field.

    Args:
        field: The camelCase field name, e.g. "industry" or "companySize".
        value: The value to store.

    Returns:
        A JSON string with success, the saved value and the new progress, or the validation error and a suggestion.
    """
    validation = validate_field_input(field, value)
    if not validation["is_valid"]:
        return json.dumps({
            "success": False,
            "field": field,
            "value": value,
            "message": validation["error"],
            "suggestion": validation["suggestion"],
        })

    async with session_scope() as session:
        service = CompanyDataService(session, user_id)
        result = await service.update_field(field, value.strip())
        progress = await service.get_completion_progress()

    logger.info(f"Assistant updated {field}")
    return json.dumps({"success": True, **result, "progress": progress})


@tool
async def batch_update_fields(fields: Dict[str, str], user_id: StateUserId = None) -> str:
    """
    Validate and save several company profile fields at once.

    Args:
        fields: Mapping of camelCase field name to value.

    Returns:
        A JSON string with a per-field result list and a summary of successes and failures.
    """
    results = []
    async with session_scope() as session:
        service = CompanyDataService(session, user_id)
        for field, value in fields.items():
            validation = validate_field_input(field, value)
            if not validation["is_valid"]:
                results.append({
                    "field": field,
                    "success": False,
                    "error": validation["error"],
                    "suggestion": validation["suggestion"],
                })
                continue
            await service.update_field(field, value.strip())
            results.append({"field": field, "success": True, "value": value.strip()})
        progress = await service.get_completion_progress()

    successful = sum(1 for r in results if r["success"])
    return json.dumps({
        "success": True,
        "results": results,
        "summary": {"total": len(results), "successful": successful, "failed": len(results) - successful},
        "progress": progress,
    })


@tool
async def get_smart_suggestions(field: str, context: str = "", user_id: StateUserId = None) -> str:
    """
    Get common values for a company profile field.

    Args:
        field: The camelCase field name.
        context: Optional extra context from the conversation.

    Returns:
        A JSON string with the field, suggested options and the reasoning behind them.
    """
    async with session_scope() as session:
        state = await CompanyDataService(session, user_id).get_current_data()
    suggestions = smart_suggestions(field, state["currentData"])
    return json.dumps({"field": field, **suggestions})


@tool
async def validate_form_completion(user_id: StateUserId = None) -> str:
    """
    Check the required company profile fields and report missing or invalid values.

    Returns:
        A JSON string with isValid, missingFields, invalidFields, suggestions and completionPercentage.
    """
    async with session_scope() as session:
        state = await CompanyDataService(session, user_id).get_current_data()
    return json.dumps(validate_form_data(state["currentData"]))


@tool
async def reset_form(user_id: StateUserId = None) -> str:
    """
    Clear every company profile field. Only use when the user explicitly asks to start over.

    Returns:
        A JSON string with success and how many fields were removed.
    """
    async with session_scope() as session:
        removed = await CompanyDataService(session, user_id).reset_data()
    return json.dumps({"success": True, "removed": removed, "message": "All form fields have been reset"})


TOOLS = [
    get_current_form_data,
    update_form_field,
    batch_update_fields,
    get_smart_suggestions,
    validate_form_completion,
    reset_form,
]
