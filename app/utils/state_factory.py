from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage


class StateFactory:
    @staticmethod
    def create_icp_generator_state(company_id: Optional[int], company_data: Dict[str, Any]) -> Dict[str, Any]:
        company_name = company_data.get("name") or "the company"
        return {
            "messages": [HumanMessage(content=f"Generate ideal customer profiles for {company_name}.")],
            "company_id": company_id,
            "company_data": dict(company_data),
            "business_model": "",
            "selected_templates": [],
            "current_template_index": 0,
            "generated_icps": [],
        }

    @staticmethod
    def create_company_profile_chat_state(message: str, user_id: str) -> Dict[str, Any]:
        return {
            "messages": [HumanMessage(content=message)],
            "user_id": user_id,
        }
