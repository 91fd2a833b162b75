"""Company profile field catalog.

The form assistant, the ICP pipeline and the legacy importer all share this
list of fields and the rules for what counts as filled.
"""

from typing import Any, Dict, List, Optional, TypedDict

FIELD_ORDER: List[str] = [
    "name",
    "location",
    "website",
    "social",
    "industry",
    "companySize",
    "targetMarket",
    "valueProposition",
    "mainOfferings",
    "pricingModel",
    "uniqueFeatures",
    "marketSegment",
    "competitiveAdvantages",
    "currentCustomers",
    "successStories",
    "painPointsSolved",
    "customerGoals",
    "currentMarketingChannels",
    "marketingMessaging",
]

FIELD_LABELS: Dict[str, str] = {
    "name": "Company name",
    "location": "Target market location",
    "website": "Company website URL",
    "social": "Social media profiles",
    "industry": "Business industry",
    "companySize": "Number of employees",
    "targetMarket": "Who you want to sell to",
    "valueProposition": "Unique value you provide",
    "mainOfferings": "Main products/services",
    "pricingModel": "How you charge customers",
    "uniqueFeatures": "What makes you different",
    "marketSegment": "Specific customer segments",
    "competitiveAdvantages": "Why customers choose you",
    "currentCustomers": "Types of customers you have",
    "successStories": "Examples of customer success",
    "painPointsSolved": "Problems you solve",
    "customerGoals": "What your customers want to achieve",
    "currentMarketingChannels": "How you reach customers",
    "marketingMessaging": "Your key marketing messages",
}

# Fields the form assistant treats as required for a usable profile
REQUIRED_FIELDS: List[str] = [
    "name",
    "location",
    "website",
    "industry",
    "companySize",
    "targetMarket",
    "valueProposition",
    "mainOfferings",
]

COMPANY_SIZE_OPTIONS: List[str] = [
    "Startup (1-10 employees)",
    "Small Business (11-50 employees)",
    "Medium Business (51-200 employees)",
    "Large Business (201-1000 employees)",
    "Enterprise (1000+ employees)",
]

INDUSTRY_OPTIONS: List[str] = [
    "SaaS/Software",
    "E-commerce",
    "Healthcare",
    "Finance/Banking",
    "Education",
    "Manufacturing",
    "Real Estate",
    "Marketing/Advertising",
    "Consulting",
    "Retail",
    "Technology",
    "Media/Entertainment",
    "Transportation",
    "Energy",
    "Other",
]

PRICING_MODEL_OPTIONS: List[str] = [
    "Subscription",
    "One-time purchase",
    "Freemium",
    "Usage-based",
    "Tiered pricing",
    "Custom pricing",
    "Free",
]

LOCATION_OPTIONS: List[str] = ["North America", "Europe", "Asia Pacific", "Global"]

MARKETING_CHANNEL_OPTIONS: List[str] = [
    "LinkedIn",
    "Email Marketing",
    "Content Marketing",
    "Paid Search",
    "Social Media",
    "Events & Conferences",
    "Partner Referrals",
]


class FieldValidation(TypedDict):
    is_valid: bool
    error: Optional[str]
    suggestion: Optional[str]


def is_known_field(field_name: str) -> bool:
    return field_name in FIELD_ORDER


def is_filled(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def filled_fields(data: Dict[str, Any]) -> List[str]:
    return [name for name in FIELD_ORDER if is_filled(data.get(name))]


def count_filled_fields(data: Dict[str, Any]) -> int:
    return len(filled_fields(data))


def next_unfilled_field(data: Dict[str, Any]) -> Optional[str]:
    for name in FIELD_ORDER:
        if not is_filled(data.get(name)):
            return name
    return None


def completion_progress(data: Dict[str, Any]) -> Dict[str, int]:
    filled = count_filled_fields(data)
    total = len(FIELD_ORDER)
    return {"filled": filled, "total": total, "percentage": round(filled / total * 100)}


def validate_field_input(field_name: str, value: Optional[str]) -> FieldValidation:
    """Validate a single value before it is written to the profile."""
    if not is_known_field(field_name):
        return {
            "is_valid": False,
            "error": f"Unknown field: {field_name}",
            "suggestion": f"Use one of: {', '.join(FIELD_ORDER)}",
        }

    trimmed = (value or "").strip()
    if not trimmed:
        return {
            "is_valid": False,
            "error": f"{field_name} cannot be empty",
            "suggestion": f"Please provide a value for {field_name}",
        }

    if field_name == "website" and not trimmed.startswith(("http://", "https://")):
        return {
            "is_valid": False,
            "error": "Website URL must start with http:// or https://",
            "suggestion": f"Try: https://{trimmed}",
        }

    if field_name == "companySize" and trimmed not in COMPANY_SIZE_OPTIONS:
        return {
            "is_valid": False,
            "error": "Invalid company size selection",
            "suggestion": f"Please choose from: {', '.join(COMPANY_SIZE_OPTIONS)}",
        }

    return {"is_valid": True, "error": None, "suggestion": None}


def validate_form_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Check the required fields and report what is missing or invalid."""
    missing = [name for name in REQUIRED_FIELDS if not is_filled(data.get(name))]
    invalid: List[str] = []
    suggestions: List[str] = []

    website = str(data.get("website") or "").strip()
    if website and not website.startswith("http"):
        invalid.append("website")
        suggestions.append("Website should start with http:// or https://")

    size = str(data.get("companySize") or "").strip()
    if size and size not in COMPANY_SIZE_OPTIONS:
        invalid.append("companySize")
        suggestions.append(f"Company size should be one of: {', '.join(COMPANY_SIZE_OPTIONS)}")

    percentage = round((len(REQUIRED_FIELDS) - len(missing)) / len(REQUIRED_FIELDS) * 100)
    return {
        "isValid": not missing and not invalid,
        "missingFields": missing,
        "invalidFields": invalid,
        "suggestions": suggestions,
        "completionPercentage": percentage,
    }


def smart_suggestions(field_name: str, current_data: Dict[str, Any]) -> Dict[str, Any]:
    if field_name == "industry":
        return {
            "options": list(INDUSTRY_OPTIONS),
            "reasoning": "These are the most common industries for ICP generation",
        }
    if field_name == "companySize":
        return {
            "options": list(COMPANY_SIZE_OPTIONS),
            "reasoning": "Company size helps determine target market and pricing strategy",
        }
    if field_name == "pricingModel":
        return {
            "options": list(PRICING_MODEL_OPTIONS),
            "reasoning": "Pricing model affects customer acquisition and retention strategies",
        }
    if field_name == "location":
        if is_filled(current_data.get("website")):
            reasoning = "Based on your website, consider these target markets"
        else:
            reasoning = "Common target market locations for ICP generation"
        return {"options": list(LOCATION_OPTIONS), "reasoning": reasoning}
    if field_name == "currentMarketingChannels":
        return {
            "options": list(MARKETING_CHANNEL_OPTIONS),
            "reasoning": "Channels that commonly reach B2B and B2C buyers",
        }
    return {"options": [], "reasoning": "No specific suggestions available for this field"}
