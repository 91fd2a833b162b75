from typing import Any, Dict

MANUFACTURING_INDICATORS = [
    "manufacturing",
    "industrial",
    "automotive",
    "aerospace",
    "defense",
    "heavy industry",
    "factory",
    "production",
    "machinery",
    "equipment",
]

B2B_INDICATORS = [
    "business",
    "company",
    "enterprise",
    "organization",
    "professional",
    "industry",
    "corporate",
    "commercial",
    "b2b",
    "business-to-business",
]

B2C_INDICATORS = [
    "consumer",
    "individual",
    "personal",
    "customer",
    "user",
    "retail",
    "end-user",
    "b2c",
    "business-to-consumer",
]


def _contains_any(text: str, indicators: list[str]) -> bool:
    return any(indicator in text for indicator in indicators)


def determine_business_model(company_data: Dict[str, Any]) -> str:
    """Classify the company as B2B, B2C or B2B2C from its market fields.

    Manufacturing always sells to businesses. Otherwise both sets of
    indicators mean B2B2C, B2B indicators alone mean B2B, and everything else
    is treated as B2C.
    """
    texts = [
        str(company_data.get(key) or "").lower()
        for key in ("targetMarket", "marketSegment", "industry")
    ]

    if any(_contains_any(text, MANUFACTURING_INDICATORS) for text in texts):
        return "B2B"

    has_b2b = any(_contains_any(text, B2B_INDICATORS) for text in texts)
    has_b2c = any(_contains_any(text, B2C_INDICATORS) for text in texts)

    if has_b2b and has_b2c:
        return "B2B2C"
    if has_b2b:
        return "B2B"
    return "B2C"
