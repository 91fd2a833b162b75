"""ICP template catalog, grouped by business model.

The selector picks three templates per generation; each becomes one ICP.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ICPTemplate:
    id: str
    name: str
    description: str
    category: str


B2B_TEMPLATES: List[ICPTemplate] = [
    ICPTemplate("startup_innovator", "Startup Innovator", "Early-stage companies seeking rapid innovation and growth", "startup"),
    ICPTemplate("smb_optimizer", "SMB Optimizer", "Small-medium businesses focused on process optimization", "smb"),
    ICPTemplate("tech_startup", "Tech Startup", "Technology startups with high growth potential", "startup"),
    ICPTemplate("saas_startup", "SaaS Startup", "Software-as-a-Service companies building scalable solutions", "startup"),
    ICPTemplate("ecommerce_smb", "E-commerce SMB", "Small-medium e-commerce businesses", "smb"),
    ICPTemplate("consulting_smb", "Consulting SMB", "Small consulting and service businesses", "smb"),
    ICPTemplate("manufacturing_smb", "Manufacturing SMB", "Small manufacturing companies", "smb"),
    ICPTemplate("healthcare_startup", "Healthcare Startup", "Healthcare technology and service startups", "startup"),
    ICPTemplate("fintech_startup", "FinTech Startup", "Financial technology startups", "startup"),
    ICPTemplate("edtech_startup", "EdTech Startup", "Education technology startups", "startup"),
    ICPTemplate("ai_startup", "AI Startup", "Artificial intelligence and machine learning startups", "startup"),
    ICPTemplate("blockchain_startup", "Blockchain Startup", "Blockchain and cryptocurrency startups", "startup"),
    ICPTemplate("biotech_startup", "Biotech Startup", "Biotechnology and life sciences startups", "startup"),
    ICPTemplate("clean_tech_startup", "CleanTech Startup", "Clean technology and sustainability startups", "startup"),
    ICPTemplate("retail_smb", "Retail SMB", "Small retail businesses", "smb"),
    ICPTemplate("restaurant_smb", "Restaurant SMB", "Small restaurant and food service businesses", "smb"),
    ICPTemplate("construction_smb", "Construction SMB", "Small construction and contracting businesses", "smb"),
    ICPTemplate("automotive_smb", "Automotive SMB", "Small automotive service and sales businesses", "smb"),
    ICPTemplate("beauty_smb", "Beauty SMB", "Small beauty and wellness businesses", "smb"),
    ICPTemplate("fitness_smb", "Fitness SMB", "Small fitness and gym businesses", "smb"),
    ICPTemplate("mid_market_scale", "Mid-Market Scale", "Growing companies scaling operations", "mid_market"),
    ICPTemplate("mid_market_efficiency", "Mid-Market Efficiency", "Established companies optimizing efficiency", "mid_market"),
    ICPTemplate("mid_market_expansion", "Mid-Market Expansion", "Companies expanding to new markets", "mid_market"),
    ICPTemplate("mid_market_digital", "Mid-Market Digital", "Traditional companies going digital", "mid_market"),
    ICPTemplate("mid_market_automation", "Mid-Market Automation", "Companies automating manual processes", "mid_market"),
    ICPTemplate("mid_market_compliance", "Mid-Market Compliance", "Companies needing regulatory compliance", "mid_market"),
    ICPTemplate("mid_market_integration", "Mid-Market Integration", "Companies integrating multiple systems", "mid_market"),
    ICPTemplate("mid_market_analytics", "Mid-Market Analytics", "Companies seeking data-driven insights", "mid_market"),
    ICPTemplate("mid_market_security", "Mid-Market Security", "Companies prioritizing cybersecurity", "mid_market"),
    ICPTemplate("mid_market_collaboration", "Mid-Market Collaboration", "Companies improving team collaboration", "mid_market"),
    ICPTemplate("mid_market_customer_experience", "Mid-Market Customer Experience", "Companies focusing on customer experience", "mid_market"),
    ICPTemplate("mid_market_supply_chain", "Mid-Market Supply Chain", "Companies optimizing supply chain operations", "mid_market"),
    ICPTemplate("mid_market_human_resources", "Mid-Market HR", "Companies modernizing HR processes", "mid_market"),
    ICPTemplate("mid_market_finance", "Mid-Market Finance", "Companies streamlining financial operations", "mid_market"),
    ICPTemplate("mid_market_sales", "Mid-Market Sales", "Companies optimizing sales processes", "mid_market"),
    ICPTemplate("mid_market_marketing", "Mid-Market Marketing", "Companies enhancing marketing capabilities", "mid_market"),
    ICPTemplate("enterprise_transformer", "Enterprise Transformer", "Large companies undergoing digital transformation", "enterprise"),
    ICPTemplate("enterprise_optimizer", "Enterprise Optimizer", "Large companies optimizing existing operations", "enterprise"),
    ICPTemplate("enterprise_innovator", "Enterprise Innovator", "Large companies driving innovation", "enterprise"),
    ICPTemplate("enterprise_compliance", "Enterprise Compliance", "Large companies with strict compliance needs", "enterprise"),
    ICPTemplate("enterprise_security", "Enterprise Security", "Large companies prioritizing security", "enterprise"),
    ICPTemplate("enterprise_integration", "Enterprise Integration", "Large companies with complex integrations", "enterprise"),
    ICPTemplate("enterprise_analytics", "Enterprise Analytics", "Large companies seeking advanced analytics", "enterprise"),
    ICPTemplate("enterprise_automation", "Enterprise Automation", "Large companies automating at scale", "enterprise"),
    ICPTemplate("enterprise_collaboration", "Enterprise Collaboration", "Large companies improving collaboration", "enterprise"),
    ICPTemplate("enterprise_customer_experience", "Enterprise Customer Experience", "Large companies focusing on customer experience", "enterprise"),
    ICPTemplate("enterprise_supply_chain", "Enterprise Supply Chain", "Large companies optimizing supply chains", "enterprise"),
    ICPTemplate("enterprise_human_resources", "Enterprise HR", "Large companies modernizing HR", "enterprise"),
    ICPTemplate("enterprise_finance", "Enterprise Finance", "Large companies streamlining finance", "enterprise"),
    ICPTemplate("enterprise_sales", "Enterprise Sales", "Large companies optimizing sales", "enterprise"),
    ICPTemplate("enterprise_marketing", "Enterprise Marketing", "Large companies enhancing marketing", "enterprise"),
    ICPTemplate("enterprise_operations", "Enterprise Operations", "Large companies optimizing operations", "enterprise"),
    ICPTemplate("enterprise_technology", "Enterprise Technology", "Large companies modernizing technology", "enterprise"),
    ICPTemplate("enterprise_data", "Enterprise Data", "Large companies managing data", "enterprise"),
    ICPTemplate("enterprise_cloud", "Enterprise Cloud", "Large companies migrating to cloud", "enterprise"),
    ICPTemplate("enterprise_mobile", "Enterprise Mobile", "Large companies going mobile", "enterprise"),
]

B2C_TEMPLATES: List[ICPTemplate] = [
    ICPTemplate("young_professionals", "Young Professionals", "Early-career professionals aged 25-35", "demographics"),
    ICPTemplate("millennials", "Millennials", "Millennial consumers aged 28-43", "demographics"),
    ICPTemplate("gen_z", "Gen Z", "Generation Z consumers aged 16-27", "demographics"),
    ICPTemplate("baby_boomers", "Baby Boomers", "Baby boomer consumers aged 59-77", "demographics"),
    ICPTemplate("high_income", "High Income", "High-income consumers with disposable income", "demographics"),
    ICPTemplate("middle_class", "Middle Class", "Middle-class consumers seeking value", "demographics"),
    ICPTemplate("urban_professionals", "Urban Professionals", "City-dwelling professionals", "demographics"),
    ICPTemplate("suburban_families", "Suburban Families", "Suburban families with children", "demographics"),
    ICPTemplate("fitness_enthusiasts", "Fitness Enthusiasts", "Health and fitness conscious consumers", "lifestyle"),
    ICPTemplate("tech_early_adopters", "Tech Early Adopters", "Technology enthusiasts who try new products first", "lifestyle"),
    ICPTemplate("eco_conscious", "Eco-Conscious", "Environmentally conscious consumers", "lifestyle"),
    ICPTemplate("luxury_seekers", "Luxury Seekers", "Consumers seeking premium and luxury products", "lifestyle"),
    ICPTemplate("budget_conscious", "Budget Conscious", "Price-sensitive consumers seeking deals", "lifestyle"),
    ICPTemplate("convenience_seekers", "Convenience Seekers", "Consumers prioritizing ease and convenience", "lifestyle"),
    ICPTemplate("quality_focused", "Quality Focused", "Consumers prioritizing product quality", "lifestyle"),
    ICPTemplate("trend_followers", "Trend Followers", "Consumers who follow current trends", "lifestyle"),
    ICPTemplate("online_shoppers", "Online Shoppers", "Consumers who prefer online shopping", "behavior"),
    ICPTemplate("mobile_users", "Mobile Users", "Heavy mobile device users", "behavior"),
    ICPTemplate("social_media_active", "Social Media Active", "Active social media users", "behavior"),
    ICPTemplate("brand_loyal", "Brand Loyal", "Consumers loyal to specific brands", "behavior"),
    ICPTemplate("impulse_buyers", "Impulse Buyers", "Consumers who make impulse purchases", "behavior"),
    ICPTemplate("research_intensive", "Research Intensive", "Consumers who research before buying", "behavior"),
    ICPTemplate("subscription_lovers", "Subscription Lovers", "Consumers who prefer subscription services", "behavior"),
    ICPTemplate("deal_hunters", "Deal Hunters", "Consumers who actively seek deals and discounts", "behavior"),
]

B2B2C_TEMPLATES: List[ICPTemplate] = [
    ICPTemplate("platform_partner", "Platform Partner", "Businesses that partner with platforms to reach end consumers", "platform"),
    ICPTemplate("marketplace_seller", "Marketplace Seller", "Businesses selling through online marketplaces", "platform"),
    ICPTemplate("franchise_owner", "Franchise Owner", "Franchise businesses serving local consumers", "platform"),
    ICPTemplate("reseller_distributor", "Reseller/Distributor", "Businesses that resell products to end consumers", "platform"),
    ICPTemplate("affiliate_partner", "Affiliate Partner", "Businesses earning commissions from consumer sales", "platform"),
    ICPTemplate("direct_to_consumer", "Direct to Consumer", "Manufacturers selling directly to consumers", "hybrid"),
    ICPTemplate("omnichannel_retailer", "Omnichannel Retailer", "Retailers with both B2B and B2C channels", "hybrid"),
    ICPTemplate("service_provider", "Service Provider", "Service businesses serving both businesses and consumers", "hybrid"),
    ICPTemplate("consulting_firm", "Consulting Firm", "Consulting firms serving businesses and individuals", "hybrid"),
    ICPTemplate("software_company", "Software Company", "Software companies with B2B and B2C products", "hybrid"),
]

ICP_TEMPLATES: Dict[str, List[ICPTemplate]] = {
    "B2B": B2B_TEMPLATES,
    "B2C": B2C_TEMPLATES,
    "B2B2C": B2B2C_TEMPLATES,
}

CATEGORY_LABELS: Dict[str, str] = {
    "startup": "STARTUP COMPANIES",
    "smb": "SMALL-MEDIUM BUSINESSES",
    "mid_market": "MID-MARKET COMPANIES",
    "enterprise": "ENTERPRISE COMPANIES",
    "demographics": "DEMOGRAPHIC SEGMENTS",
    "lifestyle": "LIFESTYLE SEGMENTS",
    "behavior": "BEHAVIORAL SEGMENTS",
    "platform": "PLATFORM PARTNERS",
    "hybrid": "HYBRID BUSINESSES",
}


def get_templates(business_model: str) -> List[ICPTemplate]:
    return ICP_TEMPLATES.get(business_model, [])


def group_by_category(templates: List[ICPTemplate]) -> Dict[str, List[ICPTemplate]]:
    """Group templates by category, keeping first-seen category order."""
    groups: Dict[str, List[ICPTemplate]] = {}
    for template in templates:
        groups.setdefault(template.category, []).append(template)
    return groups


def format_catalog(templates: List[ICPTemplate]) -> str:
    sections = []
    for category, members in group_by_category(templates).items():
        label = CATEGORY_LABELS.get(category, category.upper())
        lines = [f'- ID: "{t.id}" | Name: {t.name} | Description: {t.description}' for t in members]
        sections.append(f"{label} ({len(members)} options):\n" + "\n".join(lines))
    return "\n\n".join(sections)
