"""Seed the database with the default user and sample companies.

Safe to run repeatedly: existing companies, profiles and campaigns are kept.

    python seed_data.py
"""
import asyncio
import logging

from app.core import database
from app.core.config import get_log_level
from app.repos.campaigns import CampaignRepository
from app.repos.companies import CompanyRepository
from app.repos.icp_profiles import ICPProfileRepository

logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)

SAMPLE_COMPANIES = [
    "TechFlow Solutions",
    "HealthTech Innovations",
    "StyleHub Fashion",
    "Precision Manufacturing Co.",
    "SmartFinance Solutions",
]

TECHFLOW_DATA = {
    "location": "San Francisco, CA",
    "website": "https://techflow.com",
    "social": "@techflow_solutions",
    "industry": "SaaS / Technology",
    "companySize": "10-50 employees",
    "targetMarket": "Small to medium businesses",
    "valueProposition": "Streamlined workflow automation",
    "mainOfferings": "Project management SaaS platform",
    "pricingModel": "Subscription-based",
    "uniqueFeatures": "AI-powered task prioritization",
    "marketSegment": "B2B SaaS",
    "competitiveAdvantages": "Advanced analytics and reporting",
    "currentCustomers": "500+ active users",
    "successStories": "Increased productivity by 40%",
    "painPointsSolved": "Project delays and communication gaps",
    "customerGoals": "Improve team collaboration and efficiency",
    "currentMarketingChannels": "Digital marketing, content marketing",
    "marketingMessaging": "Transform your workflow with AI-powered insights",
}

TECHFLOW_ICP = {
    "icp_name": "TechFlow ICP",
    "business_model": "B2B",
    "segments": ["Small to medium businesses"],
    "needs_pain_goals": {
        "pains": ["Project delays", "Communication gaps"],
        "jobs_to_be_done": ["Coordinate projects across teams"],
        "desired_outcomes": ["Improve team collaboration", "Increase efficiency"],
    },
    "buying_triggers": ["Team growth", "Missed deadlines"],
    "confidence": "high",
}

TECHFLOW_CAMPAIGN = {
    "name": "TechFlow Launch Campaign",
    "copy_style": "professional",
    "media_type": "linkedin",
    "ad_copy": (
        "Transform your workflow with AI-powered insights. "
        "Streamline project management and boost team productivity by 40%."
    ),
    "image_prompt": "Modern office with team collaboration, digital screens showing project management interface",
    "cta": "Start Free Trial",
    "hooks": "Stop losing time on project delays. Our AI-powered platform helps teams collaborate better.",
    "landing_page_copy": "Join 500+ companies that have transformed their workflow with TechFlow Solutions.",
}


async def seed() -> None:
    await database.init_db()

    async with database.session_scope() as session:
        companies = CompanyRepository(session)
        user = await companies.ensure_user()
        print(f"✅ User ready: {user.email}")

        created = {}
        for name in SAMPLE_COMPANIES:
            company = await companies.find_by_name(name)
            if company is None:
                company = await companies.create_company(name)
                print(f"✅ Created company: {name}")
            created[name] = company

        techflow = created["TechFlow Solutions"]
        current = await companies.get_company_data(techflow.id)
        for field_name, value in TECHFLOW_DATA.items():
            if current.get(field_name) != value:
                await companies.upsert_field(techflow, field_name, value)
        if await companies.get_active_company() is None:
            await companies.select_company(techflow.id)
        print("✅ Seeded company data for TechFlow Solutions")

        profiles = ICPProfileRepository(session)
        existing = await profiles.list_by_company(techflow.id)
        profile = next((p for p in existing if p.name == TECHFLOW_ICP["icp_name"]), None)
        if profile is None:
            (profile,) = await profiles.save_profiles_for_company(techflow.id, [TECHFLOW_ICP])
            print(f"✅ Created ICP profile: {profile.name}")

        campaigns = CampaignRepository(session)
        if not any(c.name == TECHFLOW_CAMPAIGN["name"] for c in await campaigns.list_by_icp(profile.id)):
            await campaigns.create(icp_id=profile.id, **TECHFLOW_CAMPAIGN)
            print(f"✅ Created campaign: {TECHFLOW_CAMPAIGN['name']}")

    print("🎉 Database seeding completed")


if __name__ == "__main__":
    asyncio.run(seed())
