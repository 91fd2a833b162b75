"""
Unit tests for the company repository and form state service (SQLite)
"""
import pytest

from app.core.errors import NotFoundError, ValidationFailedError
from app.repos.companies import CompanyRepository
from app.services.company_data import DEFAULT_COMPANY_NAME, CompanyDataService


@pytest.mark.asyncio
async def test_empty_state_without_companies(db_session):
    state = await CompanyDataService(db_session).get_current_data()
    assert state == {
        "companyId": None,
        "currentData": {},
        "filledFields": [],
        "nextField": "name",
        "isComplete": False,
        "lastUpdated": None,
    }


@pytest.mark.asyncio
async def test_update_field_creates_default_company(db_session):
    service = CompanyDataService(db_session)
    result = await service.update_field("industry", "SaaS/Software")

    assert result["field"] == "industry"
    assert result["version"] == 1

    company = await service.resolve_company()
    assert company.name == DEFAULT_COMPANY_NAME
    active = await CompanyRepository(db_session).get_active_company()
    assert active.id == company.id

    state = await service.get_current_data()
    assert state["currentData"]["industry"] == "SaaS/Software"
    assert state["currentData"]["name"] == DEFAULT_COMPANY_NAME
    assert state["filledFields"] == ["name", "industry"]
    assert state["nextField"] == "location"
    assert state["lastUpdated"] is not None


@pytest.mark.asyncio
async def test_overwrite_bumps_version(db_session):
    service = CompanyDataService(db_session)
    await service.update_field("location", "Europe")
    second = await service.update_field("location", "Global")
    assert second["version"] == 2
    assert await service.get_field_value("location") == "Global"
    assert await service.is_field_filled("location")
    assert not await service.is_field_filled("website")


@pytest.mark.asyncio
async def test_unknown_field_is_rejected(db_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        await CompanyDataService(db_session).update_field("favouriteColour", "blue")
    assert exc_info.value.code == "UNKNOWN_FIELD"


@pytest.mark.asyncio
async def test_name_field_renames_company(db_session):
    repo = CompanyRepository(db_session)
    company = await repo.create_company("Old Name", {"industry": "Retail"})
    await repo.update_field(company.id, "name", "  New Name ")
    refreshed = await repo.get_company_with_data(company.id)
    assert refreshed["name"] == "New Name"


@pytest.mark.asyncio
async def test_progress_reset_and_export(db_session):
    repo = CompanyRepository(db_session)
    company = await repo.create_company(
        "Acme", {"industry": "Retail", "location": "Europe", "website": "", "social": None}
    )
    await repo.select_company(company.id)
    service = CompanyDataService(db_session)

    assert await service.get_completion_progress() == {"filled": 3, "total": 19, "percentage": 16}
    assert await service.get_next_unfilled_field() == "website"
    assert await service.export_for_icp() == {"name": "Acme", "location": "Europe", "industry": "Retail"}

    # name, industry, location and the empty website row
    assert await service.reset_data() == 4
    assert (await service.get_current_data())["currentData"] == {}


@pytest.mark.asyncio
async def test_first_company_used_when_none_selected(db_session):
    repo = CompanyRepository(db_session)
    first = await repo.create_company("First Co")
    await repo.create_company("Second Co")
    company = await CompanyDataService(db_session).resolve_company()
    assert company.id == first.id


@pytest.mark.asyncio
async def test_companies_are_scoped_to_user(db_session):
    mine = CompanyRepository(db_session, "user-a")
    theirs = CompanyRepository(db_session, "user-b")
    company = await mine.create_company("Mine")

    assert await theirs.get_company(company.id) is None
    with pytest.raises(NotFoundError):
        await theirs.require_company(company.id)
    assert [c.name for c in await mine.list_companies()] == ["Mine"]
    assert await theirs.list_companies() == []


@pytest.mark.asyncio
async def test_delete_company_cascades_fields(db_session):
    repo = CompanyRepository(db_session)
    company = await repo.create_company("Gone Co", {"industry": "Retail"})
    company_id = company.id
    await repo.delete_company(company_id)
    await db_session.commit()

    assert await repo.get_company(company_id) is None
    assert await repo.get_data_rows(company_id) == []
