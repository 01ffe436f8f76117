"""Tests for visit scheduling and agent leads."""

import pytest
from rems.services.visits import list_agent_leads, list_user_visits, schedule_visit
from rems.utils.errors import AuthenticationError, AuthorizationError, FormValidationError
from tests.utils.factories import create_property_data, create_visit_data


@pytest.mark.unit
@pytest.mark.asyncio
async def test_schedule_visit_requires_user(fake_supabase, sample_property):
    with pytest.raises(AuthenticationError):
        await schedule_visit(None, sample_property["id"], "2024-12-20T10:00")
    assert fake_supabase.rows("scheduled_visits") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_schedule_visit_requires_date(fake_supabase, customer, sample_property):
    with pytest.raises(FormValidationError):
        await schedule_visit(customer, sample_property["id"], "")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_schedule_visit_default_status(fake_supabase, customer, sample_property):
    visit = await schedule_visit(customer, sample_property["id"], "2024-12-20T10:00", "After work")

    assert visit.status == "scheduled"
    assert visit.user_id == customer.id
    assert visit.notes == "After work"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_double_booking_or_past_date_checks(fake_supabase, customer, sample_property):
    await schedule_visit(customer, sample_property["id"], "2020-01-01T10:00")
    await schedule_visit(customer, sample_property["id"], "2020-01-01T10:00")

    assert len(fake_supabase.rows("scheduled_visits")) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_visits_soonest_first(fake_supabase, customer, sample_property):
    later, sooner = fake_supabase.seed(
        "scheduled_visits",
        create_visit_data(customer.id, sample_property["id"], days_ahead=10),
        create_visit_data(customer.id, sample_property["id"], days_ahead=2),
    )

    visits = await list_user_visits(customer)

    assert [v.id for v in visits] == [sooner["id"], later["id"]]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_leads_only_for_owned_properties(fake_supabase, agent, customer, sample_property):
    other, _ = fake_supabase.add_user("agent")
    other_prop = fake_supabase.seed("properties", create_property_data(other.id))[0]
    early, late = fake_supabase.seed(
        "scheduled_visits",
        create_visit_data(customer.id, sample_property["id"], days_ahead=1),
        create_visit_data(customer.id, sample_property["id"], days_ahead=5),
    )
    fake_supabase.seed("scheduled_visits", create_visit_data(customer.id, other_prop["id"]))

    leads = await list_agent_leads(agent)

    assert [lead.id for lead in leads] == [late["id"], early["id"]]
    assert leads[0].property_title == sample_property["title"]
    assert leads[0].customer_id == customer.id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_leads_empty_without_listings(fake_supabase, agent):
    assert await list_agent_leads(agent) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_leads_forbidden_for_customers(fake_supabase, customer):
    with pytest.raises(AuthorizationError):
        await list_agent_leads(customer)
