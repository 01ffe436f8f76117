"""Tests for listing services."""

import pytest
from rems.models.property import PropertyFilters
from rems.services.listings import (
    create_listing,
    delete_listing,
    get_property_detail,
    list_agent_listings,
    list_public_listings,
    update_listing_status,
)
from rems.utils.errors import AuthorizationError, FormValidationError, NotFoundError
from tests.utils.assertions import assert_ids
from tests.utils.factories import create_listing_form, create_property_data, create_review_data


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_listing_starts_unapproved(fake_supabase, agent):
    prop = await create_listing(agent, create_listing_form(approved=True))

    assert prop.approved is False
    assert prop.agent_id == agent.id
    assert prop.status.value == "available"
    assert fake_supabase.rows("properties")[0]["approved"] is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_listing_requires_agent(fake_supabase, customer):
    with pytest.raises(AuthorizationError):
        await create_listing(customer, create_listing_form())
    assert fake_supabase.rows("properties") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_listing_validates_form(fake_supabase, agent):
    with pytest.raises(FormValidationError) as exc_info:
        await create_listing(agent, create_listing_form(price=0))

    assert exc_info.value.field == "price"
    assert ("properties", "insert") not in fake_supabase.calls


@pytest.mark.unit
@pytest.mark.asyncio
async def test_public_listings_require_approved_and_available(fake_supabase, agent):
    live, pending, sold = fake_supabase.seed(
        "properties",
        create_property_data(agent.id, approved=True),
        create_property_data(agent.id, approved=False),
        create_property_data(agent.id, approved=True, status="sold"),
    )

    result = await list_public_listings()

    assert_ids(result, [live["id"]])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_public_listings_apply_filters(fake_supabase, agent):
    cheap, pricey = fake_supabase.seed(
        "properties",
        create_property_data(agent.id, approved=True, price=200000, bedrooms=1),
        create_property_data(agent.id, approved=True, price=900000, bedrooms=4),
    )

    result = await list_public_listings(PropertyFilters(min_price=500000, bedrooms=3))

    assert_ids(result, [pricey["id"]])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_detail_shows_only_approved_reviews(fake_supabase, customer, sample_property):
    hidden, shown = fake_supabase.seed(
        "reviews",
        create_review_data(customer.id, sample_property["id"], approved=False),
        create_review_data(customer.id, sample_property["id"], approved=True),
    )

    detail = await get_property_detail(sample_property["id"], customer)

    assert_ids(detail.reviews, [shown["id"]])
    assert detail.is_favorite is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_detail_favorite_flag(fake_supabase, customer, sample_property):
    fake_supabase.seed("favorites", {"user_id": customer.id, "property_id": sample_property["id"]})

    detail = await get_property_detail(sample_property["id"], customer)

    assert detail.is_favorite is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unapproved_detail_visibility(fake_supabase, agent, customer, admin):
    prop = fake_supabase.seed("properties", create_property_data(agent.id, approved=False))[0]

    with pytest.raises(NotFoundError):
        await get_property_detail(prop["id"])
    with pytest.raises(AuthorizationError):
        await get_property_detail(prop["id"], customer)

    assert (await get_property_detail(prop["id"], agent)).property.id == prop["id"]
    assert (await get_property_detail(prop["id"], admin)).property.id == prop["id"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_listings_include_pending(fake_supabase, agent):
    other, _ = fake_supabase.add_user("agent")
    mine = fake_supabase.seed(
        "properties",
        create_property_data(agent.id, approved=False),
        create_property_data(agent.id, approved=True),
    )
    fake_supabase.seed("properties", create_property_data(other.id))

    result = await list_agent_listings(agent)

    assert_ids(result, [p["id"] for p in mine])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_listing_owner_only(fake_supabase, agent):
    other, _ = fake_supabase.add_user("agent")
    theirs = fake_supabase.seed("properties", create_property_data(other.id))[0]
    mine = fake_supabase.seed("properties", create_property_data(agent.id))[0]

    with pytest.raises(NotFoundError):
        await delete_listing(agent, theirs["id"])
    await delete_listing(agent, mine["id"])

    assert [p["id"] for p in fake_supabase.rows("properties")] == [theirs["id"]]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_can_delete_any_listing(fake_supabase, agent, admin):
    prop = fake_supabase.seed("properties", create_property_data(agent.id))[0]

    await delete_listing(admin, prop["id"])

    assert fake_supabase.rows("properties") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_status_change_leaves_approval_alone(fake_supabase, agent):
    prop = fake_supabase.seed("properties", create_property_data(agent.id, approved=False))[0]

    updated = await update_listing_status(agent, prop["id"], "under_contract")

    assert updated.status.value == "under_contract"
    assert updated.approved is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_status_change_rejects_unknown_status(fake_supabase, agent, sample_property):
    with pytest.raises(FormValidationError):
        await update_listing_status(agent, sample_property["id"], "archived")
