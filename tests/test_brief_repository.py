from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from models.brief import Brief
from schemas.brief import NarrativeUpdate
from services.brief_repository import (
    BriefNotFoundError,
    BriefPersistenceError,
    BriefRepository,
    to_response,
)

OWNER = "user-1"
OTHER = "user-2"


@pytest.mark.asyncio
async def test_create_then_get_round_trips(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    fetched = await repository.get_by_id(created.id, owner_id=OWNER)

    assert fetched is not None
    stored = to_response(fetched)
    assert stored.id == created.id
    assert stored.user_id == OWNER
    assert stored.created_at is not None
    assert stored.model_dump(exclude={"id", "user_id", "created_at"}) == sample_brief.model_dump()


@pytest.mark.asyncio
async def test_nested_collections_are_stored_camel_case(db_session, sample_brief):
    created = await BriefRepository(db_session).create(sample_brief)

    assert created.news[0]["publishedAt"] == "2025-03-10T08:00:00Z"
    assert created.tech_stack_data[0]["firstDetected"]
    assert created.stock_data == {}


@pytest.mark.asyncio
async def test_unknown_and_foreign_ids_look_the_same(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    assert await repository.get_by_id("does-not-exist", owner_id=OWNER) is None
    assert await repository.get_by_id(created.id, owner_id=OTHER) is None


@pytest.mark.asyncio
async def test_get_all_is_owner_scoped_and_newest_first(db_session, sample_brief):
    repository = BriefRepository(db_session)
    older = await repository.create(sample_brief, owner_id=OWNER)
    older.created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    await db_session.commit()
    newer = await repository.create(sample_brief, owner_id=OWNER)
    await repository.create(sample_brief, owner_id=OTHER)

    briefs = await repository.get_all(owner_id=OWNER)

    assert [brief.id for brief in briefs] == [newer.id, older.id]
    assert len(await repository.get_all()) == 3


@pytest.mark.asyncio
async def test_update_rewrites_narrative_fields_only(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    updated = await repository.update(created.id, NarrativeUpdate(summary="Sharper summary"), owner_id=OWNER)

    assert updated.summary == "Sharper summary"
    assert updated.pitch_angle == sample_brief.pitch_angle
    assert updated.news == created.news


@pytest.mark.asyncio
async def test_update_rejects_non_narrative_fields(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    with pytest.raises(ValueError):
        await repository.update(created.id, {"company_name": "Hijacked"}, owner_id=OWNER)


@pytest.mark.asyncio
async def test_update_by_non_owner_is_not_found(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    with pytest.raises(BriefNotFoundError):
        await repository.update(created.id, {"summary": "nope"}, owner_id=OTHER)


@pytest.mark.asyncio
async def test_delete_by_non_owner_keeps_record(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    with pytest.raises(BriefNotFoundError):
        await repository.delete(created.id, owner_id=OTHER)

    assert await repository.get_by_id(created.id, owner_id=OWNER) is not None


@pytest.mark.asyncio
async def test_delete_by_owner_removes_record(db_session, sample_brief):
    repository = BriefRepository(db_session)
    created = await repository.create(sample_brief, owner_id=OWNER)

    await repository.delete(created.id, owner_id=OWNER)

    assert await repository.get_by_id(created.id) is None
    with pytest.raises(BriefNotFoundError):
        await repository.delete(created.id, owner_id=OWNER)


@pytest.mark.asyncio
async def test_database_errors_surface_as_persistence_errors(db_session, sample_brief, mocker):
    mocker.patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full")))

    with pytest.raises(BriefPersistenceError):
        await BriefRepository(db_session).create(sample_brief)


@pytest.mark.parametrize("column", [
    "company_name",
    "website",
    "user_intent",
    "subject_line",
    "signal_tag",
    "company_logo",
    "hiring_trends",
    "news_trends",
    "user_id",
])
def test_free_text_columns_are_unbounded(column):
    assert getattr(Brief.__table__.c[column].type, "length", None) is None


@pytest.mark.asyncio
async def test_long_company_name_and_website_are_stored(db_session, sample_brief):
    website = "https://acme.io/" + "a" * 600
    brief = sample_brief.model_copy(update={"company_name": "A" * 300, "website": website})

    created = await BriefRepository(db_session).create(brief, owner_id=OWNER)

    fetched = await BriefRepository(db_session).get_by_id(created.id, owner_id=OWNER)
    assert fetched.company_name == "A" * 300
    assert fetched.website == website
