import httpx
import pytest

from schemas.brief import UserCompany
from services.brief_repository import BriefNotFoundError, BriefRepository, to_response
from services.brief_service import BriefService, BriefValidationError, company_logo
from services.jobs_collector import JobsCollector
from services.news_collector import NewsCollector
from services.simulation import SIMULATED_ROLES
from services.stock_collector import StockCollector
from services.tech_stack_service import TECH_CATEGORIES
from services.tone_collector import ToneCollector


def _offline_service(seed: int = 11) -> BriefService:
    news, jobs, tone = NewsCollector(), JobsCollector(), ToneCollector()
    for collector in (news, jobs, tone):
        collector.api_key = None
    return BriefService(news=news, jobs=jobs, stock=StockCollector(), tone=tone, simulation_seed=seed)


def test_company_logo():
    assert company_logo("https://www.shopify.com/plus") == "https://logo.clearbit.com/shopify.com"
    assert company_logo("http://acme.io") == "https://logo.clearbit.com/acme.io"
    assert company_logo("not a url") is None
    assert company_logo(None) is None


@pytest.mark.asyncio
async def test_shopify_brief_without_credentials(db_session):
    record = await _offline_service().create_brief(db_session, "Shopify", "pitch automation tooling")
    brief = to_response(record)

    assert len(brief.news) == 2
    assert [job.title for job in brief.job_signals] == SIMULATED_ROLES
    assert brief.stock_data.ticker == "SHOP"
    assert len(brief.tech_stack_data) <= 10
    for tech in brief.tech_stack_data:
        assert tech.category == TECH_CATEGORIES.get(tech.name, "Other")

    narrative = [brief.summary, brief.pitch_angle, brief.subject_line, brief.what_not_to_pitch, brief.signal_tag]
    assert all(field.strip() for field in narrative)
    for field in (brief.summary, brief.pitch_angle, brief.subject_line, brief.what_not_to_pitch):
        assert "Shopify" in field

    assert brief.intelligence_sources.simulated == {"news": True, "jobs": True, "stock": True, "tone": True}
    assert brief.intelligence_sources.news == 2
    assert brief.intelligence_sources.stock_data is True


@pytest.mark.asyncio
async def test_unknown_company_stores_empty_stock(db_session):
    record = await _offline_service().create_brief(db_session, "Acme Robotics", "pitch analytics")

    assert record.stock_data == {}
    assert record.intelligence_sources["simulated"]["stock"] is False


@pytest.mark.asyncio
async def test_seeded_runs_produce_the_same_narrative(db_session):
    first = await _offline_service(seed=5).create_brief(db_session, "Shopify", "pitch automation tooling")
    second = await _offline_service(seed=5).create_brief(db_session, "Shopify", "pitch automation tooling")

    assert first.summary == second.summary
    assert first.signal_tag == second.signal_tag
    assert [job["salary"] for job in first.job_signals] == [job["salary"] for job in second.job_signals]
    assert first.stock_data["priceChange"] == second.stock_data["priceChange"]


@pytest.mark.asyncio
async def test_collector_failures_never_break_creation(db_session):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    transport = httpx.MockTransport(handler)
    service = BriefService(
        news=NewsCollector(api_key="key", transport=transport),
        jobs=JobsCollector(api_key="key", transport=transport),
        stock=StockCollector(),
        tone=ToneCollector(api_key="key", transport=transport),
        simulation_seed=3,
    )

    record = await service.create_brief(db_session, "Acme", "pitch analytics")

    assert record.id
    assert record.intelligence_sources["simulated"]["news"] is True
    assert record.intelligence_sources["simulated"]["tone"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("company,intent", [("", "pitch"), ("Acme", "   "), (None, "pitch")])
async def test_missing_inputs_fail_before_collection(db_session, mocker, company, intent):
    service = _offline_service()
    collect = mocker.patch.object(service, "collect_signals")

    with pytest.raises(BriefValidationError):
        await service.create_brief(db_session, company, intent)

    collect.assert_not_called()


@pytest.mark.asyncio
async def test_user_company_personalizes_subject_line(db_session):
    user_company = UserCompany(name="Flowline", product="workflow platform", value_proposition="Faster pipelines")
    record = await _offline_service().create_brief(
        db_session,
        "Shopify",
        "pitch automation tooling",
        website="https://www.shopify.com",
        user_id="user-1",
        user_company=user_company,
    )

    assert record.subject_line == "Flowline x Shopify Strategic Partnership"
    assert record.company_logo == "https://logo.clearbit.com/shopify.com"
    assert record.user_id == "user-1"


@pytest.mark.asyncio
async def test_improve_rewrites_three_fields(db_session):
    service = _offline_service()
    record = await service.create_brief(db_session, "Shopify", "pitch automation tooling", user_id="user-1")
    subject_line, signal_tag, news = record.subject_line, record.signal_tag, list(record.news)

    improved = await service.improve_brief(db_session, record.id, user_id="user-1")

    assert improved.summary.startswith("Shopify demonstrates")
    assert "pitch automation tooling" in improved.pitch_angle
    assert improved.what_not_to_pitch.startswith("Avoid approaches that contradict Shopify's")
    assert improved.subject_line == subject_line
    assert improved.signal_tag == signal_tag
    assert improved.news == news


@pytest.mark.asyncio
async def test_improve_for_other_owner_is_not_found(db_session):
    service = _offline_service()
    record = await service.create_brief(db_session, "Shopify", "pitch", user_id="user-1")

    with pytest.raises(BriefNotFoundError):
        await service.improve_brief(db_session, record.id, user_id="user-2")
    with pytest.raises(BriefNotFoundError):
        await service.improve_brief(db_session, "missing-id", user_id="user-1")


@pytest.mark.asyncio
async def test_stats(db_session):
    service = _offline_service()
    await service.create_brief(db_session, "Shopify", "pitch", user_id="user-1")
    await service.create_brief(db_session, "Apple", "pitch", user_id="user-1")
    await service.create_brief(db_session, "Tesla", "pitch", user_id="user-2")

    stats = await service.get_stats(db_session, user_id="user-1")

    assert stats.total_briefs == 2
    assert stats.total_news == 4
    assert stats.total_jobs == 10
    assert len(await BriefRepository(db_session).get_all()) == 3
