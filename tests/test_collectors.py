import httpx
import pytest

from conftest import FIXED_NOW, make_news
from services.jobs_collector import JobsCollector, format_salary
from services.news_collector import NewsCollector
from services.simulation import SIMULATED_ROLES, SimulationMode
from services.stock_collector import StockCollector, lookup_ticker
from services.tone_collector import ToneCollector, build_tone_text


def _transport(handler):
    return httpx.MockTransport(handler)


def _offline(collector):
    collector.api_key = None
    return collector


@pytest.mark.asyncio
async def test_news_without_key_is_simulated(simulation):
    result = await _offline(NewsCollector()).collect("Shopify", simulation)

    assert result.is_simulated
    assert len(result.data) == 2
    assert result.data[0].title == "Shopify announces strategic AI integration initiative"
    assert result.data[1].source == "VentureBeat"


@pytest.mark.asyncio
async def test_news_maps_newsdata_payload(simulation):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["params"] = dict(request.url.params)
        return httpx.Response(200, json={
            "status": "success",
            "results": [{
                "title": "Acme opens Berlin office",
                "description": "Expansion into Europe",
                "link": "https://news.example.com/acme-berlin",
                "pubDate": "2025-03-10 08:00:00",
                "source_id": "reuters",
            }],
        })

    collector = NewsCollector(api_key="test-key", transport=_transport(handler))
    result = await collector.collect("Acme", simulation)

    assert not result.is_simulated
    assert captured["params"]["q"] == "Acme"
    assert captured["params"]["apikey"] == "test-key"
    item = result.data[0]
    assert item.url == "https://news.example.com/acme-berlin"
    assert item.published_at == "2025-03-10 08:00:00"
    assert item.source_favicon == "https://www.google.com/s2/favicons?domain=reuters"


@pytest.mark.asyncio
async def test_news_falls_back_on_http_error(simulation):
    collector = NewsCollector(api_key="test-key", transport=_transport(lambda request: httpx.Response(500)))
    result = await collector.collect("Acme", simulation)

    assert result.is_simulated
    assert len(result.data) == 2


@pytest.mark.asyncio
async def test_news_falls_back_on_malformed_payload(simulation):
    collector = NewsCollector(
        api_key="test-key",
        transport=_transport(lambda request: httpx.Response(200, json={"results": "nope"})),
    )
    result = await collector.collect("Acme", simulation)

    assert result.is_simulated


@pytest.mark.asyncio
async def test_news_falls_back_on_network_error(simulation):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    collector = NewsCollector(api_key="test-key", transport=_transport(handler))
    result = await collector.collect("Acme", simulation)

    assert result.is_simulated


def test_format_salary():
    assert format_salary(100000, 150000) == "$100,000 - $150,000"
    assert format_salary(None, 150000) is None


@pytest.mark.asyncio
async def test_jobs_without_key_return_fixed_roles(simulation):
    result = await _offline(JobsCollector()).collect("Shopify", simulation)

    assert result.is_simulated
    assert [job.title for job in result.data] == SIMULATED_ROLES
    assert all(job.company == "Shopify" for job in result.data)


@pytest.mark.asyncio
async def test_jobs_map_jsearch_payload(simulation):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["X-RapidAPI-Key"] == "test-key"
        return httpx.Response(200, json={"data": [
            {
                "job_title": "Platform Engineer",
                "employer_name": "Acme",
                "job_city": "Denver",
                "job_state": "CO",
                "job_posted_at_datetime_utc": "2025-03-01T00:00:00.000Z",
                "job_description": "x" * 300,
                "job_min_salary": 120000,
                "job_max_salary": 160000,
            },
            {"job_title": "Recruiter"},
        ]})

    collector = JobsCollector(api_key="test-key", transport=_transport(handler))
    result = await collector.collect("Acme", simulation)

    assert not result.is_simulated
    first, second = result.data
    assert first.location == "Denver, CO"
    assert first.description == "x" * 200 + "..."
    assert first.salary == "$120,000 - $160,000"
    assert second.location == "Unspecified"
    assert second.salary is None


@pytest.mark.asyncio
async def test_jobs_fall_back_on_http_error(simulation):
    collector = JobsCollector(api_key="test-key", transport=_transport(lambda request: httpx.Response(429)))
    result = await collector.collect("Acme", simulation)

    assert result.is_simulated
    assert len(result.data) == len(SIMULATED_ROLES)


def test_ticker_lookup_is_case_insensitive():
    assert lookup_ticker("Shopify") == "SHOP"
    assert lookup_ticker("  APPLE ") == "AAPL"
    assert lookup_ticker("Acme") is None


@pytest.mark.asyncio
async def test_unknown_company_has_empty_stock(simulation):
    result = await StockCollector().collect("Acme", simulation)

    assert result.data.model_dump(exclude_none=True) == {}
    assert not result.is_simulated


@pytest.mark.asyncio
async def test_known_company_stock_is_simulated(simulation):
    result = await StockCollector().collect("Shopify", simulation)

    assert result.is_simulated
    assert result.data.ticker == "SHOP"
    assert len(result.data.price_history) == 30
    assert result.data.price_history[-1].date == FIXED_NOW.date().isoformat()


def test_build_tone_text_uses_top_three_headlines():
    news = [make_news(f"Headline {i}") for i in range(5)]
    assert build_tone_text("pitch analytics", news) == "pitch analytics Headline 0 Headline 1 Headline 2"


@pytest.mark.asyncio
async def test_simulated_tone_dominant_emotion_has_highest_score():
    for seed in range(20):
        result = await _offline(ToneCollector()).collect("pitch", [], SimulationMode(seed=seed))
        tone = result.data
        top = max(tone.emotions, key=lambda emotion: emotion.score)

        assert result.is_simulated
        assert top.name == tone.emotion


@pytest.mark.asyncio
async def test_tone_maps_twinword_payload(simulation):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = request.content.decode()
        return httpx.Response(200, json={
            "emotions_detected": ["fear", "surprise"],
            "emotion_scores": {"fear": 0.41, "surprise": 0.22, "joy": 0.05},
        })

    collector = ToneCollector(api_key="test-key", transport=_transport(handler))
    result = await collector.collect("pitch analytics", [make_news("Acme layoffs")], simulation)

    assert not result.is_simulated
    assert "text=pitch+analytics+Acme+layoffs" in captured["body"]
    assert result.data.emotion == "fear"
    assert result.data.sentiment == "negative"
    assert result.data.confidence == pytest.approx(0.41)
    assert [emotion.name for emotion in result.data.emotions] == ["fear", "surprise", "joy"]


@pytest.mark.asyncio
async def test_tone_falls_back_on_empty_payload(simulation):
    collector = ToneCollector(api_key="test-key", transport=_transport(lambda request: httpx.Response(200, json={})))
    result = await collector.collect("pitch", [], simulation)

    assert result.is_simulated
    assert result.data.emotion is not None


def test_seeded_simulation_is_reproducible():
    first = SimulationMode(seed=7, now=FIXED_NOW)
    second = SimulationMode(seed=7, now=FIXED_NOW)

    assert first.fork("jobs").jobs("Acme") == second.fork("jobs").jobs("Acme")
    assert first.fork("stock").stock("ACME") == second.fork("stock").stock("ACME")
