from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from models import Brief  # noqa: F401  registers the table on Base.metadata
from schemas.brief import BriefCreate, JobSignal, NewsItem, StockData, TechStackItem, ToneInsights
from services.cache_service import cache_service
from services.jobs_collector import jobs_collector
from services.news_collector import news_collector
from services.simulation import SimulationMode
from services.tone_collector import tone_collector

FIXED_NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def simulation():
    return SimulationMode(seed=42, now=FIXED_NOW)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    cache_service.clear_local()
    yield
    cache_service.clear_local()


@pytest.fixture
def offline_collectors(monkeypatch):
    """Force every global collector into simulation mode regardless of the environment."""
    for collector in (news_collector, jobs_collector, tone_collector):
        monkeypatch.setattr(collector, "api_key", None)


@pytest_asyncio.fixture
async def client(session_factory, offline_collectors):
    from main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def make_job(title: str, description: str = "", location: str = "Remote") -> JobSignal:
    return JobSignal(
        title=title,
        company="Acme",
        location=location,
        posted_date="2025-03-01T00:00:00Z",
        description=description,
    )


def make_news(title: str, source: str = "Reuters") -> NewsItem:
    return NewsItem(
        title=title,
        description="",
        url="https://example.com/article",
        published_at="2025-03-10T08:00:00Z",
        source=source,
    )


@pytest.fixture
def sample_brief():
    return BriefCreate(
        company_name="Acme",
        website="https://www.acme.io",
        user_intent="pitch observability tooling",
        summary="Acme summary",
        pitch_angle="Acme pitch",
        subject_line="Strategic Growth Insights for Acme",
        what_not_to_pitch="Avoid generic pitches to Acme",
        signal_tag="Strategic Growth - Market Positioning",
        news=[make_news("Acme raises Series C")],
        tech_stack=["Python"],
        tech_stack_data=[
            TechStackItem(name="Python", confidence="Low", category="Backend", first_detected=FIXED_NOW.isoformat())
        ],
        job_signals=[make_job("Backend Engineer", "Python services", "Austin, TX")],
        stock_data=StockData(),
        tone_insights=ToneInsights(emotion="joy", confidence=0.8, mood="positive", sentiment="positive"),
        hiring_trends="Active hiring: 1 roles across 1 locations",
        news_trends="1 recent articles - positive sentiment",
    )
