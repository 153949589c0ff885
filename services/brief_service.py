"""Brief synthesis pipeline: collect signals, extract, synthesize, persist."""

import asyncio
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlparse

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from models.brief import Brief
from schemas.brief import (
    BriefCreate,
    BriefStatsResponse,
    CountEntry,
    IntelligenceSources,
    JobSignal,
    NewsItem,
    StockData,
    TechStackItem,
    ToneInsights,
    UserCompany,
)
from services.brief_formatter import render_improved_narrative, render_narrative
from services.brief_repository import BriefNotFoundError, BriefRepository, to_response
from services.hiring_analysis import hiring_trends, news_trends
from services.jobs_collector import JobsCollector, jobs_collector
from services.narrative_service import derive_improvement_context, synthesize_narrative
from services.news_collector import NewsCollector, news_collector
from services.signal_extractor import extract_key_signals
from services.simulation import CollectorResult, SimulationMode
from services.stock_collector import StockCollector, stock_collector
from services.tech_stack_service import infer_tech_stack
from services.tone_collector import ToneCollector, tone_collector

logger = structlog.get_logger()

LOGO_URL = "https://logo.clearbit.com/{domain}"
IMPROVED_MESSAGE = "Brief improved with deeper insights and sharper positioning."
TOP_TECHNOLOGIES = 10


class BriefValidationError(ValueError):
    """Required brief input is missing."""
    pass


@dataclass
class CollectedSignals:
    """Raw signal collections for one brief, with per-category simulation flags."""
    news: CollectorResult[List[NewsItem]]
    jobs: CollectorResult[List[JobSignal]]
    stock: CollectorResult[StockData]
    tone: CollectorResult[ToneInsights]
    tech_stack: List[TechStackItem]

    def intelligence_sources(self) -> IntelligenceSources:
        return IntelligenceSources(
            news=len(self.news.data),
            jobs=len(self.jobs.data),
            technologies=len(self.tech_stack),
            stock_data=bool(self.stock.data.ticker),
            tone_analysis=bool(self.tone.data.emotion),
            simulated={
                "news": self.news.is_simulated,
                "jobs": self.jobs.is_simulated,
                "stock": self.stock.is_simulated,
                "tone": self.tone.is_simulated,
            },
        )


def company_logo(website: Optional[str]) -> Optional[str]:
    """Logo URL for the website's host, or None when the website is not a parseable URL."""
    if not website:
        return None
    try:
        host = urlparse(website).hostname
    except ValueError:
        logger.info("Could not parse website for logo", website=website)
        return None
    if not host:
        return None
    return LOGO_URL.format(domain=host.replace("www.", "", 1))


class BriefService:
    """Runs the brief pipeline against injected collectors and a repository per session."""

    def __init__(
        self,
        news: NewsCollector = news_collector,
        jobs: JobsCollector = jobs_collector,
        stock: StockCollector = stock_collector,
        tone: ToneCollector = tone_collector,
        simulation_seed: Optional[int] = None,
    ):
        self.news = news
        self.jobs = jobs
        self.stock = stock
        self.tone = tone
        self.simulation_seed = simulation_seed if simulation_seed is not None else settings.simulation_seed

    def simulation(self) -> SimulationMode:
        return SimulationMode(seed=self.simulation_seed)

    async def collect_signals(
        self,
        company_name: str,
        user_intent: str,
        simulation: SimulationMode,
    ) -> CollectedSignals:
        """
        Run every collector for one company.

        News, jobs and stock are independent and run concurrently; tone reads the
        collected headlines so it runs last. Each collector gets its own forked
        simulation stream, so simulated output does not depend on scheduling.
        """
        news, jobs, stock = await asyncio.gather(
            self.news.collect(company_name, simulation.fork("news")),
            self.jobs.collect(company_name, simulation.fork("jobs")),
            self.stock.collect(company_name, simulation.fork("stock")),
        )
        tone = await self.tone.collect(user_intent, news.data, simulation.fork("tone"))
        tech_stack = infer_tech_stack(jobs.data, detected_at=simulation.now().isoformat())

        return CollectedSignals(news=news, jobs=jobs, stock=stock, tone=tone, tech_stack=tech_stack)

    def build_brief(
        self,
        company_name: str,
        user_intent: str,
        signals: CollectedSignals,
        website: Optional[str] = None,
        user_company: Optional[UserCompany] = None,
    ) -> BriefCreate:
        """Extract key signals, synthesize the narrative and assemble the record."""
        news, jobs, stock, tone = signals.news.data, signals.jobs.data, signals.stock.data, signals.tone.data

        key_signals = extract_key_signals(news, jobs, stock, signals.tech_stack)
        plan = synthesize_narrative(
            company_name,
            user_intent,
            key_signals,
            tone,
            jobs,
            signals.tech_stack,
            user_company=user_company,
        )
        narrative = render_narrative(plan)

        return BriefCreate(
            company_name=company_name,
            website=website,
            user_intent=user_intent,
            summary=narrative.summary,
            pitch_angle=narrative.pitch_angle,
            subject_line=narrative.subject_line,
            what_not_to_pitch=narrative.what_not_to_pitch,
            signal_tag=narrative.signal_tag,
            news=news,
            tech_stack=[tech.name for tech in signals.tech_stack],
            tech_stack_data=signals.tech_stack,
            job_signals=jobs,
            stock_data=stock,
            tone_insights=tone,
            intelligence_sources=signals.intelligence_sources(),
            company_logo=company_logo(website),
            hiring_trends=hiring_trends(jobs),
            news_trends=news_trends(news, tone),
        )

    async def create_brief(
        self,
        db: AsyncSession,
        company_name: Optional[str],
        user_intent: Optional[str],
        website: Optional[str] = None,
        user_id: Optional[str] = None,
        user_company: Optional[UserCompany] = None,
    ) -> Brief:
        """
        Build and store a strategic brief.

        Raises:
            BriefValidationError: company name or intent missing, before any collection
            BriefPersistenceError: the store rejected the new row
        """
        if not company_name or not company_name.strip() or not user_intent or not user_intent.strip():
            raise BriefValidationError("Company name and user intent are required")

        company_name = company_name.strip()
        user_intent = user_intent.strip()
        logger.info("Creating strategic brief", company=company_name, user_id=user_id)

        signals = await self.collect_signals(company_name, user_intent, self.simulation())
        brief = self.build_brief(company_name, user_intent, signals, website=website, user_company=user_company)

        record = await BriefRepository(db).create(brief, owner_id=user_id)
        logger.info(
            "Strategic brief created",
            brief_id=record.id,
            company=company_name,
            simulated=brief.intelligence_sources.simulated,
        )
        return record

    async def improve_brief(self, db: AsyncSession, brief_id: str, user_id: Optional[str] = None) -> Brief:
        """
        Regenerate summary, pitch angle and warnings from the stored signals.

        Raises:
            BriefNotFoundError: unknown id, or a brief the caller does not own
            BriefPersistenceError: the store rejected the update
        """
        repository = BriefRepository(db)
        record = await repository.get_by_id(brief_id, owner_id=user_id)
        if record is None:
            raise BriefNotFoundError(brief_id)

        stored = to_response(record)
        context = derive_improvement_context(
            stored.company_name,
            stored.user_intent,
            stored.news,
            stored.job_signals,
            stored.stock_data,
            stored.tone_insights,
        )
        logger.info(
            "Improving brief",
            brief_id=brief_id,
            market_context=context.market_context,
            hiring_context=context.hiring_context,
        )
        return await repository.update(brief_id, render_improved_narrative(context), owner_id=user_id)

    async def get_stats(self, db: AsyncSession, user_id: Optional[str] = None) -> BriefStatsResponse:
        briefs = await BriefRepository(db).get_all(owner_id=user_id)
        technologies = Counter(name for brief in briefs for name in (brief.tech_stack or []))
        return BriefStatsResponse(
            total_briefs=len(briefs),
            total_news=sum(len(brief.news or []) for brief in briefs),
            total_jobs=sum(len(brief.job_signals or []) for brief in briefs),
            total_technologies=len(technologies),
            top_technologies=[
                CountEntry(name=name, count=count) for name, count in technologies.most_common(TOP_TECHNOLOGIES)
            ],
        )


# Global service instance
brief_service = BriefService()
