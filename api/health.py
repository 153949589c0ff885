"""Health check endpoint."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from schemas.health import HealthResponse, ServiceStatus
from services.jobs_collector import jobs_collector
from services.news_collector import news_collector
from services.rate_limiter import RATE_LIMIT_CONFIGS, rate_limit
from services.stock_collector import stock_collector
from services.tone_collector import tone_collector

logger = structlog.get_logger()
router = APIRouter()


async def check_database(db: AsyncSession) -> str:
    """Check database connectivity."""
    try:
        await db.execute(text("SELECT 1"))
        return "ok"
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database health check failed", error=str(e))
        return "down"


def collector_mode(collector) -> str:
    """'live' when the collector has credentials, 'simulated' otherwise."""
    return "live" if collector.is_available else "simulated"


@router.get("/health", response_model=HealthResponse)
@rate_limit(**RATE_LIMIT_CONFIGS["public"])
async def health_check(request: Request, response: Response, db: AsyncSession = Depends(get_db)):
    """
    Database status plus the live/simulated mode of each signal collector.

    Simulated collectors never degrade the overall status; only the database does.
    """
    services = ServiceStatus(
        database=await check_database(db),
        news=collector_mode(news_collector),
        jobs=collector_mode(jobs_collector),
        stock=collector_mode(stock_collector),
        tone=collector_mode(tone_collector),
    )

    return HealthResponse(
        status="ok" if services.database == "ok" else "degraded",
        timestamp=datetime.now(timezone.utc),
        services=services,
    )
