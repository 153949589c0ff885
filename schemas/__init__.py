"""Pydantic schemas for API requests and responses."""

from .health import HealthResponse
from .brief import (
    BriefCreate,
    BriefResponse,
    CreateBriefRequest,
    CreateBriefResponse,
    ImproveBriefRequest,
    ImproveBriefResponse,
    JobSignal,
    NewsItem,
    StockData,
    TechStackItem,
    ToneInsights,
)

__all__ = [
    "HealthResponse",
    "BriefCreate",
    "BriefResponse",
    "CreateBriefRequest",
    "CreateBriefResponse",
    "ImproveBriefRequest",
    "ImproveBriefResponse",
    "JobSignal",
    "NewsItem",
    "StockData",
    "TechStackItem",
    "ToneInsights",
]
