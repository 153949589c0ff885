"""Brief-related Pydantic schemas."""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


Confidence = Literal["High", "Medium", "Low"]
Sentiment = Literal["positive", "negative", "neutral"]


class CamelModel(BaseModel):
    """Base schema that speaks camelCase on the wire and snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class NewsItem(CamelModel):
    """A news article about the target company."""

    title: str
    description: str = ""
    url: str = ""
    published_at: str = ""
    source: str = ""
    source_favicon: Optional[str] = None


class JobSignal(CamelModel):
    """An open job posting at the target company."""

    title: str
    company: str = ""
    location: str = ""
    posted_date: str = ""
    description: str = ""
    salary: Optional[str] = None


class TechStackItem(CamelModel):
    """A technology inferred from job postings."""

    name: str
    confidence: Confidence
    source: str = "Job Analysis"
    category: str = "Other"
    first_detected: Optional[str] = None


class PricePoint(CamelModel):
    date: str
    value: float


class StockData(CamelModel):
    """Market data; an absent ticker means no public stock data."""

    ticker: Optional[str] = None
    current_price: Optional[str] = None
    price_change: Optional[str] = None
    price_history: Optional[List[PricePoint]] = None
    market_cap: Optional[str] = None
    volume: Optional[str] = None


class EmotionScore(CamelModel):
    name: str
    score: float


class ToneInsights(CamelModel):
    """Emotion and sentiment read from the intent and top headlines."""

    emotion: Optional[str] = None
    confidence: Optional[float] = None
    mood: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    emotions: Optional[List[EmotionScore]] = None


class UserCompany(CamelModel):
    """The requesting user's own company, used to personalize the pitch."""

    name: str
    industry: str = ""
    product: str = ""
    value_proposition: str = ""
    website: Optional[str] = None
    goals: str = ""


class IntelligenceSources(CamelModel):
    """What each signal category contributed, and whether it was simulated."""

    news: int = 0
    jobs: int = 0
    technologies: int = 0
    stock_data: bool = False
    tone_analysis: bool = False
    simulated: Dict[str, bool] = Field(default_factory=dict)


class BriefCreate(CamelModel):
    """A brief as produced by the pipeline, before the store assigns id and timestamp."""

    company_name: str
    website: Optional[str] = None
    user_intent: str
    summary: str
    pitch_angle: str
    subject_line: str
    what_not_to_pitch: str
    signal_tag: str
    news: List[NewsItem] = Field(default_factory=list)
    tech_stack: List[str] = Field(default_factory=list)
    tech_stack_data: List[TechStackItem] = Field(default_factory=list)
    job_signals: List[JobSignal] = Field(default_factory=list)
    stock_data: StockData = Field(default_factory=StockData)
    tone_insights: ToneInsights = Field(default_factory=ToneInsights)
    intelligence_sources: Optional[IntelligenceSources] = None
    company_logo: Optional[str] = None
    hiring_trends: Optional[str] = None
    news_trends: Optional[str] = None


class BriefResponse(BriefCreate):
    """Response schema for a stored brief."""

    id: str
    user_id: Optional[str] = None
    created_at: datetime


class NarrativeUpdate(CamelModel):
    """Partial update; only narrative fields are ever rewritten."""

    summary: Optional[str] = None
    pitch_angle: Optional[str] = None
    subject_line: Optional[str] = None
    what_not_to_pitch: Optional[str] = None
    signal_tag: Optional[str] = None


class CreateBriefRequest(CamelModel):
    """Brief creation payload. Required fields are checked by the handler so a miss is a 400."""

    company_name: Optional[str] = None
    user_intent: Optional[str] = None
    website: Optional[str] = None
    user_id: Optional[str] = None
    user_company: Optional[UserCompany] = None


class ImproveBriefRequest(CamelModel):
    brief_id: Optional[str] = None
    user_id: Optional[str] = None


class CreateBriefResponse(CamelModel):
    success: bool
    brief: BriefResponse


class ImproveBriefResponse(CamelModel):
    success: bool
    brief: BriefResponse
    message: str


class ErrorResponse(CamelModel):
    error: str
    details: Optional[str] = None


class CountEntry(CamelModel):
    name: str
    count: int


class HiringInsights(CamelModel):
    """Department and location breakdown of a brief's job postings."""

    total_roles: int
    departments: List[CountEntry]
    locations: List[CountEntry]
    hiring_trends: str


class BriefStatsResponse(CamelModel):
    """Portfolio totals across a user's briefs."""

    total_briefs: int
    total_news: int
    total_jobs: int
    total_technologies: int
    top_technologies: List[CountEntry]
