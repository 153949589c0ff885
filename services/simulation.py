"""Simulation mode: placeholder signal data for sources that are not available.

Simulated values are drawn from a ``random.Random`` per collector (see
``SimulationMode.fork``) so a seeded ``SimulationMode`` reproduces the same
brief inputs run after run. Collectors report simulated data through
``CollectorResult.is_simulated``; it never passes as live data.
"""

import random
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Generic, List, Optional, TypeVar, Union

from schemas.brief import (
    EmotionScore,
    JobSignal,
    NewsItem,
    PricePoint,
    StockData,
    ToneInsights,
)

T = TypeVar("T")


@dataclass
class CollectorResult(Generic[T]):
    """Output of one signal collector."""
    data: T
    is_simulated: bool


SIMULATED_ROLES = [
    "Senior Software Engineer",
    "VP of Engineering",
    "Product Manager",
    "DevOps Engineer",
    "Sales Director",
]

SIMULATED_LOCATIONS = ["San Francisco, CA", "New York, NY", "Remote", "Seattle, WA", "Austin, TX"]

EMOTIONS = ["joy", "trust", "anticipation", "surprise", "fear", "sadness"]

POSITIVE_EMOTIONS = {"joy", "trust"}
NEGATIVE_EMOTIONS = {"fear", "sadness", "anger", "disgust"}


def sentiment_for_emotion(emotion: Optional[str]) -> str:
    """Map an emotion name onto positive / negative / neutral."""
    if emotion in POSITIVE_EMOTIONS:
        return "positive"
    if emotion in NEGATIVE_EMOTIONS:
        return "negative"
    return "neutral"


def _slug(company_name: str) -> str:
    return re.sub(r"\s+", "-", company_name.strip().lower())


class SimulationMode:
    """Seedable generator for simulated news, jobs, stock and tone data."""

    def __init__(self, seed: Optional[Union[int, str]] = None, now: Optional[datetime] = None):
        self.seed = seed
        self.rng = random.Random(seed)
        self._now = now

    def now(self) -> datetime:
        return self._now or datetime.now(timezone.utc)

    def fork(self, name: str) -> "SimulationMode":
        """Independent stream for one collector; seeded parents fork into seeded children."""
        seed = None if self.seed is None else f"{self.seed}:{name}"
        return SimulationMode(seed=seed, now=self._now)

    def _days_ago(self, max_days: float) -> str:
        return (self.now() - timedelta(days=self.rng.random() * max_days)).isoformat()

    def news(self, company_name: str) -> List[NewsItem]:
        slug = _slug(company_name)
        return [
            NewsItem(
                title=f"{company_name} announces strategic AI integration initiative",
                description=(
                    f"{company_name} has unveiled comprehensive AI transformation plans focusing on "
                    "workflow automation and customer experience enhancement."
                ),
                url=f"https://example.com/news/{slug}",
                published_at=self._days_ago(7),
                source="TechCrunch",
                source_favicon="https://techcrunch.com/favicon.ico",
            ),
            NewsItem(
                title=f"{company_name} secures Series B funding for global expansion",
                description=(
                    "The company raised $50M to accelerate product development and "
                    "international market penetration."
                ),
                url=f"https://example.com/funding/{slug}",
                published_at=self._days_ago(14),
                source="VentureBeat",
                source_favicon="https://venturebeat.com/favicon.ico",
            ),
        ]

    def jobs(self, company_name: str) -> List[JobSignal]:
        jobs = []
        for role in SIMULATED_ROLES:
            low = int(self.rng.random() * 100 + 100)
            high = int(self.rng.random() * 100 + 150)
            jobs.append(JobSignal(
                title=role,
                company=company_name,
                location=self.rng.choice(SIMULATED_LOCATIONS),
                posted_date=self._days_ago(30),
                description=(
                    f"Join our growing team as a {role}. We're looking for talented individuals "
                    "to help build scalable solutions and drive innovation."
                ),
                salary=f"${low}k - ${high}k",
            ))
        return jobs

    def stock(self, ticker: str) -> StockData:
        base_price = self.rng.random() * 200 + 50
        change = (self.rng.random() - 0.5) * 10
        change_percent = change / base_price * 100
        today = self.now()

        history = [
            PricePoint(
                date=(today - timedelta(days=29 - i)).date().isoformat(),
                value=round(base_price + (self.rng.random() - 0.5) * 20, 2),
            )
            for i in range(30)
        ]

        sign = "+" if change >= 0 else ""
        return StockData(
            ticker=ticker,
            current_price=f"${base_price:.2f}",
            price_change=f"{sign}{change:.2f} ({change_percent:.2f}%)",
            price_history=history,
            market_cap=f"${self.rng.random() * 500 + 100:.1f}B",
            volume=f"{self.rng.random() * 50 + 10:.1f}M",
        )

    def tone(self) -> ToneInsights:
        primary = self.rng.choice(EMOTIONS)
        confidence = self.rng.random() * 0.4 + 0.6
        # Dominant score lands in [0.7, 1.0), every other score below 0.4
        emotions = [
            EmotionScore(
                name=emotion,
                score=self.rng.random() * 0.3 + 0.7 if emotion == primary else self.rng.random() * 0.4,
            )
            for emotion in EMOTIONS
        ]
        sentiment = sentiment_for_emotion(primary)
        return ToneInsights(
            emotion=primary,
            confidence=confidence,
            mood=sentiment,
            sentiment=sentiment,
            emotions=emotions,
        )
