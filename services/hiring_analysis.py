"""Derived hiring and news views over a brief's raw signals.

Department and city are computed from job postings on demand and never stored.
"""

from collections import Counter
from typing import List, Sequence, Tuple

from schemas.brief import CountEntry, HiringInsights, JobSignal, NewsItem, ToneInsights

# First matching row wins
DEPARTMENT_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("Engineering", ("engineer", "developer", "architect")),
    ("Data/AI", ("data", "ai", "ml")),
    ("Product", ("product", "pm")),
    ("Sales", ("sales", "account")),
    ("Marketing", ("marketing", "growth")),
    ("Design", ("design", "ux", "ui")),
    ("DevOps", ("devops", "sre", "infrastructure")),
]
DEFAULT_DEPARTMENT = "Other"

TOP_DEPARTMENTS = 5
TOP_LOCATIONS = 3


def department_for(job: JobSignal) -> str:
    title = job.title.lower()
    for department, keywords in DEPARTMENT_RULES:
        if any(keyword in title for keyword in keywords):
            return department
    return DEFAULT_DEPARTMENT


def location_city(job: JobSignal) -> str:
    return job.location.split(",")[0].strip()


def hiring_trends(jobs: Sequence[JobSignal]) -> str:
    locations = {location_city(job) for job in jobs}
    return f"Active hiring: {len(jobs)} roles across {len(locations)} locations"


def news_trends(news: Sequence[NewsItem], tone: ToneInsights) -> str:
    return f"{len(news)} recent articles - {tone.sentiment or 'neutral'} sentiment"


def _top(counter: Counter, limit: int) -> List[CountEntry]:
    return [CountEntry(name=name, count=count) for name, count in counter.most_common(limit)]


def hiring_insights(jobs: Sequence[JobSignal]) -> HiringInsights:
    """Top departments and cities among the postings."""
    departments = Counter(department_for(job) for job in jobs)
    locations = Counter(location_city(job) for job in jobs)
    return HiringInsights(
        total_roles=len(jobs),
        departments=_top(departments, TOP_DEPARTMENTS),
        locations=_top(locations, TOP_LOCATIONS),
        hiring_trends=hiring_trends(jobs),
    )
