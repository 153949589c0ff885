"""Turns collected company data into a short, ordered list of key signals.

Rules run in table order and the output keeps only the first ``MAX_SIGNALS``
matches, so news rules outrank hiring rules, which outrank stock and tech
rules, whenever more signals fire than fit.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from schemas.brief import JobSignal, NewsItem, StockData, TechStackItem

MAX_SIGNALS = 4

AGGRESSIVE_HIRING_THRESHOLD = 10
SELECTIVE_HIRING_THRESHOLD = 5
ENGINEERING_ROLE_THRESHOLD = 5
SALES_ROLE_THRESHOLD = 3
MODERN_TECH_THRESHOLD = 5

ENGINEERING_TITLE_KEYWORDS = ("engineer", "developer")
SALES_TITLE_KEYWORDS = ("sales", "account", "business development")
MODERN_TECH = ("React", "Node.js", "Python", "Kubernetes", "AWS", "TypeScript")


@dataclass(frozen=True)
class NewsRule:
    """Keyword rule applied to each lowercased news title."""
    name: str
    keywords: Tuple[str, ...]
    render: Callable[[NewsItem], str]

    def matches(self, title: str) -> bool:
        return any(keyword in title for keyword in self.keywords)


def _headline_prefix(item: NewsItem, words: int = 6) -> str:
    return " ".join(item.title.split(" ")[:words])


NEWS_RULES: List[NewsRule] = [
    NewsRule("funding", ("funding", "raised", "series"),
             lambda item: f"Secured funding round ({item.source})"),
    NewsRule("launch", ("launch", "announces"),
             lambda item: f"Launched new initiative: {_headline_prefix(item)}"),
    NewsRule("partnership", ("partnership", "acquisition"),
             lambda item: "Strategic partnership/acquisition activity"),
    NewsRule("ai", ("ai", "artificial intelligence"),
             lambda item: "AI product development focus"),
]


def count_roles(jobs: Sequence[JobSignal], keywords: Tuple[str, ...]) -> int:
    """Number of postings whose lowercased title contains any keyword."""
    return sum(1 for job in jobs if any(keyword in job.title.lower() for keyword in keywords))


def news_signals(news: Sequence[NewsItem]) -> List[str]:
    signals = []
    for item in news:
        title = item.title.lower()
        signals.extend(rule.render(item) for rule in NEWS_RULES if rule.matches(title))
    return signals


def hiring_signals(jobs: Sequence[JobSignal]) -> List[str]:
    if len(jobs) > AGGRESSIVE_HIRING_THRESHOLD:
        return [f"Aggressive hiring: {len(jobs)}+ open positions"]
    if len(jobs) > SELECTIVE_HIRING_THRESHOLD:
        return [f"Selective expansion: {len(jobs)} strategic hires"]
    return []


def engineering_signals(jobs: Sequence[JobSignal]) -> List[str]:
    engineering_roles = count_roles(jobs, ENGINEERING_TITLE_KEYWORDS)
    if engineering_roles > ENGINEERING_ROLE_THRESHOLD:
        return [f"Engineering team scaling: {engineering_roles} technical roles"]
    return []


def sales_signals(jobs: Sequence[JobSignal]) -> List[str]:
    sales_roles = count_roles(jobs, SALES_TITLE_KEYWORDS)
    if sales_roles > SALES_ROLE_THRESHOLD:
        return [f"GTM expansion: {sales_roles} sales positions"]
    return []


def stock_signals(stock: StockData) -> List[str]:
    if stock.price_change and "+" in stock.price_change:
        return [f"Positive market performance: {stock.price_change}"]
    return []


def tech_signals(tech_stack: Sequence[TechStackItem]) -> List[str]:
    modern = [tech for tech in tech_stack if tech.name in MODERN_TECH]
    if len(modern) > MODERN_TECH_THRESHOLD:
        return [f"Modern tech stack: {len(modern)} cutting-edge technologies"]
    return []


def extract_key_signals(
    news: Sequence[NewsItem],
    jobs: Sequence[JobSignal],
    stock: StockData,
    tech_stack: Sequence[TechStackItem],
) -> List[str]:
    """Evaluate every rule in priority order and keep the first four signals."""
    signals = (
        news_signals(news)
        + hiring_signals(jobs)
        + engineering_signals(jobs)
        + sales_signals(jobs)
        + stock_signals(stock)
        + tech_signals(tech_stack)
    )
    return signals[:MAX_SIGNALS]
