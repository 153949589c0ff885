"""Rule-based narrative synthesis for strategic briefs.

Each rule maps a slice of the inputs (key signals, tone, jobs, tech stack) to
a qualitative category. Signal rules match case-sensitively on the signal
text, so "AI" and "ai" are different needles. The result is a structured
``NarrativePlan``; ``services.brief_formatter`` turns it into text.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from schemas.brief import JobSignal, NewsItem, StockData, TechStackItem, ToneInsights, UserCompany

MAX_PRIORITIES = 3
MAX_PAIN_POINTS = 3
MAX_PERSONAS = 2
MAX_TAGLINE_THEMES = 3

DEFAULT_TAGLINE = "Strategic Growth | Operational Excellence | Market Leadership"
DEFAULT_MESSAGING_THEMES = ["Operational efficiency", "Strategic alignment", "Growth enablement"]

# (needles matched against signal text, resulting category)
PRIORITY_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("hiring", "expansion"), "Scaling operations and team growth"),
    (("AI", "tech stack"), "Technology modernization and AI integration"),
    (("GTM", "sales"), "Go-to-market acceleration and revenue growth"),
    (("funding", "partnership"), "Strategic partnerships and market expansion"),
]
POSITIVE_MOMENTUM_PRIORITY = "Capitalizing on positive momentum"

TAGLINE_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("scaling", "hiring"), "Scaling Operations"),
    (("AI", "tech"), "AI Integration"),
    (("GTM", "sales"), "Revenue Growth"),
    (("funding", "partnership"), "Market Expansion"),
]

ANGLE_PHASE_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("scaling",), "scaling phase"),
    (("AI",), "AI transformation"),
]
DEFAULT_ANGLE_PHASE = "growth trajectory"

ANGLE_NEED_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("engineering",), "technical scaling challenges"),
    (("GTM",), "go-to-market acceleration needs"),
]
DEFAULT_ANGLE_NEED = "operational efficiency requirements"

SCALING_PAIN_POINTS = [
    "Scaling bottlenecks as team grows rapidly",
    "Maintaining quality and consistency during expansion",
]
TECH_COMPLEXITY_PAIN_POINT = "Technology stack complexity and integration challenges"
INFRASTRUCTURE_PAIN_POINT = "Infrastructure scaling and deployment efficiency"
AI_PAIN_POINT = "AI implementation and workflow integration gaps"
COMPLEX_STACK_SIZE = 8

# (title keywords, persona); first two matching rows win
PERSONA_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("product",), "VP of Product"),
    (("sales", "revenue"), "Chief Revenue Officer"),
    (("operations",), "VP of Operations"),
]

# (needles matched against pain points, theme)
PAIN_POINT_THEME_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("scaling",), "Scaling without breaking"),
    (("complexity",), "Simplifying technical complexity"),
    (("AI",), "AI workflow integration"),
]

SOPHISTICATED_STACK_SIZE = 5
GENERIC_WARNING = "Refrain from generic productivity claims — they demand outcome-based, strategic messaging"


def mentions(texts: Sequence[str], needles: Sequence[str]) -> bool:
    """True if any text contains any needle."""
    return any(needle in text for text in texts for needle in needles)


def _first_match(texts: Sequence[str], rules, default: str) -> str:
    for needles, value in rules:
        if mentions(texts, needles):
            return value
    return default


def _titles(jobs: Sequence[JobSignal]) -> List[str]:
    return [job.title.lower() for job in jobs]


@dataclass
class NarrativePlan:
    """Everything the formatter needs to render the five narrative fields."""
    company_name: str
    signals: List[str]
    priorities: List[str]
    strategic_angle: str
    tagline: str
    positioning_angle: str
    primary_hook: str
    pain_points: List[str]
    buyer_personas: List[str]
    messaging_themes: List[str]
    objection_response: str
    suggested_cta: str
    subject_line: str
    warnings: List[str]
    sentiment: Optional[str]
    signal_tag: str


def analyze_priorities(signals: Sequence[str], tone: ToneInsights) -> List[str]:
    priorities = [priority for needles, priority in PRIORITY_RULES if mentions(signals, needles)]
    if tone.sentiment == "positive":
        priorities.append(POSITIVE_MOMENTUM_PRIORITY)
    return priorities[:MAX_PRIORITIES]


def generate_strategic_angle(
    company_name: str,
    signals: Sequence[str],
    user_intent: str,
    user_company: Optional[UserCompany] = None,
) -> str:
    if not user_company:
        return (
            f"Strategic timing optimal for {user_intent} based on current expansion signals "
            "and market positioning."
        )

    phase = _first_match(signals, ANGLE_PHASE_RULES, DEFAULT_ANGLE_PHASE)
    need = _first_match(signals, ANGLE_NEED_RULES, DEFAULT_ANGLE_NEED)
    return (
        f"{user_company.name}'s {user_company.product} aligns perfectly with {company_name}'s current {phase}. "
        f"{user_company.value_proposition} directly addresses their {need}."
    )


def identify_pain_points(
    signals: Sequence[str],
    tech_stack: Sequence[TechStackItem],
    jobs: Sequence[JobSignal],
) -> List[str]:
    pain_points = []
    if mentions(signals, ("scaling", "hiring")):
        pain_points.extend(SCALING_PAIN_POINTS)
    if len(tech_stack) > COMPLEX_STACK_SIZE:
        pain_points.append(TECH_COMPLEXITY_PAIN_POINT)
    if mentions(_titles(jobs), ("devops", "infrastructure")):
        pain_points.append(INFRASTRUCTURE_PAIN_POINT)
    if mentions(signals, ("AI",)):
        pain_points.append(AI_PAIN_POINT)
    return pain_points[:MAX_PAIN_POINTS]


def identify_buyer_personas(jobs: Sequence[JobSignal]) -> List[str]:
    titles = _titles(jobs)
    personas = []
    if mentions(titles, ("cto", "vp engineering")):
        personas.append("CTO/VP of Engineering")
    elif mentions(titles, ("engineer",)):
        personas.append("VP of Engineering")

    personas.extend(persona for keywords, persona in PERSONA_RULES if mentions(titles, keywords))
    return personas[:MAX_PERSONAS]


def generate_messaging_themes(signals: Sequence[str], pain_points: Sequence[str]) -> List[str]:
    themes = [theme for needles, theme in PAIN_POINT_THEME_RULES if mentions(pain_points, needles)]
    if mentions(signals, ("GTM",)):
        themes.append("Revenue acceleration")
    return themes or list(DEFAULT_MESSAGING_THEMES)


def generate_tagline(signals: Sequence[str]) -> str:
    themes = [theme for needles, theme in TAGLINE_RULES if mentions(signals, needles)]
    return " | ".join(themes[:MAX_TAGLINE_THEMES]) or DEFAULT_TAGLINE


def generate_subject_line(company_name: str, user_company: Optional[UserCompany] = None) -> str:
    if user_company:
        return f"{user_company.name} x {company_name} Strategic Partnership"
    return f"Strategic Growth Insights for {company_name}"


def generate_warnings(
    signals: Sequence[str],
    tone: ToneInsights,
    tech_stack: Sequence[TechStackItem],
) -> List[str]:
    warnings = []
    if mentions(signals, ("AI",)):
        warnings.append("Don't lead with basic automation — they're already investing in AI capabilities")
    if mentions(signals, ("scaling", "hiring")):
        warnings.append("Avoid cost-cutting messaging — they're in growth mode, not optimization phase")
    if tone.sentiment == "positive":
        warnings.append("Don't emphasize problems — they're experiencing positive momentum")
    if len(tech_stack) > SOPHISTICATED_STACK_SIZE:
        warnings.append('Skip generic "modernization" pitches — they already have sophisticated tech stack')
    warnings.append(GENERIC_WARNING)
    return warnings


def generate_signal_tag(signals: Sequence[str], tone: ToneInsights) -> str:
    if mentions(signals, ("scaling", "hiring")):
        sentiment = tone.sentiment.capitalize() if tone.sentiment else "Neutral"
        return f"Rapid Scaling - {sentiment} Momentum"
    if mentions(signals, ("AI",)):
        return "AI Transformation - Technology Focus"
    if mentions(signals, ("funding",)):
        return "Growth Capital - Expansion Phase"
    return "Strategic Growth - Market Positioning"


def synthesize_narrative(
    company_name: str,
    user_intent: str,
    signals: Sequence[str],
    tone: ToneInsights,
    jobs: Sequence[JobSignal],
    tech_stack: Sequence[TechStackItem],
    user_company: Optional[UserCompany] = None,
) -> NarrativePlan:
    """Apply every narrative rule to the extracted signals and collected data."""
    signals = list(signals)
    pain_points = identify_pain_points(signals, tech_stack, jobs)
    intent = user_intent.lower()

    if user_company:
        positioning_angle = (
            f"{user_company.name} enables {company_name} to {intent} while maintaining operational "
            "excellence during their current growth phase."
        )
        primary_hook = (
            f"{user_company.value_proposition} specifically designed for companies like {company_name} "
            "experiencing rapid scaling challenges."
        )
        objection_response = (
            f'"Already using X" → Response: "{user_company.name} integrates with existing tools to '
            'provide unified visibility and control."'
        )
        suggested_cta = (
            f'"Would it be valuable to see how {user_company.name} helped similar companies during '
            'their scaling phase?"'
        )
    else:
        positioning_angle = (
            f"Strategic partnership opportunity to support {company_name}'s expansion through {intent}."
        )
        primary_hook = (
            f"Targeted solution addressing {company_name}'s current operational and strategic priorities."
        )
        objection_response = (
            '"Already have solutions" → Response: "We complement existing infrastructure to eliminate '
            'blind spots."'
        )
        suggested_cta = (
            '"Would it be helpful to share a brief analysis of optimization opportunities specific to '
            'your current growth stage?"'
        )

    return NarrativePlan(
        company_name=company_name,
        signals=signals,
        priorities=analyze_priorities(signals, tone),
        strategic_angle=generate_strategic_angle(company_name, signals, user_intent, user_company),
        tagline=generate_tagline(signals),
        positioning_angle=positioning_angle,
        primary_hook=primary_hook,
        pain_points=pain_points,
        buyer_personas=identify_buyer_personas(jobs),
        messaging_themes=generate_messaging_themes(signals, pain_points),
        objection_response=objection_response,
        suggested_cta=suggested_cta,
        subject_line=generate_subject_line(company_name, user_company),
        warnings=generate_warnings(signals, tone, tech_stack),
        sentiment=tone.sentiment,
        signal_tag=generate_signal_tag(signals, tone),
    )


# Improve pass

POSITIVE_NEWS_KEYWORDS = ("growth", "funding", "expansion", "partnership")
NEGATIVE_NEWS_KEYWORDS = ("layoffs", "decline", "loss")
ACTIVE_HIRING_THRESHOLD = 5


@dataclass
class ImprovementContext:
    """Qualitative reading of a stored brief's raw signals."""
    company_name: str
    user_intent: str
    sentiment: str
    primary_emotion: str
    market_context: str
    hiring_context: str
    emotional_context: str
    has_positive_news: bool
    has_negative_news: bool
    is_actively_hiring: bool
    news_count: int
    job_count: int
    stock_trend: Optional[str] = None


def derive_improvement_context(
    company_name: str,
    user_intent: str,
    news: Sequence[NewsItem],
    jobs: Sequence[JobSignal],
    stock: StockData,
    tone: ToneInsights,
) -> ImprovementContext:
    """Read market, hiring and emotional context from already-collected signals."""
    titles = [item.title.lower() for item in news]
    has_positive_news = mentions(titles, POSITIVE_NEWS_KEYWORDS)
    has_negative_news = mentions(titles, NEGATIVE_NEWS_KEYWORDS)
    is_actively_hiring = len(jobs) > ACTIVE_HIRING_THRESHOLD
    sentiment = tone.sentiment or "neutral"
    primary_emotion = tone.emotion or "neutral"

    if has_positive_news:
        market_context = "positive momentum"
    elif has_negative_news:
        market_context = "challenging market conditions"
    else:
        market_context = "stable market position"

    if is_actively_hiring:
        hiring_context = "aggressive expansion phase"
    elif jobs:
        hiring_context = "selective growth mode"
    else:
        hiring_context = "maintaining current team size"

    if primary_emotion in ("joy", "trust"):
        emotional_context = "optimistic outlook"
    elif primary_emotion in ("fear", "sadness"):
        emotional_context = "cautious approach"
    else:
        emotional_context = "balanced perspective"

    stock_trend = None
    if stock.ticker:
        stock_trend = "positive" if stock.price_change and "+" in stock.price_change else "mixed"

    return ImprovementContext(
        company_name=company_name,
        user_intent=user_intent,
        sentiment=sentiment,
        primary_emotion=primary_emotion,
        market_context=market_context,
        hiring_context=hiring_context,
        emotional_context=emotional_context,
        has_positive_news=has_positive_news,
        has_negative_news=has_negative_news,
        is_actively_hiring=is_actively_hiring,
        news_count=len(news),
        job_count=len(jobs),
        stock_trend=stock_trend,
    )
