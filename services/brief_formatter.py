"""Renders narrative plans into the text fields stored on a brief."""

from typing import Iterable, List

from schemas.brief import NarrativeUpdate
from services.narrative_service import ImprovementContext, NarrativePlan


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def _section(header: str, body: str) -> str:
    return f"{header}\n{body}"


def render_summary(plan: NarrativePlan) -> str:
    company = plan.company_name
    opening = (
        f"{company} demonstrates strong momentum with {len(plan.signals)} key market signals indicating "
        "strategic expansion and technology advancement. Current positioning suggests active growth phase "
        "with focus on operational scaling."
    )
    return "\n\n".join([
        _section(f"🚀 Strategic Opportunity: {company}", opening),
        _section("🔍 Key Signals:", _bullets(plan.signals)),
        _section("🧠 Inferred Priorities:", ", ".join(plan.priorities)),
        _section("🎯 Strategic Angle:", plan.strategic_angle),
        _section("📌 Tagline:", plan.tagline),
    ])


def render_pitch_angle(plan: NarrativePlan) -> str:
    return "\n\n".join([
        "🎯 Pitch Strategy",
        _section("📌 Positioning Angle:", plan.positioning_angle),
        _section("🧠 Primary Hook:", plan.primary_hook),
        _section("❗ Pain Points to Target:", _bullets(plan.pain_points)),
        _section("👤 Ideal Buyer Personas:", _bullets(plan.buyer_personas)),
        _section("📣 Messaging Themes:", _bullets(plan.messaging_themes)),
        _section("🚧 Objections to Expect:", plan.objection_response),
        _section("📥 Suggested CTA:", plan.suggested_cta),
    ])


def render_warnings(plan: NarrativePlan) -> str:
    reasoning = (
        f"Strategic reasoning: Based on current market sentiment ({plan.sentiment or 'neutral'}), hiring focus, "
        f"and technology sophistication, {plan.company_name} requires consultative, outcome-focused engagement "
        "rather than transactional product pitches."
    )
    return "\n\n".join(["❌ What Not to Pitch", _bullets(plan.warnings), reasoning])


def render_narrative(plan: NarrativePlan) -> NarrativeUpdate:
    """All five narrative fields for a new brief."""
    return NarrativeUpdate(
        summary=render_summary(plan),
        pitch_angle=render_pitch_angle(plan),
        subject_line=plan.subject_line,
        what_not_to_pitch=render_warnings(plan),
        signal_tag=plan.signal_tag,
    )


def _prose(sentences: List[str]) -> str:
    return " ".join(sentence for sentence in sentences if sentence)


def render_improved_narrative(ctx: ImprovementContext) -> NarrativeUpdate:
    """Summary, pitch angle and warnings for an improve pass; other fields stay as stored."""
    company = ctx.company_name

    stock_sentence = ""
    if ctx.stock_trend:
        stock_sentence = f"Financial indicators show {ctx.stock_trend} performance trends."

    summary = _prose([
        f"{company} demonstrates {ctx.sentiment} market sentiment with {ctx.emotional_context} "
        "based on recent intelligence.",
        f"Current {ctx.market_context} combined with {ctx.hiring_context} suggests strategic "
        "opportunities for partnership.",
        stock_sentence,
        f"The company's {ctx.news_count} recent news mentions and {ctx.job_count} active positions indicate "
        f"{'rapid scaling' if ctx.is_actively_hiring else 'steady operations'}, creating optimal timing for "
        "strategic engagement.",
    ])

    pitch_angle = _prose([
        f"Strategic timing analysis reveals {company} is in a {ctx.hiring_context} with {ctx.emotional_context}, "
        f"making this an ideal moment for {ctx.user_intent}.",
        "Recent positive developments create momentum for new partnerships." if ctx.has_positive_news else "",
        "Their active hiring across multiple departments signals readiness for solutions that support scaling "
        "operations." if ctx.is_actively_hiring else
        "Their selective approach to growth indicates focus on high-impact partnerships.",
        f"The {ctx.sentiment} sentiment and {ctx.primary_emotion} emotional tone suggest receptiveness to "
        "strategic initiatives that align with their current trajectory.",
    ])

    what_not_to_pitch = _prose([
        f"Avoid approaches that contradict {company}'s current {ctx.emotional_context} and {ctx.hiring_context}.",
        "Don't pitch cost-cutting or downsizing solutions during their expansion phase." if ctx.is_actively_hiring
        else "Avoid aggressive scaling solutions if they're in maintenance mode.",
        "Be sensitive to recent challenges and avoid highlighting competitive threats."
        if ctx.has_negative_news else "",
        f"Don't ignore their {ctx.sentiment} market sentiment or {ctx.primary_emotion} emotional state.",
        f"Avoid generic pitches that don't acknowledge their specific {ctx.market_context} and strategic "
        "position in the current market environment.",
    ])

    return NarrativeUpdate(
        summary=summary,
        pitch_angle=pitch_angle,
        what_not_to_pitch=what_not_to_pitch,
    )
