"""Brief model: one synthesized outreach brief per row."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Brief(Base):
    """Strategic brief about a target company, owned by at most one user."""

    __tablename__ = "briefs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Request
    company_name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_intent: Mapped[str] = mapped_column(Text, nullable=False)

    # Narrative fields (the only columns an improve pass may rewrite)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    pitch_angle: Mapped[str] = mapped_column(Text, nullable=False)
    subject_line: Mapped[str] = mapped_column(Text, nullable=False)
    what_not_to_pitch: Mapped[str] = mapped_column(Text, nullable=False)
    signal_tag: Mapped[str] = mapped_column(Text, nullable=False)

    # Raw signal collections, embedded as JSON
    news: Mapped[list] = mapped_column(JSON, default=list)
    tech_stack: Mapped[list] = mapped_column(JSON, default=list)
    tech_stack_data: Mapped[list] = mapped_column(JSON, default=list)
    job_signals: Mapped[list] = mapped_column(JSON, default=list)
    stock_data: Mapped[dict] = mapped_column(JSON, default=dict)
    tone_insights: Mapped[dict] = mapped_column(JSON, default=dict)
    intelligence_sources: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Derived display fields
    company_logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hiring_trends: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    news_trends: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)

    def __repr__(self) -> str:
        return f"<Brief(id={self.id}, company='{self.company_name}', user={self.user_id})>"
