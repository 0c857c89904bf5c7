"""
Database table definitions and it stores:
- Journeys (generated content, per-day feedback, completion flags, sealed reflection notes)
- Q&A reflection exchanges per day
Main purpose:
Document-style persistence keyed by user identity.
"""



from sqlalchemy import String, Text, Integer, DateTime, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from sophrosyne.db.base import Base

class JourneyRecord(Base):
    __tablename__ = "journeys"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    goal: Mapped[str] = mapped_column(Text)
    maturity: Mapped[str] = mapped_column(String)
    content: Mapped[str] = mapped_column(Text)  # JSON: generated journey
    feedback: Mapped[str] = mapped_column(Text, default="{}")  # JSON: {"day_3": {...}}
    completed_days: Mapped[str] = mapped_column(Text, default="{}")  # JSON: {"3": true}
    reflection_notes: Mapped[str] = mapped_column(Text, default="{}")  # JSON: {"day_3": {verse, reflection, ...}}
    used_fallback: Mapped[bool] = mapped_column(Boolean, default=False)
    revision_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_revised: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class QAEntry(Base):
    __tablename__ = "qa_entries"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    day_number: Mapped[int] = mapped_column(Integer)
    question: Mapped[str] = mapped_column(Text)
    answer: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
Index("ix_qa_entries_user_day", QAEntry.user_id, QAEntry.day_number)
