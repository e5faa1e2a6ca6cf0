from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import JSON, Boolean, Date, Enum, ForeignKey, String, Text, UniqueConstraint, Uuid, func
import uuid
import datetime as dt
from typing import Optional, List

MOOD_CATEGORIES = ("positive", "neutral", "stressed", "high_risk")

mood_category_enum = Enum(*MOOD_CATEGORIES, name="mood_category")

input_type_enum = Enum("text", "voice", name="checkin_input_type")

user_role_enum = Enum("employee", "management", name="user_role")


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    employee_id: Mapped[Optional[str]] = mapped_column(String(64))
    role: Mapped[str] = mapped_column(user_role_enum, default="employee")
    vessel: Mapped[Optional[str]] = mapped_column(String(120))
    department: Mapped[str] = mapped_column(String(120))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[dt.datetime] = mapped_column(server_default=func.now())
    checkins: Mapped[List["CheckIn"]] = relationship(back_populates="user", cascade="all, delete")
    assessments: Mapped[List["WellnessAssessment"]] = relationship(back_populates="user", cascade="all, delete")


class CheckIn(Base):
    """Quick free-text check-in. One per user per calendar day, never edited."""
    __tablename__ = "checkins"
    __table_args__ = (UniqueConstraint("user_id", "checkin_day", name="uq_checkins_user_day"),)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    user: Mapped["User"] = relationship(back_populates="checkins")
    date: Mapped[dt.datetime] = mapped_column(index=True)
    checkin_day: Mapped[dt.date] = mapped_column(Date)
    mood_input: Mapped[str] = mapped_column(Text)
    input_type: Mapped[str] = mapped_column(input_type_enum, default="text")
    sentiment_score: Mapped[float]
    wellness_score: Mapped[int]
    mood_category: Mapped[str] = mapped_column(mood_category_enum, index=True)
    created_at: Mapped[dt.datetime] = mapped_column(server_default=func.now())


class WellnessAssessment(Base):
    """
    Structured five-question daily assessment.
    Issued when questions are generated, completed once on submission.
    """
    __tablename__ = "wellness_assessments"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_wellness_assessments_user_day"),)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    user: Mapped["User"] = relationship(back_populates="assessments")
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    generated_questions: Mapped[List[str]] = mapped_column(JSON, default=list)
    responses: Mapped[List[dict]] = mapped_column(JSON, default=list)
    overall_score: Mapped[Optional[int]]
    insights: Mapped[List[str]] = mapped_column(JSON, default=list)
    completed_at: Mapped[Optional[dt.datetime]]
    mood: Mapped[Optional[str]] = mapped_column(String(64))
    stress_level: Mapped[Optional[int]]
    energy_level: Mapped[Optional[int]]
    work_satisfaction: Mapped[Optional[int]]
    created_at: Mapped[dt.datetime] = mapped_column(server_default=func.now())
