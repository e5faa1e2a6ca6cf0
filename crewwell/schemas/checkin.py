from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Literal


class CheckinCreate(BaseModel):
    # length and emptiness are checked by the classifier so the error shape matches other paths
    mood_input: str
    input_type: Literal["text", "voice"] = "text"


class CheckinSummary(BaseModel):
    id: UUID
    date: datetime
    wellness_score: int
    mood_category: str
    sentiment_score: float


class CheckinAnalysis(BaseModel):
    category: str
    wellness_score: int
    wellness_band: str
    positive_words: list[str]
    negative_words: list[str]


class CheckinOut(BaseModel):
    message: str
    check_in: CheckinSummary
    analysis: CheckinAnalysis


class CheckinHistoryItem(CheckinSummary):
    mood_input: str


class CheckinHistoryOut(BaseModel):
    check_ins: list[CheckinHistoryItem]
    has_checked_in_today: bool
    today_check_in: CheckinSummary | None = None
