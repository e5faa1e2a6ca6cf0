from pydantic import BaseModel, Field
from uuid import UUID
from datetime import date, datetime
from typing import Optional


class QuestionsOut(BaseModel):
    questions: list[str]
    check_id: UUID
    already_completed: bool


class ResponseIn(BaseModel):
    question: str
    answer: str


class AssessmentSubmit(BaseModel):
    check_id: UUID
    responses: list[ResponseIn]
    mood: Optional[str] = None
    stress_level: Optional[int] = Field(default=None, ge=1, le=10)
    energy_level: Optional[int] = Field(default=None, ge=1, le=10)
    work_satisfaction: Optional[int] = Field(default=None, ge=1, le=10)


class Breakdown(BaseModel):
    mood: Optional[str] = None
    stress_level: Optional[int] = None
    energy_level: Optional[int] = None
    work_satisfaction: Optional[int] = None
    response_scores: list[int]


class AssessmentOut(BaseModel):
    message: str
    wellness_score: int
    insights: list[str]
    check_id: UUID
    breakdown: Breakdown


class ScoredResponse(BaseModel):
    question: str
    answer: str
    score: int


class HistoryItem(BaseModel):
    id: UUID
    date: date
    overall_score: Optional[int] = None
    mood: Optional[str] = None
    stress_level: Optional[int] = None
    energy_level: Optional[int] = None
    work_satisfaction: Optional[int] = None
    responses: list[ScoredResponse] = []
    insights: list[str] = []
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HistoryStatisticsOut(BaseModel):
    total_checkins: int
    average_score: float
    recent_average: float
    trend: str
    average_stress: float
    average_energy: float
    consistency_score: int


class HistoryOut(BaseModel):
    history: list[HistoryItem]
    statistics: HistoryStatisticsOut
    insights: list[str]


class TeamEntryOut(BaseModel):
    user_id: str
    name: str
    role: str
    vessel: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    date: date
    wellness_score: int
    stress_level: Optional[int] = None
    energy_level: Optional[int] = None
    work_satisfaction: Optional[int] = None
    responses: list[ScoredResponse] = []


class EmployeeStatusOut(BaseModel):
    id: str
    name: str
    employee_id: Optional[str] = None
    vessel: Optional[str] = None
    department: Optional[str] = None
    has_checked_in_today: bool
    today_wellness_score: Optional[int] = None
    check_in_date: Optional[date] = None
    check_in_time: Optional[datetime] = None


class TeamStatisticsOut(BaseModel):
    average_wellness: float
    compliance_rate: float
    low_score_alerts: int
    total_responses: int


class TrendPointOut(BaseModel):
    date: date
    average_score: float
    check_in_count: int


class AlertOut(BaseModel):
    type: str
    severity: str
    count: int
    message: str
    employees: list[str]


class TeamOut(BaseModel):
    team_data: list[TeamEntryOut]
    employee_status: list[EmployeeStatusOut]
    today_check_ins: int
    total_employees: int
    selected_date: date
    statistics: TeamStatisticsOut
    trend_data: list[TrendPointOut]
    alerts: list[AlertOut]
