from pydantic import BaseModel
from datetime import date
from typing import Optional

from crewwell.schemas.wellness import AlertOut


class EmployeeRiskOut(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    employee_id: Optional[str] = None
    vessel: Optional[str] = None
    department: Optional[str] = None
    avg_wellness_score: Optional[int] = None
    latest_wellness_score: Optional[int] = None
    latest_check_in: Optional[date] = None
    risk_level: str
    risk_score: int
    has_checked_in_today: bool
    check_in_streak: int
    concerning_pattern: bool
    total_check_ins: int
    mood_categories: dict[str, int]


class DashboardStats(BaseModel):
    total_employees: int
    checked_in_today: int
    check_in_rate: int
    high_risk_employees: int
    medium_risk_employees: int
    avg_wellness_score: Optional[int] = None


class DashboardOut(BaseModel):
    employees: list[EmployeeRiskOut]
    stats: DashboardStats
    alerts: list[AlertOut]
    timeframe: int
