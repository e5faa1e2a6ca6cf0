from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from crewwell.db.models import CheckIn, User, WellnessAssessment
from crewwell.repositories import assessment_repo, checkin_repo, user_repo
from crewwell.services.risk import (
    Alert,
    AssessmentEntry,
    CheckInEntry,
    RiskSnapshot,
    RosterMember,
    build_alerts,
    build_risk_snapshot,
    calculate_trend,
    consistency_score,
    group_by_user,
    summarize_employee,
)
from crewwell.utils.numbers import mean, round_1dp
from crewwell.utils.time import date_range_for, days_ago, local_now

log = logging.getLogger(__name__)

RECENT_DAYS = 7
TREND_DAYS = 14


def roster_from(users: Iterable[User]) -> list[RosterMember]:
    return [
        RosterMember(
            id=str(u.id),
            name=u.name,
            email=u.email,
            employee_id=u.employee_id,
            vessel=u.vessel,
            department=u.department,
        )
        for u in users
    ]


def entries_from_checkins(checkins: Iterable[CheckIn]) -> list[CheckInEntry]:
    return [
        CheckInEntry(user_id=str(c.user_id), day=c.checkin_day, score=c.wellness_score, category=c.mood_category)
        for c in checkins
    ]


def entries_from_assessments(assessments: Iterable[WellnessAssessment]) -> list[AssessmentEntry]:
    return [
        AssessmentEntry(user_id=str(a.user_id), day=a.date, score=a.overall_score)
        for a in assessments
        if a.overall_score is not None
    ]


async def management_dashboard(db: AsyncSession, *, timeframe_days: int = 7, now: Optional[datetime] = None) -> RiskSnapshot:
    """
    Risk rows for every active employee over the last `timeframe_days`, combining both check-in paths.
    """
    now = now or local_now()
    start = days_ago(timeframe_days, now=now)
    end = datetime.combine(now.date(), time.max)

    employees = await user_repo.list_active_employees(db)
    ids = [u.id for u in employees]
    checkins = await checkin_repo.query_window(db, start, end, user_ids=ids)
    assessments = await assessment_repo.query_completed_window(db, start.date(), now.date(), user_ids=ids)

    entries = [*entries_from_checkins(checkins), *entries_from_assessments(assessments)]
    snapshot = build_risk_snapshot(roster_from(employees), entries, day=now.date())
    log.info(
        "Dashboard computed for %s employees (%s high risk, %s alerts)",
        snapshot.stats.total_employees, snapshot.stats.high_risk_employees, len(snapshot.alerts),
    )
    return snapshot


@dataclass(slots=True)
class HistoryStatistics:
    total_checkins: int
    average_score: float
    recent_average: float
    trend: str
    average_stress: float
    average_energy: float
    consistency_score: int


@dataclass(slots=True)
class HistoryReport:
    history: list[WellnessAssessment]
    statistics: HistoryStatistics
    insights: list[str] = field(default_factory=list)


def history_insights(scores_newest_first: Sequence[int], average: float, trend: str) -> list[str]:
    insights: list[str] = []

    if average >= 80:
        insights.append("You're maintaining excellent wellness levels!")
    elif average >= 60:
        insights.append("Your wellness is in a healthy range with room for improvement.")
    else:
        insights.append("Your wellness scores suggest you may need additional support.")

    if trend == "improving":
        insights.append("Great news! Your wellness trend is improving over time.")
    elif trend == "declining":
        insights.append("Your wellness trend shows some decline - consider reaching out for support.")

    if len(scores_newest_first) >= 7:
        low_days = sum(1 for s in scores_newest_first[:7] if s < 50)
        if low_days >= 3:
            insights.append("You've had several challenging days recently - please consider talking to someone.")

    return insights


def _avg_1dp(values: Iterable[Optional[int]]) -> float:
    avg = mean(v for v in values if v)
    return round_1dp(avg) if avg is not None else 0.0


async def wellness_history(
    db: AsyncSession,
    user_id: UUID,
    *,
    days: int = 30,
    limit: int = 50,
    now: Optional[datetime] = None,
) -> HistoryReport:
    now = now or local_now()
    start = days_ago(days, now=now)
    history = list(await assessment_repo.history_for_user(db, user_id, start.date(), now.date(), limit=limit))

    scores = [a.overall_score for a in history if a.overall_score is not None]
    average = mean(scores) or 0.0
    recent = mean(scores[:RECENT_DAYS]) or 0.0
    # history is newest first; trend wants oldest first
    trend = calculate_trend(list(reversed(scores[:TREND_DAYS])))

    statistics = HistoryStatistics(
        total_checkins=len(history),
        average_score=round_1dp(average),
        recent_average=round_1dp(recent),
        trend=trend,
        average_stress=_avg_1dp(a.stress_level for a in history),
        average_energy=_avg_1dp(a.energy_level for a in history),
        consistency_score=consistency_score(len(history), days),
    )
    return HistoryReport(history=history, statistics=statistics, insights=history_insights(scores, average, trend))


@dataclass(slots=True)
class TeamEntry:
    user_id: str
    name: str
    role: str
    vessel: Optional[str]
    department: Optional[str]
    employee_id: Optional[str]
    date: date
    wellness_score: int
    stress_level: Optional[int]
    energy_level: Optional[int]
    work_satisfaction: Optional[int]
    responses: list[dict] = field(default_factory=list)


@dataclass(slots=True)
class EmployeeStatus:
    id: str
    name: str
    employee_id: Optional[str]
    vessel: Optional[str]
    department: Optional[str]
    has_checked_in_today: bool
    today_wellness_score: Optional[int]
    check_in_date: Optional[date]
    check_in_time: Optional[datetime]


@dataclass(slots=True)
class TeamStatistics:
    average_wellness: float
    compliance_rate: float
    low_score_alerts: int
    total_responses: int


@dataclass(slots=True)
class TrendPoint:
    date: date
    average_score: float
    check_in_count: int


@dataclass(slots=True)
class TeamReport:
    team_data: list[TeamEntry]
    employee_status: list[EmployeeStatus]
    today_check_ins: int
    total_employees: int
    selected_date: date
    statistics: TeamStatistics
    trend_data: list[TrendPoint]
    alerts: list[Alert]


def daily_trend(assessments: Iterable[WellnessAssessment]) -> list[TrendPoint]:
    by_day: dict[date, list[int]] = defaultdict(list)
    for a in assessments:
        if a.overall_score is not None:
            by_day[a.date].append(a.overall_score)
    return [
        TrendPoint(date=d, average_score=sum(s) / len(s), check_in_count=len(s))
        for d, s in sorted(by_day.items())
    ]


async def team_wellness(
    db: AsyncSession,
    *,
    days: int = 7,
    selected: Optional[date] = None,
    vessel: Optional[str] = None,
    department: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TeamReport:
    """
    Structured-assessment view of the team for a selected day, with the same alert rules as the dashboard.
    """
    now = now or local_now()
    day = selected or now.date()
    start, end = date_range_for(selected, days, now=now)

    employees = await user_repo.list_active_employees(db, vessel=vessel, department=department)
    users = {str(u.id): u for u in employees}
    window = [
        a for a in await assessment_repo.query_completed_window(
            db, start.date(), end.date(), vessel=vessel, department=department
        )
        if str(a.user_id) in users
    ]

    team_data = [
        TeamEntry(
            user_id=str(a.user_id),
            name=users[str(a.user_id)].name,
            role=users[str(a.user_id)].role,
            vessel=users[str(a.user_id)].vessel,
            department=users[str(a.user_id)].department,
            employee_id=users[str(a.user_id)].employee_id,
            date=a.date,
            wellness_score=a.overall_score,
            stress_level=a.stress_level,
            energy_level=a.energy_level,
            work_satisfaction=a.work_satisfaction,
            responses=list(a.responses or []),
        )
        for a in sorted(window, key=lambda a: (-a.date.toordinal(), users[str(a.user_id)].name))
    ]

    todays = {str(a.user_id): a for a in window if a.date == day}
    status = [
        EmployeeStatus(
            id=str(u.id),
            name=u.name,
            employee_id=u.employee_id,
            vessel=u.vessel,
            department=u.department,
            has_checked_in_today=str(u.id) in todays,
            today_wellness_score=todays[str(u.id)].overall_score if str(u.id) in todays else None,
            check_in_date=todays[str(u.id)].date if str(u.id) in todays else None,
            check_in_time=todays[str(u.id)].completed_at if str(u.id) in todays else None,
        )
        for u in employees
    ]

    recent_cutoff = day - timedelta(days=RECENT_DAYS)
    recent = [t.wellness_score for t in team_data if t.date >= recent_cutoff]
    total = len(employees)
    statistics = TeamStatistics(
        average_wellness=round_1dp(mean(recent) or 0.0),
        compliance_rate=round_1dp(100 * len(todays) / total) if total else 0.0,
        low_score_alerts=sum(1 for s in recent if s < 50),
        total_responses=len(team_data),
    )

    trend_window = await assessment_repo.query_completed_window(
        db, now.date() - timedelta(days=TREND_DAYS), now.date(), vessel=vessel, department=department
    )

    entries = entries_from_assessments(window)
    by_user = group_by_user(entries)
    rows = [summarize_employee(m, by_user.get(m.id, []), day=day) for m in roster_from(employees)]

    return TeamReport(
        team_data=team_data,
        employee_status=status,
        today_check_ins=len(todays),
        total_employees=total,
        selected_date=day,
        statistics=statistics,
        trend_data=daily_trend(trend_window),
        alerts=build_alerts(rows, by_user),
    )
