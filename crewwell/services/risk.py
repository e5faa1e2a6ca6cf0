"""
Risk aggregation over a window of daily wellness entries.

Entries come from two scoring paths that are kept distinct:

- ``CheckInEntry``: quick free-text check-ins, carrying a 0-100 wellness score
  and a mood category.
- ``AssessmentEntry``: structured five-question assessments, carrying only the
  0-100 overall score.

Both expose ``user_id``, ``day``, ``score`` and ``category`` (None for
assessments). Risk is classified either from a score or from a mood category;
the two strategies are not merged.

Everything here is pure: callers load the window and the roster, and nothing
is written back.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from functools import cmp_to_key
from typing import Iterable, Optional, Sequence, Union

from crewwell.db.models import MOOD_CATEGORIES
from crewwell.utils.numbers import mean, round_half_up

TREND_WINDOW = 14
TREND_MIN_POINTS = 5
TREND_THRESHOLD = 5
CONSISTENCY_MAX_DAYS = 30
LOW_SCORE_THRESHOLD = 50
TREND_CONCERN_THRESHOLD = 60
STRESSED_SHARE = 0.4


@dataclass(frozen=True, slots=True)
class CheckInEntry:
    user_id: str
    day: date
    score: int
    category: str


@dataclass(frozen=True, slots=True)
class AssessmentEntry:
    user_id: str
    day: date
    score: int

    @property
    def category(self) -> None:
        return None


WellnessEntry = Union[CheckInEntry, AssessmentEntry]


@dataclass(frozen=True, slots=True)
class RiskClassification:
    level: str
    score: int


UNKNOWN_RISK = RiskClassification("unknown", 0)

_CATEGORY_RISK = {
    "high_risk": RiskClassification("high", 4),
    "stressed": RiskClassification("medium", 3),
    "neutral": RiskClassification("low", 2),
    "positive": RiskClassification("very_low", 1),
}


def classify_by_score(score: int) -> RiskClassification:
    """Numeric strategy: <50 high, <70 medium, otherwise low."""
    if score < 50:
        return RiskClassification("high", 4)
    if score < 70:
        return RiskClassification("medium", 3)
    return RiskClassification("low", 2)


def classify_by_category(category: Optional[str]) -> RiskClassification:
    """Mood-category strategy used for quick check-ins."""
    return _CATEGORY_RISK.get(category or "", UNKNOWN_RISK)


@dataclass(slots=True)
class RosterMember:
    id: str
    name: str
    email: Optional[str] = None
    employee_id: Optional[str] = None
    vessel: Optional[str] = None
    department: Optional[str] = None


@dataclass(slots=True)
class EmployeeRisk:
    id: str
    name: str
    email: Optional[str]
    employee_id: Optional[str]
    vessel: Optional[str]
    department: Optional[str]
    avg_wellness_score: Optional[int]
    latest_wellness_score: Optional[int]
    latest_check_in: Optional[date]
    today_score: Optional[int]
    risk_level: str
    risk_score: int
    has_checked_in_today: bool
    check_in_streak: int
    concerning_pattern: bool
    total_check_ins: int
    mood_categories: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class Alert:
    type: str
    severity: str
    count: int
    message: str
    employees: list[str] = field(default_factory=list)


@dataclass(slots=True)
class OrgStats:
    total_employees: int
    checked_in_today: int
    check_in_rate: int
    high_risk_employees: int
    medium_risk_employees: int
    avg_wellness_score: Optional[int]


@dataclass(slots=True)
class RiskSnapshot:
    employees: list[EmployeeRisk]
    stats: OrgStats
    alerts: list[Alert]


def recent_scores(entries: Iterable[WellnessEntry]) -> list[int]:
    """Scores ordered newest day first."""
    return [e.score for e in sorted(entries, key=lambda e: e.day, reverse=True)]


def assessment_scores(entries: Iterable[WellnessEntry]) -> list[int]:
    """Assessment scores only, newest day first. Quick check-ins are judged by category."""
    return recent_scores(e for e in entries if isinstance(e, AssessmentEntry))


def concerning_by_scores(scores_newest_first: Sequence[int]) -> bool:
    """The three most recent scores exist and are all below 60."""
    latest = list(scores_newest_first)[:3]
    return len(latest) >= 3 and all(s < TREND_CONCERN_THRESHOLD for s in latest)


def concerning_by_category(checkins: Sequence[CheckInEntry]) -> bool:
    """Any high_risk check-in, or stressed check-ins making up at least 40% of them."""
    if not checkins:
        return False
    high_risk = sum(1 for c in checkins if c.category == "high_risk")
    stressed = sum(1 for c in checkins if c.category == "stressed")
    return high_risk > 0 or stressed >= math.ceil(len(checkins) * STRESSED_SHARE)


def _latest(entries: Sequence[WellnessEntry]) -> Optional[WellnessEntry]:
    if not entries:
        return None
    # same-day tie: the assessment's score wins
    return max(entries, key=lambda e: (e.day, isinstance(e, AssessmentEntry)))


def select_risk(entries: Sequence[WellnessEntry], day: date) -> RiskClassification:
    """
    Pick the classification strategy for one employee:
    same-day assessment score, else latest quick check-in category,
    else latest assessment score, else unknown.
    """
    assessments = [e for e in entries if isinstance(e, AssessmentEntry)]
    checkins = [e for e in entries if isinstance(e, CheckInEntry)]

    same_day = [a for a in assessments if a.day == day]
    if same_day:
        return classify_by_score(same_day[-1].score)
    latest_checkin = _latest(checkins)
    if latest_checkin is not None:
        return classify_by_category(latest_checkin.category)
    latest_assessment = _latest(assessments)
    if latest_assessment is not None:
        return classify_by_score(latest_assessment.score)
    return UNKNOWN_RISK


def same_day_score(entries: Sequence[WellnessEntry], day: date) -> Optional[int]:
    todays = [e for e in entries if e.day == day]
    for e in todays:
        if isinstance(e, AssessmentEntry):
            return e.score
    return todays[0].score if todays else None


def summarize_employee(member: RosterMember, entries: Sequence[WellnessEntry], *, day: date) -> EmployeeRisk:
    checkins = [e for e in entries if isinstance(e, CheckInEntry)]
    avg = mean(e.score for e in entries)
    latest = _latest(entries)
    risk = select_risk(entries, day)

    return EmployeeRisk(
        id=member.id,
        name=member.name,
        email=member.email,
        employee_id=member.employee_id,
        vessel=member.vessel,
        department=member.department,
        avg_wellness_score=round_half_up(avg) if avg is not None else None,
        latest_wellness_score=latest.score if latest else None,
        latest_check_in=latest.day if latest else None,
        today_score=same_day_score(entries, day),
        risk_level=risk.level,
        risk_score=risk.score,
        has_checked_in_today=any(e.day == day for e in entries),
        # total entries in the window, not consecutive days
        check_in_streak=len(entries),
        concerning_pattern=concerning_by_category(checkins) or concerning_by_scores(assessment_scores(entries)),
        total_check_ins=len(entries),
        mood_categories={c: sum(1 for e in checkins if e.category == c) for c in MOOD_CATEGORIES},
    )


def _compare(a: EmployeeRisk, b: EmployeeRisk) -> int:
    if a.risk_score != b.risk_score:
        return b.risk_score - a.risk_score
    if a.latest_wellness_score is not None and b.latest_wellness_score is not None:
        return a.latest_wellness_score - b.latest_wellness_score
    return 0


def sort_employees(rows: Iterable[EmployeeRisk]) -> list[EmployeeRisk]:
    """Highest risk first, then lowest latest score first."""
    return sorted(rows, key=cmp_to_key(_compare))


def org_stats(rows: Sequence[EmployeeRisk]) -> OrgStats:
    total = len(rows)
    checked_in = sum(1 for r in rows if r.has_checked_in_today)
    averages = [r.avg_wellness_score for r in rows if r.avg_wellness_score is not None]
    org_avg = mean(averages)
    return OrgStats(
        total_employees=total,
        checked_in_today=checked_in,
        check_in_rate=round_half_up(100 * checked_in / total) if total else 0,
        high_risk_employees=sum(1 for r in rows if r.risk_level == "high"),
        medium_risk_employees=sum(1 for r in rows if r.risk_level == "medium"),
        avg_wellness_score=round_half_up(org_avg) if org_avg is not None else None,
    )


def build_alerts(rows: Sequence[EmployeeRisk], entries_by_user: dict[str, list[WellnessEntry]]) -> list[Alert]:
    alerts: list[Alert] = []

    missed = [r.name for r in rows if not r.has_checked_in_today]
    if missed:
        alerts.append(Alert(
            type="missed_checkin",
            severity="medium",
            count=len(missed),
            message=f"{len(missed)} employees haven't completed today's wellness check-in",
            employees=missed,
        ))

    low = [r.name for r in rows if r.today_score is not None and r.today_score < LOW_SCORE_THRESHOLD]
    if low:
        alerts.append(Alert(
            type="low_wellness",
            severity="high",
            count=len(low),
            message=f"{len(low)} employees have concerning wellness scores today",
            employees=low,
        ))

    consistently_low = [
        r.name for r in rows if concerning_by_scores(assessment_scores(entries_by_user.get(r.id, [])))
    ]
    if consistently_low:
        alerts.append(Alert(
            type="trend_concern",
            severity="high",
            count=len(consistently_low),
            message=f"{len(consistently_low)} employees showing consistently low wellness scores",
            employees=consistently_low,
        ))

    return alerts


def group_by_user(entries: Iterable[WellnessEntry]) -> dict[str, list[WellnessEntry]]:
    grouped: dict[str, list[WellnessEntry]] = defaultdict(list)
    for e in entries:
        grouped[e.user_id].append(e)
    return dict(grouped)


def build_risk_snapshot(roster: Sequence[RosterMember], entries: Iterable[WellnessEntry], *, day: date) -> RiskSnapshot:
    """
    Per-employee risk rows (sorted), org statistics and alerts for `day`.
    Entries for users outside the roster are ignored.
    """
    by_user = group_by_user(entries)
    rows = [summarize_employee(m, by_user.get(m.id, []), day=day) for m in roster]
    return RiskSnapshot(
        employees=sort_employees(rows),
        stats=org_stats(rows),
        alerts=build_alerts(rows, by_user),
    )


def calculate_trend(scores_oldest_first: Sequence[float]) -> str:
    """
    Compare the newer half of the last 14 points with the older half.
    Index split: the older half takes the extra point when the count is odd.
    """
    window = list(scores_oldest_first)[-TREND_WINDOW:]
    if len(window) < TREND_MIN_POINTS:
        return "stable"

    split = math.ceil(len(window) / 2)
    older, newer = window[:split], window[split:]
    difference = sum(newer) / len(newer) - sum(older) / len(older)

    if difference > TREND_THRESHOLD:
        return "improving"
    if difference < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def consistency_score(actual_checkins: int, days: int) -> int:
    expected = min(days, CONSISTENCY_MAX_DAYS)
    if expected <= 0:
        return 0
    return round_half_up(100 * actual_checkins / expected)
