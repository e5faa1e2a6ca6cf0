"""
Unit tests for crewwell.services.risk module.
"""
from datetime import date, timedelta

import pytest

from crewwell.services.risk import (
    UNKNOWN_RISK,
    AssessmentEntry,
    CheckInEntry,
    RosterMember,
    assessment_scores,
    build_risk_snapshot,
    calculate_trend,
    classify_by_category,
    classify_by_score,
    concerning_by_category,
    concerning_by_scores,
    consistency_score,
    recent_scores,
    select_risk,
    summarize_employee,
)

TODAY = date(2026, 3, 10)


def day(offset: int) -> date:
    return TODAY - timedelta(days=offset)


def assessments(user_id: str, scores_newest_first):
    return [AssessmentEntry(user_id, day(i), s) for i, s in enumerate(scores_newest_first)]


def member(user_id: str, name: str) -> RosterMember:
    return RosterMember(id=user_id, name=name, email=f"{user_id}@crewwell.test")


class TestClassification:
    """Test the two named risk strategies."""

    @pytest.mark.parametrize("score,level,risk", [
        (0, "high", 4), (49, "high", 4), (50, "medium", 3), (69, "medium", 3), (70, "low", 2), (100, "low", 2),
    ])
    def test_by_score(self, score, level, risk):
        result = classify_by_score(score)
        assert (result.level, result.score) == (level, risk)

    @pytest.mark.parametrize("category,level,risk", [
        ("high_risk", "high", 4), ("stressed", "medium", 3), ("neutral", "low", 2),
        ("positive", "very_low", 1), (None, "unknown", 0), ("bogus", "unknown", 0),
    ])
    def test_by_category(self, category, level, risk):
        result = classify_by_category(category)
        assert (result.level, result.score) == (level, risk)


class TestConcerningPattern:
    """Test the concerning-pattern heuristics."""

    def test_three_low_scores_are_concerning(self):
        assert concerning_by_scores([55, 58, 50]) is True

    def test_one_recovered_score_breaks_the_run(self):
        assert concerning_by_scores([55, 80, 50]) is False

    def test_fewer_than_three_scores(self):
        assert concerning_by_scores([10, 10]) is False

    def test_only_three_most_recent_count(self):
        assert concerning_by_scores([55, 58, 50, 90, 90]) is True
        assert concerning_by_scores([90, 58, 50, 40, 40]) is False

    def test_summary_from_assessment_scores_alone(self):
        row = summarize_employee(member("u1", "Ana"), assessments("u1", [55, 58, 50]), day=TODAY)
        assert row.concerning_pattern is True

        row = summarize_employee(member("u1", "Ana"), assessments("u1", [55, 80, 50]), day=TODAY)
        assert row.concerning_pattern is False

    def test_recent_scores_sorted_by_day(self):
        entries = [
            AssessmentEntry("u1", day(2), 30),
            AssessmentEntry("u1", day(0), 90),
            AssessmentEntry("u1", day(1), 60),
        ]
        assert recent_scores(entries) == [90, 60, 30]

    def test_neutral_checkins_are_not_concerning(self):
        # a neutral quick check-in scores 50, below the assessment threshold
        entries = [CheckInEntry("u1", day(i), 50, "neutral") for i in range(3)]

        row = summarize_employee(member("u1", "Ana"), entries, day=TODAY)
        snapshot = build_risk_snapshot([member("u1", "Ana")], entries, day=TODAY)

        assert row.risk_level == "low"
        assert row.concerning_pattern is False
        assert [a.type for a in snapshot.alerts] == []

    def test_assessment_scores_skip_checkins(self):
        entries = [
            CheckInEntry("u1", day(0), 35, "stressed"),
            AssessmentEntry("u1", day(1), 55),
            AssessmentEntry("u1", day(2), 58),
        ]
        assert assessment_scores(entries) == [55, 58]
        assert concerning_by_scores(assessment_scores(entries)) is False

    def test_no_checkins_is_not_concerning(self):
        assert concerning_by_category([]) is False

    def test_any_high_risk_checkin(self):
        checkins = [CheckInEntry("u1", day(i), 80, "positive") for i in range(5)]
        checkins.append(CheckInEntry("u1", day(6), 15, "high_risk"))
        assert concerning_by_category(checkins) is True

    def test_stressed_share(self):
        # 2 of 5 reaches ceil(0.4 * 5) = 2
        checkins = [
            CheckInEntry("u1", day(0), 35, "stressed"),
            CheckInEntry("u1", day(1), 35, "stressed"),
            CheckInEntry("u1", day(2), 50, "neutral"),
            CheckInEntry("u1", day(3), 50, "neutral"),
            CheckInEntry("u1", day(4), 80, "positive"),
        ]
        assert concerning_by_category(checkins) is True
        assert concerning_by_category(checkins[1:]) is False


class TestSelectRisk:
    """Test which strategy applies to an employee."""

    def test_same_day_assessment_wins(self):
        entries = [
            CheckInEntry("u1", TODAY, 90, "positive"),
            AssessmentEntry("u1", TODAY, 40),
        ]
        assert select_risk(entries, TODAY).level == "high"

    def test_latest_checkin_category_without_same_day_assessment(self):
        entries = [
            CheckInEntry("u1", day(1), 35, "stressed"),
            CheckInEntry("u1", day(3), 80, "positive"),
            AssessmentEntry("u1", day(2), 90),
        ]
        assert select_risk(entries, TODAY).level == "medium"

    def test_latest_assessment_score_without_checkins(self):
        entries = [AssessmentEntry("u1", day(1), 45), AssessmentEntry("u1", day(2), 90)]
        assert select_risk(entries, TODAY).level == "high"

    def test_no_entries_is_unknown(self):
        assert select_risk([], TODAY) == UNKNOWN_RISK


class TestSummarizeEmployee:
    """Test per-employee risk rows."""

    def test_mixed_entries(self):
        entries = [
            CheckInEntry("u1", day(0), 30, "stressed"),
            CheckInEntry("u1", day(1), 80, "positive"),
            AssessmentEntry("u1", day(2), 65),
        ]

        row = summarize_employee(member("u1", "Ana"), entries, day=TODAY)

        # (30 + 80 + 65) / 3 = 58.33
        assert row.avg_wellness_score == 58
        assert row.latest_wellness_score == 30
        assert row.latest_check_in == TODAY
        assert row.today_score == 30
        assert row.risk_level == "medium"
        assert row.risk_score == 3
        assert row.has_checked_in_today is True
        assert row.check_in_streak == 3
        assert row.total_check_ins == 3
        assert row.mood_categories == {"positive": 1, "neutral": 0, "stressed": 1, "high_risk": 0}

    def test_streak_counts_entries_not_consecutive_days(self):
        entries = [CheckInEntry("u1", day(d), 70, "neutral") for d in (1, 4, 6)]
        row = summarize_employee(member("u1", "Ana"), entries, day=TODAY)

        assert row.check_in_streak == 3
        assert row.has_checked_in_today is False
        assert row.today_score is None

    def test_same_day_assessment_beats_checkin_for_latest(self):
        entries = [CheckInEntry("u1", TODAY, 90, "positive"), AssessmentEntry("u1", TODAY, 45)]
        row = summarize_employee(member("u1", "Ana"), entries, day=TODAY)

        assert row.latest_wellness_score == 45
        assert row.today_score == 45

    def test_employee_without_entries(self):
        row = summarize_employee(member("u1", "Ana"), [], day=TODAY)

        assert row.avg_wellness_score is None
        assert row.latest_wellness_score is None
        assert row.risk_level == "unknown"
        assert row.concerning_pattern is False
        assert row.mood_categories == {"positive": 0, "neutral": 0, "stressed": 0, "high_risk": 0}


class TestBuildRiskSnapshot:
    """Test sorting, org statistics and alerts."""

    @pytest.fixture
    def snapshot(self):
        roster = [member("u1", "Ana"), member("u2", "Ben"), member("u3", "Cai"), member("u4", "Dee")]
        entries = [
            # Ana: low today and three low days in a row
            *assessments("u1", [40, 55, 58]),
            # Ben: stressed check-in today
            CheckInEntry("u2", TODAY, 35, "stressed"),
            # Cai: fine yesterday, nothing today
            CheckInEntry("u3", day(1), 85, "positive"),
            # outside the roster
            CheckInEntry("u9", TODAY, 10, "high_risk"),
        ]
        return build_risk_snapshot(roster, entries, day=TODAY)

    def test_sorted_by_risk_then_latest_score(self, snapshot):
        assert [r.name for r in snapshot.employees] == ["Ana", "Ben", "Cai", "Dee"]

    def test_stats(self, snapshot):
        stats = snapshot.stats
        assert stats.total_employees == 4
        assert stats.checked_in_today == 2
        assert stats.check_in_rate == 50
        assert stats.high_risk_employees == 1
        assert stats.medium_risk_employees == 1
        # (51 + 35 + 85) / 3 = 57
        assert stats.avg_wellness_score == 57

    def test_alerts(self, snapshot):
        alerts = {a.type: a for a in snapshot.alerts}

        assert alerts["missed_checkin"].severity == "medium"
        assert alerts["missed_checkin"].employees == ["Cai", "Dee"]
        assert alerts["missed_checkin"].count == 2

        assert alerts["low_wellness"].severity == "high"
        assert alerts["low_wellness"].employees == ["Ana", "Ben"]

        assert alerts["trend_concern"].severity == "high"
        assert alerts["trend_concern"].employees == ["Ana"]
        assert alerts["trend_concern"].message == "1 employees showing consistently low wellness scores"

    def test_no_alerts_when_everyone_is_fine(self):
        roster = [member("u1", "Ana")]
        snapshot = build_risk_snapshot(roster, [CheckInEntry("u1", TODAY, 80, "positive")], day=TODAY)

        assert snapshot.alerts == []
        assert snapshot.stats.check_in_rate == 100

    def test_empty_roster(self):
        snapshot = build_risk_snapshot([], [], day=TODAY)

        assert snapshot.employees == []
        assert snapshot.stats.check_in_rate == 0
        assert snapshot.stats.avg_wellness_score is None


class TestCalculateTrend:
    """Test trend direction over the last 14 points."""

    def test_drop_is_declining(self):
        assert calculate_trend([90] * 7 + [40] * 7) == "declining"

    def test_rise_is_improving(self):
        assert calculate_trend([40] * 7 + [90] * 7) == "improving"

    def test_too_few_points_is_stable(self):
        assert calculate_trend([70, 70, 70, 70]) == "stable"
        assert calculate_trend([10, 90, 10, 90]) == "stable"

    def test_small_difference_is_stable(self):
        assert calculate_trend([70, 72, 68, 71, 74, 73]) == "stable"

    def test_only_last_fourteen_points_used(self):
        assert calculate_trend([0] * 10 + [60] * 14) == "stable"

    def test_odd_count_split(self):
        # older half takes the middle point: [50, 50, 50] vs [80, 80]
        assert calculate_trend([50, 50, 50, 80, 80]) == "improving"


class TestConsistencyScore:
    def test_full_compliance(self):
        assert consistency_score(10, 10) == 100

    def test_days_capped_at_thirty(self):
        assert consistency_score(15, 40) == 50

    def test_rounds_half_up(self):
        # 100 * 1 / 8 = 12.5
        assert consistency_score(1, 8) == 13

    def test_zero_days(self):
        assert consistency_score(0, 0) == 0
