from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from crewwell.core.exceptions import DuplicateCheckInError, NotFoundError, OwnershipError, ValidationError
from crewwell.db.models import CheckIn, User, WellnessAssessment
from crewwell.repositories import assessment_repo, checkin_repo
from crewwell.services.ai import EmployeeProfile, QAPair
from crewwell.services.questions import QuestionGenerator
from crewwell.services.scoring import ResponseScorer, score_answers
from crewwell.services.sentiment import DEFAULT_MAX_LENGTH, SentimentAnalysis, analyze_sentiment, validate_mood_input
from crewwell.utils.time import day_window, local_now

log = logging.getLogger(__name__)

VALID_INPUT_TYPES = {"text", "voice"}
LEVEL_FIELDS = ("stress_level", "energy_level", "work_satisfaction")


@dataclass(slots=True)
class QuickCheckinResult:
    checkin: CheckIn
    analysis: SentimentAnalysis


@dataclass(slots=True)
class IssuedQuestions:
    assessment: WellnessAssessment
    questions: list[str]
    already_completed: bool


@dataclass(slots=True)
class AssessmentResult:
    assessment: WellnessAssessment
    score: int
    insights: list[str] = field(default_factory=list)
    response_scores: list[int] = field(default_factory=list)


def profile_for(user: User) -> EmployeeProfile:
    return EmployeeProfile(
        id=str(user.id),
        name=user.name,
        role=user.role,
        department=user.department,
        vessel=user.vessel,
    )


async def submit_quick_checkin(
    db: AsyncSession,
    *,
    user_id: UUID,
    mood_input: Optional[str],
    input_type: str = "text",
    now: Optional[datetime] = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> QuickCheckinResult:
    """
    Score and store today's free-text check-in.
    - Raises ValidationError for empty/oversized text or an unknown input type.
    - Raises DuplicateCheckInError if the user already checked in today; no second score is computed.
    """
    text = validate_mood_input(mood_input, max_length=max_length)
    if input_type not in VALID_INPUT_TYPES:
        raise ValidationError("Invalid input type")

    now = now or local_now()
    start, end = day_window(now)
    if await checkin_repo.find_by_user_and_day_window(db, user_id, start, end):
        log.info("User %s already checked in for %s", user_id, start.date())
        raise DuplicateCheckInError()

    analysis = analyze_sentiment(text, max_length=max_length)
    ci = CheckIn(
        user_id=user_id,
        date=now,
        checkin_day=start.date(),
        mood_input=text,
        input_type=input_type,
        sentiment_score=analysis.normalized_score,
        wellness_score=analysis.wellness_score,
        mood_category=analysis.category,
    )
    ci = await checkin_repo.insert(db, ci)
    log.info("Stored check-in %s for user %s (%s, %s)", ci.id, user_id, analysis.category, analysis.wellness_score)
    return QuickCheckinResult(checkin=ci, analysis=analysis)


async def issue_questions(
    db: AsyncSession,
    *,
    user: User,
    generator: QuestionGenerator,
    now: Optional[datetime] = None,
) -> IssuedQuestions:
    """
    Today's assessment questions, generated once and reused until completion.
    """
    user_id = user.id
    today = (now or local_now()).date()
    existing = await assessment_repo.find_for_day(db, user_id, today)
    if existing:
        return IssuedQuestions(existing, list(existing.generated_questions), existing.completed_at is not None)

    recent = await assessment_repo.recent_completed_scores(db, user_id)
    questions = await generator.generate(profile_for(user), recent)

    assessment = WellnessAssessment(user_id=user_id, date=today, generated_questions=questions, responses=[], insights=[])
    try:
        assessment = await assessment_repo.insert_issued(db, assessment)
    except DuplicateCheckInError:
        # A concurrent request issued first; serve its question set.
        winner = await assessment_repo.find_for_day(db, user_id, today)
        if winner is None:
            raise
        return IssuedQuestions(winner, list(winner.generated_questions), winner.completed_at is not None)
    return IssuedQuestions(assessment, questions, False)


def _validate_submission(
    assessment: WellnessAssessment, responses: Sequence[QAPair], levels: dict, max_length: int
) -> None:
    if not responses:
        raise ValidationError("Check ID and responses are required")
    if len(responses) != len(assessment.generated_questions):
        raise ValidationError(
            f"Expected {len(assessment.generated_questions)} responses, got {len(responses)}"
        )
    answered = sorted((r.question or "").strip() for r in responses)
    if answered != sorted(q.strip() for q in assessment.generated_questions):
        raise ValidationError("Responses must answer the issued questions")
    for r in responses:
        if not r.answer or not r.answer.strip():
            raise ValidationError("Answers cannot be empty")
        if len(r.answer) > max_length:
            raise ValidationError(f"Answers cannot be more than {max_length} characters")
    for name, value in levels.items():
        if value is not None and not 1 <= value <= 10:
            raise ValidationError(f"{name} must be between 1 and 10")


async def submit_assessment(
    db: AsyncSession,
    *,
    user: User,
    check_id: UUID,
    responses: Sequence[QAPair],
    scorer: ResponseScorer,
    mood: Optional[str] = None,
    stress_level: Optional[int] = None,
    energy_level: Optional[int] = None,
    work_satisfaction: Optional[int] = None,
    now: Optional[datetime] = None,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> AssessmentResult:
    """
    Complete an issued assessment: score it and persist scores, insights and levels in one commit.
    """
    assessment = await assessment_repo.get(db, check_id)
    if assessment is None:
        raise NotFoundError("Wellness check not found")
    if assessment.user_id != user.id:
        raise OwnershipError()
    if assessment.completed_at is not None:
        raise DuplicateCheckInError("Wellness check already completed today")

    levels = dict(zip(LEVEL_FIELDS, (stress_level, energy_level, work_satisfaction)))
    _validate_submission(assessment, responses, levels, max_length)

    result = await scorer.score(responses, profile_for(user))
    scored = score_answers(responses)

    completed = await assessment_repo.complete(
        db,
        assessment.id,
        responses=scored,
        overall_score=result.score,
        insights=result.insights,
        completed_at=now or local_now(),
        mood=mood,
        **levels,
    )
    log.info("Completed assessment %s for user %s with score %s", assessment.id, user.id, result.score)
    return AssessmentResult(
        assessment=completed,
        score=result.score,
        insights=result.insights,
        response_scores=[r["score"] for r in scored],
    )
