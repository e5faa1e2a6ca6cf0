import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crewwell.core.exceptions import DuplicateCheckInError
from crewwell.db.models import User, WellnessAssessment

logger = logging.getLogger(__name__)


async def get(db: AsyncSession, assessment_id: UUID) -> Optional[WellnessAssessment]:
    return await db.get(WellnessAssessment, assessment_id)


async def find_for_day(db: AsyncSession, user_id: UUID, day: date) -> Optional[WellnessAssessment]:
    res = await db.execute(
        select(WellnessAssessment).where(WellnessAssessment.user_id == user_id, WellnessAssessment.date == day)
    )
    return res.scalars().first()


async def insert_issued(db: AsyncSession, assessment: WellnessAssessment) -> WellnessAssessment:
    db.add(assessment)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info("Assessment already issued for user %s on %s", assessment.user_id, assessment.date)
        raise DuplicateCheckInError("Wellness check already issued today") from e
    await db.refresh(assessment)
    return assessment


async def recent_completed_scores(db: AsyncSession, user_id: UUID, limit: int = 7) -> list[int]:
    """Overall scores of the user's latest completed assessments, newest first."""
    res = await db.execute(
        select(WellnessAssessment.overall_score)
        .where(WellnessAssessment.user_id == user_id, WellnessAssessment.completed_at.is_not(None))
        .order_by(WellnessAssessment.date.desc())
        .limit(limit)
    )
    return [s for s in res.scalars().all() if s is not None]


async def complete(
    db: AsyncSession,
    assessment_id: UUID,
    *,
    responses: list[dict],
    overall_score: int,
    insights: list[str],
    completed_at: datetime,
    mood: Optional[str] = None,
    stress_level: Optional[int] = None,
    energy_level: Optional[int] = None,
    work_satisfaction: Optional[int] = None,
) -> WellnessAssessment:
    """
    Issued -> completed, exactly once. The WHERE completed_at IS NULL guard makes
    a concurrent second submission match zero rows.
    """
    res = await db.execute(
        update(WellnessAssessment)
        .where(WellnessAssessment.id == assessment_id, WellnessAssessment.completed_at.is_(None))
        .values(
            responses=responses,
            overall_score=overall_score,
            insights=insights,
            completed_at=completed_at,
            mood=mood,
            stress_level=stress_level,
            energy_level=energy_level,
            work_satisfaction=work_satisfaction,
        )
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        await db.rollback()
        raise DuplicateCheckInError("Wellness check already completed today")
    await db.commit()
    return await db.get(WellnessAssessment, assessment_id, populate_existing=True)


async def query_completed_window(
    db: AsyncSession,
    start: date,
    end: date,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    vessel: Optional[str] = None,
    department: Optional[str] = None,
) -> Sequence[WellnessAssessment]:
    q = select(WellnessAssessment).where(
        WellnessAssessment.completed_at.is_not(None),
        WellnessAssessment.date >= start,
        WellnessAssessment.date <= end,
    )
    if user_ids is not None:
        q = q.where(WellnessAssessment.user_id.in_(list(user_ids)))
    if vessel or department:
        q = q.join(User, User.id == WellnessAssessment.user_id)
        if vessel:
            q = q.where(User.vessel == vessel)
        if department:
            q = q.where(User.department == department)
    res = await db.execute(q.order_by(WellnessAssessment.date.desc()))
    return res.scalars().all()


async def history_for_user(
    db: AsyncSession, user_id: UUID, start: date, end: date, *, limit: int = 50
) -> Sequence[WellnessAssessment]:
    res = await db.execute(
        select(WellnessAssessment)
        .where(
            WellnessAssessment.user_id == user_id,
            WellnessAssessment.completed_at.is_not(None),
            WellnessAssessment.date >= start,
            WellnessAssessment.date <= end,
        )
        .order_by(WellnessAssessment.date.desc())
        .limit(limit)
    )
    return res.scalars().all()
