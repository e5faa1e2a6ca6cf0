import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crewwell.core.exceptions import DuplicateCheckInError
from crewwell.db.models import CheckIn

logger = logging.getLogger(__name__)


async def find_by_user_and_day_window(db: AsyncSession, user_id: UUID, start: datetime, end: datetime) -> Optional[CheckIn]:
    res = await db.execute(
        select(CheckIn).where(CheckIn.user_id == user_id, CheckIn.date >= start, CheckIn.date < end).limit(1)
    )
    return res.scalars().first()


async def insert(db: AsyncSession, checkin: CheckIn) -> CheckIn:
    """
    Persist a check-in. The (user_id, checkin_day) unique constraint is the
    authority on duplicates; a violation rolls back and raises DuplicateCheckInError.
    """
    db.add(checkin)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info("Duplicate check-in rejected for user %s on %s", checkin.user_id, checkin.checkin_day)
        raise DuplicateCheckInError() from e
    await db.refresh(checkin)
    return checkin


async def query_window(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
) -> Sequence[CheckIn]:
    q = select(CheckIn).where(CheckIn.date >= start, CheckIn.date <= end)
    if user_ids is not None:
        q = q.where(CheckIn.user_id.in_(list(user_ids)))
    res = await db.execute(q.order_by(CheckIn.date.desc()))
    return res.scalars().all()


async def list_for_user(db: AsyncSession, user_id: UUID, *, limit: int = 30, offset: int = 0) -> Sequence[CheckIn]:
    res = await db.execute(
        select(CheckIn).where(CheckIn.user_id == user_id).order_by(CheckIn.date.desc()).limit(limit).offset(offset)
    )
    return res.scalars().all()
