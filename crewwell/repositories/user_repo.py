from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crewwell.db.models import User


async def get_user(db: AsyncSession, user_id: UUID) -> Optional[User]:
    return await db.get(User, user_id)


async def list_active_employees(
    db: AsyncSession,
    role: str = "employee",
    *,
    vessel: Optional[str] = None,
    department: Optional[str] = None,
) -> Sequence[User]:
    q = select(User).where(User.role == role, User.is_active.is_(True))
    if vessel:
        q = q.where(User.vessel == vessel)
    if department:
        q = q.where(User.department == department)
    res = await db.execute(q.order_by(User.name))
    return res.scalars().all()
