from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from foodbook.models import LockedDate


async def get_locked_date(db: AsyncSession, locked_date: date) -> Optional[LockedDate]:
    result = await db.execute(select(LockedDate).where(LockedDate.locked_date == locked_date))
    return result.scalars().first()


async def get_locked_dates(db: AsyncSession) -> List[date]:
    """
    Все заблокированные даты по возрастанию.
    """
    result = await db.execute(select(LockedDate.locked_date).order_by(LockedDate.locked_date))
    return list(result.scalars().all())


async def insert_locked_date(db: AsyncSession, locked_date: date, locked_by: Optional[int] = None) -> LockedDate:
    lock = LockedDate(locked_date=locked_date, locked_by=locked_by, locked_at=datetime.now())
    db.add(lock)
    await db.flush()
    return lock


async def delete_locked_date(db: AsyncSession, locked_date: date) -> bool:
    result = await db.execute(delete(LockedDate).where(LockedDate.locked_date == locked_date))
    return result.rowcount > 0
