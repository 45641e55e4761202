"""
Реестр заблокированных дат.

Блокировка даты запрещает пользователям отменять свои заказы на этот день.
На создание заказов и на удаление заказа администратором она не влияет.
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from foodbook.crud import catalog
from foodbook.crud.locked_date import delete_locked_date, get_locked_date, get_locked_dates, insert_locked_date
from foodbook.db.session import Database
from foodbook.errors import ConflictError, NotFoundError
from foodbook.logging_config import get_logger

log = get_logger(__name__)


class DateLockRegistry:
    def __init__(self, database: Database):
        self.database = database

    async def lock_date(self, locked_date: date, locked_by: Optional[int] = None) -> None:
        """
        Блокирует дату. Повторная блокировка уже заблокированной даты - ошибка, а не no-op.
        """
        async with self.database.session() as session:
            try:
                async with session.begin():
                    if await get_locked_date(session, locked_date):
                        raise ConflictError("Dieser Tag ist bereits gesperrt.")
                    if locked_by is not None and not await catalog.get_user(session, locked_by):
                        raise NotFoundError("Benutzer nicht gefunden.")
                    await insert_locked_date(session, locked_date, locked_by)
            except IntegrityError:
                # параллельная блокировка того же дня успела раньше
                raise ConflictError("Dieser Tag ist bereits gesperrt.")

        log.info("Date %s locked (by user %s)", locked_date, locked_by)

    async def unlock_date(self, locked_date: date) -> None:
        """
        Снимает блокировку. Снятие несуществующей блокировки ошибкой не считается.
        """
        async with self.database.session() as session:
            async with session.begin():
                removed = await delete_locked_date(session, locked_date)

        if removed:
            log.info("Date %s unlocked", locked_date)

    async def is_locked(self, locked_date: date, session: Optional[AsyncSession] = None) -> bool:
        if session is not None:
            return await get_locked_date(session, locked_date) is not None

        async with self.database.session() as own_session:
            return await get_locked_date(own_session, locked_date) is not None

    async def list_locked_dates(self) -> List[date]:
        async with self.database.session() as session:
            return await get_locked_dates(session)
