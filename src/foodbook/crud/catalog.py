"""
Чтение каталога меню и справочника пользователей.

Сервис заказов только читает эти таблицы: цену меню, лимит на день, имя и роль пользователя.
"""
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foodbook.models import Menu, MenuDay, User


async def get_menu(db: AsyncSession, menu_id: int) -> Optional[Menu]:
    return await db.get(Menu, menu_id)


async def get_menu_day(db: AsyncSession, menu_id: int, available_date: date) -> Optional[MenuDay]:
    stmt = select(MenuDay).where(
        MenuDay.menu_id == menu_id,
        MenuDay.available_date == available_date,
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)
