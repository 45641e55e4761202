from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from foodbook.db.session import Database
from foodbook.services.date_locks import DateLockRegistry
from foodbook.services.order_service import OrderService


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_async_session(db: Database = Depends(get_database)) -> AsyncGenerator[AsyncSession, None]:
    """
    Использовать в Depends(get_async_session)
    Пример: async def endpoint(session: AsyncSession = Depends(get_async_session))
    """
    async with db.session() as session:
        yield session


def get_date_lock_registry(db: Database = Depends(get_database)) -> DateLockRegistry:
    return DateLockRegistry(db)


def get_order_service(
    db: Database = Depends(get_database),
    locks: DateLockRegistry = Depends(get_date_lock_registry),
) -> OrderService:
    return OrderService(db, locks)
