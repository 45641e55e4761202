import asyncio
import weakref
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import foodbook.models  # noqa: F401  регистрирует таблицы в Base.metadata
from foodbook.db.base import Base
from foodbook.logging_config import get_logger

log = get_logger(__name__)


class DateWriteLocks:
    """
    Реестр asyncio.Lock по дате заказа.

    Все операции, изменяющие заказы одного дня (создание, отмена, удаление),
    выполняются под одним и тем же замком, поэтому проверка уникальности и
    лимита и последующая вставка не пересекаются с другой записью за этот день.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[date, asyncio.Lock]" = weakref.WeakValueDictionary()

    def for_date(self, order_date: date) -> asyncio.Lock:
        lock = self._locks.get(order_date)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[order_date] = lock
        return lock


class Database:
    """
    Асинхронный движок + фабрика сессий.

    Создаётся при старте приложения и передаётся в сервисы явно,
    вместо глобального подключения на уровне модуля.
    """

    def __init__(self, url: str, echo: bool = False):
        self.engine = create_async_engine(url, echo=echo, future=True)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # Фабрика сессий
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.write_locks = DateWriteLocks()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("Database schema ensured (%s)", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self) -> None:
        await self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite по умолчанию не проверяет FOREIGN KEY / ON DELETE CASCADE
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
