from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from foodbook.config import Settings
from foodbook.db.session import Database
from foodbook.main import create_app
from foodbook.models import Menu, MenuDay, Order, OrderItem, RoleEnum, User
from foodbook.services.date_locks import DateLockRegistry
from foodbook.services.order_service import OrderService

DAY = date(2024, 6, 10)
MENU_A = 1  # 12.90, без лимита
MENU_B = 2  # 9.50, лимит 2 порции на DAY
ADMIN = 1
USERS = [2, 3, 4, 5]


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'foodbook-test.db'}")
    await db.create_all()
    await seed(db)
    yield db
    await db.dispose()


async def seed(db: Database) -> None:
    async with db.session() as session:
        async with session.begin():
            session.add(User(id=ADMIN, firstname="Anna", lastname="Admin", role=RoleEnum.admin, qr_token="qr-admin"))
            for user_id in USERS:
                session.add(
                    User(
                        id=user_id,
                        firstname=f"User{user_id}",
                        lastname="Muster",
                        role=RoleEnum.user,
                        qr_token=f"qr-{user_id}",
                    )
                )
            session.add(Menu(id=MENU_A, name="Schnitzel", price=Decimal("12.90"), active=True))
            session.add(Menu(id=MENU_B, name="Gemüsecurry", price=Decimal("9.50"), active=True))
            session.add(MenuDay(menu_id=MENU_A, available_date=DAY, max_quantity=None))
            session.add(MenuDay(menu_id=MENU_B, available_date=DAY, max_quantity=2))


@pytest.fixture
def date_locks(database):
    return DateLockRegistry(database)


@pytest.fixture
def service(database, date_locks):
    return OrderService(database, date_locks)


@pytest.fixture
async def client(database):
    app = create_app(Settings(AUTO_CREATE_SCHEMA=False), database=database)
    # ASGITransport не запускает lifespan
    app.state.database = database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def count_rows(db: Database, model) -> int:
    async with db.session() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return int(result.scalar_one())


async def count_orders(db: Database) -> int:
    return await count_rows(db, Order)


async def count_items(db: Database) -> int:
    return await count_rows(db, OrderItem)


async def count_order_items(db: Database, order_id: int) -> int:
    async with db.session() as session:
        result = await session.execute(select(func.count(OrderItem.id)).where(OrderItem.order_id == order_id))
        return int(result.scalar_one())
