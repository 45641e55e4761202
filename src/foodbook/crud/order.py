from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodbook.models import Order, OrderItem


async def get_orders(db: AsyncSession, user_id: Optional[int] = None) -> List[Order]:
    """
    Возвращает список заказов, опционально только одного пользователя.
    Подгружаем items, menu и user.
    Сортируем по created_at (новые первыми).
    """
    stmt = (
        select(Order)
        .options(
            selectinload(Order.items).selectinload(OrderItem.menu),
            selectinload(Order.user),
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
    )

    if user_id is not None:
        stmt = stmt.where(Order.user_id == user_id)

    result = await db.execute(stmt)
    return result.scalars().unique().all()


async def get_order_by_id(db: AsyncSession, order_id: int) -> Optional[Order]:
    return await db.get(Order, order_id)


async def get_order_for_user_and_date(db: AsyncSession, user_id: int, order_date: date) -> Optional[Order]:
    """
    Заказ пользователя на конкретный день (не больше одного).
    Подгружаем items, чтобы знать, какое меню заказано.
    """
    stmt = (
        select(Order)
        .where(Order.user_id == user_id, Order.order_date == order_date)
        .options(selectinload(Order.items))
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_consumed_quantity(db: AsyncSession, menu_id: int, order_date: date) -> int:
    """
    Сколько порций меню уже заказано на день.
    Считается по всем заказам дня (включая анонимные), а не по одному пользователю.
    """
    stmt = (
        select(func.coalesce(func.sum(OrderItem.quantity), 0))
        .join(Order, Order.id == OrderItem.order_id)
        .where(OrderItem.menu_id == menu_id, Order.order_date == order_date)
    )
    result = await db.execute(stmt)
    return int(result.scalar_one())


async def insert_order(
    db: AsyncSession,
    customer_name: str,
    user_id: Optional[int],
    order_date: date,
    menu_id: int,
    quantity: int,
    price: Decimal,
    total: Decimal,
) -> Order:
    """
    Создаёт заказ и его позицию в текущей транзакции (без commit).
    """
    order = Order(
        customer_name=customer_name,
        user_id=user_id,
        order_date=order_date,
        total=total,
        created_at=datetime.now(),
    )
    db.add(order)
    # нужен order.id для позиции
    await db.flush()

    db.add(
        OrderItem(
            order_id=order.id,
            menu_id=menu_id,
            quantity=quantity,
            price_at_order=price,
        )
    )
    await db.flush()
    return order


async def delete_order(db: AsyncSession, order_id: int) -> bool:
    """
    Удаляет позиции заказа, затем сам заказ (без commit).
    """
    await db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
    result = await db.execute(delete(Order).where(Order.id == order_id))
    return result.rowcount > 0

