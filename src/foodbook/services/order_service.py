"""
Сервис заказов: создание, отмена, удаление администратором и чтение.

Правила:
- у пользователя не больше одного заказа на день (для анонимных заказов правило не действует);
- лимит порций меню на день общий для всех заказов этого дня;
- цена меню фиксируется в позиции заказа на момент оформления;
- отмена своего заказа невозможна, если день заблокирован, удаление администратором - всегда.

Все изменяющие операции одного дня идут под общим asyncio.Lock (Database.write_locks),
а уникальный индекс (user_id, order_date) страхует от гонки между процессами.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from foodbook.crud import catalog
from foodbook.crud.order import (
    delete_order,
    get_consumed_quantity,
    get_order_by_id,
    get_order_for_user_and_date,
    get_orders,
    insert_order,
)
from foodbook.db.session import Database
from foodbook.errors import CapacityError, ConflictError, ForbiddenError, NotFoundError, ValidationError
from foodbook.logging_config import get_logger
from foodbook.models import Order
from foodbook.services.date_locks import DateLockRegistry

log = get_logger(__name__)

CENTS = Decimal("0.01")
DUPLICATE_ORDER_MESSAGE = "Du hast bereits eine Bestellung für diesen Tag."


@dataclass(frozen=True)
class PlacedOrder:
    id: int
    total: Decimal


@dataclass(frozen=True)
class OrderCheckResult:
    has_order: bool
    menu_id: Optional[int] = None


@dataclass(frozen=True)
class Capacity:
    menu_id: int
    order_date: date
    max_quantity: Optional[int]
    consumed: int

    @property
    def remaining(self) -> Optional[int]:
        if self.max_quantity is None:
            return None
        return max(self.max_quantity - self.consumed, 0)


class OrderService:
    def __init__(self, database: Database, date_locks: Optional[DateLockRegistry] = None):
        self.database = database
        self.date_locks = date_locks or DateLockRegistry(database)

    async def place_order(
        self,
        customer_name: str,
        menu_id: Optional[int],
        user_id: Optional[int] = None,
        order_date: Optional[date] = None,
        quantity: int = 1,
    ) -> PlacedOrder:
        """
        Оформляет заказ одной транзакцией: проверки, расчёт суммы, вставка заказа и позиции.
        При любой ошибке в базу ничего не пишется.
        """
        if not customer_name or not customer_name.strip():
            raise ValidationError("Name fehlt.")
        if not menu_id:
            raise ValidationError("Menü fehlt.")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Ungültige Menge.")

        target_date = order_date or date.today()

        async with self.database.write_locks.for_date(target_date):
            async with self.database.session() as session:
                try:
                    async with session.begin():
                        if user_id is not None:
                            if await get_order_for_user_and_date(session, user_id, target_date):
                                raise ConflictError(DUPLICATE_ORDER_MESSAGE)
                            if not await catalog.get_user(session, user_id):
                                raise NotFoundError("Benutzer nicht gefunden.")

                        menu = await catalog.get_menu(session, menu_id)
                        if not menu:
                            raise NotFoundError("Menü nicht gefunden.")

                        menu_day = await catalog.get_menu_day(session, menu_id, target_date)
                        if menu_day is not None and menu_day.max_quantity is not None:
                            consumed = await get_consumed_quantity(session, menu_id, target_date)
                            remaining = menu_day.max_quantity - consumed
                            if remaining <= 0:
                                raise CapacityError("Dieses Menü ist leider ausverkauft.", remaining=0)
                            if quantity > remaining:
                                raise CapacityError(
                                    f"Nur noch {remaining} Portion(en) verfügbar.", remaining=remaining
                                )

                        price = Decimal(menu.price)
                        total = (price * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)

                        order = await insert_order(
                            session,
                            customer_name=customer_name,
                            user_id=user_id,
                            order_date=target_date,
                            menu_id=menu_id,
                            quantity=quantity,
                            price=price,
                            total=total,
                        )
                except IntegrityError:
                    # уникальный индекс (user_id, order_date) сработал раньше проверки
                    log.warning("Duplicate order for user %s on %s rejected by storage", user_id, target_date)
                    raise ConflictError(DUPLICATE_ORDER_MESSAGE)

        log.info(
            "Order %s placed: menu=%s qty=%s date=%s user=%s total=%s",
            order.id, menu_id, quantity, target_date, user_id, total,
        )
        return PlacedOrder(id=order.id, total=total)

    async def cancel_order(self, user_id: Optional[int], order_date: Optional[date]) -> None:
        """
        Отмена заказа самим пользователем. Запрещена для заблокированных дат.
        """
        if user_id is None or order_date is None:
            raise ValidationError("user_id und Datum sind erforderlich.")

        async with self.database.write_locks.for_date(order_date):
            async with self.database.session() as session:
                async with session.begin():
                    if await self.date_locks.is_locked(order_date, session=session):
                        raise ForbiddenError("Dieser Tag ist gesperrt, Änderungen sind nicht mehr möglich.")

                    order = await get_order_for_user_and_date(session, user_id, order_date)
                    if not order:
                        raise NotFoundError("Keine Bestellung gefunden.")

                    order_id = order.id
                    await delete_order(session, order_id)

        log.info("Order %s cancelled by user %s (date %s)", order_id, user_id, order_date)

    async def admin_delete_order(self, order_id: int) -> None:
        """
        Удаление заказа администратором: блокировка даты не проверяется.
        """
        async with self.database.session() as session:
            order = await get_order_by_id(session, order_id)
            if not order:
                raise NotFoundError("Bestellung nicht gefunden.")
            order_date = order.order_date

        async with self.database.write_locks.for_date(order_date):
            async with self.database.session() as session:
                async with session.begin():
                    deleted = await delete_order(session, order_id)
                    if not deleted:
                        # удалили параллельно, пока ждали замок
                        raise NotFoundError("Bestellung nicht gefunden.")

        log.info("Order %s deleted by admin (date %s)", order_id, order_date)

    async def list_orders(self, user_id: Optional[int] = None) -> List[Order]:
        async with self.database.session() as session:
            return await get_orders(session, user_id=user_id)

    async def check_order_for_date(self, user_id: Optional[int], order_date: Optional[date] = None) -> OrderCheckResult:
        """
        Предварительная проверка для клиента. Окончательную проверку делает place_order.
        """
        if user_id is None:
            return OrderCheckResult(has_order=False)

        async with self.database.session() as session:
            order = await get_order_for_user_and_date(session, user_id, order_date or date.today())

        if not order:
            return OrderCheckResult(has_order=False)
        menu_id = order.items[0].menu_id if order.items else None
        return OrderCheckResult(has_order=True, menu_id=menu_id)

    async def get_capacity(self, menu_id: int, order_date: Optional[date] = None) -> Capacity:
        target_date = order_date or date.today()
        async with self.database.session() as session:
            if not await catalog.get_menu(session, menu_id):
                raise NotFoundError("Menü nicht gefunden.")
            menu_day = await catalog.get_menu_day(session, menu_id, target_date)
            consumed = await get_consumed_quantity(session, menu_id, target_date)

        return Capacity(
            menu_id=menu_id,
            order_date=target_date,
            max_quantity=menu_day.max_quantity if menu_day else None,
            consumed=consumed,
        )
