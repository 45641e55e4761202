from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import update

from conftest import DAY, MENU_A, MENU_B, USERS, count_items, count_order_items, count_orders
from foodbook.errors import CapacityError, ConflictError, ForbiddenError, NotFoundError, ValidationError
from foodbook.models import Menu, MenuDay


async def test_place_order_returns_total(service, database):
    placed = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)

    assert placed.total == Decimal("12.90")
    assert await count_orders(database) == 1
    assert await count_items(database) == 1


async def test_second_order_for_same_user_and_day_conflicts(service, database):
    await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)

    with pytest.raises(ConflictError):
        await service.place_order("User2 Muster", MENU_B, user_id=USERS[0], order_date=DAY)

    assert await count_orders(database) == 1


async def test_same_user_can_order_on_another_day(service):
    await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)
    placed = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY + timedelta(days=1))

    assert placed.id


async def test_anonymous_orders_may_repeat(service, database):
    await service.place_order("Gast", MENU_A, order_date=DAY)
    await service.place_order("Gast", MENU_A, order_date=DAY)

    assert await count_orders(database) == 2


async def test_unknown_menu_leaves_ledger_unchanged(service, database):
    with pytest.raises(NotFoundError):
        await service.place_order("User2 Muster", 999, user_id=USERS[0], order_date=DAY)

    assert await count_orders(database) == 0
    assert await count_items(database) == 0


async def test_unknown_user_is_rejected(service, database):
    with pytest.raises(NotFoundError):
        await service.place_order("Niemand", MENU_A, user_id=999, order_date=DAY)

    assert await count_orders(database) == 0


@pytest.mark.parametrize(
    "name, menu_id, quantity",
    [
        ("", MENU_A, 1),
        ("   ", MENU_A, 1),
        ("Gast", None, 1),
        ("Gast", MENU_A, 0),
        ("Gast", MENU_A, -2),
    ],
)
async def test_invalid_input_is_rejected(service, database, name, menu_id, quantity):
    with pytest.raises(ValidationError):
        await service.place_order(name, menu_id, order_date=DAY, quantity=quantity)

    assert await count_orders(database) == 0


async def test_quantity_above_one_multiplies_total(service):
    placed = await service.place_order("Gast", MENU_A, order_date=DAY, quantity=3)

    assert placed.total == Decimal("38.70")


async def test_order_date_defaults_to_today(service):
    await service.place_order("User2 Muster", MENU_A, user_id=USERS[0])

    check = await service.check_order_for_date(USERS[0], date.today())
    assert check.has_order is True


async def test_capacity_is_shared_between_users(service, database):
    await service.place_order("User2 Muster", MENU_B, user_id=USERS[0], order_date=DAY)
    await service.place_order("User3 Muster", MENU_B, user_id=USERS[1], order_date=DAY)

    with pytest.raises(CapacityError) as exc_info:
        await service.place_order("User4 Muster", MENU_B, user_id=USERS[2], order_date=DAY)

    assert exc_info.value.remaining == 0
    assert await count_orders(database) == 2


async def test_capacity_reports_remaining_portions(service):
    with pytest.raises(CapacityError) as exc_info:
        await service.place_order("Gast", MENU_B, order_date=DAY, quantity=3)

    assert exc_info.value.remaining == 2

    placed = await service.place_order("Gast", MENU_B, order_date=DAY, quantity=2)
    assert placed.total == Decimal("19.00")


async def test_capacity_counts_anonymous_orders(service):
    await service.place_order("Gast", MENU_B, order_date=DAY, quantity=2)

    with pytest.raises(CapacityError):
        await service.place_order("User2 Muster", MENU_B, user_id=USERS[0], order_date=DAY)


async def test_capacity_is_per_day(service):
    await service.place_order("Gast", MENU_B, order_date=DAY, quantity=2)

    # на другой день у меню B нет лимита
    placed = await service.place_order("Gast", MENU_B, order_date=DAY + timedelta(days=1), quantity=5)
    assert placed.total == Decimal("47.50")


async def test_cancelled_order_frees_capacity(service):
    await service.place_order("User2 Muster", MENU_B, user_id=USERS[0], order_date=DAY, quantity=2)
    await service.cancel_order(USERS[0], DAY)

    placed = await service.place_order("User3 Muster", MENU_B, user_id=USERS[1], order_date=DAY, quantity=2)
    assert placed.id


async def test_price_change_does_not_touch_placed_orders(service, database):
    placed = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)

    async with database.session() as session:
        async with session.begin():
            await session.execute(update(Menu).where(Menu.id == MENU_A).values(price=Decimal("15.00")))

    [order] = await service.list_orders(user_id=USERS[0])
    assert order.id == placed.id
    assert order.total == Decimal("12.90")
    assert order.items[0].price_at_order == Decimal("12.90")


async def test_cancel_removes_order_and_items(service, database):
    placed = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)

    await service.cancel_order(USERS[0], DAY)

    assert await count_orders(database) == 0
    assert await count_order_items(database, placed.id) == 0


async def test_cancel_without_order_is_not_found(service):
    with pytest.raises(NotFoundError):
        await service.cancel_order(USERS[0], DAY)


@pytest.mark.parametrize("user_id, order_date", [(None, DAY), (2, None)])
async def test_cancel_requires_user_and_date(service, user_id, order_date):
    with pytest.raises(ValidationError):
        await service.cancel_order(user_id, order_date)


async def test_cancel_on_locked_day_is_forbidden(service, date_locks, database):
    await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)
    await date_locks.lock_date(DAY)

    with pytest.raises(ForbiddenError):
        await service.cancel_order(USERS[0], DAY)

    assert await count_orders(database) == 1


async def test_lock_does_not_block_new_orders(service, date_locks):
    await date_locks.lock_date(DAY)

    placed = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)
    assert placed.id


async def test_admin_delete_ignores_lock(service, date_locks, database):
    placed = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)
    await date_locks.lock_date(DAY)

    await service.admin_delete_order(placed.id)

    assert await count_orders(database) == 0
    assert await count_items(database) == 0


async def test_admin_delete_unknown_order(service):
    with pytest.raises(NotFoundError):
        await service.admin_delete_order(12345)


async def test_list_orders_newest_first_with_user_details(service):
    first = await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)
    second = await service.place_order("Gast", MENU_B, order_date=DAY, quantity=2)

    orders = await service.list_orders()

    assert [o.id for o in orders] == [second.id, first.id]
    assert orders[1].user.full_name == "User2 Muster"
    assert orders[0].user is None
    assert orders[0].items[0].menu.name == "Gemüsecurry"
    assert orders[0].items[0].quantity == 2


async def test_list_orders_filters_by_user(service):
    await service.place_order("User2 Muster", MENU_A, user_id=USERS[0], order_date=DAY)
    await service.place_order("User3 Muster", MENU_A, user_id=USERS[1], order_date=DAY)

    orders = await service.list_orders(user_id=USERS[1])

    assert [o.user_id for o in orders] == [USERS[1]]


async def test_check_order_for_date(service):
    await service.place_order("User2 Muster", MENU_B, user_id=USERS[0], order_date=DAY)

    found = await service.check_order_for_date(USERS[0], DAY)
    missing = await service.check_order_for_date(USERS[1], DAY)
    anonymous = await service.check_order_for_date(None, DAY)

    assert (found.has_order, found.menu_id) == (True, MENU_B)
    assert (missing.has_order, missing.menu_id) == (False, None)
    assert anonymous.has_order is False


async def test_capacity_snapshot(service, database):
    await service.place_order("Gast", MENU_B, order_date=DAY)

    capped = await service.get_capacity(MENU_B, DAY)
    uncapped = await service.get_capacity(MENU_A, DAY)

    assert (capped.max_quantity, capped.consumed, capped.remaining) == (2, 1, 1)
    assert uncapped.max_quantity is None
    assert uncapped.remaining is None


async def test_capacity_snapshot_for_unknown_menu(service):
    with pytest.raises(NotFoundError):
        await service.get_capacity(999, DAY)


async def test_zero_cap_is_sold_out(service, database):
    async with database.session() as session:
        async with session.begin():
            session.add(MenuDay(menu_id=MENU_A, available_date=DAY + timedelta(days=2), max_quantity=0))

    with pytest.raises(CapacityError) as exc_info:
        await service.place_order("Gast", MENU_A, order_date=DAY + timedelta(days=2))

    assert exc_info.value.remaining == 0
