from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from foodbook.db.deps import get_date_lock_registry, get_order_service
from foodbook.schemas.locked_date import LockDateRequest
from foodbook.schemas.order import (
    CapacityRead,
    OrderCheck,
    OrderCreate,
    OrderCreated,
    OrderRead,
    SuccessResponse,
)
from foodbook.services.date_locks import DateLockRegistry
from foodbook.services.order_service import OrderService


router = APIRouter(prefix="/orders", tags=["orders"])

# Статические пути объявлены раньше /{order_id}


@router.get("", response_model=List[OrderRead])
async def list_orders(
    user_id: Optional[int] = Query(None, description="Только заказы этого пользователя"),
    service: OrderService = Depends(get_order_service),
):
    """
    Возвращает список заказов (новые первыми) с именем/ролью пользователя и позициями.
    """
    orders = await service.list_orders(user_id=user_id)
    return [OrderRead.from_orm_with_name(o) for o in orders]


@router.get("/check", response_model=OrderCheck)
async def check_order(
    user_id: Optional[int] = Query(None, description="ID пользователя"),
    order_date: Optional[date] = Query(None, alias="date", description="Дата (YYYY-MM-DD), по умолчанию сегодня"),
    service: OrderService = Depends(get_order_service),
):
    """
    Есть ли у пользователя заказ на дату и какое меню в нём.
    """
    result = await service.check_order_for_date(user_id, order_date)
    return OrderCheck(has_order=result.has_order, menu_id=result.menu_id)


@router.get("/capacity", response_model=CapacityRead)
async def get_capacity(
    menu_id: int = Query(..., description="ID меню"),
    order_date: Optional[date] = Query(None, alias="date", description="Дата (YYYY-MM-DD), по умолчанию сегодня"),
    service: OrderService = Depends(get_order_service),
):
    """
    Лимит порций меню на день, сколько уже заказано и сколько осталось.
    """
    capacity = await service.get_capacity(menu_id, order_date)
    return CapacityRead(
        menu_id=capacity.menu_id,
        order_date=capacity.order_date,
        max_quantity=capacity.max_quantity,
        consumed=capacity.consumed,
        remaining=capacity.remaining,
    )


@router.get("/locked-dates", response_model=List[date])
async def list_locked_dates(locks: DateLockRegistry = Depends(get_date_lock_registry)):
    return await locks.list_locked_dates()


@router.post("/lock-date", response_model=SuccessResponse)
async def lock_date(body: LockDateRequest, locks: DateLockRegistry = Depends(get_date_lock_registry)):
    """
    Блокирует дату: пользователи больше не могут отменять заказы на этот день.
    """
    await locks.lock_date(body.date, locked_by=body.locked_by)
    return SuccessResponse()


@router.delete("/unlock-date", response_model=SuccessResponse)
async def unlock_date(
    locked_date: date = Query(..., alias="date", description="Дата (YYYY-MM-DD)"),
    locks: DateLockRegistry = Depends(get_date_lock_registry),
):
    await locks.unlock_date(locked_date)
    return SuccessResponse()


@router.post("", response_model=OrderCreated, status_code=201)
async def create_order_endpoint(order_in: OrderCreate, service: OrderService = Depends(get_order_service)):
    """
    Оформляет заказ, возвращает id и сумму.
    """
    placed = await service.place_order(
        customer_name=order_in.customer_name,
        menu_id=order_in.menu_id,
        user_id=order_in.user_id,
        order_date=order_in.order_date,
        quantity=order_in.quantity,
    )
    return OrderCreated(id=placed.id, total=placed.total)


@router.delete("", response_model=SuccessResponse)
async def cancel_order(
    user_id: Optional[int] = Query(None, description="ID пользователя"),
    order_date: Optional[date] = Query(None, alias="date", description="Дата (YYYY-MM-DD)"),
    service: OrderService = Depends(get_order_service),
):
    """
    Отмена своего заказа. Невозможна, если день заблокирован.
    """
    await service.cancel_order(user_id, order_date)
    return SuccessResponse()


@router.delete("/{order_id}", response_model=SuccessResponse)
async def remove_order(
    order_id: int = Path(..., description="ID заказа"),
    service: OrderService = Depends(get_order_service),
):
    """
    Удаление заказа администратором, независимо от блокировки даты.
    """
    await service.admin_delete_order(order_id)
    return SuccessResponse()
