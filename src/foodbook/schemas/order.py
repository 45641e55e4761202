from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderItemRead(BaseModel):
    menu_id: int
    name: Optional[str] = None
    quantity: int
    price_at_order: Decimal

    @classmethod
    def from_orm_with_name(cls, item):
        return cls(
            menu_id=item.menu_id,
            name=item.menu.name if item.menu else None,
            quantity=item.quantity,
            price_at_order=item.price_at_order,
        )

    class Config:
        from_attributes = True


class OrderRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    customer_name: str
    user_fullname: Optional[str] = None
    user_role: Optional[str] = None
    display_name: str
    order_date: date
    total: Decimal
    created_at: datetime
    items: List[OrderItemRead] = []

    @classmethod
    def from_orm_with_name(cls, order):
        user = getattr(order, "user", None)
        user_fullname = user.full_name if user else None

        return cls(
            id=order.id,
            user_id=order.user_id,
            customer_name=order.customer_name,
            user_fullname=user_fullname,
            user_role=user.role.value if user else None,
            display_name=user_fullname or order.customer_name,
            order_date=order.order_date,
            total=order.total,
            created_at=order.created_at,
            items=[OrderItemRead.from_orm_with_name(i) for i in order.items],
        )

    class Config:
        from_attributes = True


class OrderCreate(BaseModel):
    # без ограничений на уровне схемы: проверки делает OrderService,
    # чтобы клиент получал единый формат ошибки
    customer_name: str = ""
    user_id: Optional[int] = None
    order_date: Optional[date] = None
    menu_id: Optional[int] = None
    quantity: int = 1


class OrderCreated(BaseModel):
    id: int
    total: Decimal


class OrderCheck(BaseModel):
    has_order: bool = Field(alias="hasOrder")
    menu_id: Optional[int] = Field(default=None, alias="menuId")

    class Config:
        populate_by_name = True


class CapacityRead(BaseModel):
    menu_id: int
    order_date: date
    max_quantity: Optional[int] = None
    consumed: int
    remaining: Optional[int] = None  # None = без ограничений


class SuccessResponse(BaseModel):
    success: bool = True
