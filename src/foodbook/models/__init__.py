from .user import User, RoleEnum
from .menu import Menu
from .menu_day import MenuDay
from .order import Order
from .order_item import OrderItem
from .locked_date import LockedDate

__all__ = [
    "User",
    "RoleEnum",
    "Menu",
    "MenuDay",
    "Order",
    "OrderItem",
    "LockedDate",
]
