"""
Ошибки доменного слоя заказов.

Каждая ошибка несёт человекочитаемое сообщение (показывается клиенту как есть),
машинный код и HTTP-статус, в который её превращает обработчик в main.py.
"""
from typing import Any, Dict


class OrderError(Exception):
    code = "order_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class ValidationError(OrderError):
    """Не хватает обязательных данных или они некорректны."""

    code = "validation_error"
    status_code = 400


class ConflictError(OrderError):
    """Повторный заказ на тот же день или повторная блокировка даты."""

    code = "conflict"
    status_code = 400


class NotFoundError(OrderError):
    code = "not_found"
    status_code = 404


class CapacityError(OrderError):
    """Лимит порций на день исчерпан или недостаточен."""

    code = "capacity_exceeded"
    status_code = 400

    def __init__(self, message: str, remaining: int = 0):
        super().__init__(message)
        self.remaining = remaining

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["remaining"] = self.remaining
        return data


class ForbiddenError(OrderError):
    """Дата заблокирована администратором."""

    code = "forbidden"
    status_code = 403

