from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, func
from ..db.base import Base


class LockedDate(Base):
    """Заблокированный день: пользователи больше не могут отменять свои заказы."""

    __tablename__ = "locked_dates"

    id = Column(Integer, primary_key=True, index=True)
    locked_date = Column(Date, nullable=False, unique=True)
    locked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    locked_by = Column(Integer, ForeignKey("users.id"), nullable=True)
