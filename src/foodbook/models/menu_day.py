from sqlalchemy import Column, Integer, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..db.base import Base


class MenuDay(Base):
    """Доступность меню на конкретную дату и необязательный лимит порций."""

    __tablename__ = "menu_days"
    __table_args__ = (
        UniqueConstraint("menu_id", "available_date", name="uq_menu_days_menu_id_available_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False)
    available_date = Column(Date, nullable=False, index=True)
    max_quantity = Column(Integer, nullable=True)  # None = без ограничений

    menu = relationship("Menu", back_populates="days")
