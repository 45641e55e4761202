from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        # NULL в user_id не конфликтуют, анонимных заказов на день может быть сколько угодно
        UniqueConstraint("user_id", "order_date", name="uq_orders_user_id_order_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    customer_name = Column(String(200), nullable=False)
    order_date = Column(Date, nullable=False, index=True)  # день, на который заказана еда
    total = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # связи
    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
