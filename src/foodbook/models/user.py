import enum
from sqlalchemy import Column, Integer, String, DateTime, func, Enum
from sqlalchemy.orm import relationship
from ..db.base import Base


class RoleEnum(str, enum.Enum):
    admin = "admin"
    manager = "manager"
    user = "user"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firstname = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    role = Column(Enum(RoleEnum, name="user_role"), nullable=False, default=RoleEnum.user)
    qr_token = Column(String(64), nullable=False, unique=True)  # токен для входа по QR-коду
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # связь с заказами
    orders = relationship("Order", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"
