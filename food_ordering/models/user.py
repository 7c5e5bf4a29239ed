from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from food_ordering.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String(120), nullable=False)
    phone = Column(String(30), nullable=True)
    user_type = Column(String(20), default="customer", nullable=False)  # customer | admin

    # last discount code used at checkout (denormalized for the profile screen)
    discount_type = Column(String(30), nullable=True)
    discount_photo = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    orders = relationship("Order", back_populates="user")
