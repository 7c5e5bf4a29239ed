from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from food_ordering.core.database import Base


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("discount_cents >= 0", name="ck_orders_discount_non_negative"),
        CheckConstraint("final_cents >= 0", name="ck_orders_final_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    # cents; total_cents is the subtotal before discount
    total_cents = Column(BigInteger, nullable=False)
    discount_cents = Column(BigInteger, default=0, nullable=False)
    final_cents = Column(BigInteger, nullable=False)
    discount_type = Column(String(30), nullable=True)
    payment_method = Column(String(30), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User", back_populates="orders")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
