from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from food_ordering.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    menu_items = relationship("MenuItem", back_populates="category")
