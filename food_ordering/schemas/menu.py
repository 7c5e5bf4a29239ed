from typing import Optional

from pydantic import BaseModel


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None


class MenuItemOut(BaseModel):
    id: int
    name: str
    description: str
    price: float
    image_url: Optional[str] = None
    is_available: bool
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_description: Optional[str] = None
