from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from food_ordering.core.database import get_db
from food_ordering.models.category import Category
from food_ordering.models.menu_item import MenuItem
from food_ordering.schemas.menu import CategoryOut, MenuItemOut
from food_ordering.services.catalog import (
    MenuItemNotFoundError,
    get_item,
    list_available_items,
    list_categories,
)
from food_ordering.services.pricing import cents_to_amount

router = APIRouter(prefix="/api/menu", tags=["menu"])


def _menu_item_to_dict(item: MenuItem) -> dict:
    category = item.category
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description or "",
        "price": cents_to_amount(item.price_cents),
        "image_url": item.image_url,
        "is_available": bool(item.is_available),
        "category_id": item.category_id,
        "category_name": category.name if category else None,
        "category_description": category.description if category else None,
    }


def _category_to_dict(category: Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
    }


@router.get("", response_model=List[MenuItemOut])
def list_menu(db: Session = Depends(get_db)):
    return [_menu_item_to_dict(item) for item in list_available_items(db)]


@router.get("/categories", response_model=List[CategoryOut])
def list_menu_categories(db: Session = Depends(get_db)):
    return [_category_to_dict(category) for category in list_categories(db)]


@router.get("/category/{category_id}", response_model=List[MenuItemOut])
def list_menu_by_category(category_id: int, db: Session = Depends(get_db)):
    return [_menu_item_to_dict(item) for item in list_available_items(db, category_id=category_id)]


@router.get("/{menu_item_id}", response_model=MenuItemOut)
def get_menu_item(menu_item_id: int, db: Session = Depends(get_db)):
    try:
        item = get_item(db, menu_item_id)
    except MenuItemNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Menu item not found") from exc
    return _menu_item_to_dict(item)
