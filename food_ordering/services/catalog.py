from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from food_ordering.models.category import Category
from food_ordering.models.menu_item import MenuItem


class MenuItemNotFoundError(LookupError):
    def __init__(self, menu_item_id: int):
        self.menu_item_id = menu_item_id
        super().__init__(f"Menu item ID {menu_item_id} not found")


@dataclass(frozen=True)
class CatalogPrice:
    menu_item_id: int
    name: str
    price_cents: int
    is_available: bool


def _to_catalog_price(item: MenuItem) -> CatalogPrice:
    return CatalogPrice(
        menu_item_id=item.id,
        name=item.name,
        price_cents=int(item.price_cents),
        is_available=bool(item.is_available),
    )


def get_price(db: Session, menu_item_id: int) -> CatalogPrice:
    item = db.query(MenuItem).filter(MenuItem.id == menu_item_id).first()
    if not item:
        raise MenuItemNotFoundError(menu_item_id)
    return _to_catalog_price(item)


def resolve_prices(db: Session, menu_item_ids: Iterable[int], lock: bool = False) -> dict[int, CatalogPrice]:
    """Current price and availability for each id; unknown ids are left out.

    With ``lock=True`` the rows are read ``FOR SHARE`` (ignored by SQLite) and
    always reloaded from the database instead of the session identity map.
    """
    ids = sorted(set(menu_item_ids))
    if not ids:
        return {}

    query = db.query(MenuItem).filter(MenuItem.id.in_(ids))
    if lock:
        query = query.populate_existing().with_for_update(read=True)
    return {item.id: _to_catalog_price(item) for item in query.all()}


def list_available_items(db: Session, category_id: Optional[int] = None) -> list[MenuItem]:
    query = (
        db.query(MenuItem)
        .outerjoin(Category, Category.id == MenuItem.category_id)
        .options(joinedload(MenuItem.category))
        .filter(MenuItem.is_available.is_(True))
    )
    if category_id is not None:
        query = query.filter(MenuItem.category_id == category_id)
    return query.order_by(Category.name.asc(), MenuItem.name.asc()).all()


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def get_item(db: Session, menu_item_id: int) -> MenuItem:
    item = (
        db.query(MenuItem)
        .options(joinedload(MenuItem.category))
        .filter(MenuItem.id == menu_item_id)
        .first()
    )
    if not item:
        raise MenuItemNotFoundError(menu_item_id)
    return item
