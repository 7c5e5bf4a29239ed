import pytest

from food_ordering.services.catalog import (
    MenuItemNotFoundError,
    get_item,
    get_price,
    list_available_items,
    list_categories,
    resolve_prices,
)
from tests.fixtures_data import UNKNOWN_MENU_ITEM_ID


def test_get_price_returns_price_and_availability(db):
    price = get_price(db, 4)

    assert price.menu_item_id == 4
    assert price.name == "Milkshake"
    assert price.price_cents == 1800
    assert price.is_available is False


def test_get_price_unknown_item_raises(db):
    with pytest.raises(MenuItemNotFoundError) as exc:
        get_price(db, UNKNOWN_MENU_ITEM_ID)

    assert exc.value.menu_item_id == UNKNOWN_MENU_ITEM_ID


def test_resolve_prices_leaves_unknown_ids_out(db):
    prices = resolve_prices(db, [1, 3, 3, UNKNOWN_MENU_ITEM_ID], lock=True)

    assert set(prices) == {1, 3}
    assert prices[3].price_cents == 699
    assert resolve_prices(db, []) == {}


def test_available_items_are_sorted_by_category_then_name(db):
    items = list_available_items(db)

    assert [item.name for item in items] == ["Burger", "Fries", "Soda"]


def test_available_items_filtered_by_category(db):
    assert [item.name for item in list_available_items(db, category_id=2)] == ["Soda"]


def test_categories_and_single_item(db):
    assert [c.name for c in list_categories(db)] == ["Burgers", "Drinks"]
    assert get_item(db, 2).category.name == "Burgers"
    with pytest.raises(MenuItemNotFoundError):
        get_item(db, UNKNOWN_MENU_ITEM_ID)
