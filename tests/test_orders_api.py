from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from food_ordering.models.order import Order
from food_ordering.models.order_item import OrderItem
from food_ordering.services import orders as order_service
from tests.fixtures_data import (
    HAPPY_PATH_ORDER_PAYLOAD,
    MIXED_CART_PAYLOAD,
    SAVE20_ORDER_PAYLOAD,
    UNKNOWN_MENU_ITEM_ID,
)


def test_create_order_returns_201_with_totals(customer_client, db):
    response = customer_client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Order created successfully"
    assert body["order"]["totalAmount"] == 200.0
    assert body["order"]["discountAmount"] == 0.0
    assert body["order"]["finalAmount"] == 200.0
    assert db.query(Order).filter(Order.id == body["order"]["id"]).count() == 1


def test_create_order_with_save20(customer_client):
    response = customer_client.post("/api/orders", json=SAVE20_ORDER_PAYLOAD)

    assert response.status_code == 201
    order = response.json()["order"]
    assert (order["totalAmount"], order["discountAmount"], order["finalAmount"]) == (200.0, 40.0, 160.0)


def test_create_order_with_loyalty_and_mixed_cart(customer_client):
    response = customer_client.post("/api/orders", json=MIXED_CART_PAYLOAD)

    assert response.status_code == 201
    order = response.json()["order"]
    # 3 x 12.50 + 6.99 = 44.49, flat 50.00 capped at the subtotal
    assert order["totalAmount"] == 44.49
    assert order["discountAmount"] == 44.49
    assert order["finalAmount"] == 0.0


def test_empty_cart_returns_400(customer_client, db):
    response = customer_client.post("/api/orders", json={"items": [], "payment_method": "cash"})

    assert response.status_code == 400
    assert response.json() == {"error": "Items are required"}
    assert db.query(Order).count() == 0


def test_missing_payment_method_returns_400(customer_client):
    response = customer_client.post("/api/orders", json={"items": [{"menu_item_id": 1, "quantity": 1}]})

    assert response.status_code == 400
    assert response.json() == {"error": "Payment method is required"}


def test_unknown_item_returns_400_and_writes_nothing(customer_client, db):
    payload = {
        "items": [{"menu_item_id": 1, "quantity": 1}, {"menu_item_id": UNKNOWN_MENU_ITEM_ID, "quantity": 1}],
        "payment_method": "cash",
    }

    response = customer_client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": f"Menu item ID {UNKNOWN_MENU_ITEM_ID} not found"}
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0


def test_zero_quantity_returns_400(customer_client):
    payload = {"items": [{"menu_item_id": 2, "quantity": 0}], "payment_method": "cash"}

    response = customer_client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert "menu item ID 2" in response.json()["error"]


def test_oversized_quantity_returns_400_and_writes_nothing(customer_client, db):
    payload = {"items": [{"menu_item_id": 1, "quantity": 10**19}], "payment_method": "cash"}

    response = customer_client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert response.json() == {
        "error": f"Quantity for menu item ID 1 must be a whole number from 1 to {order_service.MAX_LINE_QUANTITY}"
    }
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0


def test_largest_allowed_quantity_is_stored(customer_client, db):
    quantity = order_service.MAX_LINE_QUANTITY
    payload = {"items": [{"menu_item_id": 1, "quantity": quantity}], "payment_method": "cash"}

    response = customer_client.post("/api/orders", json=payload)

    assert response.status_code == 201
    assert db.query(OrderItem).one().quantity == quantity


@pytest.mark.parametrize(
    "line",
    [
        {"menu_item_id": 1, "quantity": "2"},
        {"menu_item_id": 1, "quantity": 1.0},
        {"menu_item_id": "1", "quantity": 1},
        {"menu_item_id": 1, "quantity": True},
    ],
)
def test_non_integer_line_fields_return_400(customer_client, db, line):
    response = customer_client.post("/api/orders", json={"items": [line], "payment_method": "cash"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("items.0.")
    assert db.query(Order).count() == 0


def test_malformed_body_returns_400_naming_the_field(customer_client):
    payload = {"items": [{"menu_item_id": 1, "quantity": "two"}], "payment_method": "cash"}

    response = customer_client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert response.json()["error"].startswith("items.0.quantity:")


def test_persistence_failure_returns_500(customer_client, db):
    boom = OperationalError("INSERT", {}, Exception("connection lost"))

    with patch.object(order_service, "_recheck_catalog", side_effect=boom):
        response = customer_client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create order"}
    assert db.query(Order).count() == 0


def test_history_lists_orders_with_items(customer_client):
    first = customer_client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD).json()["order"]
    second = customer_client.post("/api/orders", json=MIXED_CART_PAYLOAD).json()["order"]

    response = customer_client.get("/api/orders")

    assert response.status_code == 200
    history = response.json()
    assert [o["id"] for o in history] == [second["id"], first["id"]]
    latest = history[0]
    assert latest["payment_method"] == "pix"
    assert latest["discount_type"] == "loyalty"
    assert latest["created_at"]
    assert latest["items"][0] == {
        "id": latest["items"][0]["id"],
        "menu_item_id": 2,
        "quantity": 3,
        "price": 12.5,
        "name": "Fries",
    }
    assert history[1]["totalAmount"] == 200.0
    assert history[1]["finalAmount"] == 200.0


def test_history_is_empty_for_new_customer(customer_client):
    response = customer_client.get("/api/orders")

    assert response.status_code == 200
    assert response.json() == []


def test_history_pagination_params(customer_client):
    ids = [customer_client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD).json()["order"]["id"] for _ in range(3)]

    page = customer_client.get("/api/orders", params={"limit": 2}).json()
    rest = customer_client.get("/api/orders", params={"limit": 2, "before_id": page[-1]["id"]}).json()

    assert [o["id"] for o in page] == ids[::-1][:2]
    assert [o["id"] for o in rest] == ids[::-1][2:]


def test_get_single_order_and_404_for_unknown(customer_client):
    created = customer_client.post("/api/orders", json=SAVE20_ORDER_PAYLOAD).json()["order"]

    found = customer_client.get(f"/api/orders/{created['id']}")
    missing = customer_client.get("/api/orders/987654")

    assert found.status_code == 200
    assert found.json()["finalAmount"] == 160.0
    assert missing.status_code == 404
    assert missing.json() == {"error": "Order not found"}


def test_orders_require_authentication(client):
    assert client.get("/api/orders").status_code == 401
    assert client.post("/api/orders", json=HAPPY_PATH_ORDER_PAYLOAD).status_code == 401
    bad = client.get("/api/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401
