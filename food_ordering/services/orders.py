from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from food_ordering.models.order import Order
from food_ordering.models.order_item import OrderItem
from food_ordering.models.user import User
from food_ordering.services.catalog import CatalogPrice, resolve_prices
from food_ordering.services.pricing import NoDiscount, PricedLine, compute_totals, resolve_discount

logger = logging.getLogger(__name__)

MAX_LINE_QUANTITY = 999


class OrderError(Exception):
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class OrderValidationError(OrderError):
    pass


class EmptyCartError(OrderValidationError):
    def __init__(self):
        super().__init__("Items are required")


class MissingPaymentMethodError(OrderValidationError):
    def __init__(self):
        super().__init__("Payment method is required")


class InvalidQuantityError(OrderValidationError):
    def __init__(self, menu_item_id):
        self.menu_item_id = menu_item_id
        super().__init__(
            f"Quantity for menu item ID {menu_item_id} must be a whole number from 1 to {MAX_LINE_QUANTITY}"
        )


class InvalidMenuItemIdError(OrderValidationError):
    def __init__(self, menu_item_id):
        self.menu_item_id = menu_item_id
        super().__init__(f"Invalid menu item ID {menu_item_id!r}")


class OrderReferenceError(OrderError):
    pass


class ItemUnavailableError(OrderReferenceError):
    def __init__(self, menu_item_id: int, exists: bool = False):
        self.menu_item_id = menu_item_id
        self.exists = exists
        reason = "is not available" if exists else "not found"
        super().__init__(f"Menu item ID {menu_item_id} {reason}")


class CatalogChangedError(OrderError):
    status_code = 409

    def __init__(self, menu_item_id: int):
        self.menu_item_id = menu_item_id
        super().__init__(f"Menu item ID {menu_item_id} changed while placing the order, please retry")


class OrderPersistenceError(OrderError):
    status_code = 500

    def __init__(self):
        super().__init__("Failed to create order")


class OrderNotFoundError(OrderError):
    status_code = 404

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__("Order not found")


@dataclass(frozen=True)
class CartLine:
    menu_item_id: int
    quantity: int


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_request(cart_lines: Sequence[CartLine], payment_method: Optional[str]) -> str:
    if not cart_lines:
        raise EmptyCartError()

    method = (payment_method or "").strip()
    if not method:
        raise MissingPaymentMethodError()

    for line in cart_lines:
        if not _is_int(line.menu_item_id) or line.menu_item_id <= 0:
            raise InvalidMenuItemIdError(line.menu_item_id)
        if not _is_int(line.quantity) or not 1 <= line.quantity <= MAX_LINE_QUANTITY:
            raise InvalidQuantityError(line.menu_item_id)
    return method


def _price_lines(cart_lines: Sequence[CartLine], prices: dict[int, CatalogPrice]) -> list[PricedLine]:
    priced: list[PricedLine] = []
    for line in cart_lines:
        catalog = prices.get(line.menu_item_id)
        if catalog is None:
            raise ItemUnavailableError(line.menu_item_id)
        if not catalog.is_available:
            raise ItemUnavailableError(line.menu_item_id, exists=True)
        priced.append(
            PricedLine(
                menu_item_id=line.menu_item_id,
                quantity=line.quantity,
                unit_price_cents=catalog.price_cents,
            )
        )
    return priced


def _recheck_catalog(db: Session, resolved: dict[int, CatalogPrice]) -> None:
    current = resolve_prices(db, resolved.keys(), lock=True)
    for menu_item_id, snapshot in resolved.items():
        latest = current.get(menu_item_id)
        if latest is None or not latest.is_available:
            raise ItemUnavailableError(menu_item_id, exists=latest is not None)
        if latest.price_cents != snapshot.price_cents:
            raise CatalogChangedError(menu_item_id)


def place_order(
    db: Session,
    user_id: int,
    cart_lines: Iterable[CartLine],
    payment_method: Optional[str],
    discount_code: Optional[str] = None,
) -> Order:
    """Validate, price and persist an order with all of its items in one transaction.

    Prices are resolved inside the write transaction and checked again right
    before commit. Any failure rolls the whole transaction back, so either the
    order and every item are stored or nothing is.
    """
    lines = list(cart_lines or [])
    method = _validate_request(lines, payment_method)
    policy = resolve_discount(discount_code)
    applied_code = None if isinstance(policy, NoDiscount) else policy.code

    try:
        prices = resolve_prices(db, (line.menu_item_id for line in lines), lock=True)
        priced_lines = _price_lines(lines, prices)
        breakdown = compute_totals(priced_lines, policy)

        order = Order(
            user_id=user_id,
            total_cents=breakdown.subtotal_cents,
            discount_cents=breakdown.discount_cents,
            final_cents=breakdown.final_cents,
            discount_type=applied_code,
            payment_method=method,
        )
        db.add(order)
        db.flush()

        for priced in priced_lines:
            db.add(
                OrderItem(
                    order_id=order.id,
                    menu_item_id=priced.menu_item_id,
                    name=prices[priced.menu_item_id].name,
                    quantity=priced.quantity,
                    price_cents=priced.unit_price_cents,
                )
            )
        db.flush()

        _recheck_catalog(db, prices)

        if applied_code is not None:
            db.query(User).filter(User.id == user_id).update(
                {User.discount_type: applied_code}, synchronize_session=False
            )

        db.commit()
    except OrderError as exc:
        db.rollback()
        logger.warning("order rejected user_id=%s reason=%s", user_id, exc.message)
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("order persistence failed user_id=%s", user_id)
        raise OrderPersistenceError() from exc
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info(
        "order placed order_id=%s user_id=%s items=%s subtotal_cents=%s discount_cents=%s final_cents=%s",
        order.id,
        user_id,
        len(priced_lines),
        order.total_cents,
        order.discount_cents,
        order.final_cents,
        extra={"order_id": order.id},
    )
    return order


def list_orders(
    db: Session,
    user_id: int,
    limit: Optional[int] = None,
    before_id: Optional[int] = None,
) -> list[Order]:
    """Orders of ``user_id``, newest first, with their items loaded.

    ``before_id`` and ``limit`` page through the history by order id.
    """
    query = (
        db.query(Order)
        .options(selectinload(Order.order_items))
        .filter(Order.user_id == user_id)
    )
    if before_id is not None:
        query = query.filter(Order.id < before_id)
    query = query.order_by(desc(Order.created_at), desc(Order.id))
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def get_order(db: Session, user_id: int, order_id: int) -> Order:
    order = (
        db.query(Order)
        .options(selectinload(Order.order_items))
        .filter(Order.id == order_id, Order.user_id == user_id)
        .first()
    )
    if not order:
        raise OrderNotFoundError(order_id)
    return order
