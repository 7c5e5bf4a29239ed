from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from food_ordering.core.database import get_db
from food_ordering.deps import get_current_user
from food_ordering.models.order import Order
from food_ordering.models.order_item import OrderItem
from food_ordering.models.user import User
from food_ordering.schemas.orders import OrderCreate, OrderCreatedOut, OrderOut
from food_ordering.services.orders import CartLine, get_order, list_orders, place_order
from food_ordering.services.pricing import cents_to_amount

router = APIRouter(prefix="/api", tags=["orders"])


def _order_summary(o: Order) -> Dict[str, Any]:
    return {
        "id": o.id,
        "totalAmount": cents_to_amount(o.total_cents),
        "discountAmount": cents_to_amount(o.discount_cents),
        "finalAmount": cents_to_amount(o.final_cents),
    }


def _order_item_to_dict(item: OrderItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "menu_item_id": item.menu_item_id,
        "quantity": item.quantity,
        "price": cents_to_amount(item.price_cents),
        "name": item.name,
    }


def _order_to_dict(o: Order) -> Dict[str, Any]:
    return {
        **_order_summary(o),
        "items": [_order_item_to_dict(item) for item in o.order_items],
        "payment_method": o.payment_method,
        "discount_type": o.discount_type,
        "created_at": o.created_at.isoformat() if o.created_at else None,
    }


@router.get("/orders", response_model=List[OrderOut])
def list_my_orders(
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    before_id: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    orders = list_orders(db, user_id=user.id, limit=limit, before_id=before_id)
    return [_order_to_dict(o) for o in orders]


@router.post("/orders", status_code=201, response_model=OrderCreatedOut)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    # OrderError subclasses are turned into {"error": ...} by the app handler
    order = place_order(
        db,
        user_id=user.id,
        cart_lines=[CartLine(menu_item_id=line.menu_item_id, quantity=line.quantity) for line in payload.items],
        payment_method=payload.payment_method,
        discount_code=payload.discount_type,
    )
    return {
        "success": True,
        "message": "Order created successfully",
        "order": _order_summary(order),
    }


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_my_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _order_to_dict(get_order(db, user_id=user.id, order_id=order_id))
