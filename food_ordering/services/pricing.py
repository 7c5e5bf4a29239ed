"""Order pricing.

Every amount here is an integer number of cents. Percentages go through
``Decimal`` and are rounded half-up to the cent, so the same cart always
prices to the same totals.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union


@dataclass(frozen=True)
class NoDiscount:
    code: str = "none"


@dataclass(frozen=True)
class PercentageOff:
    code: str
    rate: Decimal


@dataclass(frozen=True)
class FlatAmount:
    code: str
    amount_cents: int


DiscountPolicy = Union[NoDiscount, PercentageOff, FlatAmount]

NO_DISCOUNT = NoDiscount()

DISCOUNT_RULES: dict[str, DiscountPolicy] = {
    "save20": PercentageOff(code="save20", rate=Decimal("0.20")),
    "loyalty": FlatAmount(code="loyalty", amount_cents=5000),
}


@dataclass(frozen=True)
class PricedLine:
    menu_item_id: int
    quantity: int
    unit_price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal_cents: int
    discount_cents: int
    final_cents: int


def resolve_discount(code: str | None) -> DiscountPolicy:
    """Map a client discount code to a policy. Unknown codes mean no discount."""
    normalized = (code or "").strip().lower()
    return DISCOUNT_RULES.get(normalized, NO_DISCOUNT)


def discount_for(subtotal_cents: int, policy: DiscountPolicy) -> int:
    if isinstance(policy, PercentageOff):
        raw = (Decimal(subtotal_cents) * policy.rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        discount = int(raw)
    elif isinstance(policy, FlatAmount):
        discount = policy.amount_cents
    else:
        discount = 0

    if discount > subtotal_cents:
        discount = subtotal_cents
    if discount < 0:
        discount = 0
    return discount


def compute_totals(lines: Iterable[PricedLine], policy: DiscountPolicy = NO_DISCOUNT) -> PriceBreakdown:
    subtotal_cents = 0
    for line in lines:
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
            raise ValueError(f"quantity must be a positive integer (menu_item_id={line.menu_item_id})")
        if line.unit_price_cents < 0:
            raise ValueError(f"unit price must not be negative (menu_item_id={line.menu_item_id})")
        subtotal_cents += line.line_total_cents

    discount_cents = discount_for(subtotal_cents, policy)
    final_cents = max(subtotal_cents - discount_cents, 0)
    return PriceBreakdown(
        subtotal_cents=subtotal_cents,
        discount_cents=discount_cents,
        final_cents=final_cents,
    )


def cents_to_amount(cents: int | None) -> float:
    if cents is None:
        return 0.0
    return float(Decimal(int(cents)) / Decimal(100))
