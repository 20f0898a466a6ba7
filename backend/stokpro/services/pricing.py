# Overview: Fixed-point line and order arithmetic for sales, quotes and returns.

"""
All amounts are Decimal. Every stored amount is rounded half-up to two
places at line level; order totals are sums of the rounded lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def money(value) -> Decimal:
    if value is None:
        return ZERO.quantize(CENT)
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percent(amount: Decimal, rate) -> Decimal:
    return amount * Decimal(str(rate or 0)) / HUNDRED


@dataclass(frozen=True)
class LineAmounts:
    net: Decimal        # after line discount, before VAT
    vat: Decimal
    total: Decimal      # net + vat


def sale_line(unit_price, quantity: int, discount_rate, vat_rate, include_vat: bool) -> LineAmounts:
    """
    subtotal = unit_price x quantity
    net      = subtotal - subtotal x discount_rate / 100
    vat      = net x vat_rate / 100 (zero when VAT is not included)
    """
    gross = Decimal(str(unit_price)) * quantity
    net = money(gross - percent(gross, discount_rate))
    vat = money(percent(net, vat_rate)) if include_vat else money(ZERO)
    return LineAmounts(net=net, vat=vat, total=net + vat)


def quote_line(unit_price, quantity: int, discount_rate, vat_rate, include_vat: bool) -> LineAmounts:
    """
    Quotes discount the unit price first, then extend:
    net = unit_price x (1 - discount_rate / 100) x quantity.
    VAT is always computed and kept per line; it only reaches the line
    total when include_vat is set.
    """
    discounted = Decimal(str(unit_price)) * (1 - Decimal(str(discount_rate or 0)) / HUNDRED)
    net = money(discounted * quantity)
    vat = money(percent(net, vat_rate))
    return LineAmounts(net=net, vat=vat, total=net + vat if include_vat else net)


def return_line(unit_price, quantity: int, vat_rate) -> LineAmounts:
    net = money(Decimal(str(unit_price)) * quantity)
    vat = money(percent(net, vat_rate))
    return LineAmounts(net=net, vat=vat, total=net + vat)


def order_discount(subtotal: Decimal, discount_amount, discount_rate) -> Decimal:
    """A positive fixed discount wins over the percentage."""
    if discount_amount and Decimal(str(discount_amount)) > 0:
        return money(discount_amount)
    return money(percent(subtotal, discount_rate))
