from dataclasses import dataclass
from typing import Iterable, Tuple

from storefront.config import settings


def shipping_fee(subtotal: int) -> int:
    """Flat fee below the free-shipping threshold, free at or above it."""
    if subtotal >= settings.FREE_SHIPPING_THRESHOLD:
        return 0
    return settings.SHIPPING_FEE


def subtotal_of(lines: Iterable[Tuple[int, int]]) -> int:
    """lines: (unit price, quantity) pairs"""
    return sum(price * qty for price, qty in lines)


@dataclass
class PriceBreakdown:
    subtotal: int
    shipping_fee: int
    total: int
    # how much more to spend for free shipping (0 once reached or cart empty)
    free_shipping_remaining: int


def price_breakdown(subtotal: int) -> PriceBreakdown:
    fee = shipping_fee(subtotal)
    remaining = 0
    if 0 < subtotal < settings.FREE_SHIPPING_THRESHOLD:
        remaining = settings.FREE_SHIPPING_THRESHOLD - subtotal
    return PriceBreakdown(
        subtotal=subtotal,
        shipping_fee=fee,
        total=subtotal + fee,
        free_shipping_remaining=remaining,
    )
