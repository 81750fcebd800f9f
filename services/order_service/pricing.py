from typing import Mapping, Sequence

from shared.errors import NotFoundError, PriceMismatchError
from .schemas import LineItemRequest


def compute_total(line_items: Sequence[LineItemRequest], prices: Mapping[int, int]) -> int:
    """Sums ``price * count`` from authoritative prices, in integer arithmetic."""
    total = 0
    for item in line_items:
        if item.product_id not in prices:
            # order flows surface missing products as a bad request
            raise NotFoundError(f"Product with ID {item.product_id} not found", status_code=400)
        total += prices[item.product_id] * int(item.count)
    return total


def reconcile(
    line_items: Sequence[LineItemRequest],
    prices: Mapping[int, int],
    declared_total: float,
) -> int:
    """Returns the server-side total, or raises if the client declared another one."""
    total = compute_total(line_items, prices)
    if declared_total != total:
        raise PriceMismatchError("Not valid order total price")
    return total
