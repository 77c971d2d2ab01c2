"""
Pricing progress derived from a product list.

Shared by the API and the UI state machines so both compute the same numbers.
"""
import math
from typing import Iterable

from portal.products.schemas import ProductInDB, ProgressSnapshot


def is_done(product: ProductInDB) -> bool:
    """A product is done once at least one of its prices is set."""
    return product.retailPrice is not None or product.bulkPrice is not None


def percent_complete(completed: int, total: int) -> int:
    if total == 0:
        return 0
    # Half-up rounding; round() would round 12.5 down to 12
    return math.floor(completed / total * 100 + 0.5)


def compute_progress(products: Iterable[ProductInDB]) -> ProgressSnapshot:
    products = list(products)
    total = len(products)
    completed = sum(1 for product in products if is_done(product))
    return ProgressSnapshot(
        completed=completed,
        total=total,
        percent=percent_complete(completed, total),
    )
