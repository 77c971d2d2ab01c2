"""
Admin table state: the full product list held in memory, a filtered view over
it, and optimistic edits that roll back when the API call fails.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from portal.products.progress import compute_progress, is_done
from portal.products.schemas import PRICE_FIELDS, ProductInDB, ProgressSnapshot
from portal.ui.client import ApiRequestError, PortalClient
from portal.ui.notices import NoticeBoard
from portal.ui.prices import PriceInputError, parse_price_input


class StatusFilter(str, Enum):
    ALL = "all"
    DONE = "done"
    PENDING = "pending"


def matches_search(product: ProductInDB, search: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    return needle in product.name.lower() or needle in product.itemCode.lower()


def matches_status(product: ProductInDB, status_filter: StatusFilter) -> bool:
    if status_filter is StatusFilter.ALL:
        return True
    return is_done(product) == (status_filter is StatusFilter.DONE)


def filter_products(
    products: Iterable[ProductInDB], search: str = "", status_filter: StatusFilter = StatusFilter.ALL
) -> List[ProductInDB]:
    """Products matching the search text (name or item code) and the status filter."""
    return [
        product for product in products
        if matches_search(product, search) and matches_status(product, status_filter)
    ]


class RowState(str, Enum):
    CLEAN = "clean"
    PENDING = "pending"
    ERROR = "error"


@dataclass
class RowStatus:
    """
    Per-row edit state. While PENDING or after an ERROR, ``snapshot`` holds the
    list as it was before the edit.
    """

    state: RowState = RowState.CLEAN
    snapshot: Optional[List[ProductInDB]] = None


@dataclass
class AdminBoard:
    client: PortalClient
    notices: NoticeBoard = field(default_factory=NoticeBoard)
    products: List[ProductInDB] = field(default_factory=list)
    search: str = ""
    status_filter: StatusFilter = StatusFilter.ALL
    rows: Dict[str, RowStatus] = field(default_factory=dict)
    loading: bool = False

    async def load(self) -> None:
        """Refetch the whole product list."""
        self.loading = True
        try:
            data = await self.client.list_products()
            self.products = data.products
            self.rows = {}
        except ApiRequestError:
            self.notices.error("Failed to load products")
        finally:
            self.loading = False

    @property
    def visible(self) -> List[ProductInDB]:
        return filter_products(self.products, self.search, self.status_filter)

    @property
    def progress(self) -> ProgressSnapshot:
        return compute_progress(self.products)

    def row_state(self, product_id: str) -> RowState:
        return self.rows.get(product_id, RowStatus()).state

    def _begin(self, product_id: str) -> None:
        self.rows[product_id] = RowStatus(RowState.PENDING, snapshot=list(self.products))

    def _succeed(self, product_id: str) -> None:
        self.rows.pop(product_id, None)

    def _fail(self, product_id: str) -> None:
        row = self.rows.get(product_id) or RowStatus()
        if row.snapshot is not None:
            self.products = list(row.snapshot)
        self.rows[product_id] = RowStatus(RowState.ERROR, snapshot=row.snapshot)

    async def commit_price(self, product_id: str, price_field: str, text: str) -> bool:
        """
        Commit an edited price cell (on blur or Enter).

        The new value is shown immediately; if the PATCH fails the list goes
        back to how it was before the edit.

        Returns:
            True if the price was saved
        """
        if price_field not in PRICE_FIELDS:
            raise ValueError(f"Unknown price field: {price_field}")

        try:
            value = parse_price_input(text, price_field)
        except PriceInputError:
            self.notices.error("Price must be a valid number")
            return False

        self._begin(product_id)
        self.products = [
            product.model_copy(update={price_field: value}) if product.id == product_id else product
            for product in self.products
        ]

        try:
            await self.client.update_product(product_id, {price_field: value})
        except ApiRequestError:
            self._fail(product_id)
            self.notices.error("Failed to update price")
            return False

        self._succeed(product_id)
        self.notices.success("Price saved")
        return True

    async def add_product(self, name: str, item_code: str, image_url: str) -> Optional[ProductInDB]:
        """Create a product from the add form; prices are left for later."""
        try:
            created = await self.client.create_product(name, item_code, image_url)
        except ApiRequestError as e:
            self.notices.error(e.message or "Unable to create product")
            return None

        self.products = [*self.products, created]
        self.notices.success("Product added")
        return created

    async def delete_product(self, product_id: str, confirm: Callable[[], bool]) -> bool:
        """
        Delete a row after the user confirms.

        Args:
            product_id: Row to delete
            confirm: Asks the user; nothing happens unless it returns True
        """
        if not confirm():
            return False

        self._begin(product_id)
        self.products = [product for product in self.products if product.id != product_id]

        try:
            await self.client.delete_product(product_id)
        except ApiRequestError:
            self._fail(product_id)
            self.notices.error("Failed to delete product")
            return False

        self._succeed(product_id)
        self.notices.success("Product deleted")
        return True

    async def export(self) -> Optional[Tuple[str, bytes]]:
        try:
            return await self.client.export()
        except ApiRequestError:
            self.notices.error("Failed to export products")
            return None
