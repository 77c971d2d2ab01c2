"""
Guided pricing session: one product at a time, autosaving typed prices after a
short pause and advancing on "Save & Next".
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Set

from portal.products.progress import compute_progress
from portal.products.schemas import ProductInDB, ProgressSnapshot
from portal.ui.client import ApiRequestError, PortalClient
from portal.ui.notices import NoticeBoard
from portal.ui.prices import PriceInputError, format_price_input, parse_price_input

DEFAULT_DEBOUNCE_SECONDS = 0.5

STATUS_IDLE = "Idle"
STATUS_SAVING = "Saving..."
STATUS_SAVED = "Saved"
STATUS_FAILED = "Save failed"


@dataclass
class PricingSession:
    """
    Walks the fetched product list by position.

    Typed prices live in ``retail_input`` / ``bulk_input`` until persisted.
    Every keystroke replaces the pending autosave with a fresh one, so at most
    one autosave is waiting at any time.
    """

    client: PortalClient
    debounce: float = DEFAULT_DEBOUNCE_SECONDS
    notices: NoticeBoard = field(default_factory=NoticeBoard)
    products: List[ProductInDB] = field(default_factory=list)
    progress: ProgressSnapshot = field(default_factory=lambda: ProgressSnapshot(completed=0, total=0, percent=0))
    index: int = 0
    retail_input: str = ""
    bulk_input: str = ""
    status_text: str = STATUS_IDLE
    saving: bool = False
    finished: bool = False
    loading: bool = False

    _autosave: Optional[asyncio.Task] = field(default=None, repr=False)
    _running_saves: Set[asyncio.Task] = field(default_factory=set, repr=False)

    @property
    def current(self) -> Optional[ProductInDB]:
        if 0 <= self.index < len(self.products):
            return self.products[self.index]
        return None

    @property
    def has_next(self) -> bool:
        return self.index < max(len(self.products) - 1, 0)

    @property
    def autosave_pending(self) -> bool:
        return self._autosave is not None and not self._autosave.done()

    async def load(self) -> None:
        self.loading = True
        try:
            data = await self.client.list_products()
            self.products = data.products
            self.progress = data.progress
            self.index = 0
            self.finished = False
            self._fill_inputs()
        except ApiRequestError:
            self.notices.error("Failed to load products")
        finally:
            self.loading = False

    def _fill_inputs(self) -> None:
        product = self.current
        self.retail_input = format_price_input(product.retailPrice) if product else ""
        self.bulk_input = format_price_input(product.bulkPrice) if product else ""

    def type_price(self, price_field: str, text: str) -> None:
        """
        Record a keystroke in one of the price inputs and (re)arm the autosave.
        Must be called from inside the running event loop.
        """
        if price_field == "retailPrice":
            self.retail_input = text
        elif price_field == "bulkPrice":
            self.bulk_input = text
        else:
            raise ValueError(f"Unknown price field: {price_field}")

        self.status_text = STATUS_SAVING
        self.cancel_autosave()
        task = asyncio.get_running_loop().create_task(self._autosave_after_delay())
        self._autosave = task
        self._running_saves.add(task)
        task.add_done_callback(self._running_saves.discard)

    def cancel_autosave(self) -> None:
        if self._autosave is not None:
            self._autosave.cancel()
            self._autosave = None

    async def _autosave_after_delay(self) -> None:
        await asyncio.sleep(self.debounce)
        # Past this point the save is in flight and no longer cancellable
        self._autosave = None
        await self.persist()

    def _apply_local(self, product_id: str, retail_price: Optional[float], bulk_price: Optional[float]) -> None:
        self.products = [
            product.model_copy(update={"retailPrice": retail_price, "bulkPrice": bulk_price})
            if product.id == product_id else product
            for product in self.products
        ]
        self.progress = compute_progress(self.products)

    async def persist(self) -> bool:
        """
        Save both buffered prices of the current product in one PATCH.

        Non-numeric text is rejected here and nothing is sent.

        Returns:
            True if there was nothing to save or the save succeeded
        """
        product = self.current
        if product is None:
            return True

        try:
            retail_price = parse_price_input(self.retail_input, "retailPrice")
            bulk_price = parse_price_input(self.bulk_input, "bulkPrice")
        except PriceInputError as e:
            self.notices.error(str(e))
            self.status_text = STATUS_FAILED
            return False

        self.saving = True
        try:
            await self.client.update_product(
                product.id, {"retailPrice": retail_price, "bulkPrice": bulk_price}
            )
        except ApiRequestError:
            self.notices.error("Failed to save product pricing")
            self.status_text = STATUS_FAILED
            return False
        finally:
            self.saving = False

        self._apply_local(product.id, retail_price, bulk_price)
        self.status_text = STATUS_SAVED
        return True

    async def save_and_next(self) -> bool:
        """
        Drop any pending autosave, save now, and move to the next product only
        if the save worked. On the last product, report completion instead.
        """
        self.cancel_autosave()

        if not await self.persist():
            return False

        if self.has_next:
            self.index += 1
            self._fill_inputs()
            self.status_text = STATUS_IDLE
        else:
            self.finished = True
            self.notices.success("You have reached the last product")
        return True

    async def press_key(self, key: str) -> None:
        """Enter in either price input behaves like Save & Next."""
        if key == "enter":
            await self.save_and_next()
