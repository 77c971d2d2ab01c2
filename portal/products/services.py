import re
from typing import Callable, List

from fastapi import Request
from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from portal.common.errors import InvalidIdError, NotFoundError, PortalError, StoreFailure
from portal.common.firestore import connect_firestore
from portal.common.logger import get_logger
from portal.products.schemas import PRICE_FIELDS, ProductInDB

logger = get_logger(__name__)

PRODUCTS_COLLECTION = 'products'

# Firestore auto-generated document ids: 20 letters/digits
PRODUCT_ID_PATTERN = re.compile(r'^[A-Za-z0-9]{20}$')


def is_valid_product_id(product_id: str) -> bool:
    return bool(product_id) and PRODUCT_ID_PATTERN.match(product_id) is not None


def ensure_valid_product_id(product_id: str) -> None:
    if not is_valid_product_id(product_id):
        raise InvalidIdError()


def product_from_snapshot(doc) -> ProductInDB:
    product_data = doc.to_dict() or {}
    product_data['id'] = doc.id
    return ProductInDB(**product_data)


class ProductStore:
    """
    Gateway translating product operations into Firestore calls.

    The Firestore client is created on first use and reused for the lifetime
    of the store. One store is created per process and shared by all requests.
    """

    def __init__(self, client=None, client_factory: Callable = connect_firestore):
        self._client = client
        self._client_factory = client_factory

    @property
    def client(self):
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def _collection(self):
        return self.client.collection(PRODUCTS_COLLECTION)

    def _failure(self, message: str, exc: Exception) -> StoreFailure:
        logger.exception("%s: %s", message, exc)
        return StoreFailure(message)

    async def list_all(self) -> List[ProductInDB]:
        """
        Retrieve every product, oldest first.

        Raises:
            StoreFailure: If the query fails
        """
        try:
            query = self._collection().order_by('createdAt', direction="ASCENDING")
            return [product_from_snapshot(doc) for doc in query.stream()]
        except PortalError:
            raise
        except Exception as exc:
            raise self._failure("Failed to fetch products", exc)

    async def create(self, fields: dict) -> ProductInDB:
        """
        Insert a new product. Fields must already be validated.

        Args:
            fields: name, itemCode, imageUrl and optionally the prices

        Returns:
            The stored product, with its id and server timestamps
        """
        try:
            product_data = dict(fields)
            for price_field in PRICE_FIELDS:
                product_data.setdefault(price_field, None)
            product_data['createdAt'] = firestore.firestore.SERVER_TIMESTAMP
            product_data['updatedAt'] = firestore.firestore.SERVER_TIMESTAMP

            new_product_ref = self._collection().document()
            new_product_ref.set(product_data)

            return product_from_snapshot(new_product_ref.get())
        except PortalError:
            raise
        except Exception as exc:
            raise self._failure("Failed to create product", exc)

    async def update(self, product_id: str, changes: dict) -> ProductInDB:
        """
        Apply a partial update. Only keys present in ``changes`` are written;
        a price set to None is cleared.

        Raises:
            InvalidIdError: If the id is malformed (no store call is made)
            NotFoundError: If no product has this id
            StoreFailure: On any other store error
        """
        ensure_valid_product_id(product_id)

        try:
            doc_ref = self._collection().document(product_id)
            update_data = dict(changes)
            update_data['updatedAt'] = firestore.firestore.SERVER_TIMESTAMP

            try:
                # update() fails on missing documents instead of creating them
                doc_ref.update(update_data)
            except NotFound:
                raise NotFoundError()

            return product_from_snapshot(doc_ref.get())
        except PortalError:
            raise
        except Exception as exc:
            raise self._failure("Failed to update product", exc)

    async def delete(self, product_id: str) -> ProductInDB:
        """
        Delete a product and return what was stored.

        Raises:
            InvalidIdError: If the id is malformed (no store call is made)
            NotFoundError: If no product has this id
            StoreFailure: On any other store error
        """
        ensure_valid_product_id(product_id)

        try:
            doc_ref = self._collection().document(product_id)
            doc = doc_ref.get()
            if not doc.exists:
                raise NotFoundError()

            deleted = product_from_snapshot(doc)
            doc_ref.delete()
            return deleted
        except PortalError:
            raise
        except Exception as exc:
            raise self._failure("Failed to delete product", exc)

    async def delete_all(self) -> int:
        """Remove every product. Used by the seed script."""
        try:
            count = 0
            for doc in self._collection().stream():
                doc.reference.delete()
                count += 1
            return count
        except Exception as exc:
            raise self._failure("Failed to clear products", exc)


def get_product_store(request: Request) -> ProductStore:
    """FastAPI dependency returning the process-wide store held on app.state."""
    return request.app.state.product_store
