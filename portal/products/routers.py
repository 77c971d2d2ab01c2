from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse
from starlette import status

from portal.common.errors import PortalError, error_response
from portal.common.logger import get_logger
from portal.common.schemas import ErrorResponse, MessageResponse
from portal.products.progress import compute_progress
from portal.products.schemas import ProductCreate, ProductInDB, ProductsData, ProductUpdate
from portal.products.services import ProductStore, get_product_store

router = APIRouter()
logger = get_logger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message},
    )


@router.get("", response_model=ProductsData, responses=ERROR_RESPONSES)
async def list_products(store: ProductStore = Depends(get_product_store)):
    """
    Get every product, oldest first, with the pricing progress over that list.
    """
    try:
        products = await store.list_all()
        return ProductsData(products=products, progress=compute_progress(products))
    except PortalError as e:
        return error_response(e)
    except Exception:
        logger.exception("Failed to fetch products")
        return _server_error("Failed to fetch products")


@router.post("", response_model=ProductInDB, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def create_product_endpoint(
        product_data: ProductCreate,
        store: ProductStore = Depends(get_product_store)
):
    """
    Create a new product. Prices not supplied start absent.

    Returns:
        The created product with status 201
    """
    try:
        return await store.create(product_data.model_dump())
    except PortalError as e:
        return error_response(e)
    except Exception:
        logger.exception("Failed to create product")
        return _server_error("Failed to create product")


@router.patch("/{product_id}", response_model=ProductInDB, responses=ERROR_RESPONSES)
async def update_existing_product(
        product_id: str = Path(..., description="The ID of the product to update"),
        product_data: ProductUpdate = ...,
        store: ProductStore = Depends(get_product_store)
):
    """
    Partially update a product. Only the fields sent are changed; a price sent
    as null is cleared.
    """
    try:
        return await store.update(product_id, product_data.changes())
    except PortalError as e:
        return error_response(e)
    except Exception:
        logger.exception("Failed to update product %s", product_id)
        return _server_error("Failed to update product")


@router.delete("/{product_id}", response_model=MessageResponse, responses=ERROR_RESPONSES)
async def delete_existing_product(
        product_id: str = Path(..., description="The ID of the product to delete"),
        store: ProductStore = Depends(get_product_store)
):
    try:
        await store.delete(product_id)
        return MessageResponse(message="Product deleted")
    except PortalError as e:
        return error_response(e)
    except Exception:
        logger.exception("Failed to delete product %s", product_id)
        return _server_error("Failed to delete product")
