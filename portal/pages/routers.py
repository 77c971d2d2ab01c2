"""
Server-rendered pages. Data comes from the same store and helpers as the API;
editing happens through the API.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette import status

from portal.common.errors import PortalError
from portal.common.logger import get_logger
from portal.products.progress import compute_progress, is_done
from portal.products.services import ProductStore, get_product_store
from portal.ui.admin import StatusFilter, filter_products

router = APIRouter()
logger = get_logger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.tests["done"] = is_done

DEFAULT_NEXT = "/pricing"


def safe_next(next_path: str) -> str:
    """Only allow same-site absolute paths as the post-login target."""
    if next_path and next_path.startswith("/") and not next_path.startswith("//"):
        return next_path
    return DEFAULT_NEXT


@router.get("/", include_in_schema=False)
async def index():
    return RedirectResponse(url=DEFAULT_NEXT, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/login", include_in_schema=False)
async def login_page(request: Request, next: str = Query(DEFAULT_NEXT)):
    return templates.TemplateResponse(request, "login.html", {"next": safe_next(next)})


def clamp_index(raw: str, count: int) -> int:
    """Position from the query string, kept inside the product list."""
    try:
        index = int(raw)
    except (TypeError, ValueError):
        index = 0
    return min(max(index, 0), max(count - 1, 0))


def parse_status_filter(raw: str) -> StatusFilter:
    try:
        return StatusFilter(raw)
    except ValueError:
        return StatusFilter.ALL


@router.get("/pricing", include_in_schema=False)
async def pricing_page(
        request: Request,
        index: str = Query("0", description="Position of the product to show"),
        store: ProductStore = Depends(get_product_store)
):
    try:
        products = await store.list_all()
    except PortalError as e:
        return templates.TemplateResponse(
            request, "error.html", {"message": "Failed to load products"}, status_code=e.status_code
        )

    position = clamp_index(index, len(products))
    return templates.TemplateResponse(request, "pricing.html", {
        "product": products[position] if products else None,
        "index": position,
        "total": len(products),
        "has_next": position < len(products) - 1,
        "progress": compute_progress(products),
    })


@router.get("/admin", include_in_schema=False)
async def admin_page(
        request: Request,
        q: str = Query("", description="Search by name or item code"),
        status_param: str = Query(StatusFilter.ALL.value, alias="status"),
        store: ProductStore = Depends(get_product_store)
):
    status_filter = parse_status_filter(status_param)
    try:
        products = await store.list_all()
    except PortalError as e:
        return templates.TemplateResponse(
            request, "error.html", {"message": "Failed to load products"}, status_code=e.status_code
        )

    return templates.TemplateResponse(request, "admin.html", {
        "products": filter_products(products, q, status_filter),
        "progress": compute_progress(products),
        "search": q,
        "status_filter": status_filter.value,
        "status_options": [option.value for option in StatusFilter],
    })
