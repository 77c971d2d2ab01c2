from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from starlette import status

from portal.common.errors import PortalError, error_response
from portal.common.logger import get_logger
from portal.export.services import XLSX_MEDIA_TYPE, build_pricing_workbook, export_filename
from portal.products.services import ProductStore, get_product_store

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_class=Response)
async def export_pricing(store: ProductStore = Depends(get_product_store)):
    """
    Download the current pricing as an .xlsx attachment, oldest product first.
    """
    try:
        products = await store.list_all()
        content = build_pricing_workbook(products)
        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename()}"',
                "Cache-Control": "no-store",
            },
        )
    except PortalError as e:
        return error_response(e)
    except Exception:
        logger.exception("Failed to export products")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to export products"},
        )
