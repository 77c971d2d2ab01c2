import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

load_dotenv()

from portal.auth.guard import route_guard
from portal.auth.routers import router as auth_router
from portal.common.errors import PortalError, error_response, field_errors_from_pydantic
from portal.common.logger import get_logger
from portal.export.routers import router as export_router
from portal.pages.routers import router as pages_router
from portal.products.services import ProductStore
from portal.products.routers import router as products_router

logger = get_logger(__name__)

app = FastAPI(title="Product Pricing Portal")

# One store per process; its Firestore client is created on first use
app.state.product_store = ProductStore()

app.middleware("http")(route_guard)

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(products_router, prefix="/api/products", tags=["products"])
app.include_router(export_router, prefix="/api/export", tags=["export"])
app.include_router(pages_router, tags=["pages"])


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with a field-error map."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid payload", "errors": field_errors_from_pydantic(exc.errors())},
    )


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return error_response(exc)


@app.get("/api/health", include_in_schema=False)
def read_health():
    """Liveness endpoint; does not touch the document store."""
    return {"message": "Product Pricing Portal"}


if __name__ == "__main__":
    # Set port from environment variable or default to 8000
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
