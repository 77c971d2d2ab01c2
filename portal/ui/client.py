"""
HTTP client for the portal API, used by the UI state machines.
"""
from typing import Optional, Tuple

import httpx

from portal.products.schemas import ProductInDB, ProductsData


class ApiRequestError(Exception):
    """The API answered with a non-2xx status, or could not be reached."""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or response.reason_phrase
    except (ValueError, AttributeError):
        return response.reason_phrase


class PortalClient:
    """
    Thin async wrapper over the portal's JSON API.

    Args:
        http: An httpx.AsyncClient whose base_url points at the portal. Cookies
            set by ``login`` are kept on it for later calls.
    """

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ApiRequestError(None, f"Request failed: {e}") from e

        if response.is_error:
            raise ApiRequestError(response.status_code, _error_message(response))
        return response

    async def login(self, username: str, password: str) -> None:
        await self._request("POST", "/api/auth/login", json={"username": username, "password": password})

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")

    async def list_products(self) -> ProductsData:
        response = await self._request("GET", "/api/products")
        return ProductsData.model_validate(response.json())

    async def create_product(self, name: str, item_code: str, image_url: str) -> ProductInDB:
        payload = {"name": name, "itemCode": item_code, "imageUrl": image_url}
        response = await self._request("POST", "/api/products", json=payload)
        return ProductInDB.model_validate(response.json())

    async def update_product(self, product_id: str, changes: dict) -> ProductInDB:
        response = await self._request("PATCH", f"/api/products/{product_id}", json=changes)
        return ProductInDB.model_validate(response.json())

    async def delete_product(self, product_id: str) -> None:
        await self._request("DELETE", f"/api/products/{product_id}")

    async def export(self) -> Tuple[str, bytes]:
        """
        Returns:
            tuple: (suggested filename, .xlsx content)
        """
        response = await self._request("GET", "/api/export")
        disposition = response.headers.get("content-disposition", "")
        filename = "product-pricing.xlsx"
        if 'filename="' in disposition:
            filename = disposition.split('filename="', 1)[1].rstrip('"')
        return filename, response.content

