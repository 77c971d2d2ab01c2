"""
Spreadsheet export of the current pricing.
"""
from datetime import datetime
from io import BytesIO
from typing import Iterable, Optional

from openpyxl import Workbook

from portal.common.config import get_export_timezone
from portal.products.schemas import ProductInDB

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Pricing"
EXPORT_HEADERS = ("Product Name", "Item Code", "Retail Price", "Bulk Price")
TEXT_COLUMNS = 2


def export_row(product: ProductInDB) -> tuple:
    # openpyxl leaves None cells empty
    return product.name, product.itemCode, product.retailPrice, product.bulkPrice


def build_pricing_workbook(products: Iterable[ProductInDB]) -> bytes:
    """
    Write one row per product, in the order given, under a fixed header row.

    Args:
        products: Products in the order they should appear

    Returns:
        The .xlsx file content
    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    worksheet.append(EXPORT_HEADERS)
    for product in products:
        worksheet.append(export_row(product))
        # Text starting with "=" must stay text, not become a formula
        for cell in worksheet[worksheet.max_row][:TEXT_COLUMNS]:
            cell.data_type = "s"

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_filename(now: Optional[datetime] = None) -> str:
    """Attachment name carrying the current date in the export time zone."""
    tz = get_export_timezone()
    now = now.astimezone(tz) if now else datetime.now(tz)
    return f"product-pricing-{now.strftime('%Y-%m-%d')}.xlsx"
