"""
Replace the product catalog with a small set of sample products.

Usage:
    python scripts/seed_products.py

Requires the same Firestore credentials as the portal
(FIREBASE_CREDENTIALS_JSON_CONTENT or FIREBASE_CREDENTIALS_FILE).
"""
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from portal.common.logger import get_logger
from portal.products.schemas import ProductCreate
from portal.products.services import ProductStore

logger = get_logger("seed_products")

SAMPLE_PRODUCTS = [
    {
        "name": "Hydra Glow Serum",
        "itemCode": "COS-1001",
        "imageUrl": "https://images.unsplash.com/photo-1556228578-8c89e6adf883?auto=format&fit=crop&w=800&q=80",
    },
    {
        "name": "Velvet Matte Lipstick",
        "itemCode": "COS-1002",
        "imageUrl": "https://images.unsplash.com/photo-1586495777744-4413f21062fa?auto=format&fit=crop&w=800&q=80",
    },
    {
        "name": "Daily UV Shield SPF 50",
        "itemCode": "COS-1003",
        "imageUrl": "https://images.unsplash.com/photo-1612817288484-6f916006741a?auto=format&fit=crop&w=800&q=80",
    },
    {
        "name": "Silk Finish Foundation",
        "itemCode": "COS-1004",
        "imageUrl": "https://images.unsplash.com/photo-1629198745660-1ea63a6d4f58?auto=format&fit=crop&w=800&q=80",
    },
    {
        "name": "Night Repair Eye Cream",
        "itemCode": "COS-1005",
        "imageUrl": "https://images.unsplash.com/photo-1571781418606-70265b9cce90?auto=format&fit=crop&w=800&q=80",
    },
]


async def seed(store: ProductStore) -> int:
    removed = await store.delete_all()
    logger.info("Removed %d existing products", removed)

    for product in SAMPLE_PRODUCTS:
        await store.create(ProductCreate(**product).model_dump())
    return len(SAMPLE_PRODUCTS)


def main() -> int:
    load_dotenv()
    try:
        count = asyncio.run(seed(ProductStore()))
    except Exception:
        logger.exception("Seed failed")
        return 1

    logger.info("Seeded %d products.", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
