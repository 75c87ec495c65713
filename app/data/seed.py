# app/data/seed.py
from sqlalchemy.orm import Session, sessionmaker

from app.data.models.product import ProductModel
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

SEED_PRODUCTS = [
    {
        "name": "facewash",
        "price": 2499.99,
        "image": ["../images/facewash1.jpg"],
    },
    {
        "name": "anti-aging-cream",
        "price": 799.50,
        "image": ["../images/Anti-aging1.jpg"],
    },
    {
        "name": "Classic Wrist Watch",
        # not priced yet
        "price": None,
        "image": ["../images/comingSoon.jpg"],
    },
]


def build_seed_products() -> list[ProductModel]:
    return [
        ProductModel(name=p["name"], price=p["price"], image=list(p["image"]))
        for p in SEED_PRODUCTS
    ]


def seed_if_empty(session_factory: sessionmaker[Session]) -> bool:
    """Startup seeding: unlike the admin endpoint this never wipes existing products."""
    db = session_factory()
    try:
        repo = ProductRepo(db)
        if repo.count() > 0:
            return False
        repo.insert_many(build_seed_products())
        repo.commit()
        logger.info(f"Seeded {len(SEED_PRODUCTS)} products on startup")
        return True
    finally:
        db.close()
