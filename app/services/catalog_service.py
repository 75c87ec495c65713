# app/services/catalog_service.py
from sqlalchemy.orm import Session

from app.data.database import store_errors
from app.data.models.product import ProductModel
from app.data.seed import build_seed_products
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

SEED_CONFIRMATION = "Products seeded"


class CatalogService:
    """
    Product catalog. Read-only for carts; only seed() writes.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    def seed(self) -> str:
        """
        Replace the whole catalog with the fixed seed set.

        Destructive: every product is deleted and new ids are assigned, so
        carts that pointed at the old ids end up with dangling references.
        """
        with store_errors(self.db, "seed"):
            deleted = self.repo.delete_all()
            created = self.repo.insert_many(build_seed_products())
            self.repo.commit()

        logger.info(f"Catalog reseeded: removed {deleted}, inserted {len(created)} products")
        return SEED_CONFIRMATION

    def list_products(self) -> list[ProductModel]:
        # store-native order, callers must not depend on it
        with store_errors(self.db, "list products"):
            return self.repo.list_products()
