# app/repos/product_repo.py
from collections.abc import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> list[ProductModel]:
        return list(self.db.execute(select(ProductModel)).scalars().all())

    def find_by_ids(self, product_ids: Iterable[str]) -> list[ProductModel]:
        ids = list(product_ids)
        if not ids:
            return []
        # one IN query for the whole cart
        stmt = select(ProductModel).where(ProductModel.id.in_(ids))
        return list(self.db.execute(stmt).scalars().all())

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(ProductModel)).scalar_one()

    def delete_all(self) -> int:
        return self.db.execute(delete(ProductModel)).rowcount

    def insert_many(self, products: list[ProductModel]) -> list[ProductModel]:
        self.db.add_all(products)
        self.db.flush()
        return products

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
