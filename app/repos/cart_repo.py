# app/repos/cart_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        stmt = (
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # UPDATE carts SET ..., version = old + 1 WHERE id = :id AND version = :old
        stmt = (
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def refresh(self, cart: CartModel) -> CartModel:
        self.db.refresh(cart)
        return cart

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
