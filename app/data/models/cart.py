# app/data/models/cart.py
from sqlalchemy import Column, Integer, JSON, String

from app.data.database import Base


class CartModel(Base):
    """
    One cart document per user.

    items is the ordered list of {"productId": str, "quantity": int} line
    items. version is bumped on every write (optimistic locking).
    """

    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(128), nullable=False, unique=True, index=True)

    items = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False, default=1)
