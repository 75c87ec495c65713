# app/data/models/product.py
import uuid

from sqlalchemy import Column, JSON, Numeric, String

from app.data.database import Base


def new_product_id() -> str:
    return uuid.uuid4().hex


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_product_id)
    name = Column(String, nullable=False)
    # null = not priced yet
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    image = Column(JSON, nullable=False, default=list)
