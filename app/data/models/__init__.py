# every model is imported here so SQLAlchemy registers it in Base.metadata
from app.data.models.product import ProductModel
from app.data.models.cart import CartModel

__all__ = ["ProductModel", "CartModel"]
