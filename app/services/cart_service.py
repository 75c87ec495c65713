# app/services/cart_service.py
from collections.abc import Callable
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.database import store_errors
from app.data.models.cart import CartModel
from app.data.models.product import ProductModel
from app.domain.errors import CartConflictError, ValidationError
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger, sanitize_id_for_logging
from app.utils.retry import conflict_retry

logger = get_logger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown Product"
MAX_IDENTIFIER_LENGTH = 128

LineItems = List[Dict[str, Any]]


def _validate_identifier(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} must be a non-empty string")
    if len(value) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(f"{field} must be at most {MAX_IDENTIFIER_LENGTH} characters")


def _validate_quantity(quantity: Any) -> None:
    # bool is an int subclass, reject it explicitly
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")


def _cart_to_dict(cart: CartModel) -> Dict[str, Any]:
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {"product_id": i["productId"], "quantity": i["quantity"]}
            for i in (cart.items or [])
        ],
    }


def enrich_items(items: LineItems, products: List[ProductModel]) -> List[Dict[str, Any]]:
    """
    Join stored line items with catalog products by id.

    Dangling references get the "Unknown Product" sentinel instead of
    failing. A product without a price is shown with price 0.
    """
    by_id = {p.id: p for p in products}
    enriched = []
    for item in items:
        product = by_id.get(item["productId"])
        enriched.append(
            {
                "product_id": item["productId"],
                "quantity": item["quantity"],
                "name": product.name if product else UNKNOWN_PRODUCT_NAME,
                "price": (product.price or 0) if product else 0,
                "image": list(product.image or []) if product else [],
            }
        )
    return enriched


class CartService:
    """
    Carts keyed by user id.

    query: get_cart (read + enrichment, creates an empty cart on first access)
    commands: upsert_item, remove_item

    Commands are read-modify-write against the cart version; a lost race is
    replayed from a fresh read instead of overwriting the other writer.
    """

    def __init__(self, db: Session, write_attempts: int | None = None):
        self.db = db
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)
        self.write_attempts = write_attempts

    #query
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        _validate_identifier("userId", user_id)

        with store_errors(self.db, "get cart"):
            cart = self._get_or_create_cart(user_id)

            items = list(cart.items or [])
            product_ids = {i["productId"] for i in items}
            products = self.product_repo.find_by_ids(product_ids)

        return {
            "user_id": cart.user_id,
            "items": enrich_items(items, products),
        }

    #commands
    def upsert_item(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        _validate_identifier("userId", user_id)
        _validate_identifier("productId", product_id)
        _validate_quantity(quantity)

        def upsert(items: LineItems) -> LineItems:
            for item in items:
                if item["productId"] == product_id:
                    # overwrite, never add up
                    item["quantity"] = quantity
                    return items
            items.append({"productId": product_id, "quantity": quantity})
            return items

        logger.info(
            f"Upsert product {sanitize_id_for_logging(product_id)} x{quantity} "
            f"for user {sanitize_id_for_logging(user_id)}"
        )
        return self._write(user_id, upsert, create=True)

    def remove_item(self, user_id: str, product_id: str) -> Dict[str, Any] | None:
        _validate_identifier("userId", user_id)
        _validate_identifier("productId", product_id)

        def remove(items: LineItems) -> LineItems:
            return [i for i in items if i["productId"] != product_id]

        logger.info(
            f"Remove product {sanitize_id_for_logging(product_id)} "
            f"for user {sanitize_id_for_logging(user_id)}"
        )
        return self._write(user_id, remove, create=False)

    def _get_or_create_cart(self, user_id: str) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id, items=[], version=1))
        except IntegrityError:
            # someone created it between our read and insert
            self.repo.rollback()
            cart = self.repo.get_cart_by_user(user_id)
            if cart is None:
                raise
            return cart

        logger.info(f"Created cart {created.id} for user {sanitize_id_for_logging(user_id)}")
        return created

    def _write(
        self,
        user_id: str,
        mutate: Callable[[LineItems], LineItems],
        create: bool,
    ) -> Dict[str, Any] | None:
        apply = conflict_retry(self.write_attempts)(self._apply)
        with store_errors(self.db, "write cart"):
            return apply(user_id, mutate, create)

    def _apply(
        self,
        user_id: str,
        mutate: Callable[[LineItems], LineItems],
        create: bool,
    ) -> Dict[str, Any] | None:
        if create:
            cart = self._get_or_create_cart(user_id)
        else:
            cart = self.repo.get_cart_by_user(user_id)
            if cart is None:
                logger.info(f"No cart for user {sanitize_id_for_logging(user_id)}, nothing to remove")
                return None

        # copies, so the loaded row is never mutated in place
        items = mutate([dict(i) for i in (cart.items or [])])

        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"items": items, "version": cart.version + 1},
        )

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(
                f"Cart {cart.id} changed under us (version {cart.version}), retrying"
            )
            raise CartConflictError(user_id)

        self.repo.commit()
        self.repo.refresh(cart)
        return _cart_to_dict(cart)
