# app/api/routers/carts.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import (
    CartOut,
    EnrichedCartOut,
    ItemIn,
    ItemRemoveIn,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(request: Request, db: Session = Depends(get_db)) -> CartService:
    return CartService(db=db, write_attempts=request.app.state.cart_write_attempts)


@router.get("", response_model=EnrichedCartOut)
def get_cart(
    user_id: str = Query(..., alias="userId", min_length=1, max_length=128),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart(user_id)


@router.post("", response_model=CartOut)
def upsert_item(payload: ItemIn, svc: CartService = Depends(get_service)):
    return svc.upsert_item(
        user_id=payload.user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.delete("", response_model=CartOut | None)
def remove_item(payload: ItemRemoveIn, svc: CartService = Depends(get_service)):
    # no cart for this user -> null body, not 404
    return svc.remove_item(payload.user_id, payload.product_id)
