# app/api/routers/products.py
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import ProductOut
from app.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.post("/seed-products", response_class=PlainTextResponse)
def seed_products(db: Session = Depends(get_db)):
    """
    Wipes the catalog and inserts the fixed seed set.
    Product ids change on every call.
    """
    return get_service(db).seed()


@router.get("/products", response_model=list[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return get_service(db).list_products()
