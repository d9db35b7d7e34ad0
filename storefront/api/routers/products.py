# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductCreate, ProductWithCategoryOut, CategoryOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/products", response_model=list[ProductWithCategoryOut])
def list_products(category: str | None = Query(None), db: Session = Depends(get_db)):
    return CatalogService(db).list_products(category=category)


@router.post("/products", response_model=ProductWithCategoryOut, status_code=201)
def create_product(
    payload: ProductCreate,
    _admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return CatalogService(db).create_product(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/products/{product_id}", response_model=ProductWithCategoryOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()
