# storefront/api/routers/admin.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ConflictError
from storefront.domain.schemas import (
    AdminValidateOut,
    AdminOrderOut,
    AdminUserCreate,
    AdminUserUpdate,
    MessageOut,
    OrderStatusUpdate,
    ProductWithCategoryOut,
    RecentOrderOut,
    StatsOut,
    UserRead,
    UserWithOrderCount,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

# every route here sits behind the admin gate
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/validate", response_model=AdminValidateOut)
def validate(admin: UserModel = Depends(require_admin)):
    return AdminValidateOut(success=True, user=UserRead.model_validate(admin))


@router.get("/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_db)):
    return OrderService(db).dashboard_stats()


# orders

@router.get("/orders", response_model=list[AdminOrderOut])
def list_orders(db: Session = Depends(get_db)):
    return OrderService(db).list_all_orders()


@router.get("/orders/recent", response_model=list[RecentOrderOut])
def recent_orders(db: Session = Depends(get_db)):
    return OrderService(db).recent_orders()


@router.put("/orders/{order_id}", response_model=AdminOrderOut)
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    try:
        return OrderService(db).update_status(order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


# products

@router.get("/products", response_model=list[ProductWithCategoryOut])
def list_products(db: Session = Depends(get_db)):
    return CatalogService(db).list_products(newest_first=True)


@router.post("/products", response_model=ProductWithCategoryOut, status_code=201)
def create_product(
    name: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    categoryId: str | None = Form(None),
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    try:
        return CatalogService(db).create_product_from_form(
            name, description, price, categoryId, has_image=image is not None
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/products/{product_id}", response_model=ProductWithCategoryOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/products/{product_id}", response_model=ProductWithCategoryOut)
def update_product(
    product_id: int,
    name: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    categoryId: str | None = Form(None),
    image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    try:
        return CatalogService(db).update_product_from_form(
            product_id, name, description, price, categoryId, has_image=image is not None
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/products/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    try:
        CatalogService(db).delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageOut(message="Product deleted successfully")


# users

@router.get("/users", response_model=list[UserWithOrderCount])
def list_users(db: Session = Depends(get_db)):
    return UserService(db).list_users_with_order_counts()


@router.post("/users", response_model=UserRead, status_code=201)
def create_user(payload: AdminUserCreate, db: Session = Depends(get_db)):
    try:
        return UserService(db).admin_create_user(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/users/{user_id}", response_model=UserWithOrderCount)
def update_user(user_id: int, payload: AdminUserUpdate, db: Session = Depends(get_db)):
    try:
        return UserService(db).admin_update_user(user_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/users/{user_id}", response_model=MessageOut)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    try:
        UserService(db).admin_delete_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageOut(message="User deleted successfully")
