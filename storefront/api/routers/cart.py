#storefront/api/routers/cart.py
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import require_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CartItemIn, CartItemRemove, CartItemOut, CartOut, MessageOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=list[CartItemOut])
def get_cart(user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    return CartService(db).get_items(user.id)


@router.post("", response_model=CartOut, status_code=201)
def add_item(payload: CartItemIn, user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    try:
        return CartService(db).add_product(user.id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("", response_model=CartItemOut)
def update_item(payload: CartItemIn, user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    try:
        return CartService(db).update_quantity(user.id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("", response_model=MessageOut)
def remove_item(
    payload: CartItemRemove = Body(...),
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        CartService(db).remove_product(user.id, payload.product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageOut(message="Cart item deleted successfully")
