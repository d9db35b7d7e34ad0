# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import require_user, get_notifier
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import OrderCreate, OrderOut
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Turns the caller's cart into an order and empties the cart.
    """
    try:
        return OrderService(db, notifier=notifier).create_order_from_cart(user, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[OrderOut])
def list_orders(user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    return OrderService(db).list_user_orders(user.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, user: UserModel = Depends(require_user), db: Session = Depends(get_db)):
    try:
        return OrderService(db).get_user_order(order_id, user.id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
