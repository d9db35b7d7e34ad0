# storefront/api/routers/payments.py
import stripe
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from storefront.api.deps import require_user, get_payment_client, get_event_ledger
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ConflictError
from storefront.domain.schemas import (
    CheckoutSessionIn,
    CheckoutSessionOut,
    VerifySessionIn,
    VerifySessionOut,
    WebhookAck,
)
from storefront.services.checkout_service import CheckoutService
from storefront.services.event_ledger import EventLedger
from storefront.services.payment_client import PaymentClient
from storefront.services.webhook_service import WebhookService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/stripe", tags=["payments"])


@router.post("/create-checkout-session", response_model=CheckoutSessionOut)
def create_checkout_session(
    payload: CheckoutSessionIn,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
    client: PaymentClient = Depends(get_payment_client),
):
    try:
        return CheckoutService(db, client).create_session(
            user, payload.order_id, payload.success_url, payload.cancel_url
        )
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Error creating checkout session: {e!r}")
        raise HTTPException(status_code=400, detail=f"Stripe error: {e.user_message or str(e)}")


def _verify(db: Session, client: PaymentClient, user: UserModel, session_id: str | None) -> VerifySessionOut:
    try:
        return CheckoutService(db, client).verify_session(user, session_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Error verifying session: {e!r}")
        raise HTTPException(status_code=400, detail=f"Stripe error: {e.user_message or str(e)}")


@router.get("/verify-session", response_model=VerifySessionOut)
def verify_session_get(
    session_id: str | None = Query(None),
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
    client: PaymentClient = Depends(get_payment_client),
):
    return _verify(db, client, user, session_id)


@router.post("/verify-session", response_model=VerifySessionOut)
def verify_session_post(
    payload: VerifySessionIn,
    user: UserModel = Depends(require_user),
    db: Session = Depends(get_db),
    client: PaymentClient = Depends(get_payment_client),
):
    return _verify(db, client, user, payload.session_id)


@router.post("/webhooks", response_model=WebhookAck)
async def webhooks(
    request: Request,
    db: Session = Depends(get_db),
    client: PaymentClient = Depends(get_payment_client),
    ledger: EventLedger = Depends(get_event_ledger),
):
    """
    Gateway callback. Signature is checked over the raw body before anything else.
    A verified event is always acknowledged, see WebhookService.
    """
    raw = await request.body()
    signature = request.headers.get("stripe-signature")

    if not signature:
        logger.error("Missing Stripe signature")
        raise HTTPException(status_code=400, detail="Missing Stripe signature")

    svc = WebhookService(db, client, ledger)

    try:
        # UnicodeDecodeError is a ValueError
        event = svc.construct_event(raw.decode("utf-8"), signature)
    except (stripe.SignatureVerificationError, ValueError) as e:
        logger.error(f"Webhook signature verification failed: {e!r}")
        raise HTTPException(status_code=400, detail="Webhook signature verification failed")

    try:
        await run_in_threadpool(svc.dispatch, event)
    except Exception as e:
        logger.error(f"Webhook error: {e!r}")
        raise HTTPException(status_code=500, detail="Webhook handler failed")

    return WebhookAck(received=True)
