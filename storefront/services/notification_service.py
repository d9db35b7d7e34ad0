# storefront/services/notification_service.py
import smtplib
from email.message import EmailMessage

from storefront.celery_worker import celery_app
from storefront.utils.settings import SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Queues outgoing mail. Delivery happens in the Celery worker.
    """

    @staticmethod
    def send_password_reset(email: str, new_password: str):
        send_password_reset_task.delay(email, new_password)

    @staticmethod
    def send_order_confirmation(email: str, order_id: int):
        send_order_confirmation_task.delay(email, order_id)


def send_mail(to: str, subject: str, html: str):
    msg = EmailMessage()
    msg["From"] = SMTP_USER
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(html, subtype="html")

    with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as smtp:
        smtp.starttls()
        if SMTP_USER:
            smtp.login(SMTP_USER, SMTP_PASSWORD)
        smtp.send_message(msg)


@celery_app.task(
    name="storefront.services.notification_service.send_password_reset_task",
    autoretry_for=(smtplib.SMTPException, OSError),
    retry_backoff=True,
    max_retries=3,
)
def send_password_reset_task(email: str, new_password: str):
    send_mail(email, "Your New Password", f"<p>Your new password is: {new_password}</p>")
    logger.info(f"[NOTIFICATION] Password reset mail sent to {email}")
    return {"email": email, "status": "sent"}


@celery_app.task(
    name="storefront.services.notification_service.send_order_confirmation_task",
    autoretry_for=(smtplib.SMTPException, OSError),
    retry_backoff=True,
    max_retries=3,
)
def send_order_confirmation_task(email: str, order_id: int):
    send_mail(email, f"Order #{order_id} received", f"<p>We received your order #{order_id}.</p>")
    logger.info(f"[NOTIFICATION] Order {order_id} confirmation sent to {email}")
    return {"email": email, "order_id": order_id, "status": "sent"}
