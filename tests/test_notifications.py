from storefront.services import notification_service
from storefront.services.notification_service import NotificationService


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        pass

    def send_message(self, msg):
        FakeSMTP.sent.append(msg)


def test_password_reset_task_sends_mail(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notification_service.smtplib, "SMTP", FakeSMTP)

    result = notification_service.send_password_reset_task.run("alice@example.com", "Abc123xyz789")

    assert result == {"email": "alice@example.com", "status": "sent"}
    msg = FakeSMTP.sent[0]
    assert msg["To"] == "alice@example.com"
    assert msg["Subject"] == "Your New Password"
    assert "Abc123xyz789" in msg.get_content()


def test_service_queues_tasks(monkeypatch):
    queued = []
    monkeypatch.setattr(
        notification_service.send_order_confirmation_task, "delay", lambda *args: queued.append(args)
    )

    NotificationService().send_order_confirmation("alice@example.com", 7)

    assert queued == [("alice@example.com", 7)]
