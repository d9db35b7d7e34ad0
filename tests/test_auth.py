from storefront.data.models import UserModel
from storefront.utils.security import verify_password, decode_access_token, generate_random_password

from conftest import FakeGitHubClient


class TestRegister:
    def test_register(self, client, db):
        resp = client.post(
            "/api/auth/register", json={"username": "Carol", "email": "carol@example.com", "password": "pw123456"}
        )

        assert resp.status_code == 200
        assert resp.json() == {"message": "success"}
        user = db.query(UserModel).filter_by(email="carol@example.com").one()
        assert user.name == "Carol"
        assert user.role == "user"
        assert user.password != "pw123456"
        assert verify_password("pw123456", user.password)

    def test_duplicate_email(self, client, customer):
        resp = client.post(
            "/api/auth/register", json={"username": "Alice2", "email": "alice@example.com", "password": "x"}
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Email already registered. Please log in."

    def test_missing_fields(self, client):
        resp = client.post("/api/auth/register", json={"email": "nobody@example.com"})
        assert resp.status_code == 400


class TestLogin:
    def test_login_returns_token_for_user(self, client, customer):
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["user"]["email"] == "alice@example.com"
        assert body["tokenType"] == "bearer"
        assert decode_access_token(body["accessToken"])["sub"] == str(customer.id)

    def test_token_does_not_carry_role(self, client, admin):
        body = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "secret123"}).json()
        assert "role" not in decode_access_token(body["accessToken"])

    def test_token_opens_protected_routes(self, client, customer):
        token = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        ).json()["accessToken"]

        resp = client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200

    def test_wrong_password(self, client, customer):
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials"

    def test_unknown_email(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})
        assert resp.status_code == 401

    def test_oauth2_form(self, client, customer):
        resp = client.post("/api/auth/token", data={"username": "alice@example.com", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["token_type"] == "bearer"


class TestPasswordReset:
    def test_reset_replaces_password_and_queues_mail(self, client, db, customer, notifier):
        resp = client.post("/api/auth/password-reset", json={"email": "alice@example.com"})

        assert resp.status_code == 200
        assert resp.json() == {"message": "New password has been sent to your email"}

        email, new_password = notifier.password_resets[0]
        assert email == "alice@example.com"
        assert len(new_password) == 12

        db.expire_all()
        stored = db.get(UserModel, customer.id)
        assert verify_password(new_password, stored.password)
        assert not verify_password("secret123", stored.password)

    def test_unknown_email(self, client, notifier):
        resp = client.post("/api/auth/password-reset", json={"email": "ghost@example.com"})
        assert resp.status_code == 404
        assert notifier.password_resets == []


class TestGitHub:
    def test_login_redirects_to_github(self, client):
        resp = client.get("/api/auth/github/login", follow_redirects=False)
        assert resp.status_code == 307
        assert resp.headers["location"].startswith("https://github.com/login/oauth/authorize")

    def test_callback_creates_user(self, client, db):
        resp = client.get("/api/auth/github/callback", params={"code": "abc"})

        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "octo@example.com"
        user = db.query(UserModel).filter_by(email="octo@example.com").one()
        assert user.password == ""

    def test_callback_reuses_existing_user(self, app, client, db, customer):
        from storefront.api import deps

        app.dependency_overrides[deps.get_github_client] = lambda: FakeGitHubClient(
            profile={"name": "Alice GH", "email": "alice@example.com"}
        )

        resp = client.get("/api/auth/github/callback", params={"code": "abc"})

        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == customer.id
        assert db.query(UserModel).count() == 1

    def test_callback_failure(self, app, client):
        from storefront.api import deps

        app.dependency_overrides[deps.get_github_client] = lambda: FakeGitHubClient(error=ValueError("bad code"))

        resp = client.get("/api/auth/github/callback", params={"code": "bad"})
        assert resp.status_code == 400

    def test_oauth_account_cannot_use_password_login(self, client):
        client.get("/api/auth/github/callback", params={"code": "abc"})
        resp = client.post("/api/auth/login", json={"email": "octo@example.com", "password": ""})
        assert resp.status_code == 401


def test_generated_passwords_are_alphanumeric():
    password = generate_random_password()
    assert len(password) == 12
    assert password.isalnum()
