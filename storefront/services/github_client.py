# storefront/services/github_client.py
from urllib.parse import urlencode

import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import GITHUB_ID, GITHUB_SECRET
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
API_URL = "https://api.github.com"


class GitHubClient:
    def __init__(self, client_id: str | None = None, client_secret: str | None = None, timeout: int = 5):
        self.client_id = client_id or GITHUB_ID
        self.client_secret = client_secret or GITHUB_SECRET
        self.timeout = timeout

    def authorize_url(self, redirect_uri: str) -> str:
        query = urlencode({"client_id": self.client_id, "redirect_uri": redirect_uri, "scope": "read:user user:email"})
        return f"{AUTHORIZE_URL}?{query}"

    @http_retry()
    def exchange_code(self, code: str) -> str:
        logger.info("GitHubClient POST access_token")
        resp = requests.post(
            TOKEN_URL,
            data={"client_id": self.client_id, "client_secret": self.client_secret, "code": code},
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        token = resp.json().get("access_token")
        if not token:
            raise ValueError("GitHub did not return an access token")
        return token

    @http_retry()
    def fetch_profile(self, access_token: str) -> dict:
        """Returns {"name", "email"}; falls back to the primary verified email."""
        headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/vnd.github+json"}

        resp = requests.get(f"{API_URL}/user", headers=headers, timeout=self.timeout)
        resp.raise_for_status()
        profile = resp.json()
        email = profile.get("email")

        if not email:
            resp = requests.get(f"{API_URL}/user/emails", headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            for entry in resp.json():
                if entry.get("primary") and entry.get("verified"):
                    email = entry["email"]
                    break

        if not email:
            raise ValueError("GitHub account has no verified email")

        return {"name": profile.get("name") or profile.get("login") or email, "email": email}
