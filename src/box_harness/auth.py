"""Session authentication against Box.

Uses the OAuth2 client-credentials grant: the same app credentials yield an
enterprise (service account) token for the admin handle and a user token for
the shared test user.
"""

from typing import Any

import httpx

from .client import BoxClient
from .config import HarnessConfig
from .errors import BoxAPIError
from .logging import get_logger

logger = get_logger(__name__)

SUBJECT_ENTERPRISE = "enterprise"
SUBJECT_USER = "user"


class BoxAuthenticator:
    """Produce credentialed BoxClient handles from a HarnessConfig."""

    def __init__(
        self,
        config: HarnessConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize authenticator.

        Args:
            config: Harness configuration with app credentials
            transport: Optional httpx transport shared by the token request
                and the produced clients
        """
        self.config = config
        self._transport = transport

    async def admin_client(self) -> BoxClient:
        """Return an open client acting as the enterprise service account."""
        token = await self._fetch_token(SUBJECT_ENTERPRISE, self.config.enterprise_id)
        return self._build_client(token)

    async def user_client(self, user_id: str) -> BoxClient:
        """Return an open client acting as ``user_id``."""
        token = await self._fetch_token(SUBJECT_USER, user_id)
        return self._build_client(token, user_id=user_id)

    def _build_client(self, token: str, user_id: str | None = None) -> BoxClient:
        client = BoxClient(
            token,
            api_url=self.config.api_url,
            upload_url=self.config.upload_url,
            timeout=self.config.timeout,
            user_id=user_id,
            transport=self._transport,
        )
        client.open()
        return client

    async def _fetch_token(self, subject_type: str, subject_id: str) -> str:
        form = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "box_subject_type": subject_type,
            "box_subject_id": subject_id,
        }
        logger.debug("token_requested", subject_type=subject_type, subject_id=subject_id)

        async with httpx.AsyncClient(
            timeout=self.config.timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(self.config.auth_url, data=form)
            except httpx.ConnectError:
                raise BoxAPIError(f"Cannot connect to Box auth at {self.config.auth_url}")
            except httpx.TimeoutException:
                raise BoxAPIError(f"Token request timed out after {self.config.timeout}s")

        payload: Any
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            # OAuth errors use {"error": ..., "error_description": ...}
            message = "Token request failed"
            code = None
            if isinstance(payload, dict):
                message = payload.get("error_description") or message
                code = payload.get("error")
            raise BoxAPIError(message, status_code=response.status_code, code=code)

        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise BoxAPIError("Token response did not contain an access_token")
        return str(payload["access_token"])
