"""HTTP client for the Box REST API.

Covers only the endpoints the harness provisions and tears down: users,
folders, files and retention policies. One instance holds one access token,
so an admin handle and a user handle are two separate clients.
"""

import json as jsonlib
from typing import IO, Any

import httpx

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT, DEFAULT_UPLOAD_URL
from .errors import BoxAPIError


class BoxClient:
    """Async client for the Box REST API bound to one access token."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        upload_url: str = DEFAULT_UPLOAD_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            token: OAuth2 access token
            api_url: API base URL (e.g., https://api.box.com/2.0)
            upload_url: Upload API base URL
            timeout: Request timeout in seconds
            user_id: Id of the user the token acts as, if known
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_url = api_url.rstrip("/")
        self.upload_url = upload_url.rstrip("/")
        self.timeout = timeout
        self.user_id = user_id
        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def __repr__(self) -> str:
        return f"BoxClient(api_url={self.api_url!r}, user_id={self.user_id!r})"

    async def __aenter__(self) -> "BoxClient":
        self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def open(self) -> None:
        """Create the underlying connection pool (idempotent)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self._token}"},
                transport=self._transport,
            )

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _ensure_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise BoxAPIError("Client not open. Call open() or use 'async with'.")
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request to Box.

        Args:
            method: HTTP method
            path: API path relative to ``api_url``, or an absolute URL
            json: JSON body for POST/PUT
            params: Query parameters
            data: Form fields (multipart uploads)
            files: Multipart file parts

        Returns:
            Response JSON as dict (empty for 204 No Content)

        Raises:
            BoxAPIError: On connection, timeout or HTTP errors
        """
        client = self._ensure_client()
        try:
            response = await client.request(
                method, path, json=json, params=params, data=data, files=files
            )
            response.raise_for_status()
        except httpx.ConnectError:
            raise BoxAPIError(f"Cannot connect to Box API at {self.api_url}")
        except httpx.TimeoutException:
            raise BoxAPIError(f"Request timed out after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json()
            except ValueError:
                body = None
            raise BoxAPIError.from_body(
                e.response.status_code, body, f"{method} {path} failed"
            )

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return {}
        return response.json()

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def get_current_user(self) -> dict[str, Any]:
        return await self._request("GET", "/users/me")

    async def create_enterprise_user(
        self, name: str, is_platform_access_only: bool = True
    ) -> dict[str, Any]:
        """Create an enterprise user (an app user when platform-access-only).

        Args:
            name: Display name
            is_platform_access_only: Create an app user with no login

        Returns:
            User object
        """
        body = {"name": name, "is_platform_access_only": is_platform_access_only}
        return await self._request("POST", "/users", json=body)

    async def delete_enterprise_user(
        self, user_id: str, notify: bool = False, force: bool = True
    ) -> None:
        """Delete an enterprise user.

        Args:
            user_id: User id
            notify: Notify the user by email
            force: Delete even if the user still owns content
        """
        params = {"notify": str(notify).lower(), "force": str(force).lower()}
        await self._request("DELETE", f"/users/{user_id}", params=params)

    # -------------------------------------------------------------------------
    # Folders
    # -------------------------------------------------------------------------

    async def create_folder(self, name: str, parent_id: str = "0") -> dict[str, Any]:
        body = {"name": name, "parent": {"id": parent_id}}
        return await self._request("POST", "/folders", json=body)

    async def delete_folder(self, folder_id: str, recursive: bool = True) -> None:
        params = {"recursive": str(recursive).lower()}
        await self._request("DELETE", f"/folders/{folder_id}", params=params)

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    async def upload_file(
        self, name: str, content: bytes | IO[bytes], parent_id: str = "0"
    ) -> dict[str, Any]:
        """Upload a new file.

        Args:
            name: File name in Box
            content: File bytes or a binary stream
            parent_id: Destination folder id

        Returns:
            File object
        """
        attributes = {"name": name, "parent": {"id": parent_id}}
        response = await self._request(
            "POST",
            f"{self.upload_url}/files/content",
            data={"attributes": jsonlib.dumps(attributes)},
            files={"file": (name, content)},
        )
        # Upload responds with {"total_count": 1, "entries": [file]}
        entries = response.get("entries") or []
        if not entries:
            raise BoxAPIError(f"Upload of {name!r} returned no file entry")
        return entries[0]

    async def delete_file(self, file_id: str) -> None:
        await self._request("DELETE", f"/files/{file_id}")

    # -------------------------------------------------------------------------
    # Retention policies
    # -------------------------------------------------------------------------

    async def create_retention_policy(
        self,
        name: str,
        retention_length: int = 1,
        disposition_action: str = "remove_retention",
    ) -> dict[str, Any]:
        """Create a finite retention policy.

        Args:
            name: Policy name
            retention_length: Retention in days
            disposition_action: permanently_delete or remove_retention

        Returns:
            Retention policy object
        """
        body = {
            "policy_name": name,
            "policy_type": "finite",
            "retention_length": retention_length,
            "disposition_action": disposition_action,
        }
        return await self._request("POST", "/retention_policies", json=body)

    async def assign_retention_policy(self, policy_id: str, folder_id: str) -> dict[str, Any]:
        body = {"policy_id": policy_id, "assign_to": {"type": "folder", "id": folder_id}}
        return await self._request("POST", "/retention_policy_assignments", json=body)

    async def retire_retention_policy(self, policy_id: str) -> dict[str, Any]:
        """Retire a retention policy. Box does not allow deleting policies."""
        return await self._request(
            "PUT", f"/retention_policies/{policy_id}", json={"status": "retired"}
        )
