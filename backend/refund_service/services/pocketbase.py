import logging
from typing import Any, Optional

import httpx

from refund_service.config import settings

logger = logging.getLogger(__name__)


class PocketbaseError(Exception):
    """Custom exception for Pocketbase errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class PocketbaseService:
    """Async client for Pocketbase REST API with admin authentication."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        admin_email: Optional[str] = None,
        admin_password: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.base_url = (base_url or settings.pocketbase_url).rstrip("/")
        self._admin_email = admin_email or settings.pocketbase_admin_email
        self._admin_password = admin_password or settings.pocketbase_admin_password
        self._timeout = timeout
        self._admin_token: Optional[str] = None

    async def _ensure_admin_auth(self) -> Optional[str]:
        """
        Authenticate as admin and get token.

        Returns the admin token or None if authentication fails.
        """
        if self._admin_token:
            return self._admin_token

        if not self._admin_email or not self._admin_password:
            logger.debug("No admin credentials configured")
            return None

        try:
            async with httpx.AsyncClient() as client:
                # Pocketbase v0.20+ uses _superusers collection
                response = await client.post(
                    f"{self.base_url}/api/collections/_superusers/auth-with-password",
                    json={"identity": self._admin_email, "password": self._admin_password},
                    timeout=self._timeout,
                )

                if response.status_code == 200:
                    self._admin_token = response.json().get("token")
                    logger.info("Pocketbase admin authentication successful")
                    return self._admin_token

                logger.warning("Pocketbase admin auth failed: %s", response.text)
                return None

        except httpx.HTTPError as e:
            logger.warning("Failed to authenticate as admin: %s", e)
            return None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
        require_admin: bool = False,
    ) -> Any:
        """Make an HTTP request to Pocketbase."""
        url = f"{self.base_url}{path}"

        headers = {}
        if require_admin:
            token = await self._ensure_admin_auth()
            if token:
                headers["Authorization"] = token

        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    json=json,
                    params=params,
                    headers=headers,
                    timeout=self._timeout,
                )
            except httpx.RequestError as e:
                raise PocketbaseError(f"Connection error: {str(e)}")

        if response.status_code >= 400:
            try:
                error_data = response.json() if response.text else {}
            except ValueError:
                error_data = {}
            error_msg = error_data.get("message", response.text or "Unknown error")
            raise PocketbaseError(error_msg, response.status_code)

        if response.text:
            return response.json()
        return None

    # ==================== Health ====================

    async def health_check(self) -> dict:
        """Check if Pocketbase is healthy."""
        return await self._request("GET", "/api/health")

    # ==================== Collections ====================

    async def list_collections(self) -> list[dict]:
        """Get list of all collections (requires admin auth)."""
        result = await self._request(
            "GET",
            "/api/collections",
            params={"perPage": 200},
            require_admin=True,
        )
        return result.get("items", []) if result else []

    async def create_collection(
        self,
        name: str,
        fields: list[dict],
        indexes: Optional[list[str]] = None,
    ) -> dict:
        """Create a new collection (requires admin auth)."""
        data = {
            "name": name,
            "type": "base",
            "fields": fields,  # Pocketbase v0.20+ uses 'fields' instead of 'schema'
            "indexes": indexes or [],
            # Reads are public, writes go through the backend only
            "listRule": "",
            "viewRule": "",
        }
        return await self._request("POST", "/api/collections", json=data, require_admin=True)

    # ==================== Records ====================

    async def list_records(
        self,
        collection: str,
        filter: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = 1,
        per_page: int = 50,
    ) -> dict:
        """Get list of records from a collection."""
        params = {"page": page, "perPage": per_page}
        if filter:
            params["filter"] = filter
        if sort:
            params["sort"] = sort

        return await self._request(
            "GET",
            f"/api/collections/{collection}/records",
            params=params,
            require_admin=True,
        )

    async def create_record(self, collection: str, data: dict) -> dict:
        """Create a new record in a collection."""
        return await self._request(
            "POST",
            f"/api/collections/{collection}/records",
            json=data,
            require_admin=True,
        )


# Singleton instance
pocketbase = PocketbaseService()
