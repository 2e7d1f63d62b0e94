"""HTTP client for the admin JSON API used by the dashboard pages."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from label_admin.errors import ApiRequestError, NetworkError

_FALLBACK_ERROR = "Something went wrong. Please try again."


class AdminApiClient(Protocol):
    """Interface for the `/api/*` endpoints."""

    async def list_documents(self, route: str, key: str) -> list[dict[str, object]]:
        """Fetch every record of a collection."""

    async def create_document(
        self, route: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a record and return the response envelope."""

    async def update_document(
        self, route: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Update a record and return the response envelope."""

    async def delete_document(self, route: str, document_id: str) -> dict[str, object]:
        """Delete a record and return the response envelope."""

    async def login(self, username: str, password: str) -> dict[str, object]:
        """Check admin credentials and return the response envelope."""

    async def close(self) -> None:
        """Release the underlying connection pool."""


@dataclass
class HttpxAdminApiClient(AdminApiClient):
    """Admin API client implemented with httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxAdminApiClient":
        """Create a client with a managed httpx session and no request timeout."""
        return cls(http_client=httpx.AsyncClient(base_url=base_url, timeout=None))

    async def list_documents(self, route: str, key: str) -> list[dict[str, object]]:
        """Fetch a collection and unwrap its records."""
        payload = await self._send("GET", f"/api/{route}")
        records = payload.get(key)
        return records if isinstance(records, list) else []

    async def create_document(
        self, route: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """POST a new record."""
        return await self._send("POST", f"/api/{route}", json=payload)

    async def update_document(
        self, route: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """PUT an updated record; the payload carries the id."""
        return await self._send("PUT", f"/api/{route}", json=payload)

    async def delete_document(self, route: str, document_id: str) -> dict[str, object]:
        """DELETE a record by id."""
        return await self._send(
            "DELETE", f"/api/{route}", params={"id": document_id}
        )

    async def login(self, username: str, password: str) -> dict[str, object]:
        """POST credentials to the login endpoint."""
        return await self._send(
            "POST",
            "/api/auth/login",
            json={"username": username, "password": password},
        )

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, object] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, object]:
        try:
            response = await self.http_client.request(
                method, path, json=json, params=params
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {path} failed") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise NetworkError(f"{method} {path} returned an unexpected body")
        if response.is_error or payload.get("success") is False:
            raise ApiRequestError(
                str(payload.get("error") or _FALLBACK_ERROR), response.status_code
            )
        return payload
