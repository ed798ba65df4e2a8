"""TurfApiClient: asynchronous client for the turf dashboard JSON API.

Usage::

    import asyncio
    from turfboard.client import TurfApiClient

    async def main():
        async with TurfApiClient("http://localhost:5000", user_email="ana@example.com") as c:
            rows = await c.list_logins()
            await c.update_login(rows[0]["slug"], 70, 30)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Union

import httpx

from turfboard.client.errors import ApiError, ForbiddenError, NotFoundError, ServerError, ValidationError

# Only reads are retried; a PATCH that reached the server is never replayed
RETRYABLE_STATUS_CODES = {502, 503, 504}


class TurfApiClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:5000",
        user_email: Optional[str] = None,
        timeout: float = 10.0,
        retries: int = 2,
        retry_delay: float = 0.5,
        identity_header: str = "X-User-Email",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize async client.

        Args:
            base_url: Turf API base URL
            user_email: Identity sent with every request; None for legacy anonymous access
            timeout: Request timeout in seconds
            retries: Number of retries for GET requests on 502/503/504 or network errors
            retry_delay: Delay between retries (seconds)
            identity_header: Header carrying the identity
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._user_email = user_email
        self._identity_header = identity_header
        self._retries = retries
        self._retry_delay = retry_delay
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout, transport=transport)

    # ── Internal helpers ─────────────────────────────────────────

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._user_email:
            headers[self._identity_header] = self._user_email
        return headers

    def _raise_for_status(self, resp: httpx.Response, endpoint: str) -> None:
        """Raise appropriate exception based on status code."""
        if resp.status_code < 400:
            return

        try:
            body = resp.json()
        except ValueError:
            body = resp.text

        if isinstance(body, dict):
            message = body.get("message") or str(body)
        else:
            message = str(body)

        if resp.status_code == 400:
            raise ValidationError(resp.status_code, message, body, endpoint)
        if resp.status_code == 403:
            raise ForbiddenError(resp.status_code, message, body, endpoint)
        if resp.status_code == 404:
            raise NotFoundError(resp.status_code, message, body, endpoint)
        if resp.status_code >= 500:
            raise ServerError(resp.status_code, message, body, endpoint)
        raise ApiError(resp.status_code, message, body, endpoint)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        endpoint = f"{method} {path}"
        attempts = self._retries + 1 if method == "GET" else 1

        for attempt in range(attempts):
            last = attempt == attempts - 1
            try:
                resp = await self._client.request(method, path, headers=self._headers(), **kwargs)
            except (httpx.NetworkError, httpx.TimeoutException) as e:
                if not last:
                    await asyncio.sleep(self._retry_delay)
                    continue
                raise ServerError(0, f"Network error: {e}", None, endpoint) from e

            if resp.status_code in RETRYABLE_STATUS_CODES and not last:
                await asyncio.sleep(self._retry_delay)
                continue

            self._raise_for_status(resp, endpoint)
            return resp.json()

    @staticmethod
    def _organization_params(organization_id: Optional[int]) -> Dict[str, Any]:
        return {} if organization_id is None else {"organizationId": organization_id}

    # ── Public API ───────────────────────────────────────────────

    async def list_logins(self, organization_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """GET /api/logins"""
        return await self._request("GET", "/api/logins", params=self._organization_params(organization_id))

    async def summary(self, organization_id: Optional[int] = None) -> Dict[str, Any]:
        """GET /api/logins/summary"""
        return await self._request("GET", "/api/logins/summary", params=self._organization_params(organization_id))

    async def get_login(self, slug: str) -> Dict[str, Any]:
        """GET /api/logins/<slug>"""
        return await self._request("GET", f"/api/logins/{slug}")

    async def update_login(self, slug: str, on_turf: Union[int, float], off_turf: Union[int, float]) -> Dict[str, Any]:
        """PATCH /api/logins/<slug> with both counters"""
        return await self._request("PATCH", f"/api/logins/{slug}", json={"onTurf": on_turf, "offTurf": off_turf})

    async def user_organizations(self) -> List[Dict[str, Any]]:
        """GET /api/user/organizations"""
        return await self._request("GET", "/api/user/organizations")

    async def organizations(self) -> List[Dict[str, Any]]:
        """GET /api/organizations"""
        return await self._request("GET", "/api/organizations")

    async def import_logins(self, plans: List[Dict[str, Any]], organization_id: Optional[int] = None) -> Dict[str, Any]:
        """POST /api/import/logins"""
        body: Dict[str, Any] = {"plans": plans}
        if organization_id is not None:
            body["organizationId"] = organization_id
        return await self._request("POST", "/api/import/logins", json=body)

    async def __aenter__(self) -> "TurfApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
