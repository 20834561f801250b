"""Client for the travel backend (places, availability, quotes)."""
from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

AUTOCOMPLETE_PATH = "/api/v1/hotels/places/autocomplete"
AVAILABILITY_PATH = "/api/v1/hotels/availability"
LOAD_MORE_PATH = "/api/v1/hotels/availability/load_more"
QUOTE_SCHEDULE_PATH = "/api/v1/booking/quote/schedule"
QUOTE_PULL_PATH = "/api/v1/booking/quote/pull/{reference}"


class BackendUnavailableError(RuntimeError):
    """Raised when a backend call fails at the transport level or returns a non-success status."""

    def __init__(self, endpoint: str, message: str, *, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(f"Backend request to {endpoint} failed: {message}")
        self.endpoint = endpoint
        self.status = status
        self.body = body


class BackendClient(AbstractAsyncContextManager["BackendClient"]):
    """Thin async wrapper around the travel backend endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        default_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": "hotel-mcp/0.1.0",
        }
        if headers:
            default_headers.update(headers)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=default_headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aexit__(self, exc_type, exc, exc_tb) -> None:
        await self.aclose()

    async def autocomplete_places(self, query: str, *, language: str = "en") -> Dict[str, Any]:
        logger.debug("Place autocomplete query='%s' language=%s", query, language)
        return await self._request("POST", AUTOCOMPLETE_PATH, json={"input": query, "language": language})

    async def check_availability(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(
            "Fetching availability for (%s, %s) %s -> %s",
            payload.get("location", {}).get("latitude"),
            payload.get("location", {}).get("longitude"),
            payload.get("check_in_date"),
            payload.get("check_out_date"),
        )
        return await self._request("POST", AVAILABILITY_PATH, json=payload)

    async def load_more(self, next_page_token: str) -> Dict[str, Any]:
        logger.info("Loading more availability results")
        return await self._request("POST", LOAD_MORE_PATH, json={"next_page_token": next_page_token})

    async def schedule_quote(self, products: list[Dict[str, Any]]) -> Dict[str, Any]:
        logger.info("Scheduling quote for %s product(s)", len(products))
        return await self._request("POST", QUOTE_SCHEDULE_PATH, json={"products": products})

    async def pull_quote(self, reference: str) -> Dict[str, Any]:
        logger.debug("Pulling quote status for %s", reference)
        return await self._request("GET", QUOTE_PULL_PATH.format(reference=quote(reference, safe="")))

    async def _request(self, method: str, path: str, *, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise BackendUnavailableError(path, str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            text = response.text
            raise BackendUnavailableError(
                path,
                f"HTTP {response.status_code}",
                status=response.status_code,
                body=text[:512],
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise BackendUnavailableError(path, "response body is not JSON", status=response.status_code) from exc
        if not isinstance(data, dict):
            raise BackendUnavailableError(path, "response body is not a JSON object", status=response.status_code)
        return data
