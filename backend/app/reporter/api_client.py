"""
Bug Reporter Client — HTTP API Client
=======================================

What:  Async client for the /api/bugs endpoints.
How:   httpx. Pass an ``httpx.AsyncClient`` to reuse connections (or to route
       requests through ``httpx.ASGITransport`` in tests); without one, each
       call opens a short-lived client with REQUEST_TIMEOUT.

Error mapping:
    network failure, malformed URL,
    5xx, other 4xx                   → TransportError (status_code set when known)
    404 on a single-bug URL          → NotFoundError
    unparseable response body        → TransportError
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
import pydantic

from app.exceptions import NotFoundError, TransportError
from app.reporter.config import DEFAULT_API_ENDPOINT
from app.schemas.bug import BugPriority, BugResponse, BugStatus, Metadata

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0


class BugApiClient:
    """
    Thin wrapper over the bugs collection URL.

    ``endpoint`` is the collection URL (e.g. http://localhost:8000/api/bugs);
    single-bug URLs are ``{endpoint}/{id}``.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_API_ENDPOINT,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.endpoint = (endpoint or DEFAULT_API_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self._client = client

    # ── Endpoints ─────────────────────────────────────────────────────────

    async def list_bugs(self) -> List[BugResponse]:
        response = await self._request("GET")
        return [self._parse(item) for item in self._json(response)]

    async def get_bug(self, bug_id: int) -> BugResponse:
        response = await self._request("GET", bug_id)
        return self._parse(self._json(response))

    async def create_bug(self, payload: Mapping[str, Any]) -> BugResponse:
        """POST a payload built by SubmissionComposer.compose."""
        response = await self._request("POST", json=dict(payload))
        return self._parse(self._json(response))

    async def update_status(self, bug_id: int, status: BugStatus) -> BugResponse:
        response = await self._request(
            "PUT", bug_id, "/status", json={"status": BugStatus(status).value}
        )
        return self._parse(self._json(response))

    async def update_priority(self, bug_id: int, priority: BugPriority) -> BugResponse:
        response = await self._request(
            "PUT", bug_id, "/priority", json={"priority": BugPriority(priority).value}
        )
        return self._parse(self._json(response))

    async def update_metadata(self, bug_id: int, metadata: Metadata) -> BugResponse:
        response = await self._request("PUT", bug_id, "/metadata", json=dict(metadata))
        return self._parse(self._json(response))

    async def delete_bug(self, bug_id: int) -> None:
        await self._request("DELETE", bug_id)

    # ── Plumbing ──────────────────────────────────────────────────────────

    def url_for(self, bug_id: Optional[int] = None, suffix: str = "") -> str:
        if bug_id is None:
            return self.endpoint
        return f"{self.endpoint}/{bug_id}{suffix}"

    async def _request(
        self,
        method: str,
        bug_id: Optional[int] = None,
        suffix: str = "",
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = self.url_for(bug_id, suffix)
        try:
            if self._client is not None:
                response = await self._client.request(method, url, json=json)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, json=json)
        # InvalidURL (malformed endpoint) is not an HTTPError subclass
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise TransportError(context={"url": url, "error_type": type(e).__name__}) from e

        if response.status_code == 404 and bug_id is not None:
            raise NotFoundError(resource="bug", resource_id=str(bug_id))

        if response.is_error:
            message = self._error_message(response)
            logger.error("%s %s returned %d: %s", method, url, response.status_code, message)
            raise TransportError(
                message=message,
                status_code=response.status_code,
                context={"url": url},
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return f"The bug tracker responded with HTTP {response.status_code}"

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                message="The bug tracker sent an unreadable response",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _parse(data: Any) -> BugResponse:
        try:
            return BugResponse.model_validate(data)
        except pydantic.ValidationError as e:
            raise TransportError(
                message="The bug tracker sent an unexpected response",
                context={"errors": e.error_count()},
            ) from e
