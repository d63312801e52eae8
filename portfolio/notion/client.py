"""Async Notion API client wrapper with pagination support."""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError, RequestTimeoutError

DEFAULT_API_VERSION = "2022-06-28"


class NotionAPIError(RuntimeError):
    """Raised when a Notion API call fails for any reason."""

    def __init__(self, method: str, path: str, status: Any, body: str):
        self.method = method
        self.path = path
        self.status = status
        self.body = body
        super().__init__(f"Notion API error {status} @ {method} {path} :: {body}")

    @classmethod
    def from_exception(cls, method: str, path: str, exc: Exception) -> "NotionAPIError":
        """Build an error from an SDK or transport exception."""
        if isinstance(exc, HTTPResponseError):
            return cls(method, path, getattr(exc, "status", "?"), getattr(exc, "body", str(exc)))
        if isinstance(exc, RequestTimeoutError):
            return cls(method, path, "timeout", str(exc))
        return cls(method, path, "network", str(exc) or exc.__class__.__name__)


class NotionClient:
    """Notion API client for database queries and block-children listing."""

    def __init__(
        self,
        api_key: str,
        api_version: str = DEFAULT_API_VERSION,
        page_size: int = 100,
        rate_limit_delay: float = 0.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Notion client.

        Args:
            api_key: Notion integration API key
            api_version: Notion-Version header sent with every request
            page_size: Number of results per paginated request (max 100)
            rate_limit_delay: Delay between API calls (seconds) to avoid rate limits
            http_client: Optional httpx client for the SDK to send requests through
        """
        # No retries: a failed call raises on the first attempt
        self.client = AsyncClient(
            client=http_client, auth=api_key, notion_version=api_version, retry=False
        )
        self.page_size = page_size
        self.rate_limit_delay = rate_limit_delay
        self.logger = logging.getLogger(__name__)

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.aclose()

    async def _rate_limit(self) -> None:
        """Apply rate limiting delay between API calls."""
        if self.rate_limit_delay > 0:
            await asyncio.sleep(self.rate_limit_delay)

    async def _request(
        self,
        method: str,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send one request through the SDK, normalizing failures.

        Raises:
            NotionAPIError: On any HTTP, timeout or transport failure
        """
        await self._rate_limit()
        self.logger.debug(f"{method} {path}")
        try:
            return await self.client.request(path=path, method=method, query=query, body=body)
        except (HTTPResponseError, RequestTimeoutError, httpx.HTTPError) as e:
            raise NotionAPIError.from_exception(method, path, e) from e

    async def query_database(self, database_id: str) -> AsyncIterator[Dict[str, Any]]:
        """
        Query a database and yield all pages, newest edit first.

        Args:
            database_id: Database ID

        Yields:
            Page objects from the database
        """
        path = f"databases/{database_id}/query"
        body: Dict[str, Any] = {
            "page_size": self.page_size,
            "sorts": [{"timestamp": "last_edited_time", "direction": "descending"}],
        }

        while True:
            response = await self._request("POST", path, body=body)

            for page in response.get("results", []):
                yield page

            if not (response.get("has_more") and response.get("next_cursor")):
                break
            body["start_cursor"] = response["next_cursor"]

    async def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """
        Fetch all child blocks of a page or block, handling pagination.

        Args:
            block_id: Page ID or block ID

        Returns:
            Raw block objects in document order
        """
        path = f"blocks/{block_id}/children"
        results: List[Dict[str, Any]] = []
        cursor = None

        while True:
            query: Dict[str, Any] = {"page_size": self.page_size}
            if cursor:
                query["start_cursor"] = cursor

            response = await self._request("GET", path, query=query)
            results.extend(response.get("results", []))

            if not response.get("has_more"):
                break
            cursor = response.get("next_cursor")
            if not cursor:
                break

        return results
