"""
JIVAS Walker Client

Fetches subgraphs from a JIVAS server through its graph walkers:
- get_graph             → whole graph under a root node
- get_node_connections  → neighborhood of a node up to a depth

Every walker answers {"reports": [payload, ...]}; the fragment is reports[0].
"""

from typing import Any, Dict, Optional
import logging

import httpx
from pydantic import ValidationError

from config.settings import get_settings, WALKER_ENDPOINTS
from ..graph.schema import GraphFragment
from .errors import FetchFailure, AuthenticationError, ServerError, ResponseFormatError

logger = logging.getLogger(__name__)


class JivasClient:
    """
    Async client for the JIVAS graph walkers.

    Usage:
        async with JivasClient(host="http://localhost:8000", token="...") as client:
            fragment = await client.fetch_neighborhood("7f3a...", depth=2)
    """

    def __init__(
        self,
        host: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            host: Server base URL (defaults to settings)
            token: Bearer token (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Custom httpx transport, mostly for tests
        """
        settings = get_settings()
        self.host = (host or settings.jivas_host).rstrip("/")
        self.token = token if token is not None else settings.jivas_token
        self.timeout = timeout or settings.request_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client"""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.host,
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "JivasClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ==========================================
    # WALKERS
    # ==========================================

    async def fetch_full_graph(self, root_id: str) -> GraphFragment:
        """Whole graph reachable from root_id"""
        return await self._call_walker(WALKER_ENDPOINTS["full_graph"], {"root_node": root_id})

    async def fetch_neighborhood(self, focus_id: str, depth: int) -> GraphFragment:
        """Nodes and edges within depth hops of focus_id"""
        return await self._call_walker(
            WALKER_ENDPOINTS["neighborhood"],
            {"depth": depth, "node_id": focus_id},
        )

    async def _call_walker(self, path: str, body: Dict[str, Any]) -> GraphFragment:
        logger.info(f"POST {self.host}{path} {body}")
        try:
            response = await self.client.post(path, json=body)
        except httpx.TimeoutException as e:
            raise FetchFailure(f"Timed out calling {path}") from e
        except httpx.HTTPError as e:
            raise FetchFailure(f"Network error calling {path}: {e}") from e

        return self._handle_response(path, response)

    def _handle_response(self, path: str, response: httpx.Response) -> GraphFragment:
        """Map the HTTP response to a fragment or a FetchFailure"""
        if response.status_code in (401, 403):
            raise AuthenticationError(f"Unauthorized calling {path}", status_code=response.status_code)

        if response.status_code >= 400:
            raise ServerError(f"{path} returned HTTP {response.status_code}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"{path} returned a non-JSON body") from e

        reports = payload.get("reports") if isinstance(payload, dict) else None
        if not isinstance(reports, list) or not reports:
            raise ResponseFormatError(f"{path} returned no reports")

        try:
            return GraphFragment.model_validate(reports[0])
        except ValidationError as e:
            raise ResponseFormatError(f"{path} returned an unexpected report: {e.error_count()} error(s)") from e
