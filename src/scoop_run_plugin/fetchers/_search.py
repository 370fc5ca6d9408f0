"""Async client for the hosted package search index."""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from ..config import ScoopSettings
from ..models.package import Package
from ..models.search import SearchRequest, SearchResponse

logger = logging.getLogger(__name__)


class ScoopSearchClient:
    """Searches the index, keeping at most one request in flight.

    Starting a search cancels the previous one; its caller gets ``[]``.
    All calls must come from the same event loop.
    """

    def __init__(
        self,
        api_key: str,
        settings: ScoopSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ScoopSettings()
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._current: asyncio.Task[list[Package]] | None = None

    def build_request(self, query: str) -> SearchRequest:
        s = self._settings
        return SearchRequest(
            filter=s.search_filter,
            order_by=s.search_order_by,
            search=query,
            search_mode=s.search_mode,
            select=s.search_select,
            top=s.search_top,
        )

    async def search(self, query: str) -> list[Package]:
        if self._current is not None and not self._current.done():
            logger.debug("Cancelling superseded search")
            self._current.cancel()
        task = asyncio.ensure_future(self._post(query))
        self._current = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return []

    async def aclose(self) -> None:
        if self._current is not None and not self._current.done():
            self._current.cancel()
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, query: str) -> list[Package]:
        payload = self.build_request(query).model_dump(by_alias=True)
        try:
            response = await self._http().post(self._settings.search_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Search request for %r failed: %s", query, e)
            return []
        if not response.is_success:
            logger.warning("Search for %r returned HTTP %d", query, response.status_code)
            return []
        try:
            return SearchResponse.model_validate(response.json()).packages
        except (ValueError, ValidationError) as e:
            logger.warning("Malformed search response for %r: %s", query, e)
            return []

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"api-key": self._api_key},
                timeout=self._settings.http_timeout,
                transport=self._transport,
            )
        return self._client
