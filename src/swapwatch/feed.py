"""Garden API client for the asset catalog and the matched orders feed.

The feed has been served both as a bare list and as a paginated
envelope (optionally wrapped in ``{"status": ..., "result": ...}``).
Both are normalized here into ``MatchedOrdersPage`` so the converter
only ever sees validated ``RawSettlement`` records.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Optional

import httpx
from pydantic import ValidationError

from swapwatch.catalog import NetworkCatalog
from swapwatch.config import Settings, get_settings
from swapwatch.models import RawSettlement

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """Catalog or settlement feed could not be fetched or parsed."""


@dataclass
class MatchedOrdersPage:
    """One page of the matched orders feed."""

    orders: list[RawSettlement] = field(default_factory=list)
    page: int = 1
    per_page: int = 0
    total_pages: int = 1
    total_items: int = 0


def parse_matched_orders(payload: Any, page: int = 1, per_page: int = 0) -> MatchedOrdersPage:
    """Normalize a feed response into a MatchedOrdersPage.

    Records that fail validation are logged and skipped.
    """
    meta: dict = {}
    if isinstance(payload, dict) and isinstance(payload.get("result"), (dict, list)):
        payload = payload["result"]

    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict) and isinstance(payload.get("data"), list):
        items = payload["data"]
        meta = payload
    else:
        raise FeedError(f"Unexpected matched orders payload: {type(payload).__name__}")

    orders = []
    for item in items:
        try:
            orders.append(RawSettlement.model_validate(item))
        except ValidationError as e:
            order_id = (item.get("create_order") or {}).get("create_id") if isinstance(item, dict) else None
            logger.warning(f"Skipping malformed matched order {order_id}: {e.error_count()} errors")

    return MatchedOrdersPage(
        orders=orders,
        page=int(meta.get("page") or page),
        per_page=int(meta.get("per_page") or per_page or len(items)),
        total_pages=int(meta.get("total_pages") or 1),
        total_items=int(meta.get("total_items") or len(items)),
    )


class GardenApiClient:
    """Fetches the network catalog and matched orders."""

    def __init__(
        self,
        network_api_url: str,
        orders_api_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.network_api_url = network_api_url
        self.orders_api_url = orders_api_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GardenApiClient":
        settings = settings or get_settings()
        return cls(
            network_api_url=settings.network_api_url,
            orders_api_url=settings.orders_api_url,
            timeout=settings.feed_timeout_seconds,
        )

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def _get_json(self, url: str, params: Optional[dict] = None) -> Any:
        try:
            async with self._http() as client:
                response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Garden API request failed: {e.response.status_code} for {url}")
            raise FeedError(f"HTTP {e.response.status_code} from {url}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Garden API request failed: {type(e).__name__}: {e}")
            raise FeedError(f"Request to {url} failed: {e}") from e

    async def get_network_catalog(self) -> NetworkCatalog:
        """Fetch and validate the network/asset catalog."""
        logger.info("Fetching network and asset information")
        data = await self._get_json(self.network_api_url)

        try:
            catalog = NetworkCatalog.from_payload(data)
        except ValueError as e:
            raise FeedError(f"Invalid network catalog: {e}") from e

        logger.info(f"Received information for {len(catalog)} networks: {', '.join(catalog)}")
        for chain in catalog:
            network = catalog.get(chain)
            logger.debug(f"Network {chain} has {len(network.assets)} assets configured")
        return catalog

    async def get_matched_orders(self, per_page: int, page: int = 1) -> MatchedOrdersPage:
        """Fetch one page of matched orders."""
        logger.info(f"Fetching matched orders (page {page}, per_page {per_page})")
        data = await self._get_json(
            f"{self.orders_api_url}/matched",
            params={"page": page, "per_page": per_page},
        )
        return parse_matched_orders(data, page=page, per_page=per_page)
