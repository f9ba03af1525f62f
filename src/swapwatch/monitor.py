"""High-volume swap monitor.

Polls the matched orders feed, converts new orders, selects the
high-volume ones and hands them to a publisher.

Usage:
    python -m swapwatch --threshold 300 --interval 10

Environment variables:
    VOLUME_THRESHOLD: Minimum swap volume in USD (default: 300)
    POLLING_INTERVAL_SECONDS: Seconds between polls (default: 10)
    ORDERS_PER_POLL: Max outcomes published per poll (default: 5)
"""

import argparse
import asyncio
import logging
from decimal import Decimal
from typing import Optional, Protocol

import httpx

from swapwatch.catalog import NetworkCatalog
from swapwatch.config import Settings, get_settings
from swapwatch.converter import OrderConverter
from swapwatch.feed import FeedError, GardenApiClient
from swapwatch.formatters import build_alert_message, format_compact_usd
from swapwatch.models import NormalizedOutcome
from swapwatch.routing.factory import create_default_aggregator
from swapwatch.selector import ProcessedOrders, select_high_volume

logger = logging.getLogger(__name__)


class Publisher(Protocol):
    """Renders and posts an outcome. Must raise if publication failed."""

    async def publish(self, outcome: NormalizedOutcome) -> None:
        ...


class LogPublisher:
    """Publisher that only logs the alert text."""

    async def publish(self, outcome: NormalizedOutcome) -> None:
        logger.info(f"Alert for order {outcome.order_id}:\n{build_alert_message(outcome)}")


class SwapMonitor:
    """Poll loop over the matched orders feed."""

    def __init__(
        self,
        client: GardenApiClient,
        converter: OrderConverter,
        publisher: Optional[Publisher] = None,
        threshold: Decimal = Decimal("300"),
        orders_per_poll: int = 5,
        page_size: int = 1,
        page_number: int = 1,
        interval: int = 10,
        require_savings: bool = True,
        processed: Optional[ProcessedOrders] = None,
    ):
        """Initialize monitor.

        Args:
            client: Garden API client
            converter: Order converter with its comparison aggregator
            publisher: Receives selected outcomes (defaults to LogPublisher)
            threshold: Minimum volume in USD
            orders_per_poll: Max outcomes published per poll
            page_size: Matched orders fetched per poll
            page_number: Feed page to poll
            interval: Seconds between polls
            require_savings: Skip outcomes without a positive fee saving
            processed: Dedup state, owned and mutated by this monitor
        """
        self.client = client
        self.converter = converter
        self.publisher = publisher or LogPublisher()
        self.threshold = Decimal(str(threshold))
        self.orders_per_poll = orders_per_poll
        self.page_size = page_size
        self.page_number = page_number
        self.interval = interval
        self.require_savings = require_savings
        self.processed = processed if processed is not None else ProcessedOrders()
        self.catalog: Optional[NetworkCatalog] = None

    async def refresh_catalog(self) -> NetworkCatalog:
        """Reload the network catalog."""
        self.catalog = await self.client.get_network_catalog()
        return self.catalog

    async def process_outcome(self, outcome: NormalizedOutcome) -> bool:
        """Publish one outcome and mark it processed on success."""
        if self.require_savings and not outcome.has_savings:
            logger.info(
                f"Order {outcome.order_id} saved nothing vs. competitors "
                f"({outcome.fee_saved_usd}), not publishing"
            )
            self.processed.mark(outcome.order_id)
            return False

        try:
            await self.publisher.publish(outcome)
        except Exception as e:
            logger.error(f"Error publishing order {outcome.order_id}: {type(e).__name__}: {e}")
            return False

        self.processed.mark(outcome.order_id)
        logger.info(f"Published order {outcome.order_id} ({format_compact_usd(outcome.volume_usd)})")
        return True

    async def poll_once(self) -> int:
        """Run a single poll cycle.

        Returns:
            Number of outcomes published

        Raises:
            FeedError: catalog or feed could not be fetched
        """
        catalog = self.catalog or await self.refresh_catalog()

        page = await self.client.get_matched_orders(self.page_size, self.page_number)
        if not page.orders:
            logger.info("No orders found in the response")
            return 0

        pending = [order for order in page.orders if order.order_id not in self.processed]
        skipped = len(page.orders) - len(pending)
        if skipped:
            logger.debug(f"Skipping {skipped} already processed orders")

        outcomes = await self.converter.convert_many(pending, catalog)
        selected = select_high_volume(outcomes, self.threshold, self.processed.snapshot())

        published = 0
        for outcome in selected[: self.orders_per_poll]:
            if await self.process_outcome(outcome):
                published += 1
        return published

    async def run(self) -> None:
        """Run continuous polling loop."""
        logger.info(
            f"Starting swap monitor (threshold: {format_compact_usd(self.threshold)}, "
            f"interval: {self.interval}s)"
        )

        while True:
            try:
                published = await self.poll_once()
                if published > 0:
                    logger.info(f"Published {published} high-volume orders")
            except FeedError as e:
                logger.error(f"Feed unavailable, retrying next poll: {e}")
            except Exception as e:
                logger.error(f"Monitor error: {type(e).__name__}: {e}")

            await asyncio.sleep(self.interval)


def build_monitor(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    publisher: Optional[Publisher] = None,
) -> SwapMonitor:
    """Wire a monitor from settings."""
    converter = OrderConverter(create_default_aggregator(settings, client=http_client))
    return SwapMonitor(
        client=GardenApiClient.from_settings(settings),
        converter=converter,
        publisher=publisher,
        threshold=settings.volume_threshold,
        orders_per_poll=settings.orders_per_poll,
        page_size=settings.page_size,
        page_number=settings.page_number,
        interval=settings.polling_interval_seconds,
    )


async def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Monitor high-volume Garden swaps")
    parser.add_argument(
        "--threshold",
        type=Decimal,
        default=settings.volume_threshold,
        help=f"Minimum volume in USD (default: {settings.volume_threshold})",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.polling_interval_seconds,
        help=f"Seconds between polls (default: {settings.polling_interval_seconds})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run one poll cycle and exit",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Environment: {settings.environment}")
    logger.debug(f"Settings: {settings.get_safe_dict()}")

    async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as http_client:
        monitor = build_monitor(settings, http_client=http_client)
        monitor.threshold = args.threshold
        monitor.interval = args.interval

        if args.once:
            published = await monitor.poll_once()
            print(f"Published {published} orders")
        else:
            await monitor.run()


def cli() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
