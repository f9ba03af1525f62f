"""Tests for the swap monitor poll cycle."""

import copy
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from swapwatch.catalog import NetworkCatalog
from swapwatch.config import Settings
from swapwatch.converter import OrderConverter
from swapwatch.feed import FeedError, MatchedOrdersPage
from swapwatch.models import RawSettlement
from swapwatch.monitor import LogPublisher, SwapMonitor, build_monitor
from swapwatch.routing.base import ComparisonAggregator
from swapwatch.routing.mappings import SwapPlatform
from swapwatch.selector import ProcessedOrders

from conftest import FakeAdapter


def make_settlements(payload: dict, count: int) -> list[RawSettlement]:
    raws = []
    for index in range(count):
        item = copy.deepcopy(payload)
        item["create_order"]["create_id"] = f"order-{index}"
        # Scale amounts so later orders have larger volume
        item["source_swap"]["amount"] = str(10_000_000 * (index + 1))
        item["destination_swap"]["amount"] = str(9_990_000 * (index + 1))
        raws.append(RawSettlement.model_validate(item))
    return raws


def feed_client(catalog: NetworkCatalog, orders: list[RawSettlement]) -> MagicMock:
    client = MagicMock()
    client.get_network_catalog = AsyncMock(return_value=catalog)
    client.get_matched_orders = AsyncMock(return_value=MatchedOrdersPage(orders=orders))
    return client


def make_monitor(client, publisher, fee=500, **kwargs) -> SwapMonitor:
    aggregator = ComparisonAggregator([FakeAdapter(SwapPlatform.RELAY, fee=fee, time=1200)])
    return SwapMonitor(
        client=client,
        converter=OrderConverter(aggregator),
        publisher=publisher,
        threshold=Decimal("300"),
        **kwargs,
    )


class TestSwapMonitor:
    """Tests for SwapMonitor.poll_once and process_outcome."""

    @pytest.mark.asyncio
    async def test_publishes_and_marks(self, catalog, settlement_payload):
        """Test high-volume orders are published and marked processed."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        client = feed_client(catalog, make_settlements(settlement_payload, 2))
        monitor = make_monitor(client, publisher)

        published = await monitor.poll_once()

        assert published == 2
        assert publisher.publish.await_count == 2
        # Highest volume first
        first = publisher.publish.await_args_list[0].args[0]
        assert first.order_id == "order-1"
        assert set(monitor.processed) == {"order-0", "order-1"}

    @pytest.mark.asyncio
    async def test_second_poll_does_not_republish(self, catalog, settlement_payload):
        """Test processed orders are skipped on the next poll."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        client = feed_client(catalog, make_settlements(settlement_payload, 1))
        monitor = make_monitor(client, publisher)

        assert await monitor.poll_once() == 1
        assert await monitor.poll_once() == 0
        assert publisher.publish.await_count == 1
        client.get_network_catalog.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_failure_leaves_order_unmarked(self, catalog, settlement_payload):
        """Test a failed publish is retried on the next poll."""
        publisher = MagicMock()
        publisher.publish = AsyncMock(side_effect=[RuntimeError("rate limited"), None])
        client = feed_client(catalog, make_settlements(settlement_payload, 1))
        monitor = make_monitor(client, publisher)

        assert await monitor.poll_once() == 0
        assert "order-0" not in monitor.processed

        assert await monitor.poll_once() == 1
        assert "order-0" in monitor.processed

    @pytest.mark.asyncio
    async def test_no_savings_not_published(self, catalog, settlement_payload):
        """Test outcomes without a fee saving are marked but not published."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        client = feed_client(catalog, make_settlements(settlement_payload, 1))
        monitor = make_monitor(client, publisher, fee=0)

        assert await monitor.poll_once() == 0
        publisher.publish.assert_not_awaited()
        assert "order-0" in monitor.processed

    @pytest.mark.asyncio
    async def test_savings_not_required(self, catalog, settlement_payload):
        """Test require_savings=False publishes neutral outcomes."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        client = feed_client(catalog, make_settlements(settlement_payload, 1))
        monitor = make_monitor(client, publisher, fee=0, require_savings=False)

        assert await monitor.poll_once() == 1

    @pytest.mark.asyncio
    async def test_orders_per_poll_limit(self, catalog, settlement_payload):
        """Test at most orders_per_poll outcomes are published per cycle."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        client = feed_client(catalog, make_settlements(settlement_payload, 4))
        monitor = make_monitor(client, publisher, orders_per_poll=2)

        assert await monitor.poll_once() == 2
        published = [call.args[0].order_id for call in publisher.publish.await_args_list]
        assert published == ["order-3", "order-2"]

        assert await monitor.poll_once() == 2
        assert len(monitor.processed) == 4

    @pytest.mark.asyncio
    async def test_below_threshold_ignored(self, catalog, settlement):
        """Test small orders are neither published nor marked."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        monitor = make_monitor(feed_client(catalog, [settlement]), publisher)

        assert await monitor.poll_once() == 0
        assert len(monitor.processed) == 0

    @pytest.mark.asyncio
    async def test_empty_feed(self, catalog):
        """Test an empty page publishes nothing."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        monitor = make_monitor(feed_client(catalog, []), publisher)

        assert await monitor.poll_once() == 0

    @pytest.mark.asyncio
    async def test_feed_error_propagates(self, catalog):
        """Test feed failures surface to the caller."""
        client = feed_client(catalog, [])
        client.get_matched_orders = AsyncMock(side_effect=FeedError("down"))
        monitor = make_monitor(client, MagicMock())

        with pytest.raises(FeedError):
            await monitor.poll_once()

    @pytest.mark.asyncio
    async def test_shared_processed_state(self, catalog, settlement_payload):
        """Test a caller-provided ProcessedOrders is used for dedup."""
        publisher = MagicMock()
        publisher.publish = AsyncMock()
        processed = ProcessedOrders(["order-0"])
        client = feed_client(catalog, make_settlements(settlement_payload, 1))
        monitor = make_monitor(client, publisher, processed=processed)

        assert await monitor.poll_once() == 0
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_log_publisher(self, make_outcome, caplog):
        """Test the default publisher logs the alert text."""
        with caplog.at_level("INFO", logger="swapwatch.monitor"):
            await LogPublisher().publish(make_outcome("abc", 1000))

        assert "High Swap Alert" in caplog.text


class TestBuildMonitor:
    """Tests for wiring a monitor from settings."""

    def test_build_monitor(self):
        """Test settings flow into the monitor."""
        settings = Settings(volume_threshold=Decimal("1000"), orders_per_poll=3, page_size=10)

        monitor = build_monitor(settings)

        assert monitor.threshold == Decimal("1000")
        assert monitor.orders_per_poll == 3
        assert monitor.page_size == 10
        assert len(monitor.converter.aggregator.adapters) == 3
        assert isinstance(monitor.publisher, LogPublisher)
