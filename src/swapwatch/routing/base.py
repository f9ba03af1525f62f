"""Competitor quote interface and the comparison aggregator."""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import AsyncIterator, Optional

import httpx

from swapwatch.catalog import Asset
from swapwatch.formatters import format_duration, format_time_diff, format_usd
from swapwatch.routing.mappings import UNSUPPORTED, ProviderAsset, SwapPlatform, lookup

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 10.0

# Failures that mean "no usable quote" rather than a bug
QUOTE_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError, InvalidOperation)


@dataclass(frozen=True)
class ComparisonMetric:
    """Fee (USD) and settlement time (seconds) quoted by one provider."""

    fee: Decimal
    time: int

    @classmethod
    def unavailable(cls) -> "ComparisonMetric":
        """The zero-metric sentinel: no usable quote."""
        return cls(fee=Decimal("0"), time=0)

    @property
    def is_valid(self) -> bool:
        # A zero or negative fee is never a genuine quote in this domain
        return self.fee > 0 and self.time > 0


@dataclass(frozen=True)
class ComparisonResult:
    """Worst-case competitor figures and what Garden saved against them."""

    competitor_max_fee_display: str
    competitor_max_time_display: str
    fee_saved_usd: Decimal
    time_saved_seconds: int
    time_saved_minutes: int
    time_saved_display: str
    max_fee: Decimal = Decimal("0")
    max_time: int = 0
    max_fee_provider: Optional[str] = None
    max_time_provider: Optional[str] = None

    @classmethod
    def neutral(cls) -> "ComparisonResult":
        """Result used when no competitor returned a valid quote."""
        return cls(
            competitor_max_fee_display="",
            competitor_max_time_display="",
            fee_saved_usd=Decimal("0"),
            time_saved_seconds=0,
            time_saved_minutes=0,
            time_saved_display="",
        )

    @property
    def has_comparison(self) -> bool:
        return self.max_fee_provider is not None


class ProviderAdapter(ABC):
    """Abstract base class for competitor quote adapters.

    ``quote`` must not raise for expected failures: unmapped assets,
    non-200 responses and malformed payloads all resolve to
    ``ComparisonMetric.unavailable()``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize adapter.

        Args:
            timeout: HTTP timeout in seconds for requests made by the adapter
            client: Shared client to use instead of one client per request
        """
        self.timeout = timeout
        self._client = client

    @property
    @abstractmethod
    def platform(self) -> SwapPlatform:
        """Platform this adapter queries."""
        pass

    @property
    def name(self) -> str:
        return self.platform.value

    @abstractmethod
    async def quote(self, src: Asset, dst: Asset, amount: Decimal) -> ComparisonMetric:
        """
        Get the platform's fee and time for a swap.

        Args:
            src: Source asset descriptor
            dst: Destination asset descriptor
            amount: Amount of src to swap, in real units

        Returns:
            ComparisonMetric, or the zero-metric sentinel on any failure
        """
        pass

    def resolve_pair(
        self, src: Asset, dst: Asset
    ) -> Optional[tuple[ProviderAsset, ProviderAsset]]:
        """Map both assets to platform identifiers, None if either is unsupported."""
        src_format = lookup(self.platform, src.chain, src.symbol)
        dst_format = lookup(self.platform, dst.chain, dst.symbol)

        if src_format is UNSUPPORTED or dst_format is UNSUPPORTED:
            logger.warning(
                f"{self.name}: asset mapping not found for "
                f"{src.chain}:{src.symbol} -> {dst.chain}:{dst.symbol}"
            )
            return None
        return src_format, dst_format

    @asynccontextmanager
    async def http(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the shared client, or a short-lived one."""
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client


class ComparisonAggregator:
    """Queries all adapters concurrently and reduces to the worst competitor.

    Adapter order is the tie-break order: on equal fees or times the
    adapter listed first wins.
    """

    def __init__(
        self,
        adapters: Optional[list[ProviderAdapter]] = None,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ):
        self.adapters: list[ProviderAdapter] = adapters or []
        self.timeout = timeout

    def add_adapter(self, adapter: ProviderAdapter) -> None:
        """Add a competitor adapter."""
        self.adapters.append(adapter)

    async def _safe_quote(
        self, adapter: ProviderAdapter, src: Asset, dst: Asset, amount: Decimal
    ) -> ComparisonMetric:
        try:
            return await asyncio.wait_for(adapter.quote(src, dst, amount), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{adapter.name} service timed out after {self.timeout}s")
        except Exception as e:
            logger.error(f"{adapter.name} service error: {type(e).__name__}: {e}")
        return ComparisonMetric.unavailable()

    async def collect_metrics(
        self, src: Asset, dst: Asset, amount: Decimal
    ) -> list[tuple[str, ComparisonMetric]]:
        """Get metrics from every adapter, in adapter order."""
        metrics = await asyncio.gather(
            *(self._safe_quote(adapter, src, dst, amount) for adapter in self.adapters)
        )
        return [(adapter.name, metric) for adapter, metric in zip(self.adapters, metrics)]

    async def compare(
        self,
        src: Asset,
        dst: Asset,
        amount: Decimal,
        garden_fee: Decimal,
        garden_time_seconds: int,
    ) -> ComparisonResult:
        """
        Compare Garden's fee and time against the competitors.

        The highest fee and the longest time are picked independently and
        may come from different providers.

        Args:
            src: Source asset
            dst: Destination asset
            amount: Swap amount in real src units
            garden_fee: Garden's fee in USD
            garden_time_seconds: Garden's expected settlement time

        Returns:
            ComparisonResult, neutral when no provider gave a valid quote
        """
        metrics = await self.collect_metrics(src, dst, amount)
        valid = [(name, metric) for name, metric in metrics if metric.is_valid]

        if not valid:
            logger.warning(
                f"No valid comparison services for {src.chain}:{src.symbol} -> {dst.chain}:{dst.symbol}"
            )
            return ComparisonResult.neutral()

        max_fee_name, max_fee_metric = valid[0]
        max_time_name, max_time_metric = valid[0]
        for name, metric in valid[1:]:
            if metric.fee > max_fee_metric.fee:
                max_fee_name, max_fee_metric = name, metric
            if metric.time > max_time_metric.time:
                max_time_name, max_time_metric = name, metric

        time_saved = max_time_metric.time - int(garden_time_seconds)
        fee_saved = max_fee_metric.fee - garden_fee

        logger.info(
            f"Compared {len(valid)}/{len(metrics)} services: max fee {max_fee_name} "
            f"{format_usd(max_fee_metric.fee)}, max time {max_time_name} "
            f"{format_duration(max_time_metric.time)}"
        )

        return ComparisonResult(
            competitor_max_fee_display=format_usd(max_fee_metric.fee),
            competitor_max_time_display=format_duration(max_time_metric.time),
            fee_saved_usd=fee_saved,
            time_saved_seconds=time_saved,
            time_saved_minutes=time_saved // 60,
            time_saved_display=format_time_diff(time_saved),
            max_fee=max_fee_metric.fee,
            max_time=max_time_metric.time,
            max_fee_provider=max_fee_name,
            max_time_provider=max_time_name,
        )
