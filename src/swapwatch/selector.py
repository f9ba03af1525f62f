"""High-volume outcome selection and processed-order bookkeeping."""

import logging
from decimal import Decimal
from typing import AbstractSet, Iterable, Iterator, Optional, Union

from swapwatch.formatters import format_compact_usd
from swapwatch.models import NormalizedOutcome

logger = logging.getLogger(__name__)


def select_high_volume(
    outcomes: Iterable[NormalizedOutcome],
    threshold: Union[Decimal, int, float],
    already_seen: AbstractSet[str] = frozenset(),
) -> list[NormalizedOutcome]:
    """
    Pick unseen outcomes at or above the volume threshold.

    Args:
        outcomes: Normalized outcomes from one poll cycle
        threshold: Minimum volume in USD
        already_seen: Order IDs already published; not modified

    Returns:
        Selected outcomes, highest volume first (stable for equal volumes)
    """
    threshold = Decimal(str(threshold))
    selected = []

    for outcome in outcomes:
        if outcome.order_id in already_seen:
            logger.debug(f"Skipping already processed order ID: {outcome.order_id}")
            continue

        if outcome.volume_usd >= threshold:
            logger.info(
                f"Found high-volume order ID: {outcome.order_id} "
                f"with volume: {format_compact_usd(outcome.volume_usd)}"
            )
            selected.append(outcome)
        else:
            logger.debug(
                f"Order ID: {outcome.order_id} volume ({format_compact_usd(outcome.volume_usd)}) "
                f"below threshold ({format_compact_usd(threshold)})"
            )

    return sorted(selected, key=lambda o: o.volume_usd, reverse=True)


class ProcessedOrders:
    """Caller-owned set of published order IDs.

    Only mark an order after it has been published, so a crash between
    selection and publication leads to a repost rather than a loss.
    """

    def __init__(self, order_ids: Optional[Iterable[str]] = None):
        self._order_ids: set[str] = set(order_ids or ())

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._order_ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._order_ids)

    def __len__(self) -> int:
        return len(self._order_ids)

    def mark(self, order_id: str) -> None:
        """Record an order as published."""
        self._order_ids.add(order_id)

    def snapshot(self) -> frozenset[str]:
        """Immutable copy for handing to the selector."""
        return frozenset(self._order_ids)
