"""Display formatting for outcomes and log lines."""

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from swapwatch.models import NormalizedOutcome

Number = Union[Decimal, int, float]

CHAIN_DISPLAY_NAMES = {
    "bitcoin": "Bitcoin",
    "bitcoin_testnet": "Bitcoin",
    "ethereum": "Ethereum",
    "ethereum_sepolia": "Ethereum",
    "arbitrum": "Arbitrum",
    "arbitrum_sepolia": "Arbitrum",
    "base": "Base",
    "base_sepolia": "Base",
    "starknet": "StarkNet",
    "starknet_sepolia": "StarkNet",
    "polygon": "Polygon",
    "optimism": "Optimism",
    "solana": "Solana",
}


def _quantize(value: Number) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_usd(value: Number) -> str:
    """Format as US dollars with thousands separators, e.g. ``$1,234.56``."""
    amount = _quantize(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_compact_usd(value: Number) -> str:
    """Format as dollars with a B/M/K suffix for large magnitudes."""
    amount = Decimal(str(value))
    magnitude = abs(amount)
    sign = "-" if amount < 0 else ""

    if magnitude >= 1_000_000_000:
        return f"{sign}${_quantize(magnitude / 1_000_000_000)}B"
    if magnitude >= 1_000_000:
        return f"{sign}${_quantize(magnitude / 1_000_000)}M"
    if magnitude >= 1_000:
        return f"{sign}${_quantize(magnitude / 1_000)}K"
    return format_usd(amount)


def format_duration(seconds: int) -> str:
    """Format a non-negative duration: ``45s``, ``2m 30s`` or ``1h 5m``."""
    seconds = max(int(seconds), 0)
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def format_time_diff(seconds: int) -> str:
    """Format a signed duration difference."""
    seconds = int(seconds)
    if seconds < 0:
        return f"-{format_duration(-seconds)}"
    return format_duration(seconds)


def format_chain_name(chain: str) -> str:
    """Convert a chain identifier to a display name."""
    return CHAIN_DISPLAY_NAMES.get(chain.lower(), chain)


def build_alert_message(outcome: "NormalizedOutcome") -> str:
    """Build the social post text for a high-volume swap."""
    lines = [
        "🚨 High Swap Alert! 🚨",
        "",
        f"{format_usd(outcome.volume_usd)} from {format_chain_name(outcome.source_chain)} "
        f"to {format_chain_name(outcome.destination_chain)}",
    ]
    if outcome.has_savings:
        lines.append(
            f"Saved {format_usd(outcome.fee_saved_usd)} in fees vs. "
            f"{outcome.competitor_max_fee_display} elsewhere"
        )
    if outcome.time_saved_seconds > 0:
        lines.append(f"{outcome.time_saved_display} faster")
    lines += ["", "#DeFi #Crypto #CrossChain"]
    return "\n".join(lines)
