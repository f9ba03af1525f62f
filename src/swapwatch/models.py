"""Settlement feed records and the normalized swap outcome."""

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SwapLeg(BaseModel):
    """One side of an atomic swap."""

    model_config = ConfigDict(extra="ignore")

    chain: str
    asset: str
    amount: str = Field(..., description="Amount in minor units")
    redeem_tx_hash: Optional[str] = None

    @property
    def is_redeemed(self) -> bool:
        return bool(self.redeem_tx_hash)


class AdditionalData(BaseModel):
    """Order metadata attached by the solver."""

    model_config = ConfigDict(extra="ignore")

    input_token_price: Optional[Decimal] = None
    output_token_price: Optional[Decimal] = None


class CreateOrder(BaseModel):
    """The user's order as created."""

    model_config = ConfigDict(extra="ignore")

    create_id: str
    source_chain: str
    destination_chain: str
    source_asset: str
    destination_asset: str
    additional_data: AdditionalData = Field(default_factory=AdditionalData)


class RawSettlement(BaseModel):
    """A matched order from the settlement feed."""

    model_config = ConfigDict(extra="ignore")

    created_at: datetime
    source_swap: SwapLeg
    destination_swap: SwapLeg
    create_order: CreateOrder

    @property
    def order_id(self) -> str:
        return self.create_order.create_id

    @property
    def is_complete(self) -> bool:
        """Both sides of the atomic swap were redeemed."""
        return self.source_swap.is_redeemed and self.destination_swap.is_redeemed


@dataclass(frozen=True)
class NormalizedOutcome:
    """A fully computed swap outcome, ready for rendering and publishing."""

    order_id: str
    source_chain: str
    destination_chain: str
    source_asset: str
    destination_asset: str
    source_amount: Decimal
    destination_amount: Decimal
    input_token_price: Decimal
    output_token_price: Decimal
    volume_usd: Decimal
    garden_fee_usd: Decimal
    fee_saved_usd: Decimal
    time_saved_seconds: int
    time_saved_minutes: int
    time_saved_display: str
    competitor_max_fee_display: str
    competitor_max_time_display: str
    created_at: datetime
    timestamp: str
    source_swap_amount: str
    destination_swap_amount: str

    @property
    def has_savings(self) -> bool:
        """Whether the comparison found a positive fee saving."""
        return self.fee_saved_usd > 0

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary."""
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = str(value)
        data["created_at"] = self.created_at.isoformat()
        return data
