"""
Pydantic models for Jupiter quote/swap API responses.

These models provide type-safe parsing of service responses
with automatic validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class QuoteResponse(BaseModel):
    """Best route returned by the quote endpoint."""

    input_mint: str = Field(alias="inputMint")
    in_amount: str = Field(alias="inAmount")
    output_mint: str = Field(alias="outputMint")
    out_amount: str = Field(alias="outAmount")
    other_amount_threshold: str = Field(default="0", alias="otherAmountThreshold")
    swap_mode: str = Field(default="ExactIn", alias="swapMode")
    slippage_bps: int = Field(alias="slippageBps")
    price_impact_pct: float = Field(default=0.0, alias="priceImpactPct")
    route_plan: list[dict[str, Any]] = Field(default_factory=list, alias="routePlan")
    context_slot: int | None = Field(default=None, alias="contextSlot")

    model_config = {"populate_by_name": True, "extra": "allow"}

    @property
    def in_amount_int(self) -> int:
        """Input amount in smallest units."""
        return int(self.in_amount)

    @property
    def out_amount_int(self) -> int:
        """Output amount in smallest units."""
        return int(self.out_amount)


class SwapResponse(BaseModel):
    """Serialized swap transaction returned by the swap endpoint."""

    swap_transaction: str = Field(alias="swapTransaction")
    last_valid_block_height: int | None = Field(default=None, alias="lastValidBlockHeight")
    prioritization_fee_lamports: int | None = Field(
        default=None, alias="prioritizationFeeLamports"
    )

    model_config = {"populate_by_name": True, "extra": "allow"}
