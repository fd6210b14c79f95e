"""
Pydantic models for relay gateway JSON-RPC results.
"""

from pydantic import BaseModel, Field


class OptimizeResponse(BaseModel):
    """Result of optimizeTransaction."""

    optimized_transaction: str = Field(alias="optimizedTransaction")
    compute_units: int = Field(default=0, alias="computeUnits")
    priority_fee: int = Field(default=0, alias="priorityFee")
    estimated_cost: int = Field(default=0, alias="estimatedCost")

    model_config = {"populate_by_name": True, "extra": "allow"}


class SendResponse(BaseModel):
    """Result of sendTransaction."""

    signature: str
    delivery_path: str = Field(default="unknown", alias="deliveryPath")
    actual_cost: int = Field(default=0, alias="actualCost")  # lamports
    jito_refunded: bool = Field(default=False, alias="jitoRefunded")

    model_config = {"populate_by_name": True, "extra": "allow"}
