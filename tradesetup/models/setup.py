"""Trade setup data model."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Trend(str, Enum):
    """Directional bias of a trade setup."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"


class TradeSetup(BaseModel):
    """A point-in-time trading recommendation.

    Field aliases follow the camelCase names used in persisted analyses,
    so ``model_dump_json(by_alias=True)`` produces the stored shape.
    """

    trend: Trend = Field(..., description="Directional bias")
    entry: float = Field(..., description="Suggested entry price")
    stop_loss: float = Field(..., alias="stopLoss", description="Stop-loss price")
    take_profit_1: float = Field(..., alias="takeProfit1", description="First target")
    take_profit_2: float = Field(..., alias="takeProfit2", description="Second target")
    confidence: int = Field(..., ge=25, le=95, description="Confidence score")
    risk_reward: Optional[float] = Field(
        default=None,
        ge=0,
        alias="riskReward",
        description="|takeProfit1 - entry| / |entry - stopLoss|; None when undefined",
    )
    reasoning: tuple[str, ...] = Field(
        default=(), description="Explanations in evaluation order"
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def has_defined_risk_reward(self) -> bool:
        """False when entry and stop-loss coincide."""
        return self.risk_reward is not None
