"""Persisted analysis and orchestration result models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tradesetup.models.indicators import IndicatorBundle
from tradesetup.models.setup import TradeSetup


class AnalysisType(str, Enum):
    """How the analysis was requested."""

    LIVE = "live"
    UPLOAD = "upload"


class Analysis(BaseModel):
    """A trade setup together with the context it was produced in."""

    id: str = Field(..., min_length=1, description="Analysis ID")
    user_id: str = Field(..., min_length=1, description="Owning user")
    symbol: str = Field(..., min_length=1, description="Trading pair")
    analysis_type: AnalysisType = Field(..., description="live or upload")
    timeframe: str = Field(..., description="Timeframe label (e.g., '1H')")
    setup: TradeSetup
    indicators: IndicatorBundle
    chart_image_url: str = Field(default="", description="Chart image reference")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = {"frozen": True}


class AnalysisResult(BaseModel):
    """Outcome of an orchestrated analysis request."""

    success: bool
    analysis: Optional[Analysis] = None
    error: Optional[str] = None
    quota_remaining: int = Field(default=0, ge=0)

    model_config = {"frozen": True}
