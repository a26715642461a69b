"""User quota data model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Plan(str, Enum):
    """Subscription plan controlling the daily analysis limit."""

    FREE = "free"
    PRO = "pro"
    ADMIN = "admin"


DAILY_LIMITS = {
    Plan.FREE: 3,
    Plan.PRO: 999,
    Plan.ADMIN: 999,
}


class UserStats(BaseModel):
    """Quota and usage counters for one user."""

    id: str = Field(..., min_length=1, description="Record ID")
    user_id: str = Field(..., min_length=1, description="External user ID")
    email: str = Field(default="", description="Contact email")
    plan: Plan = Field(default=Plan.FREE, description="Subscription plan")
    analyses_used_today: int = Field(default=0, ge=0, description="Analyses used today")
    daily_limit: int = Field(default=DAILY_LIMITS[Plan.FREE], ge=0, description="Daily limit")
    total_analyses: int = Field(default=0, ge=0, description="Lifetime analyses")
    is_admin: bool = Field(default=False, description="Admin flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_analysis_at: Optional[datetime] = Field(default=None, description="Last analysis")
    last_quota_reset: datetime = Field(..., description="Last daily quota reset")

    model_config = {"frozen": True}

    @property
    def quota_remaining(self) -> int:
        return max(0, self.daily_limit - self.analyses_used_today)
