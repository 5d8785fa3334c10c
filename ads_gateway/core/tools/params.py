"""
Tool Parameters
===============

Pydantic models validating the ``params`` object of each tool. Monetary
amounts are accepted in major units.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ads_gateway.core.reshape import INSIGHT_FIELDS

CAMPAIGN_STATUSES = {"ACTIVE", "PAUSED", "ARCHIVED", "DELETED"}


def _check_status(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.upper()
    if v not in CAMPAIGN_STATUSES:
        raise ValueError(f"Status must be one of: {sorted(CAMPAIGN_STATUSES)}")
    return v


class ToolParams(BaseModel):
    """Base for tool parameter models."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, allow_inf_nan=False)


class GetCampaignsParams(ToolParams):
    limit: int = Field(default=10, ge=1, le=100, description="Maximum campaigns to return")
    status: Optional[List[str]] = Field(default=None, description="Effective status filter")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            v = [v]
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [_check_status(s) for s in v]


class CampaignIdParams(ToolParams):
    campaign_id: str = Field(..., min_length=1, description="Campaign ID")


class CreateCampaignParams(ToolParams):
    name: str = Field(..., min_length=1, description="Campaign name")
    objective: str = Field(default="OUTCOME_TRAFFIC", description="Campaign objective")
    status: str = Field(default="PAUSED", description="Initial status")
    daily_budget: Optional[float] = Field(default=None, gt=0, description="Daily budget")
    lifetime_budget: Optional[float] = Field(default=None, gt=0, description="Lifetime budget")
    special_ad_categories: List[str] = Field(default_factory=list)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return _check_status(v)

    @field_validator("objective")
    @classmethod
    def upper_objective(cls, v: str) -> str:
        return v.upper()


class UpdateCampaignParams(CampaignIdParams):
    name: Optional[str] = Field(default=None, min_length=1)
    status: Optional[str] = None
    daily_budget: Optional[float] = Field(default=None, gt=0)
    lifetime_budget: Optional[float] = Field(default=None, gt=0)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        return _check_status(v)


class GetInsightsParams(ToolParams):
    campaign_id: Optional[str] = Field(default=None, min_length=1)
    date_preset: str = Field(default="last_7d", description="Reporting window preset")
    fields: List[str] = Field(default_factory=lambda: list(INSIGHT_FIELDS))

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: List[str]) -> List[str]:
        unknown = [f for f in v if f not in INSIGHT_FIELDS]
        if unknown:
            raise ValueError(f"Unsupported insight fields: {unknown}")
        return v
